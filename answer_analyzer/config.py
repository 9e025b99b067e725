"""
Configuration settings for the Answer Analyzer service.
"""
import os
import platform
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# API settings
API_TITLE = "Answer Analyzer"
API_VERSION = "1.0.0"
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
DEBUG = os.getenv("DEBUG", "False").lower() in ("true", "1", "t")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# Reasoning engine settings
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", os.getenv("API_KEY", ""))
MODEL_NAME = os.getenv("MODEL_NAME", "gemini-1.5-flash")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", 0.2))
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", 60))
EXAMINER_ROLE = os.getenv("EXAMINER_ROLE", "an experienced UPSC examiner")

# Whole-pipeline retries on transient engine failures (1 = no retry)
MAX_ATTEMPTS = int(os.getenv("MAX_ATTEMPTS", 1))
RETRY_BACKOFF_SECONDS = float(os.getenv("RETRY_BACKOFF_SECONDS", 1.0))

# OCR settings
# Set tesseract path based on platform
if platform.system() == "Windows":
    TESSERACT_CMD = os.getenv("TESSERACT_CMD", r"C:\\Program Files\\Tesseract-OCR\\tesseract.exe")
else:
    TESSERACT_CMD = os.getenv("TESSERACT_CMD", "/usr/bin/tesseract")

OCR_DEFAULT_CONFIG = os.getenv("OCR_DEFAULT_CONFIG", "--oem 3 --psm 6")
OCR_LANGUAGE = os.getenv("OCR_LANGUAGE", "eng")
OCR_TIMEOUT_SECONDS = float(os.getenv("OCR_TIMEOUT_SECONDS", 30))

# Answer validation
MIN_ANSWER_LENGTH = int(os.getenv("MIN_ANSWER_LENGTH", 5))
MAX_IMAGE_SIZE = int(os.getenv("MAX_IMAGE_SIZE", 5 * 1024 * 1024))  # 5MB default
