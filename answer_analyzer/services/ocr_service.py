import asyncio
import logging
from typing import Protocol, Union

import pytesseract

from answer_analyzer.config import (
    TESSERACT_CMD, OCR_DEFAULT_CONFIG, OCR_LANGUAGE, OCR_TIMEOUT_SECONDS, MIN_ANSWER_LENGTH
)
from answer_analyzer.exceptions import EmptyInputError, OcrFailureError
from answer_analyzer.models import NormalizedAnswer
from answer_analyzer.services.text_normalizer import normalize_text
from answer_analyzer.utils.image_preprocessing import decode_image_data, load_image, preprocess_image

logger = logging.getLogger(__name__)


class OcrEngine(Protocol):
    def recognize(self, image: bytes, language: str) -> str:
        ...


class TesseractOcrEngine:
    """Handwriting recognition backed by pytesseract."""

    # Page segmentation modes tried in turn; the most confident result wins
    SEGMENTATION_CONFIGS = [
        "--oem 3 --psm 6",  # Assume a single uniform block of text
        "--oem 3 --psm 4",  # Assume a single column of text
        "--oem 3 --psm 3",  # Fully automatic page segmentation
    ]

    def __init__(self, tesseract_cmd: str = TESSERACT_CMD, fallback_config: str = OCR_DEFAULT_CONFIG):
        logger.info("Initializing Pytesseract OCR engine")
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.fallback_config = fallback_config

    def recognize(self, image: bytes, language: str) -> str:
        thresh = preprocess_image(load_image(image))

        best_text = ""
        max_confidence = 0.0

        for config in self.SEGMENTATION_CONFIGS:
            data = pytesseract.image_to_data(
                thresh, lang=language, config=config, output_type=pytesseract.Output.DICT
            )

            confidences = []
            text_parts = []
            for i in range(len(data["text"])):
                word = data["text"][i].strip()
                if not word:
                    continue
                try:
                    conf = float(data["conf"][i])
                except ValueError:
                    continue
                if conf > 0:
                    confidences.append(conf)
                    text_parts.append(word)

            if confidences:
                avg_confidence = sum(confidences) / len(confidences)
                if avg_confidence > max_confidence:
                    max_confidence = avg_confidence
                    best_text = " ".join(text_parts)

        if not best_text:
            best_text = pytesseract.image_to_string(thresh, lang=language, config=self.fallback_config)
        else:
            logger.info(f"Best OCR candidate has mean confidence {max_confidence:.1f}")

        return best_text


class ImageTextExtractor:
    """Converts an encoded answer image into a NormalizedAnswer."""

    def __init__(self, engine: OcrEngine, language: str = OCR_LANGUAGE,
                 timeout: float = OCR_TIMEOUT_SECONDS, min_length: int = MIN_ANSWER_LENGTH):
        self.engine = engine
        self.language = language
        self.timeout = timeout
        self.min_length = min_length

    async def extract(self, image_data: Union[bytes, str]) -> NormalizedAnswer:
        """
        Recognize the answer text in an image.

        Raises:
            OcrFailureError: If the image cannot be decoded, the engine fails
                or times out, or the recognized text is unreadable
        """
        image_bytes = decode_image_data(image_data)
        logger.info(f"Extracting text from image ({len(image_bytes)} bytes, lang={self.language})")

        try:
            raw_text = await asyncio.wait_for(
                asyncio.to_thread(self.engine.recognize, image_bytes, self.language),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"OCR timed out after {self.timeout}s")
            raise OcrFailureError("Timed out while reading text from the image.") from e
        except Exception as e:
            logger.error(f"Error extracting text from image: {str(e)}")
            raise OcrFailureError("Failed to extract text from image.") from e

        try:
            answer = normalize_text(raw_text, source_was_image=True, min_length=self.min_length)
        except EmptyInputError as e:
            raise OcrFailureError(
                "Extracted text is empty or unreadable. Please upload a clearer image."
            ) from e

        logger.info(f"OCR extracted text. First 100 chars: {answer.text[:100]}")
        return answer
