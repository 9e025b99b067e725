import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from answer_analyzer.config import API_TITLE, API_VERSION, CORS_ORIGINS, DEBUG, GEMINI_API_KEY, HOST, PORT
from answer_analyzer.models import EvaluationResult
from answer_analyzer.routes.analysis_routes import router as analysis_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("answer_analyzer")

app = FastAPI(title=API_TITLE, version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed requests with the same shape as any other failed analysis"""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(f"Invalid analysis request: {details}")
    result = EvaluationResult.failed(f"Invalid request: {details}", "InvalidRequest")
    return JSONResponse(content=result.to_dict(), status_code=422)


@app.on_event("startup")
async def startup_event():
    """Startup event"""
    logger.info(f"Starting Answer Analyzer on http://{HOST}:{PORT}")
    logger.info(f"Debug mode: {DEBUG}")

    if not GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY environment variable not set. Answer evaluation will fail.")
