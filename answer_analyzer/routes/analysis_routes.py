from functools import lru_cache
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from answer_analyzer.schemas import AnalyzeAnswerRequest, AnalyzeAnswerResponse
from answer_analyzer.services.analysis_service import AnswerAnalysisService
from answer_analyzer.services.llm_eval import GeminiReasoningEngine
from answer_analyzer.services.ocr_service import TesseractOcrEngine

logger = logging.getLogger(__name__)
router = APIRouter()

# HTTP status per failure kind; anything unlisted is a server error
STATUS_BY_ERROR_KIND = {
    "EmptyInput": 422,
    "OcrFailure": 422,
    "EmptyResponse": 502,
    "EngineUnavailable": 503,
}


@lru_cache(maxsize=1)
def get_analysis_service() -> AnswerAnalysisService:
    """Shared pipeline wired to the real OCR and Gemini engines"""
    return AnswerAnalysisService(
        ocr_engine=TesseractOcrEngine(),
        reasoning_engine=GeminiReasoningEngine(),
    )


@router.post("/api/analyze-answer", response_model=AnalyzeAnswerResponse, response_model_exclude_none=True)
async def analyze_answer(payload: AnalyzeAnswerRequest,
                         service: AnswerAnalysisService = Depends(get_analysis_service)):
    """Evaluate a typed or photographed answer and return the critique and score"""
    result = await service.run_with_retry(payload.to_evaluation_request())

    if result.success:
        return JSONResponse(content=result.to_dict())

    status_code = STATUS_BY_ERROR_KIND.get(result.error_kind, 500)
    logger.warning(f"Returning {status_code} for failed analysis: {result.error}")
    return JSONResponse(content=result.to_dict(), status_code=status_code)


@router.get("/health")
def health():
    return {"status": "ok"}
