import asyncio
import logging
from typing import Optional

from answer_analyzer.config import MAX_ATTEMPTS, RETRY_BACKOFF_SECONDS
from answer_analyzer.exceptions import AnalysisError
from answer_analyzer.models import (
    EvaluationRequest, EvaluationResult, ImageData, NormalizedAnswer, PipelineState
)
from answer_analyzer.prompts.prompt import build_evaluation_prompt
from answer_analyzer.services.llm_eval import EvaluationClient, ReasoningEngine
from answer_analyzer.services.ocr_service import ImageTextExtractor, OcrEngine
from answer_analyzer.services.response_parser import parse_response
from answer_analyzer.services.text_normalizer import normalize_text

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to analyze answer. Please try again."


class AnswerAnalysisService:
    """
    Runs one answer through normalize -> prompt -> evaluate -> parse.

    The service holds only its collaborators, so a single instance can serve
    concurrent requests. run() never raises: every failure comes back as a
    failed EvaluationResult.
    """

    def __init__(self, ocr_engine: OcrEngine, reasoning_engine: ReasoningEngine,
                 extractor: Optional[ImageTextExtractor] = None,
                 client: Optional[EvaluationClient] = None):
        self.extractor = extractor or ImageTextExtractor(ocr_engine)
        self.client = client or EvaluationClient(reasoning_engine)

    @staticmethod
    def _transition(current: PipelineState, target: PipelineState) -> PipelineState:
        logger.debug(f"Pipeline state {current.value} -> {target.value}")
        return target

    async def _normalize(self, request: EvaluationRequest) -> NormalizedAnswer:
        if isinstance(request.answer_source, ImageData):
            return await self.extractor.extract(request.answer_source.data)
        return normalize_text(request.answer_source.text)

    async def run(self, request: EvaluationRequest) -> EvaluationResult:
        state = PipelineState.RECEIVED
        source = "image" if request.is_image else "text"
        logger.info(f"Analyzing {source} answer for subject '{request.subject}' ({request.marks} marks)")

        try:
            state = self._transition(state, PipelineState.NORMALIZING)
            answer = await self._normalize(request)

            state = self._transition(state, PipelineState.PROMPTING)
            prompt = build_evaluation_prompt(request, answer)

            state = self._transition(state, PipelineState.EVALUATING)
            response = await self.client.evaluate(prompt)

            state = self._transition(state, PipelineState.PARSING)
            parsed = parse_response(response, request.marks)

        except AnalysisError as e:
            logger.error(f"Analysis failed while {state.value}: [{e.kind}] {e.message}")
            return EvaluationResult.failed(e.message, e.kind, retryable=e.retryable, stage=state)
        except Exception:
            logger.exception(f"Unexpected error while {state.value}")
            return EvaluationResult.failed(GENERIC_FAILURE_MESSAGE, "InternalError", stage=state)

        logger.info(f"Analysis complete (score: {parsed.score})")
        return EvaluationResult.succeeded(parsed)

    async def run_with_retry(self, request: EvaluationRequest, max_attempts: int = MAX_ATTEMPTS,
                             backoff_seconds: float = RETRY_BACKOFF_SECONDS) -> EvaluationResult:
        """
        Run the pipeline, re-running it with exponential backoff while the
        failure is a transient engine error. Input and OCR failures are
        returned immediately.
        """
        attempt = 1
        result = await self.run(request)
        while result.retryable and attempt < max_attempts:
            delay = backoff_seconds * (2 ** (attempt - 1))
            logger.warning(
                f"Attempt {attempt}/{max_attempts} failed with {result.error_kind}; retrying in {delay:.1f}s"
            )
            await asyncio.sleep(delay)
            attempt += 1
            result = await self.run(request)
        return result
