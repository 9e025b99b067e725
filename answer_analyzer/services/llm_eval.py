import asyncio
import logging
from typing import Optional, Protocol

from google import genai
from google.genai import types

from answer_analyzer.config import GEMINI_API_KEY, MODEL_NAME, LLM_TEMPERATURE, LLM_TIMEOUT_SECONDS
from answer_analyzer.exceptions import EmptyResponseError, EngineUnavailableError
from answer_analyzer.models import Prompt, RawEngineResponse

logger = logging.getLogger(__name__)


class ReasoningEngine(Protocol):
    async def submit(self, prompt: str) -> Optional[str]:
        ...


class GeminiReasoningEngine:
    """Reasoning engine backed by the Google Gen AI SDK."""

    def __init__(self, api_key: str = GEMINI_API_KEY, model_name: str = MODEL_NAME,
                 temperature: float = LLM_TEMPERATURE):
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self._client = None

    @property
    def client(self) -> genai.Client:
        # Created on first use so a missing key surfaces as a failed call, not an import error
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def submit(self, prompt: str) -> Optional[str]:
        response = await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=types.GenerateContentConfig(temperature=self.temperature),
        )
        return getattr(response, "text", None)


class EvaluationClient:
    """Sends a built prompt to the reasoning engine and returns its raw text."""

    def __init__(self, engine: ReasoningEngine, timeout: float = LLM_TIMEOUT_SECONDS):
        self.engine = engine
        self.timeout = timeout

    async def evaluate(self, prompt: Prompt) -> RawEngineResponse:
        """
        Run a single, non-streaming evaluation call.

        Raises:
            EngineUnavailableError: On any engine/transport exception or timeout
            EmptyResponseError: If the engine returned no text
        """
        try:
            text = await asyncio.wait_for(self.engine.submit(prompt.body), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Reasoning engine timed out after {self.timeout}s")
            raise EngineUnavailableError("The evaluation service timed out. Please try again.") from e
        except Exception as e:
            logger.error(f"Reasoning engine call failed: {str(e)}")
            raise EngineUnavailableError("The evaluation service is unavailable. Please try again.") from e

        if not isinstance(text, str) or not text.strip():
            logger.error("Reasoning engine returned an empty response")
            raise EmptyResponseError("No valid response from the evaluation service.")

        logger.info(f"Received evaluation response ({len(text)} chars)")
        return RawEngineResponse(text=text)
