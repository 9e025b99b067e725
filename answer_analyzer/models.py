"""
Domain models passed between the stages of the answer analysis pipeline.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple, Union

# Score value used whenever the engine output carries no usable score
SCORE_UNAVAILABLE = "Not provided"


@dataclass(frozen=True)
class TypedText:
    text: str


@dataclass(frozen=True)
class ImageData:
    # Raw image bytes, a bare base64 string or a data URI
    data: Union[bytes, str]


AnswerSource = Union[TypedText, ImageData]


@dataclass(frozen=True)
class EvaluationRequest:
    question_text: str
    subject: str
    expected_points: Tuple[str, ...]
    max_words: int
    marks: int
    answer_source: AnswerSource

    def __post_init__(self):
        if not isinstance(self.answer_source, (TypedText, ImageData)):
            raise TypeError("answer_source must be TypedText or ImageData")
        if self.max_words < 0:
            raise ValueError("max_words must be >= 0")
        if self.marks <= 0:
            raise ValueError("marks must be > 0")
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "expected_points", tuple(self.expected_points))

    @property
    def is_image(self) -> bool:
        return isinstance(self.answer_source, ImageData)


@dataclass(frozen=True)
class NormalizedAnswer:
    text: str
    source_was_image: bool = False

    @property
    def word_count(self) -> int:
        return len(self.text.split())


@dataclass(frozen=True)
class Prompt:
    body: str


@dataclass(frozen=True)
class RawEngineResponse:
    text: str


@dataclass(frozen=True)
class ParsedEvaluation:
    analysis: str
    score: Union[int, str]

    @property
    def has_score(self) -> bool:
        return self.score != SCORE_UNAVAILABLE


class PipelineState(str, Enum):
    RECEIVED = "received"
    NORMALIZING = "normalizing"
    PROMPTING = "prompting"
    EVALUATING = "evaluating"
    PARSING = "parsing"
    DONE = "done"
    FAILED = "failed"


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class EvaluationResult:
    """
    Terminal outcome of one pipeline run.

    A successful result carries the analysis and score; a failed one carries
    only the error message. Both always carry a timestamp.
    """

    success: bool
    analysis: Optional[str] = None
    score: Optional[Union[int, str]] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    retryable: bool = False
    final_state: PipelineState = PipelineState.DONE
    failed_stage: Optional[PipelineState] = None
    timestamp: str = field(default_factory=utc_timestamp)

    @classmethod
    def succeeded(cls, parsed: ParsedEvaluation) -> "EvaluationResult":
        return cls(success=True, analysis=parsed.analysis, score=parsed.score, final_state=PipelineState.DONE)

    @classmethod
    def failed(cls, message: str, kind: str, retryable: bool = False,
               stage: Optional[PipelineState] = None) -> "EvaluationResult":
        return cls(
            success=False,
            error=message,
            error_kind=kind,
            retryable=retryable,
            final_state=PipelineState.FAILED,
            failed_stage=stage,
        )

    def to_dict(self) -> dict:
        """Outbound JSON shape: analysis/score only on success, error only on failure."""
        if self.success:
            return {
                "success": True,
                "analysis": self.analysis,
                "score": self.score,
                "timestamp": self.timestamp,
            }
        return {"success": False, "error": self.error, "timestamp": self.timestamp}
