"""
Typed failures raised by the answer analysis pipeline stages.

Every failure is caught by the orchestrator and turned into a failed
EvaluationResult, so none of these ever reach the HTTP caller as an exception.
"""


class AnalysisError(Exception):
    """Base class for pipeline stage failures."""

    kind = "AnalysisError"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyInputError(AnalysisError):
    """Normalization produced nothing usable. The learner has to fix the answer."""

    kind = "EmptyInput"


class OcrFailureError(AnalysisError):
    """The image could not be decoded or read by the OCR engine."""

    kind = "OcrFailure"


class EngineUnavailableError(AnalysisError):
    """Transport, quota or engine-side failure of the reasoning engine."""

    kind = "EngineUnavailable"
    retryable = True


class EmptyResponseError(AnalysisError):
    """The reasoning engine answered without any usable text."""

    kind = "EmptyResponse"
    retryable = True
