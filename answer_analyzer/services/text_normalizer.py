import re
import logging
from typing import Optional

from answer_analyzer.config import MIN_ANSWER_LENGTH
from answer_analyzer.exceptions import EmptyInputError
from answer_analyzer.models import NormalizedAnswer

logger = logging.getLogger(__name__)

WHITESPACE_PATTERN = re.compile(r"\s+")


def collapse_whitespace(text: Optional[str]) -> str:
    """Collapse every whitespace run to a single space and trim the ends."""
    if not text:
        return ""
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def normalize_text(raw_text: Optional[str], source_was_image: bool = False,
                   min_length: int = MIN_ANSWER_LENGTH) -> NormalizedAnswer:
    """
    Turn raw typed or recognized text into a NormalizedAnswer.

    Only whitespace is touched; case, punctuation and wording are kept as the
    learner wrote them.

    Args:
        raw_text: Text as typed by the learner or returned by OCR
        source_was_image: Whether the text came from an image
        min_length: Shortest text still considered readable

    Returns:
        NormalizedAnswer with the cleaned text

    Raises:
        EmptyInputError: If nothing usable is left after cleaning
    """
    text = collapse_whitespace(raw_text)

    if not text:
        raise EmptyInputError("Answer text is empty.")
    if len(text) < min_length:
        logger.warning(f"Answer text too short to evaluate ({len(text)} < {min_length} chars)")
        raise EmptyInputError("Answer text is too short to evaluate.")

    return NormalizedAnswer(text=text, source_was_image=source_was_image)
