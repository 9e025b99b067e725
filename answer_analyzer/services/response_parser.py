"""
Turns the reasoning engine's free-form critique into a score and clean text.

The engine is only asked, not forced, to end with "Score: X/Y", so score
extraction is best-effort: when no usable score is found the analysis is
still returned with the "Not provided" sentinel.
"""
import re
import logging
from typing import Union

from answer_analyzer.exceptions import EmptyResponseError
from answer_analyzer.models import ParsedEvaluation, RawEngineResponse, SCORE_UNAVAILABLE
from answer_analyzer.prompts.prompt import SCORE_LABEL

logger = logging.getLogger(__name__)

# "Score: 7/10", "**Score:** 7 / 10", "Score: 4". The label is case-sensitive and must
# start a word; fractions like "7.5" and values too long to be a score do not count.
SCORE_PATTERN = re.compile(
    r"\b" + re.escape(SCORE_LABEL[:-1]) + r"[*_]*\s*:\s*[*_]*\s*(\d{1,9})(?!\d)(?!\.\d)(\s*/\s*\d+)?"
)

# Leading whitespace other than newlines (tabs, NBSP, \r, \f) may precede a heading
HEADING_PATTERN = re.compile(r"^[^\S\n]*(?:#+[^\S\n]*)+", re.MULTILINE)
EMPHASIS_PATTERN = re.compile(r"\*{2,}")
BLANK_LINES_PATTERN = re.compile(r"\n{3,}")


def extract_score(text: str, marks: int) -> Union[int, str]:
    """
    Return the score following the score label, if it lies in [0, marks].

    When several labels appear, the first one written as "X/Y" wins over bare
    "Score: X" mentions. Anything else (no label, fractional or out-of-range
    value) yields SCORE_UNAVAILABLE.
    """
    matches = list(SCORE_PATTERN.finditer(text or ""))
    if not matches:
        logger.warning("Score not found in evaluation response")
        return SCORE_UNAVAILABLE

    match = next((m for m in matches if m.group(2)), matches[0])

    score = int(match.group(1))
    if score > marks:
        logger.warning(f"Rejecting out-of-range score {score}/{marks}")
        return SCORE_UNAVAILABLE
    return score


def clean_analysis_text(text: str) -> str:
    """
    Format the critique for display: drop heading markers, collapse repeated
    asterisks and excess blank lines. Applying it twice changes nothing.
    """
    cleaned = HEADING_PATTERN.sub("", text or "")
    cleaned = EMPHASIS_PATTERN.sub("*", cleaned)
    cleaned = BLANK_LINES_PATTERN.sub("\n\n", cleaned)
    return cleaned.strip()


def parse_response(response: RawEngineResponse, marks: int) -> ParsedEvaluation:
    score = extract_score(response.text, marks)
    analysis = clean_analysis_text(response.text)

    if not analysis:
        raise EmptyResponseError("The evaluation service returned no readable analysis.")

    return ParsedEvaluation(analysis=analysis, score=score)
