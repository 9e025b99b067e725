"""
Shared fixtures: fake OCR and reasoning engines plus sample requests.
"""
import io
import base64
import asyncio

import pytest
from PIL import Image

from answer_analyzer.models import EvaluationRequest, ImageData, TypedText


SAMPLE_ANALYSIS = """## CONTENT ANALYSIS
The answer correctly identifies the **Salt March** of 1930.



## STRENGTHS
* Accurate date

## AREAS FOR IMPROVEMENT
* Mention Dandi and the civil disobedience movement

Score: 6/10"""


class FakeOcrEngine:
    """Returns canned recognized text, or raises the given error."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def recognize(self, image, language):
        self.calls.append((image, language))
        if self.error:
            raise self.error
        return self.text


class FakeReasoningEngine:
    """Returns canned responses in order, or raises the given error."""

    def __init__(self, responses=(SAMPLE_ANALYSIS,), error=None, delay=0.0):
        self.responses = list(responses)
        self.error = error
        self.delay = delay
        self.prompts = []

    async def submit(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


def make_png_bytes(size=(60, 30), color="white"):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return make_png_bytes()


@pytest.fixture
def png_data_uri(png_bytes):
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def text_request():
    return EvaluationRequest(
        question_text="Describe the significance of the Salt March.",
        subject="History",
        expected_points=("Civil disobedience", "Dandi, 1930", "Mass participation"),
        max_words=150,
        marks=10,
        answer_source=TypedText(text="Gandhi led the Salt March in 1930."),
    )


@pytest.fixture
def image_request(png_data_uri):
    return EvaluationRequest(
        question_text="Describe the significance of the Salt March.",
        subject="History",
        expected_points=("Civil disobedience",),
        max_words=150,
        marks=10,
        answer_source=ImageData(data=png_data_uri),
    )


@pytest.fixture
def sample_analysis():
    return SAMPLE_ANALYSIS


@pytest.fixture
def ocr_engine_factory():
    return FakeOcrEngine


@pytest.fixture
def reasoning_engine_factory():
    return FakeReasoningEngine
