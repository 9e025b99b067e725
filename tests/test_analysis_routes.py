import pytest
from fastapi.testclient import TestClient

from answer_analyzer.main import app
from answer_analyzer.routes.analysis_routes import get_analysis_service
from answer_analyzer.services.analysis_service import AnswerAnalysisService


@pytest.fixture
def client_factory(ocr_engine_factory, reasoning_engine_factory):
    def make_client(ocr_text="", responses=None, error=None):
        kwargs = {"error": error}
        if responses is not None:
            kwargs["responses"] = responses
        service = AnswerAnalysisService(
            ocr_engine=ocr_engine_factory(text=ocr_text),
            reasoning_engine=reasoning_engine_factory(**kwargs),
        )
        app.dependency_overrides[get_analysis_service] = lambda: service
        return TestClient(app)

    yield make_client
    app.dependency_overrides.clear()


def payload(**overrides):
    body = {
        "questionText": "Describe the significance of the Salt March.",
        "subject": "History",
        "expectedPoints": ["Civil disobedience", "Dandi, 1930"],
        "userAnswer": "Gandhi led the Salt March in 1930.",
        "answerType": "text",
        "maxWords": 150,
        "marks": 10,
    }
    body.update(overrides)
    return body


def test_typed_answer_returns_analysis_and_score(client_factory):
    response = client_factory().post("/api/analyze-answer", json=payload())

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["score"] == 6
    assert data["analysis"]
    assert data["timestamp"]
    assert "error" not in data


def test_missing_score_is_reported_as_not_provided(client_factory):
    response = client_factory(responses=["Fair attempt."]).post("/api/analyze-answer", json=payload())

    assert response.status_code == 200
    assert response.json()["score"] == "Not provided"


def test_unreadable_image_is_unprocessable(client_factory, png_data_uri):
    client = client_factory(ocr_text="~")
    response = client.post(
        "/api/analyze-answer",
        json=payload(answerType="image", userAnswer=None, imageData=png_data_uri),
    )

    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["error"]
    assert data["timestamp"]
    assert "analysis" not in data and "score" not in data


def test_engine_outage_is_service_unavailable(client_factory):
    response = client_factory(error=ConnectionError("quota exceeded")).post(
        "/api/analyze-answer", json=payload()
    )

    assert response.status_code == 503
    assert response.json()["success"] is False


def test_empty_engine_response_is_bad_gateway(client_factory):
    response = client_factory(responses=[""]).post("/api/analyze-answer", json=payload())
    assert response.status_code == 502


def test_text_answer_type_ignores_image_data(client_factory, png_data_uri):
    response = client_factory().post("/api/analyze-answer", json=payload(imageData=png_data_uri))
    assert response.status_code == 200


def test_missing_typed_answer_is_empty_input(client_factory):
    response = client_factory().post("/api/analyze-answer", json=payload(userAnswer=None))

    assert response.status_code == 422
    assert response.json()["error"] == "Answer text is empty."


@pytest.mark.parametrize("overrides", [{"marks": 0}, {"maxWords": -1}, {"answerType": "audio"}])
def test_invalid_request_has_failure_shape(client_factory, overrides):
    response = client_factory().post("/api/analyze-answer", json=payload(**overrides))

    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["error"].startswith("Invalid request:")
    assert data["timestamp"]


def test_health(client_factory):
    assert client_factory().get("/health").json() == {"status": "ok"}
