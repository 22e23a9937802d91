import pytest
from fastapi.testclient import TestClient
from langchain_core.runnables import RunnableLambda

from quizgen.main import app, get_quiz_service
from quizgen.services.quiz_service import QuizService
from quizgen.utils.config import Settings, get_settings
from quizgen.utils.errors import UpstreamServiceError

from conftest import CAPITAL_QUIZ, build_encrypted_pdf


@pytest.fixture()
def client(quiz_service_factory):
    app.dependency_overrides[get_settings] = lambda: Settings(max_pages=9)
    app.dependency_overrides[get_quiz_service] = lambda: quiz_service_factory(CAPITAL_QUIZ)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_parse_pdf(client, make_pdf):
    response = client.post(
        "/parse-pdf/",
        files={"file": ("notes.pdf", make_pdf("First page", "Second page"), "application/pdf")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["content"] == "First page\n\nSecond page\n\n"
    assert body["page_count"] == 2


def test_parse_pdf_rejects_non_pdf(client):
    response = client.post(
        "/parse-pdf/",
        files={"file": ("notes.txt", b"just text", "text/plain")},
    )

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert response.json()["message"] == "Invalid file type"
    assert response.json()["error"] == "validation_error"


def test_parse_pdf_page_limit(client, make_pdf):
    response = client.post(
        "/parse-pdf/",
        files={"file": ("long.pdf", make_pdf(*["x"] * 12), "application/pdf")},
    )

    assert response.status_code == 422
    assert response.json()["message"] == "PDF must have less than 10 pages"
    assert response.json()["content"] is None


def test_parse_pdf_corrupt_file(client):
    response = client.post(
        "/parse-pdf/",
        files={"file": ("broken.pdf", b"%PDF-garbage", "application/pdf")},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "document_open_error"


def test_parse_pdf_password_protected_file(client):
    response = client.post(
        "/parse-pdf/",
        files={"file": ("locked.pdf", build_encrypted_pdf(), "application/pdf")},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "document_open_error"
    assert response.json()["message"] == "Unable to read PDF file"


def test_generate_quiz(client):
    response = client.post("/generate-quiz/", json={"text": "The capital of France is Paris."})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["questions"][0]["options"] == ["Paris", "Lyon", "Nice", "Rome"]
    assert body["questions"][0]["answer"] == "Paris"


def test_generate_quiz_malformed_model_output(client, quiz_service_factory):
    app.dependency_overrides[get_quiz_service] = lambda: quiz_service_factory("no quiz today")

    response = client.post("/generate-quiz/", json={"text": "notes"})

    assert response.status_code == 502
    assert response.json()["error"] == "malformed_response"


def test_generate_quiz_upstream_failure(client):
    def unavailable(_):
        raise TimeoutError("deadline exceeded")

    app.dependency_overrides[get_quiz_service] = lambda: QuizService(RunnableLambda(unavailable))

    response = client.post("/generate-quiz/", json={"text": "notes"})

    assert response.status_code == 502
    assert response.json() == {
        "success": False,
        "message": "deadline exceeded",
        "error": "upstream_service_error",
        "questions": [],
    }


def test_generate_quiz_empty_text(client):
    response = client.post("/generate-quiz/", json={"text": ""})

    assert response.status_code == 422
    assert response.json()["success"] is False


def test_unconfigured_model_is_reported(client):
    def not_configured():
        raise UpstreamServiceError("Quiz generator is not configured: missing API key")

    app.dependency_overrides[get_quiz_service] = not_configured

    response = client.post("/generate-quiz/", json={"text": "notes"})

    assert response.status_code == 502
    assert response.json()["message"] == "Quiz generator is not configured: missing API key"
