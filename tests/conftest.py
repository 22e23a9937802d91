import io

import fitz  # PyMuPDF
import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from quizgen.services.quiz_service import QuizService

CAPITAL_QUIZ = (
    '[{"question":"What is the capital of France?",'
    '"options":["Paris","Lyon","Nice","Rome"],"answer":"Paris"}]'
)


class FakeUpload(io.BytesIO):
    """Stands in for Streamlit's UploadedFile"""

    def __init__(self, data: bytes, name: str = "notes.pdf", type: str = "application/pdf"):
        super().__init__(data)
        self.name = name
        self.type = type


def build_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def build_encrypted_pdf(text: str = "secret notes") -> bytes:
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), text)
    data = doc.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="user")
    doc.close()
    return data


@pytest.fixture()
def make_pdf():
    return build_pdf


@pytest.fixture()
def make_upload():
    def _make(data: bytes, name: str = "notes.pdf", type: str = "application/pdf"):
        return FakeUpload(data, name=name, type=type)
    return _make


@pytest.fixture()
def quiz_service_factory():
    def _make(*responses: str) -> QuizService:
        return QuizService(FakeListChatModel(responses=list(responses)))
    return _make
