from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

PDF_MIME_TYPE = "application/pdf"
OPTION_COUNT = 4

class Question(BaseModel):
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    answer: str  # must be one of options
    selected: str | None = None
    is_correct: bool | None = None

    @model_validator(mode="after")
    def answer_among_options(self) -> "Question":
        if self.answer not in self.options:
            raise PydanticCustomError(
                "answer_not_in_options", "Answer must be one of the options"
            )
        return self

class PdfUpload(BaseModel):
    """An uploaded file that claims to be a PDF"""
    pdf: Any = None

    @field_validator("pdf")
    @classmethod
    def must_be_pdf_file(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("missing_file", "Please select a PDF file")
        if not callable(getattr(value, "read", None)):
            raise PydanticCustomError("not_a_file", "Expected a file")
        # FastAPI's UploadFile says content_type, Streamlit's UploadedFile says type
        mime_type = getattr(value, "content_type", None) or getattr(value, "type", None)
        if mime_type != PDF_MIME_TYPE:
            raise PydanticCustomError("invalid_file_type", "Invalid file type")
        return value

class ParseResult(BaseModel):
    success: bool
    message: str
    error: str | None = None
    content: str | None = None
    page_count: int | None = None

class QuizRequest(BaseModel):
    text: str

class QuizResult(BaseModel):
    success: bool
    message: str
    error: str | None = None
    questions: list[Question] = []
