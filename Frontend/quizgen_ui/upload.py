import logging
from dataclasses import dataclass, field
from typing import Any

from quizgen.schemas import Question
from quizgen.utils.errors import format_error
from quizgen.utils.file_processing import read_upload, validate_pdf_upload

from quizgen_ui.client import BackendClient

logger = logging.getLogger(__name__)

@dataclass
class UploadOutcome:
    success: bool
    message: str
    questions: list[Question] = field(default_factory=list)

def upload_and_generate(uploaded_file: Any, client: BackendClient) -> UploadOutcome:
    """
    Validate the file, extract its text on the backend, then generate a quiz.

    Stops at the first failure. Nothing reaches the backend unless the file
    is a PDF.
    """
    try:
        validate_pdf_upload(uploaded_file)
        filename = getattr(uploaded_file, "name", None) or "upload.pdf"

        # Step 1: Parse PDF content
        parse_result = client.parse_pdf(filename, read_upload(uploaded_file))
        if not parse_result.success:
            return UploadOutcome(success=False, message=parse_result.message)

        # Step 2: Generate quiz from parsed content
        quiz_result = client.generate_quiz(parse_result.content or "")
        if not quiz_result.success:
            return UploadOutcome(success=False, message=quiz_result.message)
    except Exception as e:
        return UploadOutcome(success=False, message=format_error(e))

    logger.info(f"Quiz ready: {len(quiz_result.questions)} question(s) from {filename}")
    return UploadOutcome(
        success=True,
        message="Quiz generated successfully!",
        questions=quiz_result.questions,
    )
