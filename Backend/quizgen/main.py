import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse

from quizgen.schemas import ParseResult, QuizRequest, QuizResult
from quizgen.services.quiz_service import QuizService, build_chat_model
from quizgen.utils.config import Settings, get_settings
from quizgen.utils.errors import (
    PAGE_LIMIT_EXCEEDED,
    VALIDATION_ERROR,
    DocumentOpenError,
    MalformedResponseError,
    QuizGenError,
    UpstreamServiceError,
)
from quizgen.utils.file_processing import parse_pdf

logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

# HTTP status for each failure code; the body is always the result object
STATUS_CODES = {
    VALIDATION_ERROR: 422,
    PAGE_LIMIT_EXCEEDED: 422,
    DocumentOpenError.code: 400,
    MalformedResponseError.code: 502,
    UpstreamServiceError.code: 502,
}

app = FastAPI(title="PDF Quiz Generator")

@lru_cache
def get_quiz_service() -> QuizService:
    settings = get_settings()
    return QuizService(build_chat_model(settings), question_count=settings.question_count)

def _respond(result: ParseResult | QuizResult) -> JSONResponse:
    status_code = 200 if result.success else STATUS_CODES.get(result.error, 500)
    return JSONResponse(status_code=status_code, content=result.model_dump())

@app.exception_handler(QuizGenError)
async def quizgen_error_handler(request: Request, exc: QuizGenError):
    logger.error(f"{request.url.path} failed: {exc.message}")
    return _respond(QuizResult(success=False, message=exc.message, error=exc.code))

@app.get("/health")
async def health():
    return {"status": "ok"}

@app.post("/parse-pdf/")
def parse_pdf_upload(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"Parsing upload {file.filename!r} ({file.content_type})")
    result = parse_pdf(file, max_pages=settings.max_pages)
    return _respond(result)

@app.post("/generate-quiz/")
def generate_quiz(
    request: QuizRequest,
    quiz_service: QuizService = Depends(get_quiz_service),
):
    result = quiz_service.generate_quiz(request.text)
    return _respond(result)
