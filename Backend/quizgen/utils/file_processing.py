import logging
from typing import Any

import fitz  # PyMuPDF

from quizgen.schemas import ParseResult, PdfUpload
from quizgen.utils.errors import (
    PAGE_LIMIT_EXCEEDED,
    DocumentOpenError,
    error_code,
    format_error,
)

logger = logging.getLogger(__name__)

def validate_pdf_upload(candidate: Any) -> PdfUpload:
    """Raise pydantic.ValidationError unless candidate is a file of type application/pdf"""
    return PdfUpload(pdf=candidate)

def read_upload(pdf_file: Any) -> bytes:
    """Read the whole upload from the start"""
    # FastAPI's UploadFile keeps the real file object on .file
    source = getattr(pdf_file, "file", None)
    if source is None:
        source = pdf_file
    if hasattr(source, "seek"):
        source.seek(0)
    data = source.read()
    if isinstance(data, str):
        data = data.encode("utf-8", errors="ignore")
    return data

def _open_document(file_bytes: bytes) -> fitz.Document:
    try:
        doc = fitz.open(stream=file_bytes, filetype="pdf")
    except Exception as e:
        logger.error(f"PDF open failed: {str(e)}")
        raise DocumentOpenError("Unable to read PDF file") from e
    if doc.needs_pass:
        doc.close()
        logger.error("PDF open failed: document is password protected")
        raise DocumentOpenError("Unable to read PDF file")
    return doc

def _page_text(page: fitz.Page) -> str:
    """Join every text span on the page with a single space"""
    fragments = []
    for block in page.get_text("dict").get("blocks", []):
        if block.get("type") != 0:  # image block
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                if span.get("text"):
                    fragments.append(span["text"])
    return " ".join(fragments)

def extract_pdf_text(file_bytes: bytes, max_pages: int = 9) -> ParseResult:
    """
    Extract the text of every page, in order, each page followed by a blank line.

    Documents longer than max_pages come back as an unsuccessful result with
    no content. Unreadable documents raise DocumentOpenError.
    """
    with _open_document(file_bytes) as doc:
        page_count = doc.page_count
        if page_count == 0:
            raise DocumentOpenError("Unable to read PDF file")
        if page_count > max_pages:
            logger.info(f"Rejected PDF with {page_count} pages (limit {max_pages})")
            return ParseResult(
                success=False,
                message=f"PDF must have less than {max_pages + 1} pages",
                error=PAGE_LIMIT_EXCEEDED,
                page_count=page_count,
            )

        text = ""
        try:
            for page in doc:
                text += _page_text(page) + "\n\n"
        except (RuntimeError, ValueError) as e:
            logger.error(f"PDF text extraction failed: {str(e)}")
            raise DocumentOpenError("Unable to read PDF file") from e

    logger.info(f"Extracted {len(text)} characters from {page_count} page(s)")
    return ParseResult(
        success=True,
        message="PDF uploaded successfully",
        content=text,
        page_count=page_count,
    )

def parse_pdf(upload: Any, max_pages: int = 9) -> ParseResult:
    """Validate, read and extract an uploaded PDF. Never raises."""
    try:
        validated = validate_pdf_upload(upload)
        file_bytes = read_upload(validated.pdf)
        return extract_pdf_text(file_bytes, max_pages)
    except Exception as e:
        return ParseResult(success=False, message=format_error(e), error=error_code(e))
