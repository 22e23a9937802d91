import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

logger = logging.getLogger(__name__)

# Failure codes reported in operation results
VALIDATION_ERROR = "validation_error"
PAGE_LIMIT_EXCEEDED = "page_limit_exceeded"


class QuizGenError(Exception):
    """Base class for failures raised inside the extraction and generation steps"""
    code = "quizgen_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DocumentOpenError(QuizGenError):
    code = "document_open_error"


class MalformedResponseError(QuizGenError):
    code = "malformed_response"


class UpstreamServiceError(QuizGenError):
    code = "upstream_service_error"


def error_code(error: Any) -> str:
    if isinstance(error, ValidationError):
        return VALIDATION_ERROR
    return getattr(error, "code", QuizGenError.code)


def _lookup(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key)
    return getattr(value, key, None)


def _format(error: Any) -> str:
    # Field-level validation messages
    if isinstance(error, ValidationError):
        return " ".join(e["msg"] for e in error.errors())

    # Provider-style {"error": {"message": ...}}
    nested = _lookup(_lookup(error, "error"), "message")
    if isinstance(nested, str):
        return nested

    message = _lookup(error, "message")
    if isinstance(message, str):
        return message

    if isinstance(error, BaseException) and str(error):
        return str(error)

    try:
        return json.dumps(error)
    except (TypeError, ValueError):
        return repr(error)


def format_error(error: Any) -> str:
    """
    Turn any raised or returned error value into a message safe to show a user.

    Handles pydantic validation errors, nested API error objects, anything
    exposing a ``message`` and finally falls back to serializing the value.
    Never raises.
    """
    logger.debug("format_error: %r", error)
    try:
        return _format(error)
    except Exception:
        return "Unknown error"
