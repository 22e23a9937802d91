import os
import logging

import requests

from quizgen.schemas import PDF_MIME_TYPE, ParseResult, QuizResult
from quizgen.utils.errors import UpstreamServiceError

logger = logging.getLogger(__name__)

# Configuration
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")

class BackendClient:
    """Calls the quiz backend; one blocking request at a time"""

    def __init__(self, base_url: str = BACKEND_URL):
        self.base_url = base_url.rstrip("/")

    def parse_pdf(self, filename: str, file_bytes: bytes) -> ParseResult:
        response = self._post(
            "/parse-pdf/",
            files={"file": (filename, file_bytes, PDF_MIME_TYPE)},
            timeout=120,
        )
        return ParseResult.model_validate(self._payload(response))

    def generate_quiz(self, text: str) -> QuizResult:
        response = self._post("/generate-quiz/", json={"text": text}, timeout=300)
        return QuizResult.model_validate(self._payload(response))

    def _post(self, path: str, **kwargs) -> requests.Response:
        try:
            return requests.post(f"{self.base_url}{path}", **kwargs)
        except requests.RequestException as e:
            logger.error(f"POST {path} failed: {str(e)}")
            raise UpstreamServiceError(f"Connection error: {str(e)}") from e

    @staticmethod
    def _payload(response: requests.Response) -> dict:
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamServiceError(
                f"Backend returned an unreadable response ({response.status_code})"
            ) from e

        if isinstance(payload, dict) and "success" in payload:
            return payload

        # FastAPI's own request errors come back as {"detail": ...}
        detail = payload.get("detail", "Unknown error") if isinstance(payload, dict) else payload
        raise UpstreamServiceError(f"Error: {detail}")
