import json
import re
import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import ValidationError

from quizgen.schemas import OPTION_COUNT, Question, QuizResult
from quizgen.utils.config import Settings
from quizgen.utils.errors import (
    MalformedResponseError,
    UpstreamServiceError,
    VALIDATION_ERROR,
    error_code,
    format_error,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a quiz generator."

QUIZ_TEMPLATE = """
Generate {number} questions based on the following text:
{text}

Each question should contain a question text and {option_count} options with 1 correct answer and return the result as a JSON array with each question formatted like this:
[
  {{
    "question": "...",
    "options": ["...", "...", "...", "..."],
    "answer": "..."
  }}
]
Only output JSON.
"""

# ```json ... ``` wrappers some models add despite being told not to
_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"```$")


def build_chat_model(settings: Settings) -> BaseChatModel:
    """Create the Gemini chat model from settings"""
    try:
        return ChatGoogleGenerativeAI(
            model=settings.llm_model,
            temperature=settings.temperature,
            google_api_key=settings.google_api_key,
        )
    except Exception as e:
        logger.error(f"Chat model setup failed: {str(e)}")
        raise UpstreamServiceError(
            f"Quiz generator is not configured: {format_error(e)}"
        ) from e


def strip_code_fence(raw: str) -> str:
    return _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", raw.strip())).strip()


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        # Multi-part responses: keep the text parts only
        content = "".join(
            part if isinstance(part, str) else part.get("text", "")
            for part in content
        )
    return content or "[]"


class QuizService:
    def __init__(self, llm: Runnable, question_count: int = 5):
        self.llm = llm
        self.question_count = question_count
        self.setup_chain()

    def setup_chain(self):
        """Setup the quiz generation chain"""
        self.quiz_prompt = ChatPromptTemplate.from_messages([
            ("system", SYSTEM_PROMPT),
            ("human", QUIZ_TEMPLATE),
        ])
        self.quiz_chain = self.quiz_prompt | self.llm

    def request_quiz(self, text: str) -> str:
        """Send one generation request and return the raw completion text"""
        try:
            response = self.quiz_chain.invoke({
                "text": text,
                "number": self.question_count,
                "option_count": OPTION_COUNT,
            })
        except Exception as e:
            raise UpstreamServiceError(format_error(e)) from e
        return _message_text(response)

    @staticmethod
    def parse_questions(raw: str) -> list[Question]:
        """Parse the model's completion into validated questions"""
        cleaned = strip_code_fence(raw)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.debug(f"Failed to extract JSON from: {raw}")
            raise MalformedResponseError("Quiz generator returned invalid JSON") from e

        if not isinstance(data, list) or not data:
            raise MalformedResponseError(
                "Quiz generator must return a non-empty JSON array of questions"
            )

        try:
            return [Question.model_validate(item) for item in data]
        except ValidationError as e:
            raise MalformedResponseError(
                f"Quiz generator returned a malformed question: {format_error(e)}"
            ) from e

    def generate_quiz(self, text: str) -> QuizResult:
        """Generate quiz questions from extracted PDF text. Never raises."""
        if not text or not text.strip():
            return QuizResult(
                success=False,
                message="No text to generate questions from",
                error=VALIDATION_ERROR,
            )

        try:
            raw = self.request_quiz(text)
            questions = self.parse_questions(raw)
        except Exception as e:
            message = format_error(e)
            logger.error(f"Quiz generation failed: {message}")
            return QuizResult(success=False, message=message, error=error_code(e))

        logger.info(f"Generated {len(questions)} question(s)")
        return QuizResult(
            success=True,
            message="Generate questions successfully",
            questions=questions,
        )
