import math
from collections.abc import MutableMapping
from typing import Any

from quizgen.schemas import Question


class QuizStateError(RuntimeError):
    pass


class NoSelectionError(QuizStateError):
    pass


def _defaults() -> dict[str, Any]:
    return {
        "questions": [],
        "current_index": 0,
        "selected_option": None,
        "score": 0,
        "finished": False,
        "pdf_file": None,
        "uploader_key": 0,
    }


class QuizSession:
    """
    One quiz run kept in a session mapping (``st.session_state`` in the app).

    Questions are answered in order, once each. ``submit`` scores the current
    selection and moves on; after the last question the run is finished and
    only ``reset`` gets the user back to the upload form.
    """

    def __init__(self, state: MutableMapping):
        self.state = state
        for key, value in _defaults().items():
            if key not in state:
                state[key] = value

    @property
    def questions(self) -> list[Question]:
        return self.state["questions"]

    @property
    def current_index(self) -> int:
        return self.state["current_index"]

    @property
    def selected_option(self) -> str | None:
        return self.state["selected_option"]

    @property
    def score(self) -> int:
        return self.state["score"]

    @property
    def finished(self) -> bool:
        return self.state["finished"]

    @property
    def pdf_file(self) -> Any:
        return self.state["pdf_file"]

    @pdf_file.setter
    def pdf_file(self, value: Any):
        self.state["pdf_file"] = value

    @property
    def uploader_key(self) -> int:
        return self.state["uploader_key"]

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def has_quiz(self) -> bool:
        return bool(self.questions)

    @property
    def current_question(self) -> Question | None:
        if not self.has_quiz:
            return None
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == self.total - 1

    @property
    def can_submit(self) -> bool:
        return self.has_quiz and not self.finished and self.selected_option is not None

    @property
    def score_percentage(self) -> int:
        if not self.total:
            return 0
        # halves round up
        return math.floor(self.score / self.total * 100 + 0.5)

    def load(self, questions: list[Question]):
        """Start a new run over freshly generated questions"""
        self.state["questions"] = [q.model_copy() for q in questions]
        self.state["current_index"] = 0
        self.state["selected_option"] = None
        self.state["score"] = 0
        self.state["finished"] = False

    def select(self, option: str | None):
        self.state["selected_option"] = option

    def submit(self) -> bool:
        """Score the selected option and advance. Returns whether it was correct."""
        if not self.has_quiz or self.finished:
            raise QuizStateError("No question is waiting for an answer")
        if self.selected_option is None:
            raise NoSelectionError("Select an option")

        question = self.current_question
        is_correct = self.selected_option == question.answer
        question.selected = self.selected_option
        question.is_correct = is_correct
        if is_correct:
            self.state["score"] += 1

        self.state["selected_option"] = None
        if self.is_last_question:
            self.state["finished"] = True
        else:
            self.state["current_index"] += 1
        return is_correct

    def reset(self):
        """Discard the run and the uploaded file"""
        self.state["questions"] = []
        self.state["pdf_file"] = None
        self.state["current_index"] = 0
        self.state["selected_option"] = None
        self.state["score"] = 0
        self.state["finished"] = False
        # a new widget key empties the file uploader
        self.state["uploader_key"] += 1
