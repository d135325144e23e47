"""Error types raised by the quiz session controller."""

from __future__ import annotations

__all__ = [
    "QuizError",
    "InvalidQuestionError",
    "NoSelectionError",
    "OptionOutOfRangeError",
    "SessionFinishedError",
]


class QuizError(RuntimeError):
    """Base class for quiz failures."""


class InvalidQuestionError(QuizError, ValueError):
    """Raised when a question or question set breaks its invariants."""


class NoSelectionError(QuizError):
    """Raised by ``advance`` when no option is selected for the question."""

    def __init__(self, question_id: str) -> None:
        super().__init__(
            f"Select an answer for question '{question_id}' before continuing."
        )
        self.question_id = question_id


class OptionOutOfRangeError(QuizError, IndexError):
    """Raised when an option index does not exist on the current question."""


class SessionFinishedError(QuizError):
    """Raised when an answering intent arrives after the last question."""
