"""Single-screen multiple-choice quiz with scoring and answer review."""

from .quiz import (
    QUESTIONS,
    NoSelectionError,
    Question,
    QuizSession,
)

__all__ = [
    "QUESTIONS",
    "NoSelectionError",
    "Question",
    "QuizSession",
]
