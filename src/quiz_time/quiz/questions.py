"""Question records and the built-in question set."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .errors import InvalidQuestionError

__all__ = [
    "MIN_OPTIONS",
    "MAX_OPTIONS",
    "Question",
    "QUESTIONS",
    "validate_question_set",
]

MIN_OPTIONS = 3
MAX_OPTIONS = 4


@dataclass(frozen=True)
class Question:
    """Immutable multiple-choice question.

    ``options`` is stored as a tuple so the record can be shared freely
    between the controller and the presentation layers.
    """

    id: str
    prompt: str
    options: tuple[str, ...]
    correct_index: int

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise InvalidQuestionError("Question id must not be empty.")
        if not str(self.prompt).strip():
            raise InvalidQuestionError(
                f"Question '{self.id}' has an empty prompt."
            )
        # Accept any sequence but keep the record hashable.
        object.__setattr__(self, "options", tuple(self.options))
        count = len(self.options)
        if not MIN_OPTIONS <= count <= MAX_OPTIONS:
            raise InvalidQuestionError(
                "Question '{0}' needs {1}-{2} options, found {3}.".format(
                    self.id, MIN_OPTIONS, MAX_OPTIONS, count
                )
            )
        if any(not str(option).strip() for option in self.options):
            raise InvalidQuestionError(
                f"Question '{self.id}' has a blank option."
            )
        if isinstance(self.correct_index, bool) or not isinstance(
            self.correct_index, int
        ):
            raise InvalidQuestionError(
                f"Question '{self.id}' correct_index must be an integer."
            )
        if not 0 <= self.correct_index < count:
            raise InvalidQuestionError(
                "Question '{0}' correct_index {1} is outside 0..{2}.".format(
                    self.id, self.correct_index, count - 1
                )
            )

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index]

    def is_correct(self, index: int) -> bool:
        return index == self.correct_index


def validate_question_set(
    questions: Iterable[Question],
) -> tuple[Question, ...]:
    """Return ``questions`` as a tuple after checking set-level invariants.

    A set must hold at least one question and ids must be unique so answer
    records can be traced back to the question they belong to.
    """

    ordered = tuple(questions)
    if not ordered:
        raise InvalidQuestionError("Question set is empty.")
    seen: set[str] = set()
    for question in ordered:
        if not isinstance(question, Question):
            raise InvalidQuestionError(
                f"Expected Question, found {type(question).__name__}."
            )
        if question.id in seen:
            raise InvalidQuestionError(
                f"Duplicate question id '{question.id}'."
            )
        seen.add(question.id)
    return ordered


def _build(
    entries: Sequence[tuple[str, str, Sequence[str], int]],
) -> tuple[Question, ...]:
    return validate_question_set(
        Question(
            id=qid,
            prompt=prompt,
            options=tuple(options),
            correct_index=idx,
        )
        for qid, prompt, options, idx in entries
    )


QUESTIONS: tuple[Question, ...] = _build(
    [
        (
            "q1",
            "Which language runs in a web browser?",
            ["Java", "C", "Python", "JavaScript"],
            3,
        ),
        (
            "q2",
            "Which one is a JavaScript framework?",
            ["Django", "Laravel", "React", "Flask"],
            2,
        ),
        (
            "q3",
            "What does CSS stand for?",
            [
                "Central Style Sheets",
                "Cascading Style Sheets",
                "Cascading Simple Sheets",
                "Cars SUVs Sailboats",
            ],
            1,
        ),
        (
            "q4",
            "Which HTML tag is used to define an unordered list?",
            ["<ol>", "<ul>", "<li>", "<list>"],
            1,
        ),
        (
            "q5",
            "Inside which HTML element do we put the JavaScript?",
            ["<javascript>", "<scripting>", "<script>", "<js>"],
            2,
        ),
    ]
)
