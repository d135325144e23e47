"""Quiz session controller and its state/record types.

The controller owns a single :class:`SessionState` and exposes intents
(``select_option``, ``advance``, ``toggle_review``, ``restart``) plus
read-only projections (progress, scores, review rows). Presentation layers
read projections and dispatch intents; they never mutate the state object
directly.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from .errors import (
    NoSelectionError,
    OptionOutOfRangeError,
    SessionFinishedError,
)
from .questions import QUESTIONS, Question, validate_question_set

__all__ = [
    "AnswerRecord",
    "QuizSession",
    "ReviewRow",
    "SessionPhase",
    "SessionState",
    "CORRECT_BADGE",
    "PICK_BADGE",
]

logger = logging.getLogger(__name__)

CORRECT_BADGE = "Correct"
PICK_BADGE = "Your pick"


class SessionPhase(str, Enum):
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class AnswerRecord:
    """The answer given for one question, recorded when advancing past it."""

    question_id: str
    selected_index: int
    is_correct: bool


@dataclass
class SessionState:
    """Mutable session state owned by :class:`QuizSession`."""

    current_index: int = 0
    current_selection: int | None = None
    answers: list[AnswerRecord] = field(default_factory=list)
    finished: bool = False
    review_visible: bool = False


@dataclass(frozen=True)
class ReviewRow:
    """Per-question review data used to annotate options after finishing."""

    index: int
    question_id: str
    prompt: str
    options: tuple[str, ...]
    correct_index: int
    picked_index: int
    is_correct: bool

    def annotation(self, option_index: int) -> str | None:
        if option_index == self.correct_index:
            return CORRECT_BADGE
        if option_index == self.picked_index:
            return PICK_BADGE
        return None

    @property
    def outcome(self) -> str:
        if self.is_correct:
            return "You answered correctly."
        return "Your answer was incorrect."


class QuizSession:
    """State machine driving a single run through a question set."""

    def __init__(self, questions: Sequence[Question] | None = None) -> None:
        self._questions = validate_question_set(
            QUESTIONS if questions is None else questions
        )
        self._state = SessionState()

    # Read-only views -----------------------------------------------------

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def current_question(self) -> Question | None:
        if self._state.finished:
            return None
        return self._questions[self._state.current_index]

    @property
    def current_selection(self) -> int | None:
        return self._state.current_selection

    @property
    def answers(self) -> tuple[AnswerRecord, ...]:
        return tuple(self._state.answers)

    @property
    def finished(self) -> bool:
        return self._state.finished

    @property
    def review_visible(self) -> bool:
        return self._state.review_visible

    @property
    def phase(self) -> SessionPhase:
        if self._state.finished:
            return SessionPhase.FINISHED
        return SessionPhase.IN_PROGRESS

    @property
    def is_last_question(self) -> bool:
        return (
            not self._state.finished
            and self._state.current_index == self.total_questions - 1
        )

    def snapshot(self) -> SessionState:
        """Return a detached copy of the current state."""

        return replace(self._state, answers=list(self._state.answers))

    # Intents -------------------------------------------------------------

    def select_option(self, index: int) -> None:
        question = self._require_current()
        if not 0 <= index < len(question.options):
            raise OptionOutOfRangeError(
                "Option {0} does not exist on question '{1}' (0..{2}).".format(
                    index, question.id, len(question.options) - 1
                )
            )
        self._state.current_selection = index
        logger.debug(
            "option selected",
            extra={
                "event": "select",
                "question_id": question.id,
                "selected_index": index,
            },
        )

    def advance(self) -> AnswerRecord:
        """Record the current selection and move to the next question.

        Raises :class:`NoSelectionError` without touching state when nothing
        is selected. Answering the last question finishes the session and
        moves ``current_index`` past the end of the set.
        """

        question = self._require_current()
        selection = self._state.current_selection
        if selection is None:
            logger.info(
                "advance rejected without selection",
                extra={"event": "no_selection", "question_id": question.id},
            )
            raise NoSelectionError(question.id)

        record = AnswerRecord(
            question_id=question.id,
            selected_index=selection,
            is_correct=question.is_correct(selection),
        )
        self._state.answers.append(record)
        self._state.current_index += 1
        self._state.current_selection = None
        if self._state.current_index >= self.total_questions:
            self._state.finished = True
        logger.debug(
            "answer recorded",
            extra={
                "event": "advance",
                "question_id": record.question_id,
                "selected_index": record.selected_index,
                "is_correct": record.is_correct,
            },
        )
        if self._state.finished:
            logger.info(
                "session finished",
                extra={
                    "event": "finished",
                    "score": self.final_score(),
                    "total": self.total_questions,
                },
            )
        return record

    def toggle_review(self) -> bool:
        if self._state.finished:
            self._state.review_visible = not self._state.review_visible
            logger.debug(
                "review toggled",
                extra={
                    "event": "review",
                    "visible": self._state.review_visible,
                },
            )
        return self._state.review_visible

    def restart(self) -> None:
        self._state = SessionState()
        logger.debug("session restarted", extra={"event": "restart"})

    # Projections ---------------------------------------------------------

    def progress(self) -> float:
        if self._state.finished:
            return 1.0
        fraction = self._state.current_index / self.total_questions
        return min(1.0, max(0.0, fraction))

    def running_score(self) -> int:
        return sum(1 for answer in self._state.answers if answer.is_correct)

    def final_score(self) -> int:
        return self.running_score()

    def review_row(self, index: int) -> ReviewRow:
        answers = self._state.answers
        if not 0 <= index < len(answers):
            raise IndexError(
                f"No answer recorded for question index {index}."
            )
        question = self._questions[index]
        answer = answers[index]
        return ReviewRow(
            index=index,
            question_id=question.id,
            prompt=question.prompt,
            options=question.options,
            correct_index=question.correct_index,
            picked_index=answer.selected_index,
            is_correct=answer.is_correct,
        )

    def review_rows(self) -> list[ReviewRow]:
        return [self.review_row(i) for i in range(len(self._state.answers))]

    def advance_label(self) -> str:
        return "Finish" if self.is_last_question else "Next"

    def review_label(self) -> str:
        if self._state.review_visible:
            return "Hide review"
        return "Show correct answers"

    def _require_current(self) -> Question:
        if self._state.finished:
            raise SessionFinishedError(
                "The quiz is finished; restart to answer again."
            )
        return self._questions[self._state.current_index]
