from .errors import (
    InvalidQuestionError,
    NoSelectionError,
    OptionOutOfRangeError,
    QuizError,
    SessionFinishedError,
)
from .questions import QUESTIONS, Question, validate_question_set
from .session import (
    AnswerRecord,
    QuizSession,
    ReviewRow,
    SessionPhase,
    SessionState,
)
from .console import (
    ConsoleCommand,
    ConsoleSessionResult,
    parse_console_command,
    run_console_session,
)

__all__ = [
    "QuizError",
    "InvalidQuestionError",
    "NoSelectionError",
    "OptionOutOfRangeError",
    "SessionFinishedError",
    "QUESTIONS",
    "Question",
    "validate_question_set",
    "AnswerRecord",
    "QuizSession",
    "ReviewRow",
    "SessionPhase",
    "SessionState",
    "ConsoleCommand",
    "ConsoleSessionResult",
    "parse_console_command",
    "run_console_session",
]
