import argparse
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from .core import (
    TomlConfigError,
    configure_logger,
    find_config,
    load_config,
    write_toml_template,
)
from .core.config import CONFIG_FILENAME, UI_MODES
from .quiz import QuizSession, run_console_session
from .quiz.view import QuizApp

logger = logging.getLogger("quiz_time")


def _version() -> str:
    try:
        return metadata.version("quiz-time")
    except metadata.PackageNotFoundError:
        return "unknown"


def _cmd_init(args: argparse.Namespace) -> int:
    path = Path(args.path or CONFIG_FILENAME).expanduser().resolve()
    try:
        write_toml_template(path, overwrite=bool(args.force))
    except TomlConfigError:
        print(f"{CONFIG_FILENAME} already exists at {path}")
        return 0
    print(f"Created template {path}")
    return 0


def _cmd_questions(args: argparse.Namespace) -> int:
    session = QuizSession()
    for idx, question in enumerate(session.questions, start=1):
        print(f"{idx}. [{question.id}] {question.prompt}")
        if args.options:
            for key, option in zip("ABCD", question.options):
                print(f"     {key}) {option}")
    return 0


def _cmd_start(args: argparse.Namespace) -> int:
    """Run a quiz session in the console or the Textual UI.

    CLI flags take precedence over ``quiz_time.toml``. The stderr log
    handler is only attached for the console UI so it cannot scribble over
    the Textual screen.
    """
    try:
        config = load_config(find_config(args.config))
    except TomlConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    ui_mode = args.ui or config.ui_mode
    verbose = bool(args.verbose or config.verbose)
    _, log_path = configure_logger(
        "quiz_time",
        log_dir=config.log_dir,
        level="DEBUG" if verbose else config.log_level,
        verbose=verbose and ui_mode == "console",
        filename="quiz_time.log",
    )

    session = QuizSession()
    logger.info(
        "session started",
        extra={
            "event": "start",
            "ui": ui_mode,
            "questions": session.total_questions,
            "log_path": log_path,
        },
    )
    if ui_mode == "tui":
        QuizApp(session).run()
        logger.info(
            "session ended",
            extra={
                "event": "end",
                "score": session.running_score(),
                "finished": session.finished,
            },
        )
        return 0

    console = Console()
    result = run_console_session(
        session,
        console,
        lambda: console.input("[bold cyan]> [/]"),
    )
    logger.info(
        "session ended",
        extra={
            "event": "end",
            "exit_action": result.exit_action,
            "score": result.score,
            "finished": result.finished,
        },
    )
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quiz-time",
        description="Multiple-choice quiz with scoring and answer review",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("-V", "--version", action="version", version=_version())
    sub = p.add_subparsers(dest="command", required=True)

    sp_init = sub.add_parser(
        "init", help=f"Create a {CONFIG_FILENAME} template"
    )
    sp_init.add_argument("--path", help="Where to write the template")
    sp_init.add_argument(
        "--force", action="store_true", help="Overwrite an existing file"
    )

    sp_q = sub.add_parser("questions", help="List the built-in questions")
    sp_q.add_argument(
        "--options", action="store_true", help="Also list answer options"
    )

    sp_start = sub.add_parser("start", help="Start a quiz session")
    sp_start.add_argument(
        "--ui",
        choices=list(UI_MODES),
        default=None,
        help="Front end to use (defaults to ui.mode from the config)",
    )
    sp_start.add_argument("--config", help=f"Path to {CONFIG_FILENAME}")
    sp_start.add_argument(
        "-v", "--verbose", action="store_true", help="Log to stderr as well"
    )
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.command == "init":
        code = _cmd_init(args)
    elif args.command == "questions":
        code = _cmd_questions(args)
    elif args.command == "start":
        code = _cmd_start(args)
    else:  # pragma: no cover - fallback guard
        parser.print_help()
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    main()
