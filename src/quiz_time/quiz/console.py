"""Rich-powered console front end for a :class:`QuizSession`.

The loop renders the current question (or the result card once finished),
reads one command per prompt from an injectable input provider, and maps it
onto session intents. Keeping input behind a callable lets tests drive the
loop with a scripted list of commands.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from .errors import NoSelectionError
from .session import CORRECT_BADGE, QuizSession, ReviewRow

InputProvider = Callable[[], str]
ExitAction = Literal["quit", "interrupted"]
CommandType = Literal["select", "next", "review", "restart", "quit"]

OPTION_KEYS = "ABCD"

_NEXT_WORDS = {"n", "next", "finish"}
_REVIEW_WORDS = {"r", "review"}
_RESTART_WORDS = {"restart", "again", "t"}
_QUIT_WORDS = {"q", "quit", "exit"}


@dataclass(frozen=True)
class ConsoleCommand:
    """Normalized command parsed from console input."""

    type: CommandType
    option: int | None = None


@dataclass(frozen=True)
class ConsoleSessionResult:
    """Return value from ``run_console_session``."""

    exit_action: ExitAction
    score: int
    total: int
    finished: bool


def parse_console_command(raw: str | None) -> ConsoleCommand | None:
    """Parse raw user input into a :class:`ConsoleCommand`.

    Options may be given as letters (``a``-``d``) or 1-based numbers.
    """

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    lowered = text.lower()
    if lowered in _NEXT_WORDS:
        return ConsoleCommand("next")
    if lowered in _REVIEW_WORDS:
        return ConsoleCommand("review")
    if lowered in _RESTART_WORDS:
        return ConsoleCommand("restart")
    if lowered in _QUIT_WORDS:
        return ConsoleCommand("quit")
    if lowered.isdigit():
        number = int(lowered)
        if number >= 1:
            return ConsoleCommand("select", number - 1)
        return None
    if len(text) == 1 and text.upper() in OPTION_KEYS:
        return ConsoleCommand("select", OPTION_KEYS.index(text.upper()))
    return None


def run_console_session(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
) -> ConsoleSessionResult:
    """Drive ``session`` interactively until the user quits."""

    exit_action: ExitAction = "quit"
    while True:
        render_session(console, session)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            exit_action = "interrupted"
            break
        command = parse_console_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print("\n[bold yellow]Goodbye.[/]")
            break
        _apply_command(command, session, console)

    return ConsoleSessionResult(
        exit_action=exit_action,
        score=session.running_score(),
        total=session.total_questions,
        finished=session.finished,
    )


def _apply_command(
    command: ConsoleCommand,
    session: QuizSession,
    console: Console,
) -> None:
    if command.type == "restart":
        session.restart()
        console.print("[bold]Starting over.[/]")
        return
    if command.type == "review":
        if session.finished:
            session.toggle_review()
        else:
            console.print(
                "[dim]Review is available after the last question.[/]"
            )
        return
    if session.finished:
        console.print(
            "[yellow]The quiz is finished. Use review, restart or quit.[/]"
        )
        return
    if command.type == "select" and command.option is not None:
        question = session.current_question
        if question is None or command.option >= len(question.options):
            key = _option_key(command.option)
            console.print(
                f"[red]'{key}' is not a valid choice for this question.[/]"
            )
            return
        session.select_option(command.option)
        console.print(f"Selected [bold]{_option_key(command.option)}[/].")
        return
    if command.type == "next":
        try:
            session.advance()
        except NoSelectionError:
            console.print(
                Panel(
                    "Please select an answer before continuing.",
                    title="Choose an option",
                    border_style="yellow",
                )
            )


def render_session(console: Console, session: QuizSession) -> None:
    """Render the header and the view matching the session phase."""

    _render_header(console, session)
    if session.finished:
        _render_results(console, session)
        if session.review_visible:
            _render_review(console, session.review_rows())
    else:
        _render_question(console, session)


def _option_key(index: int) -> str:
    if 0 <= index < len(OPTION_KEYS):
        return OPTION_KEYS[index]
    return str(index + 1)


def _render_header(console: Console, session: QuizSession) -> None:
    console.print()
    if session.finished:
        status = Text("restart to try again", style="dim")
    else:
        status = Text(f"Score: {session.running_score()}", style="bold")
    header = Table.grid(expand=True)
    header.add_column()
    header.add_column(justify="right")
    header.add_row(Text("Quiz Time", style="bold"), status)
    console.print(header)
    console.print(
        ProgressBar(total=100, completed=round(session.progress() * 100))
    )


def _render_question(console: Console, session: QuizSession) -> None:
    question = session.current_question
    if question is None:
        return
    counter = Text.assemble(
        (f"Question {session.current_index + 1}", "bold cyan"),
        (f" / {session.total_questions}", "dim"),
    )
    console.rule(counter)
    console.print(Text(question.prompt, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Option")
    selected = session.current_selection
    for idx, option in enumerate(question.options):
        marker = "●" if idx == selected else "○"
        label = Text(f"{marker} ")
        label += Text(option, style="bold blue" if idx == selected else "")
        table.add_row(_option_key(idx), label)
    console.print(table)

    keys = ", ".join(_option_key(i) for i in range(len(question.options)))
    console.print(
        Text(
            f"Commands: choices [{keys}], n ({session.advance_label()}), "
            "restart, quit",
            style="dim",
        )
    )


def _render_results(console: Console, session: QuizSession) -> None:
    body = Table.grid()
    body.add_column(justify="center")
    body.add_row(Text("All done!", style="bold"))
    body.add_row(Text("Your score", style="dim"))
    body.add_row(
        Text(
            f"{session.final_score()} / {session.total_questions}",
            style="bold magenta",
        )
    )
    console.print(Panel(body, box=box.ROUNDED, expand=False))
    console.print(
        Text(
            f"Commands: r ({session.review_label()}), "
            "restart (Try again), quit",
            style="dim",
        )
    )


def _render_review(console: Console, rows: list[ReviewRow]) -> None:
    console.rule(Text("Review", style="bold"))
    for row in rows:
        table = Table(show_header=False, box=box.SIMPLE, expand=True)
        table.add_column("Option")
        table.add_column("Badge", justify="right")
        for idx, option in enumerate(row.options):
            badge = row.annotation(idx)
            if badge is None:
                table.add_row(Text(option), Text(""))
                continue
            color = "green" if badge == CORRECT_BADGE else "red"
            table.add_row(
                Text(option, style=color),
                Text(f" {badge} ", style=f"bold white on {color}"),
            )
        outcome = Text(
            row.outcome, style="bold green" if row.is_correct else "bold red"
        )
        console.print(_review_panel(row, table, outcome))


def _review_panel(row: ReviewRow, table: Table, outcome: Text) -> Panel:
    body = Table.grid()
    body.add_column()
    body.add_row(table)
    body.add_row(outcome)
    return Panel(
        body,
        title=f"{row.index + 1}. {row.prompt}",
        title_align="left",
        border_style="green" if row.is_correct else "red",
    )
