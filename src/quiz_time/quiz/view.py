from __future__ import annotations

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widget import Widget
from textual.widgets import Button, ProgressBar, Static

from .errors import NoSelectionError
from .questions import Question
from .session import CORRECT_BADGE, QuizSession, ReviewRow


class QuizApp(App):
    """Textual front end mirroring the single-screen quiz layout."""

    CSS_PATH = None
    CSS = """
#header { height: 3; padding: 0 1; }
#title { width: 1fr; text-style: bold; }
#score, #header-restart { width: auto; }
.options Button { width: 100%; margin-top: 1; }
.options Button.selected { background: $accent; color: black; }
.review-option.correct { color: $success; }
.review-option.picked { color: $error; }
.outcome.correct { color: $success; text-style: bold; }
.outcome.incorrect { color: $error; text-style: bold; }
"""
    BINDINGS = [
        ("1", "select(0)", "Option 1"),
        ("2", "select(1)", "Option 2"),
        ("3", "select(2)", "Option 3"),
        ("4", "select(3)", "Option 4"),
        ("n", "advance", "Next"),
        ("r", "toggle_review", "Review"),
        ("t", "restart", "Try again"),
    ]

    def __init__(self, session: QuizSession | None = None):
        super().__init__()
        self.session = session or QuizSession()

    def compose(self) -> ComposeResult:
        with Horizontal(id="header"):
            yield Static("Quiz Time", id="title")
            yield from self._header_widgets()
        yield ProgressBar(
            total=100,
            show_eta=False,
            show_percentage=False,
            id="progress",
        )
        with Container(id="stage"):
            yield from self._stage_widgets()
        with Container(id="footer"):
            yield Button(
                self.session.advance_label(),
                id="advance",
                variant="primary",
            )

    # Intents wired to bindings and buttons

    def action_select(self, index: int) -> None:
        question = self.session.current_question
        if question is None or not 0 <= index < len(question.options):
            return
        self.session.select_option(index)
        self._refresh_view()

    def action_advance(self) -> bool:
        if self.session.finished:
            return False
        try:
            self.session.advance()
        except NoSelectionError:
            self.notify(
                "Please select an answer before continuing.",
                title="Choose an option",
                severity="warning",
            )
            return False
        self._refresh_view()
        return True

    def action_toggle_review(self) -> None:
        self.session.toggle_review()
        self._refresh_view()

    def action_restart(self) -> None:
        self.session.restart()
        self._refresh_view()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        # The intent lives in ``name``; stage buttons are remounted on every
        # refresh and carry no DOM id.
        button = event.button
        bid = getattr(button, "name", None) or getattr(button, "id", None)
        bid = bid or ""
        if bid.startswith("option-"):
            self.action_select(int(bid.rsplit("-", 1)[-1]))
        elif bid == "advance":
            self.action_advance()
        elif bid == "review":
            self.action_toggle_review()
        elif bid == "restart":
            self.action_restart()

    # Rendering helpers

    def _stage_widgets(self) -> list[Widget]:
        session = self.session
        question = session.current_question
        if question is not None:
            return [
                QuestionCard(
                    question,
                    index=session.current_index,
                    total=session.total_questions,
                    selected=session.current_selection,
                )
            ]
        widgets: list[Widget] = [
            ResultCard(
                score=session.final_score(),
                total=session.total_questions,
                review_label=session.review_label(),
            )
        ]
        if session.review_visible:
            widgets.extend(ReviewCard(row) for row in session.review_rows())
        return widgets

    def _header_widgets(self) -> list[Widget]:
        """Score while answering, a restart button once finished."""

        score = Static(self._score_text(), id="score")
        restart = Button("Restart", id="header-restart", name="restart")
        score.display = not self.session.finished
        restart.display = self.session.finished
        return [score, restart]

    def _score_text(self) -> str:
        return f"Score: {self.session.running_score()}"

    def _refresh_view(self) -> None:
        try:
            stage = self.query_one("#stage", Container)
        except Exception:
            # Not mounted yet; compose() renders the current state.
            return
        stage.remove_children()
        stage.mount(*self._stage_widgets())
        score = self.query_one("#score", Static)
        score.update(self._score_text())
        score.display = not self.session.finished
        self.query_one("#header-restart", Button).display = (
            self.session.finished
        )
        self.query_one("#progress", ProgressBar).update(
            progress=round(self.session.progress() * 100)
        )
        advance = self.query_one("#advance", Button)
        advance.label = self.session.advance_label()
        advance.display = not self.session.finished


class QuestionCard(Widget):
    """Counter, prompt and one button per option for the active question."""

    DEFAULT_CSS = "QuestionCard { height: auto; border: round $primary; }"

    def __init__(
        self,
        question: Question,
        index: int,
        total: int,
        *,
        selected: int | None = None,
    ) -> None:
        super().__init__()
        self.question = question
        self.index = index
        self.total = total
        self.selected = selected

    def compose(self) -> ComposeResult:
        yield Static(
            f"Question {self.index + 1} / {self.total}", classes="counter"
        )
        yield Static(self.question.prompt, classes="prompt")
        with Vertical(classes="options"):
            for idx, option in enumerate(self.question.options):
                marker = "●" if idx == self.selected else "○"
                btn = Button(f"{marker} {option}", name=f"option-{idx}")
                if idx == self.selected:
                    btn.add_class("selected")
                yield btn


class ResultCard(Widget):
    DEFAULT_CSS = "ResultCard { height: auto; border: round $primary; }"

    def __init__(self, *, score: int, total: int, review_label: str) -> None:
        super().__init__()
        self.score = score
        self.total = total
        self.review_label = review_label

    def compose(self) -> ComposeResult:
        yield Static("All done!", classes="result-title")
        yield Static("Your score", classes="result-caption")
        yield Static(f"{self.score} / {self.total}", classes="result-score")
        yield Button(self.review_label, name="review", variant="primary")
        yield Button("Try again", name="restart")


class ReviewCard(Widget):
    """One answered question with "Correct" / "Your pick" badges."""

    DEFAULT_CSS = "ReviewCard { height: auto; border: round $surface; }"

    def __init__(self, row: ReviewRow) -> None:
        super().__init__()
        self.row = row

    def option_lines(self) -> list[tuple[str, str]]:
        """Return ``(label, css_class)`` pairs for each option."""

        lines: list[tuple[str, str]] = []
        for idx, option in enumerate(self.row.options):
            badge = self.row.annotation(idx)
            if badge is None:
                lines.append((option, ""))
            elif badge == CORRECT_BADGE:
                lines.append((f"{option}  [{badge}]", "correct"))
            else:
                lines.append((f"{option}  [{badge}]", "picked"))
        return lines

    def compose(self) -> ComposeResult:
        yield Static(f"{self.row.index + 1}. {self.row.prompt}")
        for label, css_class in self.option_lines():
            classes = f"review-option {css_class}".strip()
            yield Static(label, classes=classes, markup=False)
        outcome_class = "correct" if self.row.is_correct else "incorrect"
        yield Static(self.row.outcome, classes=f"outcome {outcome_class}")
