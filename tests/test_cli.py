from __future__ import annotations

import logging
from pathlib import Path

import pytest

from quiz_time import _main as cli
from quiz_time.core import config as cfg
from quiz_time.quiz.console import ConsoleSessionResult


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Run each command from a temp dir with logs kept under it."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(cfg.HOME_ENV, str(tmp_path / "home"))
    yield
    logger = logging.getLogger("quiz_time")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True


def run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return int(excinfo.value.code)


def test_init_writes_template_once(tmp_path, capsys):
    assert run(["init"]) == 0
    target = tmp_path / cfg.CONFIG_FILENAME
    assert target.read_text(encoding="utf-8") == cfg.CONFIG_TEMPLATE
    assert "Created template" in capsys.readouterr().out

    target.write_text("# edited\n", encoding="utf-8")
    assert run(["init"]) == 0
    assert "already exists" in capsys.readouterr().out
    assert target.read_text(encoding="utf-8") == "# edited\n"

    assert run(["init", "--force"]) == 0
    assert target.read_text(encoding="utf-8") == cfg.CONFIG_TEMPLATE


def test_init_custom_path(tmp_path):
    target = tmp_path / "conf" / "mine.toml"
    assert run(["init", "--path", str(target)]) == 0
    assert target.exists()


def test_questions_lists_prompts(capsys):
    assert run(["questions", "--options"]) == 0
    out = capsys.readouterr().out
    assert "1. [q1] Which language runs in a web browser?" in out
    assert "D) JavaScript" in out
    assert "5. [q5]" in out


def test_start_console_uses_session(monkeypatch, tmp_path):
    seen = {}

    def fake_run(session, console, provider):
        seen["total"] = session.total_questions
        return ConsoleSessionResult("quit", 0, session.total_questions, False)

    monkeypatch.setattr(cli, "run_console_session", fake_run)

    assert run(["start"]) == 0
    assert seen == {"total": 5}
    log_file = tmp_path / "home" / "logs" / "quiz_time.log"
    assert "session started" in log_file.read_text(encoding="utf-8")


def test_start_tui_from_config(monkeypatch, tmp_path):
    launched = []

    class FakeApp:
        def __init__(self, session):
            self.session = session

        def run(self):
            launched.append(self.session)

    monkeypatch.setattr(cli, "QuizApp", FakeApp)
    (tmp_path / cfg.CONFIG_FILENAME).write_text(
        '[ui]\nmode = "tui"\n', encoding="utf-8"
    )

    assert run(["start"]) == 0
    assert len(launched) == 1


def test_start_flag_overrides_config(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(
        cli,
        "QuizApp",
        lambda session: pytest.fail("TUI should not start"),
    )
    monkeypatch.setattr(
        cli,
        "run_console_session",
        lambda session, console, provider: calls.append(session)
        or ConsoleSessionResult("quit", 0, 5, False),
    )
    (tmp_path / cfg.CONFIG_FILENAME).write_text(
        '[ui]\nmode = "tui"\n', encoding="utf-8"
    )

    assert run(["start", "--ui", "console"]) == 0
    assert len(calls) == 1


def test_start_reports_config_errors(tmp_path, capsys):
    bad = tmp_path / "bad.toml"
    bad.write_text('[ui]\nmode = "web"\n', encoding="utf-8")

    assert run(["start", "--config", str(bad)]) == 1
    assert "Invalid ui.mode" in capsys.readouterr().err

    assert run(["start", "--config", str(tmp_path / "nope.toml")]) == 1


def test_unknown_command_is_usage_error():
    assert run(["bogus"]) == 2


def test_version_flag(monkeypatch, capsys):
    monkeypatch.setattr(cli, "_version", lambda: "9.9-test")
    parser = cli.build_arg_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--version"])
    assert "9.9-test" in capsys.readouterr().out


def test_version_handles_missing_package(monkeypatch):
    def missing(name):
        raise cli.metadata.PackageNotFoundError(name)

    monkeypatch.setattr(cli.metadata, "version", missing)
    assert cli._version() == "unknown"


def test_log_path_is_under_home(tmp_path, monkeypatch):
    monkeypatch.setattr(
        cli,
        "run_console_session",
        lambda *args: ConsoleSessionResult("quit", 0, 5, False),
    )
    assert run(["start", "--verbose"]) == 0
    assert Path(tmp_path / "home" / "logs" / "quiz_time.log").exists()
