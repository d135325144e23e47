from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

import pytest

from quiz_time.core import logging as core_logging
from quiz_time.quiz.session import SessionPhase


def _handlers(logger: logging.Logger, marker: str) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, marker, False)]


@pytest.fixture
def cleanup():
    names: list[str] = []
    yield names.append
    for name in names:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True


def test_configure_logger_writes_json(tmp_path, cleanup):
    cleanup("quiz_time.test_json")
    logger, log_path = core_logging.configure_logger(
        "quiz_time.test_json",
        log_dir=tmp_path / "logs",
        filename="test.log",
    )

    logger.info(
        "answer recorded",
        extra={"event": "advance", "question_id": "q1", "path": tmp_path},
    )
    logger.debug("below file level")
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("with error", extra={"phase": SessionPhase.FINISHED})
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["message"] == "answer recorded"
    assert first["level"] == "INFO"
    assert first["logger"] == "quiz_time.test_json"
    assert first["extra"] == {
        "event": "advance",
        "question_id": "q1",
        "path": str(tmp_path),
    }
    last = json.loads(lines[-1])
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["phase"] == repr(SessionPhase.FINISHED)


def test_verbose_logs_debug_and_adds_console(tmp_path, cleanup, capsys):
    cleanup("quiz_time.test_verbose")
    logger, log_path = core_logging.configure_logger(
        "quiz_time.test_verbose",
        log_dir=tmp_path / "logs",
        level="WARNING",
        verbose=True,
        filename="verbose.log",
    )

    logger.debug("details")
    for handler in logger.handlers:
        handler.flush()

    assert len(_handlers(logger, core_logging._CONSOLE_MARKER)) == 1
    assert "details" in log_path.read_text(encoding="utf-8")


def test_console_handler_toggle_reuses_file_handler(tmp_path, cleanup):
    name = "quiz_time.test_toggle"
    cleanup(name)
    kwargs = {"log_dir": tmp_path / "logs", "filename": "toggle.log"}

    logger, first_path = core_logging.configure_logger(
        name, verbose=True, **kwargs
    )
    core_logging.configure_logger(name, verbose=True, **kwargs)
    assert len(_handlers(logger, core_logging._CONSOLE_MARKER)) == 1

    _, second_path = core_logging.configure_logger(
        name, verbose=False, **kwargs
    )
    assert not _handlers(logger, core_logging._CONSOLE_MARKER)
    assert len(_handlers(logger, core_logging._FILE_MARKER)) == 1
    assert second_path == first_path


def test_configure_logger_fallback_directory(tmp_path, monkeypatch, cleanup):
    cleanup("quiz_time.test_blocked")
    target = tmp_path / "blocked"
    fallback = tmp_path / "fallback"
    original_mkdir = Path.mkdir

    def fake_mkdir(self, *args, **kwargs):  # noqa: ANN001
        if self == target:
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", fake_mkdir)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback)

    _, log_path = core_logging.configure_logger(
        "quiz_time.test_blocked",
        log_dir=target,
        filename="blocked.log",
    )

    assert log_path == fallback / "blocked.log"
    assert log_path.exists()


def test_rotating_handler_permission_fallback(tmp_path, monkeypatch, cleanup):
    cleanup("quiz_time.test_rotating")
    calls = {"count": 0}
    fallback = tmp_path / "rotate-fallback"
    original_handler = core_logging.RotatingFileHandler

    def fake_handler(path, *args, **kwargs):  # noqa: ANN001
        calls["count"] += 1
        if calls["count"] == 1:
            raise PermissionError("denied")
        return original_handler(path, *args, **kwargs)

    monkeypatch.setattr(core_logging, "RotatingFileHandler", fake_handler)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback)

    _, log_path = core_logging.configure_logger(
        "quiz_time.test_rotating",
        log_dir=tmp_path / "primary",
        filename="rotate.log",
    )

    assert log_path.parent == fallback
    assert calls["count"] == 2


def test_fallback_log_dir_uses_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "gettempdir", lambda: str(tmp_path))
    assert core_logging._fallback_log_dir() == tmp_path / "quiz-time-logs"


def test_coerce_level_defaults():
    assert core_logging._coerce_level("bogus") == logging.INFO
    assert core_logging._coerce_level("warning") == logging.WARNING
