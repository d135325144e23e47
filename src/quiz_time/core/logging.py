"""Logging setup for quiz-time: JSON lines to a rotating file."""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
]

_FILE_MARKER = "_quiz_time_file"
_CONSOLE_MARKER = "_quiz_time_console"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 3


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record; session fields go under ``extra``."""

    _STANDARD = frozenset(
        logging.LogRecord("", 0, "", 0, "", (), None).__dict__
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: _json_safe(value)
            for key, value in record.__dict__.items()
            if key not in self._STANDARD
        }
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Attach a JSON file handler to ``name`` and return the log path.

    Repeated calls keep the existing file handler; only its level and the
    presence of the stderr handler follow the new arguments.
    """

    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    handler = _find_handler(logger, _FILE_MARKER)
    if handler is None:
        log_name = filename or f"{name.rsplit('.', 1)[-1]}.log"
        handler = _open_file_handler(log_dir, log_name)
        logger.addHandler(handler)
    handler.setLevel(logging.DEBUG if verbose else _coerce_level(level))

    console = _find_handler(logger, _CONSOLE_MARKER)
    if verbose and console is None:
        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(logging.DEBUG)
        console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        setattr(console, _CONSOLE_MARKER, True)
        logger.addHandler(console)
    elif not verbose and console is not None:
        logger.removeHandler(console)
        console.close()

    return logger, Path(getattr(handler, "baseFilename"))


def _coerce_level(level: str) -> int:
    numeric = logging.getLevelName(str(level).upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def _find_handler(
    logger: logging.Logger, marker: str
) -> logging.Handler | None:
    for handler in logger.handlers:
        if getattr(handler, marker, False):
            return handler
    return None


def _open_file_handler(log_dir: Path, filename: str) -> RotatingFileHandler:
    """Open ``log_dir/filename``, retrying under the temp dir when denied."""

    try:
        handler = RotatingFileHandler(
            _private_file(log_dir, filename),
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
    except PermissionError:
        handler = RotatingFileHandler(
            _private_file(_fallback_log_dir(), filename),
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, _FILE_MARKER, True)
    return handler


def _private_file(log_dir: Path, filename: str) -> Path:
    """Create ``log_dir`` (0700) and ``filename`` (0600) inside it."""

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        log_dir = _fallback_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / filename
    path.touch(exist_ok=True)
    for target, mode in ((log_dir, 0o700), (path, 0o600)):
        try:
            target.chmod(mode)
        except PermissionError:  # pragma: no cover - depends on filesystem
            pass
    return path


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    return repr(value)


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "quiz-time-logs"
