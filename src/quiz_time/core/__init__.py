"""Core shared helpers for quiz-time."""

from __future__ import annotations

from .config import (
    QuizTimeConfig,
    TomlConfigError,
    find_config,
    load_config,
    load_toml,
    merge_defaults,
    write_toml_template,
)
from .logging import JsonLogFormatter, configure_logger

__all__ = [
    "QuizTimeConfig",
    "TomlConfigError",
    "find_config",
    "load_config",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
    "JsonLogFormatter",
    "configure_logger",
]
