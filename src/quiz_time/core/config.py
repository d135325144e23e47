"""TOML configuration for the quiz-time command."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping

try:  # Python >= 3.11 ships ``tomllib`` in the stdlib.
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover - interpreter guard
    raise RuntimeError("Python 3.11+ is required for tomllib support.") from exc

__all__ = [
    "CONFIG_FILENAME",
    "CONFIG_TEMPLATE",
    "DEFAULT_CONFIG",
    "HOME_ENV",
    "UI_MODES",
    "QuizTimeConfig",
    "TomlConfigError",
    "find_config",
    "load_config",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]

HOME_ENV = "QUIZ_TIME_HOME"
DEFAULT_HOME = Path.home() / ".quiz-time"
CONFIG_FILENAME = "quiz_time.toml"
UI_MODES = ("console", "tui")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG: Mapping[str, Any] = {
    "logging": {
        "level": "INFO",
        "verbose": False,
        "dir": "",
    },
    "ui": {
        "mode": "console",
    },
}

CONFIG_TEMPLATE = """\
# quiz-time configuration

[logging]
# File log level: DEBUG, INFO, WARNING, ERROR or CRITICAL
level = "INFO"
# Mirror log records to stderr
verbose = false
# Log directory; empty uses $QUIZ_TIME_HOME/logs or ~/.quiz-time/logs
dir = ""

[ui]
# "console" for the Rich prompt loop, "tui" for the Textual app
mode = "console"
"""


class TomlConfigError(RuntimeError):
    """Raised when TOML config IO or validation fails."""


@dataclass(frozen=True)
class QuizTimeConfig:
    """Resolved settings for a quiz-time run."""

    log_level: str
    verbose: bool
    log_dir: Path
    ui_mode: str
    source: Path | None = None


def load_toml(path: Path) -> Mapping[str, Any]:
    """Load a TOML document from ``path``.

    Errors are surfaced as :class:`TomlConfigError` instances so the CLI can
    report them uniformly.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Recursively merge ``override`` into ``base`` enforcing known keys."""

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            merge_defaults(base_value, value, path=f"{dotted}.")
            continue
        base[key] = value


def write_toml_template(
    path: Path,
    *,
    template: str = CONFIG_TEMPLATE,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path`` honouring ``overwrite`` semantics."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    with path.open("w", encoding="utf-8") as handle:
        handle.write(template)
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path


def find_config(explicit: str | os.PathLike[str] | None) -> Path | None:
    """Locate the config file: an explicit path, else ``./quiz_time.toml``.

    An explicit path that does not exist is an error; a missing default file
    simply means built-in defaults apply.
    """

    if explicit:
        path = Path(explicit).expanduser().resolve()
        if not path.is_file():
            raise TomlConfigError(f"Config file not found: {path}")
        return path
    default = Path(CONFIG_FILENAME).resolve()
    return default if default.is_file() else None


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> QuizTimeConfig:
    """Merge ``path`` (when given) over defaults and validate the result."""

    data: MutableMapping[str, Any] = copy.deepcopy(dict(DEFAULT_CONFIG))
    if path is not None:
        merge_defaults(data, load_toml(path))

    log_section = data["logging"]
    level = str(log_section["level"]).strip().upper()
    if level not in _LOG_LEVELS:
        raise TomlConfigError(
            "Invalid logging.level '{0}'; expected one of {1}.".format(
                log_section["level"], ", ".join(_LOG_LEVELS)
            )
        )
    verbose = log_section["verbose"]
    if not isinstance(verbose, bool):
        raise TomlConfigError("logging.verbose must be true or false.")

    mode = str(data["ui"]["mode"]).strip().lower()
    if mode not in UI_MODES:
        raise TomlConfigError(
            "Invalid ui.mode '{0}'; expected one of {1}.".format(
                data["ui"]["mode"], ", ".join(UI_MODES)
            )
        )

    return QuizTimeConfig(
        log_level=level,
        verbose=verbose,
        log_dir=_resolve_log_dir(str(log_section["dir"] or ""), env),
        ui_mode=mode,
        source=path,
    )


def _resolve_log_dir(raw: str, env: Mapping[str, str] | None) -> Path:
    if raw.strip():
        return Path(raw).expanduser()
    env_map = os.environ if env is None else env
    custom = (env_map.get(HOME_ENV) or "").strip()
    base = Path(custom).expanduser() if custom else DEFAULT_HOME
    return base / "logs"
