from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

TESTS_DIR = Path(__file__).resolve().parent

# Ensure src/ is importable when the package is not installed
ROOT = TESTS_DIR.parent
for extra in (ROOT / "src",):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from rich.console import Console  # noqa: E402

from quiz_time.quiz import QuizSession  # noqa: E402


@pytest.fixture
def session() -> QuizSession:
    """A fresh session over the built-in five questions."""

    return QuizSession()


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=100, force_terminal=True)


@pytest.fixture
def make_provider() -> Callable[[list[str]], Callable[[], str]]:
    """Turn a list of scripted commands into an input provider."""

    def _factory(commands: list[str]) -> Callable[[], str]:
        iterator = iter(commands)

        def _provider() -> str:
            return next(iterator)

        return _provider

    return _factory
