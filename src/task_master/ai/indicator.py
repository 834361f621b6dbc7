"""Loading indicators bracketing provider network calls."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext

from rich.console import Console

LoadingIndicator = Callable[[str], AbstractContextManager[object]]


def silent_indicator(message: str) -> AbstractContextManager[object]:  # noqa: ARG001
    return nullcontext()


def rich_indicator(console: Console) -> LoadingIndicator:
    """Spinner on the given console for the duration of each call."""

    def _indicator(message: str) -> AbstractContextManager[object]:
        return console.status(message, spinner="dots")

    return _indicator
