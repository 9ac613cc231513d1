# src/taskdesk/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the interactive parts.

The counter shell depends on a Protocol instead of a real TTY,
which keeps the loop testable without a terminal.
"""

from types import TracebackType
from typing import Protocol


class Terminal(Protocol):
    """
    A scoped full-screen terminal.

    __enter__ switches into raw mode + alternate screen;
    __exit__ must restore both on every exit path.
    """

    def __enter__(self) -> Terminal: ...

    def __exit__(
            self,
            exc_type: type[BaseException] | None,
            exc: BaseException | None,
            tb: TracebackType | None,
    ) -> None: ...

    def draw(self, lines: list[str]) -> None: ...

    def poll_key(self, timeout: float) -> str | None: ...
