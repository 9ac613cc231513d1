# src/taskdesk/shell/terminal.py

from __future__ import annotations

import contextlib
import logging
import os
import select
import shutil
import sys
import termios
import tty
from types import TracebackType
from typing import TextIO

from ..errors import IoFailure

logger = logging.getLogger(__name__)

ENTER_ALT_SCREEN = "\033[?1049h\033[?25l"
LEAVE_ALT_SCREEN = "\033[?25h\033[?1049l"
CLEAR_SCREEN = "\033[H\033[2J"


class RawTerminal:
    """
    POSIX terminal in raw mode on the alternate screen.

    Use as a context manager: entering saves the tty attributes, switches to raw
    input and the alternate buffer; leaving restores both, also when the body raised.
    """

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout
        self._saved_attrs: list | None = None
        self._alt_screen = False

    def __enter__(self) -> RawTerminal:
        try:
            fd = self._in.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setraw(fd)
            self._write(ENTER_ALT_SCREEN)
            self._alt_screen = True
        except (OSError, termios.error) as exc:
            with contextlib.suppress(OSError, termios.error):
                self._restore()
            raise IoFailure(f"Cannot enter raw terminal mode: {exc}") from exc
        logger.debug("Raw mode + alternate screen entered.")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self._restore()
        except (OSError, termios.error) as restore_exc:
            # Do not mask the loop's own error with a teardown error.
            if exc is None:
                raise IoFailure(f"Cannot restore terminal: {restore_exc}") from restore_exc
            logger.error("Terminal restore failed after error: %s", restore_exc)
        logger.debug("Terminal restored.")

    def _restore(self) -> None:
        try:
            if self._alt_screen:
                self._alt_screen = False
                self._write(LEAVE_ALT_SCREEN)
        finally:
            if self._saved_attrs is not None:
                termios.tcsetattr(self._in.fileno(), termios.TCSADRAIN, self._saved_attrs)
                self._saved_attrs = None

    def _write(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()

    def draw(self, lines: list[str]) -> None:
        """Redraw the whole viewport; lines are clipped to the terminal size."""
        size = shutil.get_terminal_size()
        visible = [line[: size.columns] for line in lines[: size.lines]]
        try:
            # Raw mode disables output post-processing, so lines end with \r\n.
            self._write(CLEAR_SCREEN + "\r\n".join(visible))
        except OSError as exc:
            raise IoFailure(f"Render failed: {exc}") from exc

    def poll_key(self, timeout: float) -> str | None:
        """Wait up to `timeout` seconds for one key; None when nothing arrived."""
        try:
            fd = self._in.fileno()
            ready, _, _ = select.select([fd], [], [], timeout)
            if not ready:
                return None
            data = os.read(fd, 1)
        except OSError as exc:
            raise IoFailure(f"Input poll failed: {exc}") from exc
        if not data:
            return None
        return data.decode("utf-8", errors="replace")
