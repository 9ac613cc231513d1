# tests/test_raw_terminal.py

from __future__ import annotations

import io
import os
import termios

import pytest

from taskdesk.errors import IoFailure
from taskdesk.shell.terminal import ENTER_ALT_SCREEN, LEAVE_ALT_SCREEN, RawTerminal


@pytest.fixture()
def pty_stdin():
    """Slave side of a pseudo-terminal, so termios calls work without a real TTY."""
    master, slave = os.openpty()
    stdin = os.fdopen(slave, "r")
    yield master, stdin
    stdin.close()
    os.close(master)


def test_raw_mode_restored_on_clean_exit(pty_stdin) -> None:
    master, stdin = pty_stdin
    out = io.StringIO()
    before = termios.tcgetattr(stdin.fileno())

    with RawTerminal(stdin, out) as term:
        assert termios.tcgetattr(stdin.fileno()) != before
        term.draw(["Counter: 0"])

    assert termios.tcgetattr(stdin.fileno()) == before
    text = out.getvalue()
    assert text.startswith(ENTER_ALT_SCREEN)
    assert "Counter: 0" in text
    assert text.endswith(LEAVE_ALT_SCREEN)


def test_raw_mode_restored_after_error(pty_stdin) -> None:
    master, stdin = pty_stdin
    out = io.StringIO()
    before = termios.tcgetattr(stdin.fileno())

    with pytest.raises(RuntimeError):
        with RawTerminal(stdin, out):
            raise RuntimeError("boom")

    assert termios.tcgetattr(stdin.fileno()) == before
    assert out.getvalue().endswith(LEAVE_ALT_SCREEN)


def test_poll_key_reads_one_key_or_times_out(pty_stdin) -> None:
    master, stdin = pty_stdin

    with RawTerminal(stdin, io.StringIO()) as term:
        assert term.poll_key(0.01) is None
        os.write(master, b"j")
        assert term.poll_key(1.0) == "j"


def test_enter_on_non_tty_raises_io_failure(tmp_path) -> None:
    path = tmp_path / "not-a-tty"
    path.write_text("")
    with path.open("r") as stdin:
        with pytest.raises(IoFailure):
            with RawTerminal(stdin, io.StringIO()):
                pass


def test_failed_enter_writes_no_screen_escapes(tmp_path) -> None:
    path = tmp_path / "plain-file"
    path.write_text("")
    out = io.StringIO()
    with path.open("r") as stdin:
        with pytest.raises(IoFailure):
            RawTerminal(stdin, out).__enter__()

    assert out.getvalue() == ""
