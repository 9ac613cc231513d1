# tests/test_counter_shell.py

from __future__ import annotations

import pytest

from taskdesk.errors import IoFailure
from taskdesk.shell.app import CounterApp, KeyBindings, run_counter_shell

from .fakes import FakeTerminal


def test_increment_increment_decrement() -> None:
    term = FakeTerminal(["j", "j", "k", "q"])

    app = run_counter_shell(term, poll_timeout=0.25)

    assert app.counter == 1
    assert app.should_quit
    assert term.restored


def test_quit_ends_loop_within_one_poll() -> None:
    term = FakeTerminal(["q"])

    run_counter_shell(term)

    assert term.polls == 1
    assert len(term.frames) == 1
    assert term.restored


def test_timeouts_and_other_keys_do_not_change_state() -> None:
    term = FakeTerminal([None, "x", None, "J", "q"])

    app = run_counter_shell(term, poll_timeout=0.25)

    assert app.counter == 0
    assert term.polls == 5
    assert set(term.timeouts) == {0.25}


def test_renders_counter_before_each_poll() -> None:
    term = FakeTerminal(["j", "k", "k", "q"])

    run_counter_shell(term)

    assert [frame[0] for frame in term.frames] == [
        "Counter: 0",
        "Counter: 1",
        "Counter: 0",
        "Counter: -1",
    ]


def test_terminal_restored_after_mid_loop_failure() -> None:
    term = FakeTerminal(["j"], fail_after=3)

    with pytest.raises(IoFailure):
        run_counter_shell(term)

    assert term.entered
    assert term.restored


def test_custom_key_bindings() -> None:
    keys = KeyBindings(increment="+", decrement="-", quit="x")
    term = FakeTerminal(["+", "+", "+", "-", "j", "x"])

    app = run_counter_shell(term, keys=keys)

    assert app.counter == 2


def test_key_bindings_from_settings(settings) -> None:
    settings.key_quit = "z"
    keys = KeyBindings.from_settings(settings)
    assert keys == KeyBindings(increment="j", decrement="k", quit="z")


def test_existing_app_state_is_continued() -> None:
    app = CounterApp(counter=10)
    run_counter_shell(FakeTerminal(["k", "q"]), app)
    assert app.counter == 9
