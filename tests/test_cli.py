# tests/test_cli.py

from __future__ import annotations

import logging
import sqlite3

import pytest

from taskdesk.cli import main as cli_main
from taskdesk.cli.bootstrap import create_initial_state, shutdown
from taskdesk.connectors.console_connector import run_console_loop
from taskdesk.tasks.task_models import TaskDraft
from taskdesk.tasks.task_store import TaskStore

from .fakes import FakeTerminal


@pytest.fixture()
def cli_settings(settings, monkeypatch):
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    yield settings
    # setup_logging attached a FileHandler under tmp_path; detach it again.
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()


def test_bootstrap_creates_data_dir_and_store(settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        assert settings.data_dir.is_dir()
        assert state.task_store.count_tasks() == 0
    finally:
        shutdown(state)


def test_one_shot_add_then_show(cli_settings, capsys) -> None:
    assert cli_main.main(["add", "Buy milk", "two liters"]) == 0
    assert "Task added: #1" in capsys.readouterr().out

    assert cli_main.main(["show", "1"]) == 0
    assert "Buy milk: two liters" in capsys.readouterr().out


def test_unknown_command_exit_code(cli_settings, capsys) -> None:
    assert cli_main.main(["frobnicate"]) == 2
    assert "Unknown command" in capsys.readouterr().err


def test_demo_runs(cli_settings, capsys) -> None:
    assert cli_main.main(["demo"]) == 0
    out = capsys.readouterr().out
    assert "Missing id:" in out
    assert "[deleted]" in out


def test_shell_mode_clean_quit(cli_settings, monkeypatch, capsys) -> None:
    term = FakeTerminal(["j", "j", "q"])
    monkeypatch.setattr(cli_main, "RawTerminal", lambda: term)

    assert cli_main.main(["shell"]) == 0
    assert term.restored
    assert "Counter: 2" in capsys.readouterr().out


def test_shell_mode_failure_restores_and_exits_1(cli_settings, monkeypatch) -> None:
    term = FakeTerminal([], fail_after=1)
    monkeypatch.setattr(cli_main, "RawTerminal", lambda: term)

    assert cli_main.main(["shell"]) == 1
    assert term.restored


def test_console_loop_runs_commands_until_exit(state, capsys) -> None:
    lines = iter(["add Walk | the dog", "", "/find Walk", "/exit", "/find never"])

    run_console_loop(state, read_line=lambda _prompt: next(lines))

    out = capsys.readouterr().out
    assert "Task added: #1" in out
    assert "Walk: the dog" in out
    assert state.task_store.find_by_title_prefix("") == [state.task_store.find_by_id(1)]


def test_console_loop_stops_on_eof(state) -> None:
    state.task_store.insert(TaskDraft(title="x", description=""))

    def read_line(_prompt: str) -> str:
        raise EOFError

    run_console_loop(state, read_line=read_line)


def test_one_shot_missing_task_exits_1(cli_settings, capsys) -> None:
    assert cli_main.main(["show", "999"]) == 1
    assert "Task not found: id=999" in capsys.readouterr().err


def test_one_shot_undecodable_row_exits_1(cli_settings, capsys) -> None:
    cli_settings.data_dir.mkdir(parents=True, exist_ok=True)
    with TaskStore.open(cli_settings.tasks_db_path) as store:
        store.insert(TaskDraft(title="Broken", description=""))
    conn = sqlite3.connect(str(cli_settings.tasks_db_path))
    try:
        conn.execute("UPDATE tasks SET status = 'bogus' WHERE id = 1")
        conn.commit()
    finally:
        conn.close()

    assert cli_main.main(["show", "1"]) == 1
    assert "Cannot decode task row id=1" in capsys.readouterr().err


def test_console_keeps_store_errors_as_replies(state, capsys) -> None:
    lines = iter(["/show 999", "/exit"])

    run_console_loop(state, read_line=lambda _prompt: next(lines))

    assert "Task not found: id=999" in capsys.readouterr().out
