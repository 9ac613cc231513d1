# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdesk.core.state import AppState
from taskdesk.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap code.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdesk-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        strict=False,
        poll_interval_ms=10,
        key_increment="j",
        key_decrement="k",
        key_quit="q",
    )


@pytest.fixture()
def store(tmp_path: Path) -> Iterator[TaskStore]:
    """Real SQLite store: its SQL is exactly what we want to test."""
    s = TaskStore.open(tmp_path / "tasks.sqlite3")
    yield s
    s.close()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store)
