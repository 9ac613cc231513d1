# src/taskdesk/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in commands/connectors.
    settings: object

    task_store: TaskStore
