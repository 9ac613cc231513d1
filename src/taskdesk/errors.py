# src/taskdesk/errors.py

"""Exception hierarchy shared by the store, the shell and the CLI."""

from __future__ import annotations


class TaskdeskError(Exception):
    """Base class for all taskdesk errors."""


class StoreError(TaskdeskError):
    """Any failure of the task store."""


class ConnectionFailure(StoreError):
    """The database file could not be opened."""


class QueryFailure(StoreError):
    """A statement failed, a constraint was violated, or a row could not be decoded."""


class NotFound(StoreError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task not found: id={task_id}")
        self.task_id = task_id


class IoFailure(TaskdeskError):
    """Terminal mode switch, input poll or render failed."""
