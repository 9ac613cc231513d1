# src/taskdesk/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_local() -> str:
    return datetime.now().strftime(DATE_FORMAT)


def format_date(value: str | datetime) -> str:
    if isinstance(value, datetime):
        return value.strftime(DATE_FORMAT)
    return str(value)


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - the enum value is the stable identifier used in code
    - the database column stores the display label (see `label`)
    """

    NEW = "New"
    IN_PROCESS = "InProcess"
    COMPLETED = "Completed"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        """Decode a stored label (or a plain enum value). Raises ValueError otherwise."""
        if raw is None:
            raise ValueError("status is NULL")
        for status, label in _LABELS.items():
            if raw == label:
                return status
        return cls(raw)

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        """Lenient user input: 'new', 'in-process', 'InProcess', 'completed', a label..."""
        key = raw.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        for status in cls:
            if key == status.value.lower() or raw.strip() == status.label:
                return status
        raise ValueError(f"Unknown status: {raw!r}")


_LABELS: dict[TaskStatus, str] = {
    TaskStatus.NEW: "Новая",
    TaskStatus.IN_PROCESS: "В работе",
    TaskStatus.COMPLETED: "Завершена",
}


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str
    create_date: str
    status: TaskStatus
    deleted: int

    @property
    def is_deleted(self) -> bool:
        return self.deleted != 0


@dataclass(slots=True)
class TaskDraft:
    """Fields needed to create a task. create_date is captured when the draft is built."""

    title: str
    description: str
    create_date: str = field(default_factory=now_local)
    status: TaskStatus = TaskStatus.NEW
    deleted: int = 0


@dataclass(slots=True)
class TaskPatch:
    """Partial update: None leaves the column untouched, any other value overwrites it."""

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    deleted: int | None = None

    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.description is None
            and self.status is None
            and self.deleted is None
        )
