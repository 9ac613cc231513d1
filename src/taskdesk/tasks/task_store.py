# src/taskdesk/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from ..errors import ConnectionFailure, NotFound, QueryFailure, StoreError
from .task_models import Task, TaskDraft, TaskPatch, TaskStatus, format_date

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    create_date TEXT NOT NULL,
    status TEXT NOT NULL,
    deleted INTEGER NOT NULL DEFAULT 0
)
"""

CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_tasks_create_date ON tasks(create_date)"

INSERT_SQL = """
INSERT INTO tasks(title, description, create_date, status, deleted)
VALUES (?, ?, ?, ?, ?)
"""

SELECT_COLUMNS = "id, title, description, create_date, status, deleted"


def _escape_like(prefix: str) -> str:
    return prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TaskStore:
    """
    SQLite task store over a single connection.

    The connection is supplied by the caller (or opened with `TaskStore.open`)
    and released with `close()` / the context-manager protocol.

    Read/write policy:
    - strict=False: list reads skip rows that fail to decode, and apply_patch
      on a missing id does nothing
    - strict=True: both raise (QueryFailure / NotFound)
    - soft_delete on a missing id is always a no-op

    Not thread-safe: one store per thread.
    """

    def __init__(self, conn: sqlite3.Connection, *, strict: bool = False) -> None:
        self._conn = conn
        self._conn.row_factory = sqlite3.Row
        self.strict = strict

    @classmethod
    def open(cls, db_path: str | Path, *, strict: bool = False) -> TaskStore:
        """Open the database file and make sure the schema exists."""
        db_path = Path(db_path)
        try:
            conn = sqlite3.connect(str(db_path), timeout=30.0)
        except sqlite3.Error as exc:
            raise ConnectionFailure(f"Cannot open task database {db_path}: {exc}") from exc

        store = cls(conn, strict=strict)
        try:
            store.initialize_schema()
        except QueryFailure:
            conn.close()
            raise
        logger.info("TaskStore ready db=%s total=%s strict=%s", db_path, store.count_tasks(), strict)
        return store

    def close(self) -> None:
        try:
            self._conn.close()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot close task database: {exc}") from exc

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def _query(self, what: str) -> Iterator[sqlite3.Cursor]:
        try:
            yield self._conn.cursor()
        except sqlite3.Error as exc:
            with contextlib.suppress(sqlite3.Error):
                self._conn.rollback()
            raise QueryFailure(f"{what} failed: {exc}") from exc

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        deleted = int(row["deleted"])
        if deleted not in (0, 1):
            raise ValueError(f"deleted flag out of range: {deleted}")
        return Task(
            id=int(row["id"]),
            title=str(row["title"]),
            description=str(row["description"]),
            create_date=str(row["create_date"]),
            status=TaskStatus.from_db(row["status"]),
            deleted=deleted,
        )

    def _decode_rows(self, rows: list[sqlite3.Row]) -> list[Task]:
        tasks: list[Task] = []
        for row in rows:
            try:
                tasks.append(self._row_to_task(row))
            except (TypeError, ValueError) as exc:
                if self.strict:
                    raise QueryFailure(f"Cannot decode task row id={row['id']}: {exc}") from exc
                logger.warning("Skipping undecodable task row id=%s: %s", row["id"], exc)
        return tasks

    # ---- public API ----

    def initialize_schema(self) -> None:
        with self._query("create table") as cur:
            cur.execute(CREATE_TABLE_SQL)
            cur.execute(CREATE_INDEX_SQL)
            self._conn.commit()
        logger.debug("Tasks table ensured.")

    def count_tasks(self) -> int:
        with self._query("count tasks") as cur:
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)

    def insert(self, draft: TaskDraft) -> int:
        with self._query("insert task") as cur:
            cur.execute(
                INSERT_SQL,
                (
                    draft.title,
                    draft.description,
                    draft.create_date,
                    draft.status.label,
                    1 if draft.deleted else 0,
                ),
            )
            self._conn.commit()
            rowid = cur.lastrowid
        if rowid is None:
            raise QueryFailure("SQLite did not return lastrowid for tasks insert")
        task_id = int(rowid)
        logger.debug("Task added id=%s title=%r", task_id, draft.title)
        return task_id

    def find_by_id(self, task_id: int) -> Task:
        with self._query("find task by id") as cur:
            cur.execute(f"SELECT {SELECT_COLUMNS} FROM tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
        if row is None:
            raise NotFound(task_id)
        try:
            return self._row_to_task(row)
        except (TypeError, ValueError) as exc:
            raise QueryFailure(f"Cannot decode task row id={task_id}: {exc}") from exc

    def find_by_title_prefix(self, prefix: str) -> list[Task]:
        """
        Titles starting with `prefix` (SQLite LIKE, so ASCII case-insensitive).

        Wildcards inside the prefix match literally. An empty prefix returns every
        row, soft-deleted ones included.
        """
        pattern = _escape_like(prefix) + "%"
        with self._query("find tasks by title") as cur:
            cur.execute(
                f"SELECT {SELECT_COLUMNS} FROM tasks WHERE title LIKE ? ESCAPE '\\' ORDER BY id",
                (pattern,),
            )
            rows = cur.fetchall()
        return self._decode_rows(rows)

    def find_between_dates(self, start: str | datetime, end: str | datetime) -> list[Task]:
        """Inclusive range on create_date, compared as fixed-width strings."""
        with self._query("find tasks between dates") as cur:
            cur.execute(
                f"SELECT {SELECT_COLUMNS} FROM tasks "
                "WHERE create_date BETWEEN ? AND ? ORDER BY create_date, id",
                (format_date(start), format_date(end)),
            )
            rows = cur.fetchall()
        return self._decode_rows(rows)

    def soft_delete(self, task_id: int) -> bool:
        """Mark the task deleted. Returns False (no error) when the id does not exist."""
        with self._query("soft delete task") as cur:
            cur.execute("UPDATE tasks SET deleted = 1 WHERE id = ?", (int(task_id),))
            self._conn.commit()
            matched = cur.rowcount > 0
        if not matched:
            logger.debug("soft_delete: no task with id=%s", task_id)
        return matched

    def apply_patch(self, task_id: int, patch: TaskPatch) -> None:
        # Existence only: a row that fails to decode can still be repaired by a patch.
        with self._query("check task exists") as cur:
            cur.execute("SELECT 1 FROM tasks WHERE id = ?", (int(task_id),))
            exists = cur.fetchone() is not None
        if not exists:
            if self.strict:
                raise NotFound(task_id)
            logger.info("apply_patch: no task with id=%s, nothing to update", task_id)
            return

        if patch.is_empty():
            return

        fields: list[str] = []
        params: list[Any] = []

        if patch.title is not None:
            fields.append("title = ?")
            params.append(patch.title)

        if patch.description is not None:
            fields.append("description = ?")
            params.append(patch.description)

        if patch.status is not None:
            fields.append("status = ?")
            params.append(TaskStatus(patch.status).label)

        if patch.deleted is not None:
            fields.append("deleted = ?")
            params.append(1 if patch.deleted else 0)

        params.append(int(task_id))
        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?"

        with self._query("update task") as cur:
            cur.execute(sql, params)
            self._conn.commit()
        logger.debug("Task patched id=%s fields=%s", task_id, len(fields))
