# src/taskdesk/cli/demo.py

"""Walk through every store operation on the configured database and print the results."""

from __future__ import annotations

import logging

from ..core.state import AppState
from ..errors import NotFound
from ..tasks.task_models import TaskDraft, TaskPatch, TaskStatus
from .commands import format_task

logger = logging.getLogger(__name__)


def run_demo(state: AppState) -> None:
    store = state.task_store
    store.initialize_schema()
    print("Tasks table ready.")

    first_id = store.insert(TaskDraft(title="First task", description="Try the task store"))
    second_id = store.insert(TaskDraft(title="Second task", description="Gets soft-deleted below"))
    print(f"Added tasks #{first_id} and #{second_id}.")

    task = store.find_by_id(first_id)
    print("By id:", format_task(task))

    store.apply_patch(first_id, TaskPatch(status=TaskStatus.IN_PROCESS))
    print("Patched:", format_task(store.find_by_id(first_id)))

    store.soft_delete(second_id)
    print("Soft-deleted:", format_task(store.find_by_id(second_id)))

    try:
        store.find_by_id(-1)
    except NotFound as e:
        print("Missing id:", e)

    print("All tasks:")
    for t in store.find_by_title_prefix(""):
        print("  ", format_task(t))

    day = task.create_date[:10]
    between = store.find_between_dates(f"{day} 00:00:00", f"{day} 23:59:59")
    print(f"Created on {day}: {len(between)} task(s).")
    logger.info("Demo finished (total=%s).", store.count_tasks())
