# src/taskdesk/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..core.state import AppState
from ..errors import NotFound, StoreError
from ..tasks.task_models import Task, TaskDraft, TaskPatch, TaskStatus

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple command registry used by the console REPL (/help, /add, ...) and one-shot CLI mode."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._handlers

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        return self.dispatch(state, parts[0], parts[1:])

    def dispatch(
        self,
        state: AppState,
        name: str,
        args: list[str],
        *,
        raise_errors: bool = False,
    ) -> str:
        """
        Run one command. Store errors become the reply text, unless
        raise_errors is set (one-shot CLI mode maps them to the exit code).
        """
        handler = self._handlers.get(name.lower())
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if raise_errors:
            return handler(state, args)

        try:
            return handler(state, args)
        except NotFound as e:
            return str(e)
        except StoreError as e:
            logger.error("Command /%s failed: %s", name, e)
            return f"Store error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    flag = " [deleted]" if task.is_deleted else ""
    return f"#{task.id} {task.create_date} [{task.status.label}] {task.title}: {task.description}{flag}"


def _format_list(tasks: list[Task], empty: str) -> str:
    if not tasks:
        return empty
    return "\n".join(format_task(t) for t in tasks)


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


def _expand_date(raw: str, *, end: bool) -> str:
    # "2024-01-09" -> whole day
    if len(raw) == 10:
        return f"{raw} {'23:59:59' if end else '00:00:00'}"
    return raw


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> | <description>
    /add "<title>" "<description>"
    """
    if not args:
        return "Usage: /add <title> | <description>"

    text = " ".join(args)
    if "|" in text:
        title, _, description = text.partition("|")
        title, description = title.strip(), description.strip()
    else:
        title, description = args[0], " ".join(args[1:])

    if not title:
        return "Usage: /add <title> | <description>"

    task_id = state.task_store.insert(TaskDraft(title=title, description=description))
    return f"Task added: #{task_id}"


def cmd_show(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /show <id>"
    return format_task(state.task_store.find_by_id(task_id))


def cmd_find(state: AppState, args: list[str]) -> str:
    prefix = " ".join(args)
    tasks = state.task_store.find_by_title_prefix(prefix)
    return _format_list(tasks, f"No tasks with title starting with {prefix!r}.")


def cmd_between(state: AppState, args: list[str]) -> str:
    """
    /between 2024-01-09 2024-01-11
    /between "2024-01-09 08:00:00" "2024-01-09 18:00:00"
    """
    if len(args) != 2:
        return "Usage: /between <start> <end>"
    start = _expand_date(args[0], end=False)
    end = _expand_date(args[1], end=True)
    tasks = state.task_store.find_between_dates(start, end)
    return _format_list(tasks, f"No tasks created between {start} and {end}.")


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /delete <id>"
    if state.task_store.soft_delete(task_id):
        return f"Task #{task_id} deleted."
    return f"No task #{task_id}; nothing deleted."


def cmd_restore(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /restore <id>"
    state.task_store.apply_patch(task_id, TaskPatch(deleted=0))
    return format_task(state.task_store.find_by_id(task_id))


def cmd_status(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /status <id> <new|inprocess|completed>"
    try:
        status = TaskStatus.parse(" ".join(args[1:]))
    except ValueError as e:
        return str(e)
    state.task_store.apply_patch(task_id, TaskPatch(status=status))
    return format_task(state.task_store.find_by_id(task_id))


def cmd_rename(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /rename <id> <title>"
    state.task_store.apply_patch(task_id, TaskPatch(title=" ".join(args[1:])))
    return format_task(state.task_store.find_by_id(task_id))


def cmd_describe(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /describe <id> <text>"
    state.task_store.apply_patch(task_id, TaskPatch(description=" ".join(args[1:])))
    return format_task(state.task_store.find_by_id(task_id))


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> | <description>.", aliases=["new"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.", aliases=["get"])
registry.register("find", cmd_find, help_text="Tasks whose title starts with a prefix: /find [prefix].", aliases=["ls"])
registry.register("between", cmd_between, help_text="Tasks created in a date range: /between <start> <end>.")
registry.register("delete", cmd_delete, help_text="Soft-delete a task: /delete <id>.", aliases=["rm"])
registry.register("restore", cmd_restore, help_text="Undo a soft delete: /restore <id>.")
registry.register("status", cmd_status, help_text="Set status: /status <id> <new|inprocess|completed>.")
registry.register("rename", cmd_rename, help_text="Change the title: /rename <id> <title>.")
registry.register("describe", cmd_describe, help_text="Change the description: /describe <id> <text>.")
