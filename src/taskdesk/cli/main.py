# src/taskdesk/cli/main.py

"""
CLI entrypoint.

    taskdesk [console]        interactive slash-command REPL over the task store
    taskdesk shell            full-screen counter shell (j/k/q)
    taskdesk demo             run every store operation once and print the results
    taskdesk <command> ...    one registry command, e.g. `taskdesk add "Title" "Text"`
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state, shutdown
from ..cli.commands import registry as command_registry
from ..cli.demo import run_demo
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import IoFailure, TaskdeskError
from ..logging_setup import setup_logging
from ..shell.app import KeyBindings, run_counter_shell
from ..shell.terminal import RawTerminal

logger = logging.getLogger(__name__)


def _run_shell(settings) -> int:
    try:
        app = run_counter_shell(
            RawTerminal(),
            keys=KeyBindings.from_settings(settings),
            poll_timeout=settings.poll_interval_ms / 1000.0,
        )
    except IoFailure as e:
        logger.error("Counter shell failed: %s", e)
        print(f"taskdesk: {e}", file=sys.stderr)
        return 1
    print(f"Counter: {app.counter}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    mode = args[0].lower() if args else "console"

    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    # The shell owns the screen: file logging only.
    setup_logging(log_dir=settings.data_dir, console_level=console_level, console=mode != "shell")

    logger.info("Starting %s (%s)...", settings.app_name, mode)

    if mode == "shell":
        return _run_shell(settings)

    if mode not in ("console", "demo") and mode not in command_registry:
        print(f"Unknown command: {mode}\n{command_registry.build_help()}", file=sys.stderr)
        return 2

    try:
        state = create_initial_state(settings=settings)
    except TaskdeskError as e:
        logger.error("Cannot open task store: %s", e)
        return 1

    try:
        if mode == "console":
            run_console_loop(state)
        elif mode == "demo":
            run_demo(state)
        else:
            print(command_registry.dispatch(state, mode, args[1:], raise_errors=True))
    except TaskdeskError as e:
        logger.error("%s failed: %s", mode, e)
        print(f"taskdesk: {e}", file=sys.stderr)
        return 1
    finally:
        shutdown(state)
        logger.info("Bye.")
    return 0


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
