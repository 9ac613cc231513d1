# src/taskdesk/shell/app.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.ports import Terminal

logger = logging.getLogger(__name__)

DEFAULT_POLL_TIMEOUT = 0.25


@dataclass(frozen=True, slots=True)
class KeyBindings:
    increment: str = "j"
    decrement: str = "k"
    quit: str = "q"

    @staticmethod
    def from_settings(settings) -> KeyBindings:
        return KeyBindings(
            increment=getattr(settings, "key_increment", "j"),
            decrement=getattr(settings, "key_decrement", "k"),
            quit=getattr(settings, "key_quit", "q"),
        )


@dataclass(slots=True)
class CounterApp:
    counter: int = 0
    should_quit: bool = False

    def handle_key(self, key: str, keys: KeyBindings) -> None:
        if key == keys.increment:
            self.counter += 1
        elif key == keys.decrement:
            self.counter -= 1
        elif key == keys.quit:
            self.should_quit = True

    def render(self, keys: KeyBindings) -> list[str]:
        return [
            f"Counter: {self.counter}",
            "",
            f"{keys.increment}: +1   {keys.decrement}: -1   {keys.quit}: quit",
        ]


def run_counter_shell(
    terminal: Terminal,
    app: CounterApp | None = None,
    *,
    keys: KeyBindings | None = None,
    poll_timeout: float = DEFAULT_POLL_TIMEOUT,
) -> CounterApp:
    """
    Render / poll / update until the quit key is pressed.

    The terminal context restores the screen on every exit path; errors
    from draw/poll propagate after that.
    """
    app = app or CounterApp()
    keys = keys or KeyBindings()

    with terminal:
        logger.info("Counter shell started.")
        while True:
            terminal.draw(app.render(keys))

            key = terminal.poll_key(poll_timeout)
            if key is not None:
                app.handle_key(key, keys)

            if app.should_quit:
                break

    logger.info("Counter shell finished (counter=%s).", app.counter)
    return app
