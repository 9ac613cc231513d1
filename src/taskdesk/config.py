# src/taskdesk/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a working local default; nothing is required.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDESK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_key(name: str, default: str) -> str:
    # The shell reads one byte per key: only printable ASCII can ever match.
    raw = os.getenv(name)
    if raw is None or len(raw) != 1 or not raw.isascii() or not raw.isprintable():
        return default
    return raw


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    # ---- Store policy ----
    strict: bool

    # ---- Counter shell ----
    poll_interval_ms: int
    key_increment: str
    key_decrement: str
    key_quit: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdesk") or "taskdesk"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdesk"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        strict = _env_bool(_k("STRICT"), False)

        poll_interval_ms = max(1, _env_int(_k("POLL_INTERVAL_MS"), 250))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            strict=strict,
            poll_interval_ms=poll_interval_ms,
            key_increment=_env_key(_k("KEY_INCREMENT"), "j"),
            key_decrement=_env_key(_k("KEY_DECREMENT"), "k"),
            key_quit=_env_key(_k("KEY_QUIT"), "q"),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
