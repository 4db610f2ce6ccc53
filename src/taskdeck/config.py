# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Tests pass their own settings object instead of reading the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDECK"

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


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    documents_db_path: Path

    # ---- Document store ----
    projects_collection: str
    atomic_task_writes: bool

    # ---- Identity ----
    # Empty -> ask for a display name on /login.
    display_name: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdeck").strip() or "taskdeck"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeck"))
        documents_db_path = _env_path(_k("DOCUMENTS_DB_PATH"), data_dir / "documents.sqlite3")

        projects_collection = _env(_k("PROJECTS_COLLECTION"), "projects").strip() or "projects"
        atomic_task_writes = _env_bool(_k("ATOMIC_TASK_WRITES"), False)

        display_name = _env(_k("DISPLAY_NAME"), "").strip()

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            documents_db_path=documents_db_path,
            projects_collection=projects_collection,
            atomic_task_writes=atomic_task_writes,
            display_name=display_name,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
