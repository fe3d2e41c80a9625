# src/taskwise/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read at import time; get_settings() builds it on first use.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .storage.kv_store import STORAGE_BACKENDS
from .tasks.task_operations import TASKS_STORAGE_KEY

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKWISE"

_DEFAULT_STORAGE_FILES = {
    "sqlite": "storage.sqlite3",
    "json": "storage.json",
}


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


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw not in choices:
        logger.warning(
            "Unknown %s=%r (expected one of %s); using %r.", name, raw, ", ".join(choices), default
        )
        return default
    return raw


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data (ignored by git) ----
    data_dir: Path
    storage_backend: str
    storage_path: Path | None
    storage_key: str

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "taskwise").strip() or "taskwise"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskwise"))
        storage_backend = _env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "sqlite")

        default_file = _DEFAULT_STORAGE_FILES.get(storage_backend)
        storage_path: Path | None = None
        if default_file is not None:
            storage_path = _env_path(_k("STORAGE_PATH"), data_dir / default_file)

        storage_key = _env(_k("STORAGE_KEY"), TASKS_STORAGE_KEY).strip() or TASKS_STORAGE_KEY

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_path=storage_path,
            storage_key=storage_key,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        # Local .env never overrides variables already set in the environment.
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
