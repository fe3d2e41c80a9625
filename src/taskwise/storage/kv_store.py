# src/taskwise/storage/kv_store.py

"""
Local key-value storage backends (the "device storage" boundary).

All backends store opaque string values under string keys and raise
StorageIOError when the medium misbehaves. A backend that cannot even
be opened raises StorageUnavailable from its constructor.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import sqlite3
from pathlib import Path
from typing import Any

from ..core.errors import StorageIOError, StorageUnavailable
from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("sqlite", "json", "memory", "none")


class SqliteKeyValueStorage:
    """
    SQLite key-value table.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "storage.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as e:
            raise StorageUnavailable(f"Cannot open SQLite storage at {self._db_path}: {e}") from e
        logger.info("SqliteKeyValueStorage ready db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get_item(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageIOError(f"SQLite read failed key={key}: {e}") from e
        return None if row is None else str(row[0])

    def set_item(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (key, value),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageIOError(f"SQLite write failed key={key}: {e}") from e


class JsonFileKeyValueStorage:
    """
    A single JSON object file: {"key": "value", ...}.

    Writes go to a temp file first and are swapped in with os.replace.
    """

    def __init__(self, path: str | Path = "storage.json") -> None:
        self._path = Path(path)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create storage dir for {self._path}: {e}") from e
        logger.info("JsonFileKeyValueStorage ready path=%s", self._path)

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data: Any = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise StorageIOError(f"Cannot read storage file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageIOError(f"Storage file {self._path} is not a JSON object")
        bad = sorted(str(k) for k, v in data.items() if not isinstance(v, str))
        if bad:
            # Refuse rather than drop: the next write would erase those entries.
            raise StorageIOError(f"Storage file {self._path} has non-string values for keys: {', '.join(bad)}")
        return {str(k): v for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise StorageIOError(f"Cannot write storage file {self._path}: {e}") from e
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)


class InMemoryKeyValueStorage:
    """
    Dict-backed storage. Nothing survives the process.

    fail_reads / fail_writes make get_item / set_item raise StorageIOError,
    which is handy for exercising the failure paths.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageIOError(f"read failed key={key}")
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageIOError(f"write failed key={key}")
        self.items[key] = value
        self.writes += 1


def open_storage(settings) -> KeyValueStorage | None:
    """
    Build the configured backend.

    Returns None when storage is disabled ("none") or cannot be opened;
    the task service treats None as "storage unavailable".
    """
    backend = str(getattr(settings, "storage_backend", "sqlite")).strip().lower()
    path = getattr(settings, "storage_path", None)

    try:
        if backend == "sqlite":
            return SqliteKeyValueStorage(path or "storage.sqlite3")
        if backend == "json":
            return JsonFileKeyValueStorage(path or "storage.json")
        if backend == "memory":
            return InMemoryKeyValueStorage()
        if backend == "none":
            logger.info("Storage disabled by configuration.")
            return None
    except StorageUnavailable:
        logger.warning("Storage backend %s is unavailable; running without persistence.", backend, exc_info=True)
        return None

    raise ValueError(f"Unknown storage backend: {backend!r} (expected one of {', '.join(STORAGE_BACKENDS)})")
