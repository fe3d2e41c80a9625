# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskwise.core.state import AppState
from taskwise.storage.kv_store import InMemoryKeyValueStorage
from taskwise.tasks.task_operations import TASKS_STORAGE_KEY, TaskOperationsService
from taskwise.tasks.task_state import TaskStateStore

from .fakes import SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskwise-test",
        log_level="DEBUG",
        console_enabled=True,
        data_dir=tmp_path / "data",
        storage_backend="sqlite",
        storage_path=tmp_path / "data" / "storage.sqlite3",
        storage_key=TASKS_STORAGE_KEY,
    )


@pytest.fixture()
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture()
def store() -> TaskStateStore:
    return TaskStateStore()


@pytest.fixture()
def service(store: TaskStateStore, storage: InMemoryKeyValueStorage) -> TaskOperationsService:
    return TaskOperationsService(store, storage, id_factory=SequentialIds())


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    store: TaskStateStore,
    service: TaskOperationsService,
) -> AppState:
    """AppState wired with the in-memory storage, without touching disk."""
    return AppState(settings=settings, tasks=store, operations=service)
