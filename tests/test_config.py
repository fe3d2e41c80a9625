# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskwise.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TASKWISE_APP_NAME",
        "TASKWISE_LOG_LEVEL",
        "TASKWISE_DATA_DIR",
        "TASKWISE_STORAGE_BACKEND",
        "TASKWISE_STORAGE_PATH",
        "TASKWISE_STORAGE_KEY",
        "TASKWISE_CONSOLE_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()

    assert s.app_name == "taskwise"
    assert s.log_level == "INFO"
    assert s.console_enabled is True
    assert s.storage_backend == "sqlite"
    assert s.storage_path == Path(".local/taskwise") / "storage.sqlite3"
    assert s.storage_key == "tutorialAppTasks"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKWISE_STORAGE_BACKEND", "JSON")
    monkeypatch.setenv("TASKWISE_STORAGE_KEY", "myTasks")
    monkeypatch.setenv("TASKWISE_CONSOLE_ENABLED", "no")

    s = Settings.from_env()

    assert s.storage_backend == "json"
    assert s.storage_path == tmp_path / "storage.json"
    assert s.storage_key == "myTasks"
    assert s.console_enabled is False


def test_unknown_backend_falls_back_with_warning_and_memory_has_no_path(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("TASKWISE_STORAGE_BACKEND", "nonee")
    with caplog.at_level(logging.WARNING, logger="taskwise.config"):
        assert Settings.from_env().storage_backend == "sqlite"
    assert "TASKWISE_STORAGE_BACKEND" in caplog.text
    assert "nonee" in caplog.text

    monkeypatch.setenv("TASKWISE_STORAGE_BACKEND", "memory")
    s = Settings.from_env()
    assert s.storage_backend == "memory"
    assert s.storage_path is None
