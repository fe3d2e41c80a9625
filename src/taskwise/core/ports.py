# src/taskwise/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task service depends on Protocols instead of concrete implementations.
This keeps the storage medium swappable and makes testing easier.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class KeyValueStorage(Protocol):
    """
    Local device storage: string values under string keys.

    Backends raise StorageIOError on I/O failure.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...


class TaskObserver(Protocol):
    """Callback receiving the full task list on every store commit."""

    def __call__(self, tasks: Sequence[Task]) -> None: ...
