# src/taskwise/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_operations import TaskOperationsService
from ..tasks.task_state import TaskStateStore


@dataclass
class AppState:
    """
    Everything a connector needs, wired once in cli/bootstrap.py.

    The store and the service are shared instances: the connector reads
    and subscribes through `tasks`, and mutates only through `operations`.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: Any

    tasks: TaskStateStore
    operations: TaskOperationsService
