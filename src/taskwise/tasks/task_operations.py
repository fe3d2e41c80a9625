# src/taskwise/tasks/task_operations.py

from __future__ import annotations

"""
Task CRUD operations.

Owns every mutation rule and the sync between TaskStateStore and local
storage. Each mutation:
- reads the current list fresh from the store,
- computes a new tuple,
- commits it to the store,
- saves the very same tuple to storage.

There is no locking between operations: two overlapping mutations can
both read the same list and the last commit wins.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace

from ..core.errors import StorageIOError, StorageUnavailable, ValidationError
from ..core.ports import KeyValueStorage
from .task_models import MutationOutcome, Task, decode_tasks, encode_tasks, generate_task_id
from .task_state import TaskStateStore

logger = logging.getLogger(__name__)

TASKS_STORAGE_KEY = "tutorialAppTasks"

IdFactory = Callable[[Iterable[str]], str]


class TaskOperationsService:
    def __init__(
        self,
        state: TaskStateStore,
        storage: KeyValueStorage | None,
        *,
        storage_key: str = TASKS_STORAGE_KEY,
        id_factory: IdFactory = generate_task_id,
    ) -> None:
        self._state = state
        self._storage = storage
        self._storage_key = storage_key
        self._id_factory = id_factory
        logger.info(
            "TaskOperationsService ready storage=%s key=%s",
            type(storage).__name__ if storage is not None else "unavailable",
            storage_key,
        )

    @property
    def storage_available(self) -> bool:
        return self._storage is not None

    # ---- public API ----

    async def load_all_tasks(self) -> None:
        """
        Replace the in-memory list with the persisted snapshot.

        Never raises. On any failure the store gets an empty list and
        storage is left untouched.
        """
        logger.debug("Loading tasks from storage key=%s", self._storage_key)
        try:
            tasks = await self._load_tasks_from_device()
        except Exception:
            logger.exception("Failed to load tasks from storage")
            self._state.commit(())
            return

        self._state.commit(tasks)
        logger.info("Loaded %d tasks from storage", len(tasks))

    async def create_task(self, title: str) -> Task:
        """
        Append a new incomplete task.

        Raises ValidationError for a blank title (nothing committed or saved).
        Raises StorageIOError if the save fails; the new task stays committed.
        """
        clean = (title or "").strip()
        if not clean:
            logger.warning("Cannot create task with empty title.")
            raise ValidationError("Task title cannot be empty.")

        current = self._state.current()
        task = Task(id=self._id_factory(t.id for t in current), title=clean, is_complete=False)
        updated = (*current, task)

        self._state.commit(updated)
        await self._save_tasks_to_device(updated)
        logger.info("Task created id=%s total=%d", task.id, len(updated))
        return task

    async def update_task_status(self, task_id: str, is_complete: bool) -> MutationOutcome:
        current = self._state.current()

        index = _index_of(current, task_id)
        if index is None:
            logger.warning("Task with id=%s not found for updating status.", task_id)
            return MutationOutcome.NOT_FOUND

        existing = current[index]
        if existing.is_complete == bool(is_complete):
            logger.debug("Task id=%s already has is_complete=%s", task_id, existing.is_complete)
            return MutationOutcome.UNCHANGED

        updated = (
            *current[:index],
            replace(existing, is_complete=bool(is_complete)),
            *current[index + 1 :],
        )

        self._state.commit(updated)
        await self._save_tasks_to_device(updated)
        logger.info("Task status updated id=%s is_complete=%s", task_id, bool(is_complete))
        return MutationOutcome.APPLIED

    async def delete_task(self, task_id: str) -> MutationOutcome:
        current = self._state.current()
        updated = tuple(t for t in current if t.id != task_id)

        if len(updated) == len(current):
            logger.warning("Task with id=%s not found for deletion.", task_id)
            return MutationOutcome.NOT_FOUND

        self._state.commit(updated)
        await self._save_tasks_to_device(updated)
        logger.info("Task deleted id=%s remaining=%d", task_id, len(updated))
        return MutationOutcome.APPLIED

    # ---- persistence ----

    async def _save_tasks_to_device(self, tasks: Sequence[Task]) -> None:
        """
        Write the whole list as one record under the fixed key.

        Missing storage is a successful no-op. Any write failure is
        re-raised as StorageIOError for the calling operation.
        """
        if self._storage is None:
            logger.warning("Storage is not available. Tasks cannot be saved.")
            return

        try:
            self._storage.set_item(self._storage_key, encode_tasks(tasks))
        except StorageUnavailable:
            logger.warning("Storage became unavailable. Tasks cannot be saved.")
            return
        except StorageIOError:
            logger.exception("Error saving tasks to storage")
            raise
        except Exception as e:
            logger.exception("Error saving tasks to storage")
            raise StorageIOError(f"Failed to save tasks: {e}") from e

        logger.debug("Saved %d tasks to storage", len(tasks))

    async def _load_tasks_from_device(self) -> tuple[Task, ...]:
        """Read the stored record. Resolves to () on any problem; never raises."""
        if self._storage is None:
            logger.warning("Storage is not available. Cannot load tasks.")
            return ()

        try:
            raw = self._storage.get_item(self._storage_key)
            if not raw:
                logger.info("No tasks found in storage.")
                return ()
            return decode_tasks(raw)
        except StorageUnavailable:
            logger.warning("Storage became unavailable. Cannot load tasks.")
            return ()
        except Exception:
            logger.exception("Error loading tasks from storage")
            return ()


def _index_of(tasks: Sequence[Task], task_id: str) -> int | None:
    for i, t in enumerate(tasks):
        if t.id == task_id:
            return i
    return None
