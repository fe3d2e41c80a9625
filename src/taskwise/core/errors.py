# src/taskwise/core/errors.py

"""
Error taxonomy.

- ValidationError: bad input to create (blank title). No state change.
- TaskNotFound: unknown task id. The service reports this as
  MutationOutcome.NOT_FOUND; callers that want an exception raise this.
- StorageUnavailable: the storage medium cannot be opened at all.
  Reads resolve to an empty list, writes are a successful no-op.
- StorageIOError: read/decode/write failure at the storage boundary.
"""

from __future__ import annotations


class TaskwiseError(Exception):
    """Base class for all taskwise errors."""


class ValidationError(TaskwiseError, ValueError):
    pass


class TaskNotFound(TaskwiseError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class StorageUnavailable(TaskwiseError):
    pass


class StorageIOError(TaskwiseError, OSError):
    pass
