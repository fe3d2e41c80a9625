# src/taskwise/tasks/task_models.py

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.errors import StorageIOError

logger = logging.getLogger(__name__)


class MutationOutcome(StrEnum):
    """
    Result of UpdateStatus / Delete.

    NOT_FOUND is a non-fatal signal: nothing was committed or saved.
    """

    APPLIED = "applied"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    is_complete: bool = False

    def to_record(self) -> dict[str, Any]:
        # Storage record keys are camelCase.
        return {"id": self.id, "title": self.title, "isComplete": self.is_complete}

    @classmethod
    def from_record(cls, raw: Any) -> Task:
        if not isinstance(raw, dict):
            raise StorageIOError(f"task record must be an object, got {type(raw).__name__}")

        task_id = raw.get("id")
        title = raw.get("title")
        is_complete = raw.get("isComplete", False)

        if not isinstance(task_id, str) or not task_id:
            raise StorageIOError(f"task record has invalid id: {task_id!r}")
        if not isinstance(title, str):
            raise StorageIOError(f"task record {task_id} has invalid title")
        if not isinstance(is_complete, bool):
            raise StorageIOError(f"task record {task_id} has invalid isComplete")

        return cls(id=task_id, title=title.strip(), is_complete=is_complete)


def generate_task_id(existing: Iterable[str] = ()) -> str:
    """
    Build a fresh id like "task-1718000000000-3fa9c".

    Regenerates on the (unlikely) collision with an id already in the list.
    """
    taken = set(existing)
    while True:
        candidate = f"task-{int(time.time() * 1000)}-{uuid.uuid4().hex[:5]}"
        if candidate not in taken:
            return candidate


def count_pending(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if not t.is_complete)


def encode_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([t.to_record() for t in tasks], ensure_ascii=False)


def decode_tasks(raw: str) -> tuple[Task, ...]:
    """
    Decode a stored record into tasks.

    Structural problems reject the whole snapshot (StorageIOError).
    Blank titles and duplicate ids are dropped with a warning so the
    loaded list still satisfies the list invariants.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise StorageIOError(f"stored tasks are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise StorageIOError(f"stored tasks must be a JSON array, got {type(data).__name__}")

    out: list[Task] = []
    seen: set[str] = set()
    for item in data:
        task = Task.from_record(item)
        if not task.title:
            logger.warning("Dropping stored task with blank title id=%s", task.id)
            continue
        if task.id in seen:
            logger.warning("Dropping stored task with duplicate id=%s", task.id)
            continue
        seen.add(task.id)
        out.append(task)

    return tuple(out)
