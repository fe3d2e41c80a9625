# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from taskwise.tasks.task_models import Task


@dataclass(slots=True)
class RecordingObserver:
    """Store observer that keeps every delivered list."""

    calls: list[tuple[Task, ...]] = field(default_factory=list)

    def __call__(self, tasks: Sequence[Task]) -> None:
        self.calls.append(tuple(tasks))

    @property
    def last(self) -> tuple[Task, ...]:
        return self.calls[-1]


class SequentialIds:
    """Deterministic id factory: task-1, task-2, ... (skips ids already taken)."""

    def __init__(self) -> None:
        self.n = 0

    def __call__(self, existing: Iterable[str]) -> str:
        taken = set(existing)
        while True:
            self.n += 1
            candidate = f"task-{self.n}"
            if candidate not in taken:
                return candidate


class BrokenStorage:
    """KeyValueStorage whose medium throws something unexpected."""

    def get_item(self, key: str) -> str | None:
        raise RuntimeError("disk on fire")

    def set_item(self, key: str, value: str) -> None:
        raise RuntimeError("disk on fire")
