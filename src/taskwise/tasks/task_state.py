# src/taskwise/tasks/task_state.py

from __future__ import annotations

"""
Application task state.

Holds the current task list (the single source of truth) and broadcasts
it to observers on every commit. No mutation rules and no persistence
live here; see task_operations.py for those.
"""

import itertools
import logging
from collections import deque
from collections.abc import Iterable

from ..core.ports import TaskObserver
from .task_models import Task

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by TaskStateStore.subscribe()."""

    __slots__ = ("_store", "_token")

    def __init__(self, store: TaskStateStore, token: int) -> None:
        self._store: TaskStateStore | None = store
        self._token = token

    @property
    def active(self) -> bool:
        return self._store is not None

    def unsubscribe(self) -> None:
        if self._store is None:
            return
        self._store._remove(self._token)
        self._store = None


class TaskStateStore:
    """
    Reactive holder of the task list.

    - current() returns the last committed list (a tuple, never aliased)
    - subscribe() delivers the current list immediately, then every commit
    - commit() replaces the list and notifies observers synchronously,
      in subscription order
    - a commit made by an observer is queued, so every observer still sees
      every list in commit order
    """

    def __init__(self, initial: Iterable[Task] = ()) -> None:
        self._tasks: tuple[Task, ...] = tuple(initial)
        self._observers: dict[int, TaskObserver] = {}
        self._tokens = itertools.count(1)
        self._queued: deque[tuple[Task, ...]] = deque()
        self._delivering = False
        logger.debug("TaskStateStore initialized with %d tasks", len(self._tasks))

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def current(self) -> tuple[Task, ...]:
        return self._tasks

    def subscribe(self, observer: TaskObserver) -> Subscription:
        token = next(self._tokens)
        self._observers[token] = observer
        sub = Subscription(self, token)
        self._notify_one(token, observer, self._tasks)
        return sub

    def commit(self, tasks: Iterable[Task]) -> None:
        self._tasks = tuple(tasks)
        self._queued.append(self._tasks)
        if self._delivering:
            # Committed from inside an observer: delivered after the current round.
            return

        self._delivering = True
        try:
            while self._queued:
                committed = self._queued.popleft()
                # Snapshot: observers may unsubscribe while being notified.
                for token, observer in list(self._observers.items()):
                    if token in self._observers:
                        self._notify_one(token, observer, committed)
        finally:
            self._delivering = False

    def _remove(self, token: int) -> None:
        self._observers.pop(token, None)

    @staticmethod
    def _notify_one(token: int, observer: TaskObserver, tasks: tuple[Task, ...]) -> None:
        try:
            observer(tasks)
        except Exception:
            logger.exception("Task observer #%s failed", token)
