# tests/test_task_state.py

from __future__ import annotations

from taskwise.tasks.task_models import Task
from taskwise.tasks.task_state import TaskStateStore

from .fakes import RecordingObserver


def test_subscribe_delivers_current_list_immediately() -> None:
    a = Task(id="a", title="A")
    store = TaskStateStore([a])
    obs = RecordingObserver()

    store.subscribe(obs)

    assert obs.calls == [(a,)]


def test_commit_notifies_in_subscription_and_commit_order() -> None:
    store = TaskStateStore()
    order: list[str] = []
    first = RecordingObserver()
    second = RecordingObserver()

    store.subscribe(lambda tasks: order.append("first"))
    store.subscribe(lambda tasks: order.append("second"))
    store.subscribe(first)
    store.subscribe(second)
    order.clear()

    a = Task(id="a", title="A")
    b = Task(id="b", title="B")
    store.commit([a])
    store.commit([a, b])

    assert order == ["first", "second", "first", "second"]
    assert first.calls == [(), (a,), (a, b)]
    assert second.calls == first.calls
    assert store.current() == (a, b)


def test_commit_does_not_alias_callers_list() -> None:
    store = TaskStateStore()
    tasks = [Task(id="a", title="A")]

    store.commit(tasks)
    tasks.append(Task(id="b", title="B"))

    assert [t.id for t in store.current()] == ["a"]


def test_unsubscribe_stops_delivery_and_is_idempotent() -> None:
    store = TaskStateStore()
    obs = RecordingObserver()

    sub = store.subscribe(obs)
    store.commit([Task(id="a", title="A")])
    sub.unsubscribe()
    sub.unsubscribe()
    store.commit([])

    assert len(obs.calls) == 2
    assert not sub.active
    assert store.observer_count == 0


def test_unsubscribe_from_another_observer_takes_effect_immediately() -> None:
    store = TaskStateStore()
    late = RecordingObserver()
    subs = {}

    def killer(tasks) -> None:
        if tasks:
            subs["late"].unsubscribe()

    store.subscribe(killer)
    subs["late"] = store.subscribe(late)
    store.commit([Task(id="a", title="A")])

    assert late.calls == [()]


def test_failing_observer_does_not_block_others() -> None:
    store = TaskStateStore()
    obs = RecordingObserver()

    def boom(tasks) -> None:
        raise RuntimeError("observer bug")

    store.subscribe(boom)
    store.subscribe(obs)
    store.commit([Task(id="a", title="A")])

    assert len(obs.calls) == 2
    assert store.current()[0].id == "a"


def test_commit_from_observer_is_delivered_in_commit_order() -> None:
    store = TaskStateStore()
    a = Task(id="a", title="A")
    b = Task(id="b", title="B")

    def chain(tasks) -> None:
        if tasks == (a,):
            store.commit([a, b])

    store.subscribe(chain)
    later = RecordingObserver()
    store.subscribe(later)

    store.commit([a])

    assert [[t.id for t in call] for call in later.calls] == [[], ["a"], ["a", "b"]]
    assert store.current() == (a, b)
