# tests/test_task_store.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from todo_dashboard.tasks.task_models import Priority, TodosState
from todo_dashboard.tasks.task_store import TaskStore

from .fakes import FakeClock, SequentialIds


def test_add_assigns_unique_ids_and_increasing_order(store: TaskStore) -> None:
    tasks = [store.add(f"task {i}") for i in range(20)]

    ids = [t.id for t in tasks if t is not None]
    assert len(ids) == 20
    assert len(set(ids)) == 20
    assert [t.order for t in store.active_tasks()] == list(range(1, 21))


def test_add_regenerates_colliding_id(clock: FakeClock) -> None:
    store = TaskStore(TodosState(), clock=clock, id_factory=SequentialIds(["a", "a", "b"]), tz=UTC)
    first = store.add("one")
    second = store.add("two")
    assert first is not None and second is not None
    assert (first.id, second.id) == ("a", "b")


def test_add_trims_title_and_ignores_blank(store: TaskStore, clock: FakeClock) -> None:
    assert store.add("   ") is None
    assert len(store) == 0
    assert store.last_updated is None

    task = store.add(" Buy milk ")
    assert task is not None
    assert task.title == "Buy milk"
    assert task.priority == Priority.MEDIUM
    assert task.completed is False
    assert task.completed_at is None
    assert task.created_at == clock.now
    assert task.order == 1
    assert store.last_updated == clock.now


def test_add_normalizes_optional_fields(store: TaskStore) -> None:
    task = store.add("Pay rent", description="   ", category=" Home, ,Bills ", priority=Priority.HIGH)
    assert task is not None
    assert task.description is None
    assert task.category == "Home, Bills"
    assert task.priority == Priority.HIGH

    bare = store.add("Read", category="  ")
    assert bare is not None
    assert bare.category is None


def test_toggle_twice_restores_active_state(store: TaskStore, clock: FakeClock) -> None:
    a = store.add("a")
    store.add("b")
    assert a is not None

    clock.advance(minutes=5)
    done = store.toggle_complete(a.id)
    assert done is not None
    assert done.completed is True
    assert done.completed_at == clock.now

    clock.advance(minutes=5)
    back = store.toggle_complete(a.id)
    assert back is not None
    assert back.completed is False
    assert back.completed_at is None
    assert back.order >= a.order


def test_uncomplete_moves_task_to_end_of_queue(store: TaskStore) -> None:
    a = store.add("a")
    store.add("b")
    store.add("c")
    assert a is not None

    store.toggle_complete(a.id)
    assert [t.title for t in store.active_tasks()] == ["b", "c"]

    reopened = store.toggle_complete(a.id)
    assert reopened is not None
    assert reopened.order > 3
    assert [t.title for t in store.active_tasks()] == ["b", "c", "a"]


def test_toggle_unknown_id_is_a_noop(store: TaskStore, clock: FakeClock) -> None:
    store.add("a")
    stamp = store.last_updated
    clock.advance(seconds=1)

    assert store.toggle_complete("missing") is None
    assert store.last_updated == stamp


def test_update_overwrites_fields_and_clears_blank_optionals(store: TaskStore) -> None:
    due = datetime(2026, 11, 1, tzinfo=UTC)
    task = store.add("Draft", description="old", category="Work", due_date=due)
    assert task is not None

    updated = store.update(task.id, title="  Final  ", description="", category="", priority=Priority.LOW)
    assert updated is not None
    assert updated.title == "Final"
    assert updated.description is None
    assert updated.category is None
    assert updated.due_date is None
    assert updated.priority == Priority.LOW
    assert updated.order == task.order
    assert updated.created_at == task.created_at


def test_update_with_completed_flag(store: TaskStore, clock: FakeClock) -> None:
    a = store.add("a")
    store.add("b")
    assert a is not None

    done = store.update(a.id, title="a", completed=True)
    assert done is not None
    assert done.completed is True
    assert done.completed_at == clock.now

    reopened = store.update(a.id, title="a", completed=False)
    assert reopened is not None
    assert reopened.completed is False
    assert reopened.completed_at is None
    assert reopened.order == 3

    # Same value again is not a transition: order stays put.
    again = store.update(a.id, title="a", completed=False)
    assert again is not None
    assert again.order == 3


def test_update_unknown_id_or_blank_title_is_a_noop(store: TaskStore, clock: FakeClock) -> None:
    task = store.add("keep me")
    assert task is not None
    stamp = store.last_updated
    clock.advance(seconds=1)

    assert store.update("missing", title="x") is None
    assert store.update(task.id, title="   ") is None
    assert store.get(task.id) == task
    assert store.last_updated == stamp


def test_delete_removes_task(store: TaskStore) -> None:
    a = store.add("a")
    b = store.add("b")
    assert a is not None and b is not None

    assert store.delete(a.id) is True
    assert [t.id for t in store.items] == [b.id]


def test_delete_unknown_id_keeps_items_but_touches_last_updated(
    store: TaskStore, clock: FakeClock
) -> None:
    store.add("a")
    before = store.items
    clock.advance(seconds=1)

    assert store.delete("missing") is False
    assert store.items == before
    assert store.last_updated == clock.now


def test_reorder_active_partial_and_unknown_ids(store: TaskStore) -> None:
    a = store.add("a")
    b = store.add("b")
    c = store.add("c")
    assert a is not None and b is not None and c is not None

    store.reorder_active([b.id, "ghost", a.id])

    assert store.get(b.id).order == 1  # type: ignore[union-attr]
    assert store.get(a.id).order == 3  # type: ignore[union-attr]
    # Not mentioned: keeps its previous order.
    assert store.get(c.id).order == 3  # type: ignore[union-attr]


def test_reorder_two_tasks(store: TaskStore) -> None:
    a = store.add("a")
    b = store.add("b")
    assert a is not None and b is not None

    store.reorder_active([b.id, a.id])

    assert [t.id for t in store.active_tasks()] == [b.id, a.id]
    assert store.get(b.id).order == 1  # type: ignore[union-attr]
    assert store.get(a.id).order == 2  # type: ignore[union-attr]


def test_completed_tasks_newest_first(store: TaskStore, clock: FakeClock) -> None:
    ids = [store.add(name).id for name in ("a", "b", "c")]  # type: ignore[union-attr]
    for tid in ids:
        clock.advance(minutes=1)
        store.toggle_complete(tid)

    assert [t.title for t in store.completed_tasks()] == ["c", "b", "a"]
    assert store.active_tasks() == []


def test_overdue_counts_only_active_tasks_due_before_today(store: TaskStore, clock: FakeClock) -> None:
    today_start = datetime(2026, 10, 19, tzinfo=UTC)
    yesterday = store.add("late", due_date=today_start - timedelta(minutes=1))
    store.add("today morning", due_date=today_start)
    store.add("today night", due_date=today_start + timedelta(hours=23))
    store.add("no due date")
    assert yesterday is not None

    assert store.overdue_count() == 1

    store.toggle_complete(yesterday.id)
    assert store.overdue_count() == 0


def test_overdue_uses_store_timezone(clock: FakeClock) -> None:
    # 01:00 UTC on the 19th is still the 18th in a UTC-5 zone.
    clock.now = datetime(2026, 10, 19, 1, 0, tzinfo=UTC)
    store = TaskStore(TodosState(), clock=clock, tz=timezone(timedelta(hours=-5)))
    store.add("x", due_date=datetime(2026, 10, 18, 12, 0, tzinfo=UTC))

    assert store.overdue_count() == 0


def test_completion_rate(store: TaskStore) -> None:
    assert store.completion_rate() == 0

    ids = [store.add(f"t{i}").id for i in range(4)]  # type: ignore[union-attr]
    store.toggle_complete(ids[0])
    assert store.completion_rate() == 25

    store.toggle_complete(ids[1])
    store.toggle_complete(ids[2])
    store.toggle_complete(ids[3])
    assert store.completion_rate() == 100


def test_completion_rate_rounds_halves_up(store: TaskStore) -> None:
    ids = [store.add(f"t{i}").id for i in range(8)]  # type: ignore[union-attr]
    store.toggle_complete(ids[0])
    assert store.completion_rate() == 13


def test_stats(store: TaskStore) -> None:
    a = store.add("a", due_date=datetime(2026, 1, 1, tzinfo=UTC))
    store.add("b")
    c = store.add("c")
    assert a is not None and c is not None
    store.toggle_complete(c.id)

    s = store.stats()
    assert (s.active, s.completed, s.overdue, s.total, s.completion_rate) == (2, 1, 1, 3, 33)


def test_listeners_get_snapshot_after_each_mutation(store: TaskStore) -> None:
    seen: list[int] = []
    unsubscribe = store.subscribe(lambda snap: seen.append(len(snap.items)))

    a = store.add("a")
    store.add("   ")
    assert a is not None
    store.toggle_complete(a.id)
    store.delete(a.id)
    unsubscribe()
    store.add("b")

    assert seen == [1, 1, 0]


def test_failing_listener_does_not_break_mutation(store: TaskStore) -> None:
    def boom(_snap: TodosState) -> None:
        raise RuntimeError("disk on fire")

    store.subscribe(boom)
    task = store.add("still works")
    assert task is not None
    assert len(store) == 1


def test_last_updated_never_moves_backwards(store: TaskStore, clock: FakeClock) -> None:
    store.add("a")
    stamp = store.last_updated
    clock.advance(hours=-1)

    store.add("b")
    assert store.last_updated == stamp


def test_returned_tasks_are_copies(store: TaskStore) -> None:
    task = store.add("a")
    assert task is not None
    task.title = "mutated outside"

    assert store.get(task.id).title == "a"  # type: ignore[union-attr]


def test_default_seed_when_no_state(clock: FakeClock) -> None:
    store = TaskStore(clock=clock, id_factory=SequentialIds(), tz=UTC)

    assert [t.title for t in store.active_tasks()] == ["Plan sprint backlog", "Grocery run"]
    assert [t.title for t in store.completed_tasks()] == ["Call mom"]
    assert store.last_updated == clock.now
    assert store.completion_rate() == 33
    assert store.overdue_count() == 0


def test_unknown_priority_falls_back_to_medium(store: TaskStore) -> None:
    task = store.add("x", priority="urgent")
    assert task is not None
    assert task.priority == Priority.MEDIUM

    updated = store.update(task.id, title="x", priority="HIGH ")
    assert updated is not None
    assert updated.priority == Priority.HIGH

    updated = store.update(task.id, title="x", priority="whenever")
    assert updated is not None
    assert updated.priority == Priority.MEDIUM


def test_naive_due_date_is_read_in_store_timezone(clock: FakeClock) -> None:
    plus_two = timezone(timedelta(hours=2))
    store = TaskStore(TodosState(), clock=clock, id_factory=SequentialIds(), tz=plus_two)

    task = store.add("Dentist", due_date=datetime(2026, 10, 21, 9, 30))
    assert task is not None
    assert task.due_date == datetime(2026, 10, 21, 9, 30, tzinfo=plus_two)

    updated = store.update(task.id, title="Dentist", due_date=datetime(2026, 10, 22, 8, 0))
    assert updated is not None
    assert updated.due_date == datetime(2026, 10, 22, 8, 0, tzinfo=plus_two)
