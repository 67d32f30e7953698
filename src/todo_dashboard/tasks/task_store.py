# src/todo_dashboard/tasks/task_store.py

from __future__ import annotations

import functools
import logging
import math
import secrets
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime, timedelta, tzinfo

from .task_input import normalize_categories, normalize_text
from .task_models import Priority, Task, TaskStats, TodosState

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]
StateListener = Callable[[TodosState], None]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def new_task_id() -> str:
    return secrets.token_urlsafe(15)


def starter_tasks(now: datetime, id_factory: IdFactory = new_task_id) -> list[Task]:
    """Built-in content shown on first start, before anything was persisted."""
    return [
        Task(
            id=id_factory(),
            title="Plan sprint backlog",
            description="Review tasks for the week and assign ownership.",
            category="Work",
            priority=Priority.HIGH,
            due_date=now + timedelta(days=2),
            created_at=now,
            order=1,
        ),
        Task(
            id=id_factory(),
            title="Grocery run",
            description="Ingredients for the weekend dinner party.",
            category="Personal",
            priority=Priority.MEDIUM,
            due_date=now + timedelta(days=4),
            created_at=now,
            order=2,
        ),
        Task(
            id=id_factory(),
            title="Call mom",
            category="Family",
            priority=Priority.LOW,
            completed=True,
            completed_at=now,
            created_at=now,
            order=3,
        ),
    ]


def _by_completed_at_desc(a: Task, b: Task) -> int:
    # Missing stamps compare equal so the stable sort leaves them in place.
    if a.completed_at is None or b.completed_at is None:
        return 0
    if a.completed_at > b.completed_at:
        return -1
    if a.completed_at < b.completed_at:
        return 1
    return 0


class TaskStore:
    """
    In-memory task collection and its mutation operations.

    Rules:
    - every operation is total: unknown ids and blank titles are ignored, not raised
    - each successful mutation bumps last_updated and notifies subscribers
      (persistence hooks in through subscribe)
    - callers only ever see copies; the internal list is never handed out
    - "now" comes from the injected clock, calendar days from the injected tz
    """

    def __init__(
        self,
        state: TodosState | None = None,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        tz: tzinfo | None = None,
        on_change: StateListener | None = None,
    ) -> None:
        self._clock: Clock = clock or _utc_now
        self._id_factory: IdFactory = id_factory or new_task_id
        self._tz = tz
        self._listeners: list[StateListener] = []

        if state is None:
            now = self._clock()
            state = TodosState(items=starter_tasks(now, self._id_factory), last_updated=now)
            logger.info("TaskStore seeded with %d starter tasks", len(state.items))
        else:
            state = state.copy()

        self._items: list[Task] = state.items
        self._last_updated: datetime | None = state.last_updated

        if on_change is not None:
            self.subscribe(on_change)

        logger.debug("TaskStore ready total=%d", len(self._items))

    # ---- subscriptions ----

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _touch(self) -> None:
        now = self._clock()
        if self._last_updated is not None and now < self._last_updated:
            now = self._last_updated
        self._last_updated = now

        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("TaskStore listener %r failed", listener)

    # ---- low-level helpers ----

    def _find(self, task_id: str) -> Task | None:
        for t in self._items:
            if t.id == task_id:
                return t
        return None

    def _next_order(self) -> int:
        return max((t.order for t in self._items), default=0) + 1

    def _set_completed(self, task: Task, completed: bool) -> None:
        task.completed = completed
        if completed:
            task.completed_at = self._clock()
        else:
            task.completed_at = None
            task.order = self._next_order()

    def _aware(self, value: datetime | None) -> datetime | None:
        # Naive values are wall-clock time in the store zone.
        if value is None or value.tzinfo is not None:
            return value
        return value.replace(tzinfo=self._tz) if self._tz is not None else value.astimezone()

    def _unique_id(self) -> str:
        tid = self._id_factory()
        while self._find(tid) is not None:
            tid = self._id_factory()
        return tid

    # ---- read access ----

    @property
    def items(self) -> list[Task]:
        return [t.copy() for t in self._items]

    @property
    def last_updated(self) -> datetime | None:
        return self._last_updated

    def snapshot(self) -> TodosState:
        return TodosState(items=self.items, last_updated=self._last_updated)

    def get(self, task_id: str) -> Task | None:
        t = self._find(task_id)
        return t.copy() if t is not None else None

    def __len__(self) -> int:
        return len(self._items)

    # ---- mutations ----

    def add(
        self,
        title: str,
        description: str | None = None,
        category: str | None = None,
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
    ) -> Task | None:
        clean_title = normalize_text(title)
        if clean_title is None:
            logger.debug("add ignored: blank title")
            return None

        task = Task(
            id=self._unique_id(),
            title=clean_title,
            description=normalize_text(description),
            category=normalize_categories(category),
            priority=Priority.from_raw(priority),
            due_date=self._aware(due_date),
            created_at=self._clock(),
            order=self._next_order(),
        )
        self._items.append(task)
        logger.debug("Task added id=%s order=%s priority=%s", task.id, task.order, task.priority)
        self._touch()
        return task.copy()

    def update(
        self,
        task_id: str,
        *,
        title: str,
        description: str | None = None,
        category: str | None = None,
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
        completed: bool | None = None,
    ) -> Task | None:
        task = self._find(task_id)
        if task is None:
            logger.debug("update ignored: unknown id=%s", task_id)
            return None

        clean_title = normalize_text(title)
        if clean_title is None:
            logger.debug("update ignored: blank title id=%s", task_id)
            return None

        task.title = clean_title
        task.description = normalize_text(description)
        task.category = normalize_categories(category)
        task.priority = Priority.from_raw(priority)
        task.due_date = self._aware(due_date)

        if completed is not None and bool(completed) != task.completed:
            self._set_completed(task, bool(completed))

        logger.debug("Task updated id=%s completed=%s", task.id, task.completed)
        self._touch()
        return task.copy()

    def toggle_complete(self, task_id: str) -> Task | None:
        task = self._find(task_id)
        if task is None:
            logger.debug("toggle ignored: unknown id=%s", task_id)
            return None

        self._set_completed(task, not task.completed)
        logger.debug("Task toggled id=%s completed=%s order=%s", task.id, task.completed, task.order)
        self._touch()
        return task.copy()

    def delete(self, task_id: str) -> bool:
        """
        Remove a task.

        last_updated is bumped even when nothing matched; returns whether a row was removed.
        """
        before = len(self._items)
        self._items = [t for t in self._items if t.id != task_id]
        removed = len(self._items) != before
        logger.debug("Task delete id=%s removed=%s", task_id, removed)
        self._touch()
        return removed

    def reorder_active(self, ordered_ids: Iterable[str]) -> None:
        """
        Assign order = position+1 to every listed id that exists.

        Unknown ids are skipped; tasks not listed keep their previous order.
        """
        for index, task_id in enumerate(ordered_ids):
            task = self._find(task_id)
            if task is not None:
                task.order = index + 1
        self._touch()

    # ---- derived views ----

    def active_tasks(self) -> list[Task]:
        active = [t.copy() for t in self._items if not t.completed]
        active.sort(key=lambda t: t.order)
        return active

    def completed_tasks(self) -> list[Task]:
        done = [t.copy() for t in self._items if t.completed]
        done.sort(key=functools.cmp_to_key(_by_completed_at_desc))
        return done

    def _local_day(self, value: datetime) -> date:
        return value.astimezone(self._tz).date()

    def overdue_count(self) -> int:
        today = self._local_day(self._clock())
        return sum(
            1
            for t in self._items
            if not t.completed and t.due_date is not None and self._local_day(t.due_date) < today
        )

    def completion_rate(self) -> int:
        total = len(self._items)
        if not total:
            return 0
        done = sum(1 for t in self._items if t.completed)
        # Halves round up (12.5 -> 13), unlike round().
        rate = math.floor(100 * done / total + 0.5)
        return max(0, min(100, rate))

    def stats(self) -> TaskStats:
        done = sum(1 for t in self._items if t.completed)
        return TaskStats(
            active=len(self._items) - done,
            completed=done,
            overdue=self.overdue_count(),
            total=len(self._items),
            completion_rate=self.completion_rate(),
        )
