# src/todo_dashboard/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_raw(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


@dataclass(slots=True)
class Task:
    id: str
    title: str
    priority: Priority
    created_at: datetime
    order: int

    description: str | None = None
    category: str | None = None
    due_date: datetime | None = None

    completed: bool = False
    completed_at: datetime | None = None

    def copy(self) -> Task:
        return replace(self)


@dataclass(slots=True)
class TodosState:
    """Whole-collection snapshot: the tasks plus the collection-wide revision stamp."""

    items: list[Task] = field(default_factory=list)
    last_updated: datetime | None = None

    def copy(self) -> TodosState:
        return TodosState(items=[t.copy() for t in self.items], last_updated=self.last_updated)


@dataclass(frozen=True, slots=True)
class TaskStats:
    active: int
    completed: int
    overdue: int
    total: int
    completion_rate: int


# ---- wire format ----


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_timestamp(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise ValueError(f"timestamp must be a string, got {type(raw).__name__}")
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def task_to_dict(task: Task) -> dict[str, Any]:
    """
    Serialize a task into the persisted slot layout.

    Absent optionals are omitted; completedAt is always written (null while active).
    """
    out: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "priority": task.priority.value,
        "completed": task.completed,
        "completedAt": format_timestamp(task.completed_at),
        "createdAt": format_timestamp(task.created_at),
        "order": task.order,
    }
    if task.description is not None:
        out["description"] = task.description
    if task.category is not None:
        out["category"] = task.category
    if task.due_date is not None:
        out["dueDate"] = format_timestamp(task.due_date)
    return out


def task_from_dict(raw: dict[str, Any]) -> Task:
    """
    Parse one persisted task. Raises ValueError/TypeError on a malformed row.

    order must be an integer (1.0 is accepted, 1.5 and Infinity are not),
    completed must be a real JSON boolean.
    """
    if not isinstance(raw, dict):
        raise TypeError("task row must be an object")

    tid = raw.get("id")
    title = raw.get("title")
    if not isinstance(tid, str) or not tid:
        raise ValueError("task id is missing")
    if not isinstance(title, str) or not title.strip():
        raise ValueError(f"task {tid} has no title")

    order = raw.get("order", 0)
    if isinstance(order, float) and order.is_integer():
        order = int(order)
    if isinstance(order, bool) or not isinstance(order, int):
        raise ValueError(f"task {tid} has a non-integer order")

    created_at = parse_timestamp(raw.get("createdAt"))
    if created_at is None:
        raise ValueError(f"task {tid} has no createdAt")

    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise ValueError(f"task {tid} has a non-boolean completed flag")
    completed_at = parse_timestamp(raw.get("completedAt")) if completed else None
    if completed and completed_at is None:
        # Older rows may lack the stamp; fall back to creation time.
        completed_at = created_at

    description = raw.get("description")
    category = raw.get("category")

    return Task(
        id=tid,
        title=title,
        priority=Priority.from_raw(raw.get("priority")),
        created_at=created_at,
        order=order,
        description=description if isinstance(description, str) and description.strip() else None,
        category=category if isinstance(category, str) and category.strip() else None,
        due_date=parse_timestamp(raw.get("dueDate")),
        completed=completed,
        completed_at=completed_at,
    )


def state_to_dict(state: TodosState) -> dict[str, Any]:
    return {
        "todos": {
            "items": [task_to_dict(t) for t in state.items],
            "lastUpdated": format_timestamp(state.last_updated),
        }
    }
