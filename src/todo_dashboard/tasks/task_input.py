# src/todo_dashboard/tasks/task_input.py

"""
Form-level helpers.

These turn raw user text into the normalized shapes TaskStore expects.
They run before the store is called, so they are allowed to raise on bad input.
"""

from __future__ import annotations

from datetime import datetime, time, tzinfo

from .task_models import Priority

_PRIORITY_ALIASES = {
    "h": Priority.HIGH,
    "hi": Priority.HIGH,
    "m": Priority.MEDIUM,
    "med": Priority.MEDIUM,
    "l": Priority.LOW,
    "lo": Priority.LOW,
}


def normalize_text(value: str | None) -> str | None:
    if value is None:
        return None
    v = value.strip()
    return v or None


def normalize_categories(value: str | None) -> str | None:
    """'Work, ,home ' -> 'Work, home'. Returns None when nothing is left."""
    if not value:
        return None
    parts = [p.strip() for p in value.split(",")]
    joined = ", ".join(p for p in parts if p)
    return joined or None


def split_categories(value: str | None) -> list[str]:
    if not value:
        return []
    return [p.strip() for p in value.split(",") if p.strip()]


def parse_priority(raw: str | None, default: Priority = Priority.MEDIUM) -> Priority:
    if raw is None or not raw.strip():
        return default
    key = raw.strip().lower()
    if key in _PRIORITY_ALIASES:
        return _PRIORITY_ALIASES[key]
    try:
        return Priority(key)
    except ValueError:
        return default


def parse_due_date(raw: str | None, tz: tzinfo | None = None) -> datetime | None:
    """
    Parse a due date typed by the user.

    Accepts YYYY-MM-DD (midnight in `tz`) or a full ISO-8601 timestamp.
    Naive timestamps are interpreted in `tz` (system local zone when None).
    """
    text = (raw or "").strip()
    if not text:
        return None

    if len(text) == 10:
        day = datetime.strptime(text, "%Y-%m-%d").date()
        value = datetime.combine(day, time.min)
    else:
        value = datetime.fromisoformat(text)

    if value.tzinfo is None:
        value = value.replace(tzinfo=tz) if tz is not None else value.astimezone()
    return value


def format_datetime(value: datetime | None, tz: tzinfo | None = None) -> str:
    if value is None:
        return "Never"
    return value.astimezone(tz).strftime("%Y-%m-%d %H:%M")
