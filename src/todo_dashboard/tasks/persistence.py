# src/todo_dashboard/tasks/persistence.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from ..core.ports import KeyValueStorage
from .task_models import Task, TodosState, parse_timestamp, state_to_dict, task_from_dict
from .task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "dashboard-todos"


class LoadOutcome(StrEnum):
    NOT_LOADED = "not_loaded"
    NO_PRIOR_STATE = "no_prior_state"
    HAS_PRIOR_STATE = "has_prior_state"


class TaskPersistence:
    """
    Round-trips the whole TaskStore state through one storage slot.

    - load() runs once at startup; anything unreadable means "no prior state"
    - save() rewrites the full slot on every change, failures are logged and swallowed
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STATE_KEY) -> None:
        self._storage = storage
        self._key = key
        self.outcome = LoadOutcome.NOT_LOADED

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> TodosState | None:
        state = self._read()
        self.outcome = LoadOutcome.HAS_PRIOR_STATE if state is not None else LoadOutcome.NO_PRIOR_STATE
        return state

    def _read(self) -> TodosState | None:
        try:
            raw = self._storage.get_item(self._key)
        except Exception:
            logger.exception("Failed to read slot %r; starting without prior state", self._key)
            return None

        if not raw:
            logger.info("No saved tasks in slot %r", self._key)
            return None

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            logger.warning("Slot %r is not valid JSON; ignoring it", self._key)
            return None

        state = parse_state(data)
        if state is None:
            logger.warning("Slot %r has an unexpected shape; ignoring it", self._key)
            return None

        logger.info("Loaded %d tasks from slot %r", len(state.items), self._key)
        return state

    def save(self, state: TodosState) -> bool:
        try:
            payload = json.dumps(state_to_dict(state), ensure_ascii=False)
            self._storage.set_item(self._key, payload)
        except Exception:
            logger.exception("Failed to save %d tasks to slot %r", len(state.items), self._key)
            return False
        logger.debug("Saved %d tasks to slot %r", len(state.items), self._key)
        return True

    def attach(self, store: TaskStore) -> Callable[[], None]:
        """Persist after every store mutation. Returns the unsubscribe callable."""
        return store.subscribe(self.save)


def parse_state(data: Any) -> TodosState | None:
    """
    Parse the persisted {"todos": {"items": [...], "lastUpdated": ...}} layout.

    Returns None when the envelope is wrong. Bad rows are dropped one by one,
    and a repeated id keeps its first row.
    """
    if not isinstance(data, dict):
        return None
    todos = data.get("todos")
    if not isinstance(todos, dict):
        return None
    rows = todos.get("items")
    if not isinstance(rows, list):
        return None

    try:
        last_updated = parse_timestamp(todos.get("lastUpdated"))
    except (TypeError, ValueError):
        last_updated = None

    items: list[Task] = []
    seen: set[str] = set()
    for i, row in enumerate(rows):
        try:
            task = task_from_dict(row)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning("Skipping malformed task row #%d: %s", i, e)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id=%s", task.id)
            continue
        seen.add(task.id)
        items.append(task)

    return TodosState(items=items, last_updated=last_updated)
