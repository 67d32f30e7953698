# src/todo_dashboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Any

from ..preferences import Preferences
from ..tasks.persistence import TaskPersistence
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings kept on the state so connectors/commands can read them.
    settings: Any

    store: TaskStore
    persistence: TaskPersistence
    preferences: Preferences

    # Zone used for display and for typed due dates (None = system local).
    tz: tzinfo | None = None
