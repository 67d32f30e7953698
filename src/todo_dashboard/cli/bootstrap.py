# src/todo_dashboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- picks the storage backend,
- loads prior task state and wires persistence into the TaskStore.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..preferences import Preferences, Theme
from ..storage.kv import FileKeyValueStorage, MemoryKeyValueStorage, SqliteKeyValueStorage
from ..tasks.persistence import TaskPersistence
from ..tasks.task_models import TodosState
from ..tasks.task_store import Clock, TaskStore

logger = logging.getLogger(__name__)


def create_storage(settings) -> KeyValueStorage:
    backend = str(getattr(settings, "storage_backend", "json")).lower()
    if backend == "memory":
        return MemoryKeyValueStorage()
    if backend == "sqlite":
        return SqliteKeyValueStorage(settings.storage_db_path)
    return FileKeyValueStorage(settings.storage_dir)


def resolve_timezone(name: str | None) -> tzinfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r; using the system local zone", name)
        return None


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    clock: Clock | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    settings/storage/clock are injectable for tests; settings falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        storage = create_storage(settings)

    tz = resolve_timezone(getattr(settings, "timezone", None))

    persistence = TaskPersistence(storage, key=getattr(settings, "state_key", "dashboard-todos"))
    prior = persistence.load()
    if prior is None and not getattr(settings, "seed_defaults", True):
        prior = TodosState()

    store = TaskStore(prior, clock=clock, tz=tz)
    persistence.attach(store)

    preferences = Preferences(
        storage,
        default_theme=Theme.from_raw(getattr(settings, "default_theme", None), Theme.DARK),
    )

    logger.info(
        "State ready: %d tasks (%s), theme=%s",
        len(store),
        persistence.outcome.value,
        preferences.theme.value,
    )
    return AppState(
        settings=settings,
        store=store,
        persistence=persistence,
        preferences=preferences,
        tz=tz,
    )
