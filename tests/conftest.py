# tests/conftest.py

from __future__ import annotations

from datetime import UTC
from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_dashboard.cli.bootstrap import create_initial_state
from todo_dashboard.core.state import AppState
from todo_dashboard.storage.kv import MemoryKeyValueStorage
from todo_dashboard.tasks.task_models import TodosState
from todo_dashboard.tasks.task_store import TaskStore

from .fakes import FakeClock, SequentialIds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    """Empty store on a fixed clock, UTC calendar days and predictable ids."""
    return TaskStore(TodosState(), clock=clock, id_factory=SequentialIds(), tz=UTC)


@pytest.fixture()
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap.

    A SimpleNamespace instead of the real config keeps tests independent of env vars and .env.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_backend="memory",
        storage_dir=tmp_path / "storage",
        storage_db_path=tmp_path / "todo.sqlite3",
        state_key="dashboard-todos",
        seed_defaults=False,
        default_theme="dark",
        timezone=None,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, storage: MemoryKeyValueStorage, clock: FakeClock) -> AppState:
    """AppState wired to in-memory storage and the fake clock (starts empty)."""
    return create_initial_state(settings=settings, storage=storage, clock=clock)
