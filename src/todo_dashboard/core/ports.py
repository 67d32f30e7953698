# src/todo_dashboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The persistence adapter and preferences depend on these Protocols instead of
concrete backends, so storage stays swappable and tests can use in-memory fakes.
"""

from typing import Protocol


class KeyValueStorage(Protocol):
    """Durable local string slots (file directory, SQLite table, or a dict in tests)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
