# src/todo_dashboard/storage/kv.py

"""
Local key-value backends ("slots").

Each backend stores opaque strings under string keys. Backends raise on I/O
failures; callers that must never crash (persistence, preferences) catch and log.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import sqlite3
import time
from pathlib import Path

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]+")


class StorageUnavailableError(OSError):
    """Raised by MemoryKeyValueStorage when writes are switched off (quota / private mode)."""


class MemoryKeyValueStorage:
    """Dict-backed storage for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, str] | None = None, *, fail_writes: bool = False) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageUnavailableError(f"storage is read-only, cannot write {key!r}")
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileKeyValueStorage:
    """
    One JSON file per key under a directory.

    Writes go to a temp file first and are moved into place with os.replace,
    so a crash mid-write never leaves a truncated slot behind.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileKeyValueStorage ready dir=%s", self._dir)

    def _path(self, key: str) -> Path:
        name = _SAFE_KEY.sub("_", key).strip("._") or "_"
        return self._dir / f"{name}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_text(value, "utf-8")
            os.replace(tmp, path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise
        with contextlib.suppress(Exception):
            os.chmod(path, 0o600)

    def remove_item(self, key: str) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path(key).unlink()


class SqliteKeyValueStorage:
    """
    SQLite-backed storage: a single kv table.

    Each method opens its own short-lived connection.
    """

    def __init__(self, db_path: str | Path = "todo.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteKeyValueStorage ready db=%s", self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def get_item(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return str(row[0]) if row else None
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
