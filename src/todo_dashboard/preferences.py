# src/todo_dashboard/preferences.py

from __future__ import annotations

import logging
from enum import StrEnum

from .core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

SKIP_DELETE_CONFIRM_KEY = "todo_skip_delete_confirm"
THEME_KEY = "todo_theme"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_raw(cls, raw: str | None, default: Theme) -> Theme:
        if not raw:
            return default
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return default


class Preferences:
    """
    UI preferences kept outside the task state, each in its own slot.

    Reads fall back to defaults; writes are best-effort.
    """

    def __init__(self, storage: KeyValueStorage, *, default_theme: Theme = Theme.DARK) -> None:
        self._storage = storage
        self._default_theme = default_theme

    def _get(self, key: str) -> str | None:
        try:
            return self._storage.get_item(key)
        except Exception:
            logger.exception("Failed to read preference %r", key)
            return None

    def _set(self, key: str, value: str) -> None:
        try:
            self._storage.set_item(key, value)
        except Exception:
            logger.exception("Failed to save preference %r", key)

    @property
    def skip_delete_confirm(self) -> bool:
        return self._get(SKIP_DELETE_CONFIRM_KEY) == "true"

    @skip_delete_confirm.setter
    def skip_delete_confirm(self, value: bool) -> None:
        self._set(SKIP_DELETE_CONFIRM_KEY, "true" if value else "false")

    @property
    def theme(self) -> Theme:
        return Theme.from_raw(self._get(THEME_KEY), self._default_theme)

    @theme.setter
    def theme(self, value: Theme) -> None:
        self._set(THEME_KEY, Theme(value).value)

    def toggle_theme(self) -> Theme:
        new = Theme.LIGHT if self.theme == Theme.DARK else Theme.DARK
        self.theme = new
        return new
