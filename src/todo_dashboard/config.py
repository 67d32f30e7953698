# src/todo_dashboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a local default; nothing is required to start.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

STORAGE_BACKENDS = ("json", "sqlite", "memory")

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    return raw if raw in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    data_dir: Path
    storage_backend: str
    storage_dir: Path
    storage_db_path: Path
    state_key: str

    # ---- Behaviour ----
    seed_defaults: bool
    default_theme: str
    timezone: str | None

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "todo-dashboard").strip() or "todo-dashboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo-dashboard"))
        storage_backend = _env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "json")
        storage_dir = _env_path(_k("STORAGE_DIR"), data_dir / "storage")
        storage_db_path = _env_path(_k("STORAGE_DB_PATH"), data_dir / "todo.sqlite3")
        state_key = _env(_k("STATE_KEY"), "dashboard-todos").strip() or "dashboard-todos"

        seed_defaults = _env_bool(_k("SEED_DEFAULTS"), True)
        default_theme = _env_choice(_k("DEFAULT_THEME"), ("light", "dark"), "dark")
        timezone = _env(_k("CONSOLE_TIMEZONE"), "").strip() or None

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_dir=storage_dir,
            storage_db_path=storage_db_path,
            state_key=state_key,
            seed_defaults=seed_defaults,
            default_theme=default_theme,
            timezone=timezone,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
