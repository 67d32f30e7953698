# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file lists every variable so the repo is self-documenting without opening the code.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo-dashboard).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Storage (gitignored)
    "TODO_DATA_DIR": "Local data directory (default: .local/todo-dashboard).",
    "TODO_STORAGE_BACKEND": "json | sqlite | memory (default: json).",
    "TODO_STORAGE_DIR": "Slot directory for the json backend (default: <data_dir>/storage).",
    "TODO_STORAGE_DB_PATH": "SQLite file for the sqlite backend (default: <data_dir>/todo.sqlite3).",
    "TODO_STATE_KEY": "Slot name holding the task list (default: dashboard-todos).",
    # Behaviour
    "TODO_SEED_DEFAULTS": "Seed three starter tasks on first start (true/false, default: true).",
    "TODO_DEFAULT_THEME": "Theme used until one is chosen: light | dark (default: dark).",
    "TODO_CONSOLE_TIMEZONE": "IANA zone for due dates and 'overdue' (default: system local zone).",
}
