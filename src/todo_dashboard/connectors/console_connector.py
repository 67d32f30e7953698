# src/todo_dashboard/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import cmd_add, cmd_list, cmd_stats
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def handle_line(state: AppState, line: str, emit: Callable[[str], None] | None = None) -> str | None:
    """
    One console turn. Slash commands go to the registry; plain text is a quick add.
    Returns the reply, or None for empty input.
    """
    text = line.strip()
    if not text:
        return None
    reply = command_registry.handle(state, text, emit=emit)
    if reply is not None:
        return reply
    return cmd_add(state, [text.replace("|", "/")])


def run_console_loop(
    state: AppState,
    *,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.store))

    def emit(text: str) -> None:
        write(f"[{_ts_local()}] {text}")

    emit("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.")
    emit(cmd_stats(state, []))
    emit(cmd_list(state, []))

    while True:
        try:
            user_input = read_line(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            emit(reply)

    logger.info("Console connector finished.")
