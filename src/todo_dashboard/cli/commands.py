# src/todo_dashboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..preferences import Theme
from ..tasks.task_input import (
    format_datetime,
    normalize_categories,
    normalize_text,
    parse_due_date,
    parse_priority,
)
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

SHORT_ID_LEN = 6
FIELD_SEP = "|"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def short_id(task: Task) -> str:
    return task.id[:SHORT_ID_LEN]


def format_task(task: Task, state: AppState) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] {short_id(task)}  ({task.priority.value}) {task.title}"
    if task.due_date is not None:
        line += f"  due {format_datetime(task.due_date, state.tz)}"
    if task.category:
        line += f"  [{task.category}]"
    if task.completed:
        line += f"  done {format_datetime(task.completed_at, state.tz)}"
    return line


def resolve_task(state: AppState, token: str) -> Task | str:
    """Find a task by full id or unique id prefix. Returns an error reply on failure."""
    exact = state.store.get(token)
    if exact is not None:
        return exact
    matches = [t for t in state.store.items if t.id.startswith(token)]
    if not matches:
        return f"No task matches id {token!r}."
    if len(matches) > 1:
        return f"Id prefix {token!r} is ambiguous ({len(matches)} tasks)."
    return matches[0]


def _fields(args: list[str]) -> list[str]:
    return [p.strip() for p in " ".join(args).split(FIELD_SEP)]


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    active = state.store.active_tasks()
    if not active:
        return "No active tasks. Add one with /add."
    lines = [f"Active tasks ({len(active)}):"]
    lines.extend(f"  {format_task(t, state)}" for t in active)
    return "\n".join(lines)


def cmd_completed(state: AppState, args: list[str]) -> str:
    done = state.store.completed_tasks()
    if not done:
        return "Nothing completed yet."
    lines = [f"Completed tasks ({len(done)}):"]
    lines.extend(f"  {format_task(t, state)}" for t in done)
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title | description | categories | priority | due
    Everything after the title is optional.
    """
    fields = _fields(args) + [""] * 5
    title, description, categories, priority, due = fields[:5]
    if not normalize_text(title):
        return "Usage: /add title | description | categories | priority | due (YYYY-MM-DD)"

    try:
        due_date = parse_due_date(due, state.tz)
    except ValueError:
        return f"Cannot parse due date {due!r}. Use YYYY-MM-DD."

    task = state.store.add(
        title,
        description=description,
        category=normalize_categories(categories),
        priority=parse_priority(priority),
        due_date=due_date,
    )
    if task is None:
        return "Task not added."
    return f"Added {short_id(task)}: {task.title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit id | title | description | categories | priority | due
    Trailing fields left out keep their current value; an empty field clears it.
    """
    if not args:
        return "Usage: /edit id | title | description | categories | priority | due"

    fields = _fields(args)
    found = resolve_task(state, fields[0])
    if isinstance(found, str):
        return found
    task = found
    given = fields[1:]

    def pick(i: int, current: str | None) -> str | None:
        return given[i] if i < len(given) else current

    title = pick(0, task.title) or task.title
    priority = parse_priority(pick(3, None), default=task.priority)

    due_raw = pick(4, None)
    if due_raw is None:
        due_date = task.due_date
    else:
        try:
            due_date = parse_due_date(due_raw, state.tz)
        except ValueError:
            return f"Cannot parse due date {due_raw!r}. Use YYYY-MM-DD."

    updated = state.store.update(
        task.id,
        title=title,
        description=pick(1, task.description),
        category=normalize_categories(pick(2, task.category)),
        priority=priority,
        due_date=due_date,
    )
    if updated is None:
        return "Task not updated."
    return f"Updated {short_id(updated)}: {updated.title}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle id"
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    task = state.store.toggle_complete(found.id)
    if task is None:
        return "Task not found."
    return f"{'Completed' if task.completed else 'Reopened'} {short_id(task)}: {task.title}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    """
    /rm id        -> ask for confirmation (unless confirmations are off)
    /rm id yes    -> delete
    /rm id yes!   -> delete and stop asking from now on
    """
    if not args:
        return "Usage: /rm id [yes|yes!]"
    found = resolve_task(state, args[0])
    if isinstance(found, str):
        return found

    answer = args[1].lower() if len(args) > 1 else ""
    if not state.preferences.skip_delete_confirm and answer not in ("yes", "yes!"):
        return (
            f"Delete {short_id(found)} {found.title!r}? "
            f"Repeat with /rm {short_id(found)} yes (or yes! to stop asking)."
        )
    if answer == "yes!":
        state.preferences.skip_delete_confirm = True

    state.store.delete(found.id)
    return f"Deleted {short_id(found)}: {found.title}"


def cmd_move(state: AppState, args: list[str]) -> str:
    """/move id1 id2 ... -> new order of the active list (listed ids first)."""
    if not args:
        return "Usage: /move id1 id2 ..."
    ids: list[str] = []
    for token in args:
        found = resolve_task(state, token)
        if isinstance(found, str):
            return found
        ids.append(found.id)
    state.store.reorder_active(ids)
    return cmd_list(state, [])


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.store.stats()
    return (
        "Stats:\n"
        f"  Active tasks: {s.active}\n"
        f"  Completed: {s.completed}\n"
        f"  Overdue: {s.overdue}\n"
        f"  Completion: {s.completion_rate}%\n"
        f"  Last updated: {format_datetime(state.store.last_updated, state.tz)}"
    )


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme          -> toggle light/dark
    /theme light    -> set explicitly
    """
    if not args:
        new = state.preferences.toggle_theme()
        return f"Theme: {new.value}"
    arg = args[0].lower()
    if arg not in (Theme.LIGHT.value, Theme.DARK.value):
        return "Usage: /theme [light|dark]"
    state.preferences.theme = Theme(arg)
    return f"Theme: {arg}"


def cmd_confirm(state: AppState, args: list[str]) -> str:
    if not args:
        on = not state.preferences.skip_delete_confirm
        return f"Delete confirmation is {'ON' if on else 'OFF'}. Use /confirm on or /confirm off."
    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        state.preferences.skip_delete_confirm = False
        return "Delete confirmation ON."
    if arg in ("off", "0", "false", "no"):
        state.preferences.skip_delete_confirm = True
        return "Delete confirmation OFF."
    return "Usage: /confirm on or /confirm off."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show active tasks in order.", aliases=["ls"])
registry.register("done", cmd_completed, help_text="Show completed tasks, newest first.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add title | description | categories | priority | due.",
)
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit id | title | description | categories | priority | due.",
)
registry.register("toggle", cmd_toggle, help_text="Complete / reopen a task: /toggle id.", aliases=["x"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm id [yes|yes!].", aliases=["del"])
registry.register("move", cmd_move, help_text="Reorder active tasks: /move id1 id2 ...")
registry.register("stats", cmd_stats, help_text="Show counts, overdue and completion rate.")
registry.register("theme", cmd_theme, help_text="Switch theme: /theme [light|dark].")
registry.register("confirm", cmd_confirm, help_text="Delete confirmation: /confirm on | off.")
