# src/smart_calendar/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import bump_progress, complete_task
from ..tasks.task_form import ValidationError
from ..tasks.task_models import Task, parse_due_date
from ..tasks.task_store import TaskNotFoundError
from ..tasks.task_transfer import ImportFormatError, export_tasks, import_tasks_file
from ..tasks.task_views import (
    PRIORITY_FILTERS,
    STATUS_FILTERS,
    calendar_cells,
    filtered_tasks,
    stats,
    tasks_for_date,
)
from . import render

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /new, ...)."""

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


def _resolve(state: AppState, args: list[str]) -> Task | str:
    if not args:
        return "Missing goal id. Use /list to see ids."
    task = state.store.resolve(args[0])
    if task is None:
        return f"No goal matches id {args[0]!r} (or the prefix is ambiguous)."
    return task


def _visible(state: AppState) -> list[Task]:
    return filtered_tasks(state.store.all(), state.priority_filter, state.status_filter)


def _render_calendar(state: AppState) -> str:
    month = calendar_cells(
        state.calendar_year,
        state.calendar_month,
        _visible(state),
        selected_date=state.selected_date,
        preview_limit=int(getattr(state.settings, "calendar_preview", 2)),
    )
    day_tasks = tasks_for_date(_visible(state), state.selected_date)
    return render.render_calendar(month) + "\n\n" + render.render_day(state.selected_date, day_tasks)


def render_current_view(state: AppState) -> str:
    header = render.render_stats(stats(state.store.all()))
    body = _render_calendar(state) if state.view == "calendar" else render.render_task_list(_visible(state))
    return f"{header}\n\n{body}"


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    idx = year * 12 + month + delta
    return idx // 12, idx % 12


# ---- form ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_new(state: AppState, args: list[str]) -> str:
    state.form.start_create()
    return render.render_draft(state.form.draft, editing_id=None) + "\nUse /set <field> <value>, then /save."


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set <field> <value...>

    Fields: title specific measurable achievable relevant timebound
            priority category dueDate status progress
    """
    if not args:
        return "Usage: /set <field> <value>"
    field_name, value = args[0], " ".join(args[1:])
    try:
        state.form.update_field(field_name, value)
    except ValueError as e:
        return str(e)
    return f"{field_name} = {value!r}"


def cmd_draft(state: AppState, args: list[str]) -> str:
    return render.render_draft(state.form.draft, editing_id=state.form.editing_id)


def cmd_save(state: AppState, args: list[str]) -> str:
    editing = state.form.is_editing
    try:
        task = state.form.commit()
    except ValidationError as e:
        return f"{e}\n(draft kept; fix it with /set and /save again)"
    except TaskNotFoundError:
        state.form.cancel()
        return "The goal being edited no longer exists; draft discarded."
    verb = "Updated" if editing else "Created"
    return f"{verb} goal {render.short_id(task)}: {task.title}"


def cmd_cancel(state: AppState, args: list[str]) -> str:
    state.form.cancel()
    return "Draft discarded."


def cmd_edit(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    state.form.start_edit(task)
    return render.render_draft(state.form.draft, editing_id=task.id) + "\nUse /set <field> <value>, then /save."


# ---- store actions ----


def cmd_delete(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    state.store.remove(task.id)
    return f"Deleted goal {render.short_id(task)}: {task.title}"


def cmd_bump(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    updated = bump_progress(state.store, task.id)
    return f"{updated.title}: {updated.progress}% ({updated.status.value})"


def cmd_complete(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    updated = complete_task(state.store, task.id)
    return f"{updated.title}: completed"


# ---- views ----


def cmd_view(state: AppState, args: list[str]) -> str:
    if args:
        mode = args[0].lower()
        if mode not in ("calendar", "list"):
            return "Usage: /view calendar | /view list"
        state.view = mode  # type: ignore[assignment]
    return render_current_view(state)


def cmd_list(state: AppState, args: list[str]) -> str:
    state.view = "list"
    return render_current_view(state)


def cmd_calendar(state: AppState, args: list[str]) -> str:
    """
    /calendar            -> current month
    /calendar 2025-09    -> given month
    /calendar next|prev  -> move one month
    """
    state.view = "calendar"
    if args:
        arg = args[0].lower()
        if arg in ("next", "prev"):
            state.calendar_year, state.calendar_month = _shift_month(
                state.calendar_year, state.calendar_month, 1 if arg == "next" else -1
            )
        elif arg == "today":
            today = date.today()
            state.calendar_year, state.calendar_month = today.year, today.month - 1
        else:
            parsed = parse_due_date(f"{arg}-01")
            if parsed is None:
                return "Usage: /calendar [YYYY-MM | next | prev | today]"
            state.calendar_year, state.calendar_month = parsed.year, parsed.month - 1
    return render_current_view(state)


def cmd_day(state: AppState, args: list[str]) -> str:
    if args:
        parsed = parse_due_date(args[0])
        if parsed is None:
            return "Usage: /day YYYY-MM-DD"
        state.selected_date = parsed
    return render.render_day(state.selected_date, tasks_for_date(_visible(state), state.selected_date))


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                      -> show filters
    /filter priority <value|all>
    /filter status <value|all>
    /filter reset
    """
    if not args:
        return f"Filters: priority={state.priority_filter} status={state.status_filter}"

    kind = args[0].lower()
    if kind == "reset":
        state.priority_filter = state.status_filter = "all"
        return "Filters reset."
    if len(args) < 2:
        return "Usage: /filter priority|status <value|all>"

    value = args[1].lower()
    if kind == "priority":
        if value not in PRIORITY_FILTERS:
            return f"Unknown priority. Choose one of: {', '.join(PRIORITY_FILTERS)}"
        state.priority_filter = value
    elif kind == "status":
        if value not in STATUS_FILTERS:
            return f"Unknown status. Choose one of: {', '.join(STATUS_FILTERS)}"
        state.status_filter = value
    else:
        return "Usage: /filter priority|status <value|all>"
    return f"Filters: priority={state.priority_filter} status={state.status_filter}"


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render.render_stats(stats(state.store.all()))


# ---- import / export ----


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    directory = Path(args[0]) if args else Path(getattr(state.settings, "export_dir", "."))
    prefix = str(getattr(state.settings, "export_prefix", "ceo-smart-tasks"))
    try:
        path = export_tasks(state.store.all(), directory, prefix=prefix)
    except OSError as e:
        logger.warning("Export to %s failed: %s", directory, e)
        return f"Export failed: {e}"
    return f"Exported {len(state.store)} goals to {path}"


def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /import <file.json>"
    path = Path(" ".join(args)).expanduser()
    if emit:
        emit(f"Importing from {path}...")
    try:
        count = asyncio.run(import_tasks_file(state.store, path))
    except ImportFormatError as e:
        logger.info("Import rejected: %s", e)
        return "Error importing tasks. Please check the file format.\n" + str(e)
    return f"Tasks imported successfully! ({count} goals)"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("new", cmd_new, help_text="Start a new SMART goal draft.")
registry.register("set", cmd_set, help_text="Set a draft field: /set <field> <value>.")
registry.register("draft", cmd_draft, help_text="Show the current draft.")
registry.register("save", cmd_save, help_text="Validate and save the draft (create or update).")
registry.register("cancel", cmd_cancel, help_text="Discard the draft.")
registry.register("edit", cmd_edit, help_text="Load a goal into the draft: /edit <id>.")
registry.register("delete", cmd_delete, help_text="Delete a goal: /delete <id>.", aliases=["rm"])
registry.register("bump", cmd_bump, help_text="Add 25% progress: /bump <id>.", aliases=["+25"])
registry.register("complete", cmd_complete, help_text="Mark a goal completed: /complete <id>.")
registry.register("view", cmd_view, help_text="Switch view: /view calendar | /view list.")
registry.register("list", cmd_list, help_text="List view (filtered).", aliases=["ls"])
registry.register(
    "calendar", cmd_calendar, help_text="Calendar view: /calendar [YYYY-MM | next | prev | today].", aliases=["cal"]
)
registry.register("day", cmd_day, help_text="Select a date and show its goals: /day YYYY-MM-DD.")
registry.register("filter", cmd_filter, help_text="Filter: /filter priority|status <value|all> | reset.")
registry.register("stats", cmd_stats, help_text="Show totals (completed / in progress / overdue).")
registry.register("export", cmd_export, help_text="Export all goals to JSON: /export [dir].")
registry.register("import", cmd_import, help_text="Replace all goals from a JSON file: /import <path>.")
