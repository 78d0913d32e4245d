# src/smart_calendar/cli/render.py

"""Plain-text rendering for the console. No business rules here."""

from __future__ import annotations

from datetime import date

from ..tasks.task_form import Draft
from ..tasks.task_models import Task
from ..tasks.task_views import CalendarMonth, TaskStats

WEEKDAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
CELL_WIDTH = 11
SHORT_ID = 8


def short_id(task: Task) -> str:
    return task.id[:SHORT_ID]


def _label(value: str) -> str:
    return value.replace("-", " ").upper()


def progress_bar(progress: int, width: int = 20) -> str:
    filled = round(width * progress / 100)
    return "[" + "#" * filled + "." * (width - filled) + f"] {progress}%"


def render_task(task: Task) -> str:
    return "\n".join(
        [
            f"{short_id(task)}  {task.title}",
            f"  {task.priority.value} | {task.category.value} | due {task.due_date} | {_label(task.status.value)}",
            f"  S: {task.specific}",
            f"  M: {task.measurable}",
            f"  A: {task.achievable}",
            f"  R: {task.relevant}",
            f"  T: {task.timebound}",
            f"  {progress_bar(task.progress)}",
        ]
    )


def render_task_list(tasks: list[Task], *, empty: str = "No goals match the current filters.") -> str:
    if not tasks:
        return empty
    return "\n\n".join(render_task(t) for t in tasks)


def render_stats(s: TaskStats) -> str:
    return (
        f"Total goals: {s.total} | Completed: {s.completed} | "
        f"In progress: {s.in_progress} | Overdue: {s.overdue}"
    )


def _cell_lines(text: str) -> str:
    return text[:CELL_WIDTH].ljust(CELL_WIDTH)


def render_calendar(month: CalendarMonth) -> str:
    """
    Sunday-first month grid; each day shows at most the preview tasks and
    a "+N more" line. Today is marked with '*', the selected day with '>'.
    """
    lines = [month.title.center((CELL_WIDTH + 1) * 7), " ".join(_cell_lines(d) for d in WEEKDAYS)]

    slots: list[list[str] | None] = [None] * month.leading_blanks
    for cell in month.cells:
        marker = (">" if cell.is_selected else "") + ("*" if cell.is_today else "")
        block = [f"{marker}{cell.day}"]
        block.extend(t.title[:15] for t in cell.preview)
        if cell.overflow:
            block.append(f"+{cell.overflow} more")
        slots.append(block)

    for start in range(0, len(slots), 7):
        week = slots[start : start + 7]
        height = max(len(b) for b in week if b is not None)
        for row in range(height):
            parts = []
            for b in week:
                text = b[row] if b is not None and row < len(b) else ""
                parts.append(_cell_lines(text))
            lines.append(" ".join(parts).rstrip())
        lines.append("")

    return "\n".join(lines).rstrip()


def render_day(day: date, tasks: list[Task]) -> str:
    header = day.strftime("%A, %B %d").replace(" 0", " ")
    if not tasks:
        return f"{header}\nNo tasks scheduled for this date."
    return f"{header}\n\n" + render_task_list(tasks)


def render_draft(draft: Draft, *, editing_id: str | None) -> str:
    mode = f"Edit SMART Goal ({editing_id[:SHORT_ID]})" if editing_id else "Create New SMART Goal"
    rows = [
        ("title", draft.title),
        ("specific", draft.specific),
        ("measurable", draft.measurable),
        ("achievable", draft.achievable),
        ("relevant", draft.relevant),
        ("timebound", draft.timebound),
        ("priority", draft.priority),
        ("category", draft.category),
        ("dueDate", draft.due_date),
        ("status", draft.status),
        ("progress", draft.progress),
    ]
    return mode + ":\n" + "\n".join(f"  {k:<11} {v}" for k, v in rows)
