# src/smart_calendar/tasks/task_views.py

"""
Pure projections over the task collection.

Nothing here mutates tasks or keeps state; every result is a function of
the arguments (the current date included, which callers may pin).
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from .task_models import Priority, Task, TaskStatus, parse_due_date

ALL = "all"

PRIORITY_FILTERS: tuple[str, ...] = (ALL, *(p.value for p in Priority))
STATUS_FILTERS: tuple[str, ...] = (ALL, *(s.value for s in TaskStatus))


def filtered_tasks(
    tasks: Iterable[Task],
    priority_filter: str = ALL,
    status_filter: str = ALL,
) -> list[Task]:
    return [
        t
        for t in tasks
        if (priority_filter == ALL or t.priority == priority_filter)
        and (status_filter == ALL or t.status == status_filter)
    ]


def date_key(day: date | str) -> str:
    return day.isoformat() if isinstance(day, date) else str(day)


def tasks_for_date(tasks: Iterable[Task], day: date | str) -> list[Task]:
    """Tasks whose due date string equals `day` exactly (YYYY-MM-DD)."""
    key = date_key(day)
    return [t for t in tasks if t.due_date == key]


@dataclass(slots=True)
class CalendarCell:
    day: int
    date: str
    tasks: list[Task]
    is_today: bool
    is_selected: bool
    preview_limit: int = 2

    @property
    def preview(self) -> list[Task]:
        return self.tasks[: self.preview_limit]

    @property
    def overflow(self) -> int:
        return max(0, len(self.tasks) - self.preview_limit)


@dataclass(slots=True)
class CalendarMonth:
    year: int
    month: int  # zero-based
    leading_blanks: int
    cells: list[CalendarCell] = field(default_factory=list)

    @property
    def title(self) -> str:
        return month_title(self.year, self.month)


def month_title(year: int, month: int) -> str:
    """'October 2026' for a zero-based month."""
    return f"{calendar.month_name[month + 1]} {year}"


def calendar_cells(
    year: int,
    month: int,
    tasks: Sequence[Task],
    *,
    today: date | None = None,
    selected_date: date | str | None = None,
    preview_limit: int = 2,
) -> CalendarMonth:
    """
    Lay out one month as a Sunday-first grid.

    `month` is zero-based (0 = January). `tasks` should already be filtered.
    """
    if not 0 <= month <= 11:
        raise ValueError(f"month must be 0..11, got {month}")

    first_weekday, days_in_month = calendar.monthrange(year, month + 1)
    # calendar.monthrange counts Monday as 0; the grid starts on Sunday.
    leading_blanks = (first_weekday + 1) % 7

    today_key = date_key(today or date.today())
    selected_key = date_key(selected_date) if selected_date is not None else None

    cells: list[CalendarCell] = []
    for day in range(1, days_in_month + 1):
        key = f"{year:04d}-{month + 1:02d}-{day:02d}"
        cells.append(
            CalendarCell(
                day=day,
                date=key,
                tasks=tasks_for_date(tasks, key),
                is_today=key == today_key,
                is_selected=key == selected_key,
                preview_limit=preview_limit,
            )
        )

    return CalendarMonth(year=year, month=month, leading_blanks=leading_blanks, cells=cells)


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    in_progress: int
    overdue: int


def is_overdue(task: Task, today: date) -> bool:
    if task.status == TaskStatus.COMPLETED:
        return False
    due = parse_due_date(task.due_date)
    return due is not None and due < today


def stats(tasks: Iterable[Task], *, today: date | None = None) -> TaskStats:
    """Aggregates over the full (unfiltered) collection."""
    today = today or date.today()
    items = list(tasks)
    return TaskStats(
        total=len(items),
        completed=sum(1 for t in items if t.status == TaskStatus.COMPLETED),
        in_progress=sum(1 for t in items if t.status == TaskStatus.IN_PROGRESS),
        overdue=sum(1 for t in items if is_overdue(t, today)),
    )
