# src/smart_calendar/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

from ..tasks.task_form import FormController
from ..tasks.task_store import TaskStore
from ..tasks.task_views import ALL

ViewMode = Literal["calendar", "list"]


@dataclass
class AppState:
    # Settings object (config.Settings or a test namespace).
    settings: Any

    store: TaskStore
    form: FormController

    view: ViewMode = "calendar"
    priority_filter: str = ALL
    status_filter: str = ALL

    selected_date: date = field(default_factory=date.today)
    # Month shown in the calendar (month is zero-based).
    calendar_year: int = field(default_factory=lambda: date.today().year)
    calendar_month: int = field(default_factory=lambda: date.today().month - 1)
