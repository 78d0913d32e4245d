# tests/helpers.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from smart_calendar.tasks.task_form import FormController
from smart_calendar.tasks.task_models import Category, Priority, Task, TaskStatus


def make_task(**overrides: Any) -> Task:
    """A fully populated task; override any field by keyword."""
    ts = datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc)
    fields: dict[str, Any] = dict(
        id="t1",
        title="Q3 Revenue Target",
        specific="Grow ARR in EMEA",
        measurable="+15% ARR",
        achievable="Two new AEs hired",
        relevant="Board plan",
        timebound="End of Q3",
        priority=Priority.HIGH,
        category=Category.FINANCIAL,
        due_date="2025-09-30",
        status=TaskStatus.NOT_STARTED,
        progress=0,
        created_at=ts,
        updated_at=ts,
    )
    fields.update(overrides)
    return Task(**fields)


def fill_draft(form: FormController, **overrides: Any) -> None:
    values: dict[str, Any] = dict(
        title="Q3 Revenue Target",
        specific="Grow ARR in EMEA",
        measurable="+15% ARR",
        achievable="Two new AEs hired",
        relevant="Board plan",
        timebound="End of Q3",
        dueDate="2025-09-30",
        priority="high",
        category="financial",
    )
    values.update(overrides)
    for name, value in values.items():
        form.update_field(name, value)
