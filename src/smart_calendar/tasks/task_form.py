# src/smart_calendar/tasks/task_form.py

"""
Draft editing for the create/edit form.

The draft holds raw user input (strings, mostly) and is only checked on
commit(). A failed commit leaves the draft untouched so the user can fix it.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from dataclasses import dataclass
from typing import Any

from ..core.ports import Clock
from .task_models import (
    SMART_FIELDS,
    Category,
    Priority,
    Task,
    TaskStatus,
    parse_due_date,
)
from .task_store import TaskStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("title", *SMART_FIELDS, "due_date")

# JSON / UI spellings accepted by update_field().
FIELD_ALIASES: dict[str, str] = {
    "dueDate": "due_date",
    "due": "due_date",
}


class ValidationError(ValueError):
    """Commit refused: required fields are empty or values are out of range."""

    def __init__(self, missing: list[str], invalid: list[str] | None = None) -> None:
        self.missing = list(missing)
        self.invalid = list(invalid or [])
        parts: list[str] = []
        if self.missing:
            parts.append("Please fill in all required fields: " + ", ".join(self.missing))
        if self.invalid:
            parts.append("Invalid values: " + ", ".join(self.invalid))
        super().__init__("; ".join(parts))


@dataclass(slots=True)
class Draft:
    title: str = ""
    specific: str = ""
    measurable: str = ""
    achievable: str = ""
    relevant: str = ""
    timebound: str = ""
    priority: Any = Priority.HIGH
    category: Any = Category.STRATEGIC
    due_date: Any = ""
    status: Any = TaskStatus.NOT_STARTED
    progress: Any = 0

    @classmethod
    def from_task(cls, task: Task) -> Draft:
        return cls(
            title=task.title,
            specific=task.specific,
            measurable=task.measurable,
            achievable=task.achievable,
            relevant=task.relevant,
            timebound=task.timebound,
            priority=task.priority,
            category=task.category,
            due_date=task.due_date,
            status=task.status,
            progress=task.progress,
        )


_DRAFT_FIELDS = frozenset(f.name for f in dataclasses.fields(Draft))


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


class FormController:
    def __init__(self, store: TaskStore, *, clock: Clock | None = None) -> None:
        self._store = store
        self._clock: Clock = clock or store.clock
        self._draft = Draft()
        self._editing: Task | None = None

    @property
    def draft(self) -> Draft:
        return self._draft

    @property
    def is_editing(self) -> bool:
        return self._editing is not None

    @property
    def editing_id(self) -> str | None:
        return self._editing.id if self._editing is not None else None

    def start_create(self) -> None:
        self._draft = Draft()
        self._editing = None

    def start_edit(self, task: Task) -> None:
        self._draft = Draft.from_task(task)
        self._editing = task

    def update_field(self, field: str, value: Any) -> None:
        name = FIELD_ALIASES.get(field, field)
        if name not in _DRAFT_FIELDS:
            raise ValueError(f"unknown form field: {field}")
        setattr(self._draft, name, value)

    def cancel(self) -> None:
        self.start_create()

    def validate(self) -> None:
        d = self._draft
        missing = [name for name in REQUIRED_FIELDS if _is_blank(getattr(d, name))]

        invalid: list[str] = []
        if "due_date" not in missing and parse_due_date(str(d.due_date).strip()) is None:
            invalid.append(f"due_date={d.due_date!r} (expected YYYY-MM-DD)")
        for name, enum_cls in (("priority", Priority), ("category", Category), ("status", TaskStatus)):
            if str(getattr(d, name)) not in {m.value for m in enum_cls}:
                invalid.append(f"{name}={getattr(d, name)!r}")
        try:
            progress = int(d.progress)
        except (TypeError, ValueError):
            invalid.append(f"progress={d.progress!r}")
        else:
            if not 0 <= progress <= 100:
                invalid.append(f"progress={progress} (expected 0..100)")

        if missing or invalid:
            raise ValidationError(missing, invalid)

    def _finalize(self) -> dict[str, Any]:
        d = self._draft
        return {
            "title": str(d.title).strip(),
            "specific": str(d.specific).strip(),
            "measurable": str(d.measurable).strip(),
            "achievable": str(d.achievable).strip(),
            "relevant": str(d.relevant).strip(),
            "timebound": str(d.timebound).strip(),
            "priority": Priority(str(d.priority)),
            "category": Category(str(d.category)),
            "due_date": parse_due_date(str(d.due_date).strip()).isoformat(),
            "status": TaskStatus(str(d.status)),
            "progress": int(d.progress),
        }

    def commit(self) -> Task:
        """
        Validate the draft and write it to the store.

        Creates a new task (fresh id and timestamps) or updates the task being
        edited (id and created_at preserved). Resets to create mode on success.
        """
        self.validate()
        fields = self._finalize()

        if self._editing is not None:
            task = self._store.update(self._editing.id, **fields)
            logger.info("Goal updated id=%s title=%r", task.id, task.title)
        else:
            now = self._clock()
            task = Task(id=uuid.uuid4().hex, created_at=now, updated_at=now, **fields)
            self._store.add(task)
            logger.info("Goal created id=%s title=%r due=%s", task.id, task.title, task.due_date)

        self.start_create()
        return task
