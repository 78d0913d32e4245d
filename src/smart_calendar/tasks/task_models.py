# src/smart_calendar/tasks/task_models.py

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Priority(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_raw(cls, raw: Any) -> Priority:
        try:
            return cls(raw)
        except ValueError:
            return cls.HIGH


class Category(StrEnum):
    STRATEGIC = "strategic"
    OPERATIONAL = "operational"
    FINANCIAL = "financial"
    PEOPLE = "people"
    GROWTH = "growth"
    INNOVATION = "innovation"

    @classmethod
    def from_raw(cls, raw: Any) -> Category:
        try:
            return cls(raw)
        except ValueError:
            return cls.STRATEGIC


class TaskStatus(StrEnum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    ON_HOLD = "on-hold"

    @classmethod
    def from_raw(cls, raw: Any) -> TaskStatus:
        try:
            return cls(raw)
        except ValueError:
            return cls.NOT_STARTED


SMART_FIELDS: tuple[str, ...] = ("specific", "measurable", "achievable", "relevant", "timebound")


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds (the precision of the JSON form)."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2025-09-30T08:15:00.000Z."""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        ts = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def parse_due_date(raw: str) -> date | None:
    """Parse a YYYY-MM-DD due date; None when it is not a calendar date."""
    try:
        return date.fromisoformat(raw)
    except (TypeError, ValueError):
        return None


def clamp_progress(value: Any) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, n))


@dataclass(slots=True)
class Task:
    id: str
    title: str

    specific: str
    measurable: str
    achievable: str
    relevant: str
    timebound: str

    priority: Priority
    category: Category
    due_date: str
    status: TaskStatus
    progress: int

    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Wire shape used for local storage and export files (camelCase keys)."""
        return {
            "id": self.id,
            "title": self.title,
            "specific": self.specific,
            "measurable": self.measurable,
            "achievable": self.achievable,
            "relevant": self.relevant,
            "timebound": self.timebound,
            "priority": self.priority.value,
            "category": self.category.value,
            "dueDate": self.due_date,
            "status": self.status.value,
            "progress": self.progress,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Lenient decoder for stored/imported records.

        Nothing is rejected here: unknown enum values fall back to the form
        defaults, missing text becomes "", progress is clamped, a missing id
        is replaced by a fresh one.
        """
        created_at = parse_timestamp(raw.get("createdAt")) or EPOCH
        updated_at = parse_timestamp(raw.get("updatedAt")) or created_at
        if updated_at < created_at:
            updated_at = created_at

        def text(key: str) -> str:
            v = raw.get(key)
            return "" if v is None else str(v)

        task_id = text("id").strip()
        if not task_id:
            task_id = uuid.uuid4().hex
            logger.info("Task %r had no id; assigned %s", raw.get("title"), task_id)

        return cls(
            id=task_id,
            title=text("title"),
            specific=text("specific"),
            measurable=text("measurable"),
            achievable=text("achievable"),
            relevant=text("relevant"),
            timebound=text("timebound"),
            priority=Priority.from_raw(raw.get("priority")),
            category=Category.from_raw(raw.get("category")),
            due_date=text("dueDate"),
            status=TaskStatus.from_raw(raw.get("status")),
            progress=clamp_progress(raw.get("progress")),
            created_at=created_at,
            updated_at=updated_at,
        )


def tasks_to_payload(tasks: list[Task]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in tasks]


def tasks_from_payload(payload: list[Any]) -> list[Task]:
    """Decode a JSON array; entries that are not objects are dropped."""
    out: list[Task] = []
    for i, item in enumerate(payload):
        if not isinstance(item, dict):
            logger.warning("Skipping task entry #%d: expected object, got %s", i, type(item).__name__)
            continue
        out.append(Task.from_dict(item))
    return out
