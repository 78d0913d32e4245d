# src/smart_calendar/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on Protocols instead of concrete implementations.
This keeps the storage backend swappable and makes testing easier.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class Clock(Protocol):
    """Returns the current moment as an aware UTC datetime."""
    def __call__(self) -> datetime: ...


class TaskStorage(Protocol):
    """
    Persistence for the whole task collection.

    load() must never raise: absent or corrupt data reads as an empty list.
    save() returns False when the write did not happen.
    """

    def load(self) -> list[Task]: ...
    def save(self, tasks: list[Task]) -> bool: ...
