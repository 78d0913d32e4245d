# src/smart_calendar/tasks/task_transfer.py

"""
JSON export / import of the whole collection.

Export files use the same shape as local storage: a pretty-printed JSON
array of task objects. Import replaces the store wholesale, and only after
the file was read and parsed; any failure leaves the store as it was.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from .task_models import Task, tasks_from_payload, tasks_to_payload
from .task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_PREFIX = "ceo-smart-tasks"


class ImportFormatError(ValueError):
    """The import file could not be read or is not a JSON array."""


def export_filename(prefix: str = DEFAULT_EXPORT_PREFIX, today: date | None = None) -> str:
    today = today or date.today()
    return f"{prefix}-{today.isoformat()}.json"


def dumps_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps(tasks_to_payload(list(tasks)), ensure_ascii=False, indent=2)


def loads_tasks(text: str) -> list[Task]:
    try:
        payload = json.loads(text)
    except ValueError as e:
        raise ImportFormatError(f"Error importing tasks: not valid JSON ({e})") from e
    if not isinstance(payload, list):
        raise ImportFormatError(
            f"Error importing tasks: expected a JSON array, got {type(payload).__name__}"
        )
    return tasks_from_payload(payload)


def export_tasks(
    tasks: Iterable[Task],
    directory: str | Path = ".",
    *,
    prefix: str = DEFAULT_EXPORT_PREFIX,
    today: date | None = None,
) -> Path:
    """Write the collection to <directory>/<prefix>-YYYY-MM-DD.json and return the path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(prefix, today)

    items = list(tasks)
    tmp = path.with_suffix(".tmp")
    try:
        tmp.write_text(dumps_tasks(items), "utf-8")
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)
    logger.info("Exported %d tasks to %s", len(items), path)
    return path


def read_import_file(path: str | Path) -> list[Task]:
    path = Path(path)
    try:
        text = path.read_text("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ImportFormatError(f"Error importing tasks: cannot read {path} ({e})") from e
    return loads_tasks(text)


async def import_tasks_file(store: TaskStore, path: str | Path) -> int:
    """
    Read + parse `path` off the event loop, then replace the store contents.

    Returns the number of imported tasks. Raises ImportFormatError without
    touching the store when the file is unreadable or not a JSON array.
    """
    tasks = await asyncio.to_thread(read_import_file, path)
    store.replace_all(tasks)
    logger.info("Imported %d tasks from %s", len(tasks), path)
    return len(tasks)
