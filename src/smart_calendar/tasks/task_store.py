# src/smart_calendar/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from typing import Any

from ..core.ports import Clock, TaskStorage
from .task_models import Category, Priority, Task, TaskStatus, utc_now

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
_TASK_FIELDS = frozenset(f.name for f in dataclasses.fields(Task))


class TaskNotFoundError(KeyError):
    pass


class DuplicateTaskError(ValueError):
    pass


_ENUM_FIELDS = {"priority": Priority, "category": Category, "status": TaskStatus}


def _coerce_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Normalize patch values so every stored Task keeps enum fields and 0..100 progress."""
    out = dict(changes)
    for name, enum_cls in _ENUM_FIELDS.items():
        if name in out:
            try:
                out[name] = enum_cls(out[name])
            except ValueError:
                raise ValueError(f"invalid {name}: {out[name]!r}") from None
    if "progress" in out:
        try:
            progress = int(out["progress"])
        except (TypeError, ValueError):
            raise ValueError(f"invalid progress: {out['progress']!r}") from None
        if not 0 <= progress <= 100:
            raise ValueError(f"progress must be 0..100, got {progress}")
        out["progress"] = progress
    return out


class TaskStore:
    """
    Canonical, ordered task collection.

    Persistence is write-through: every mutation immediately saves the whole
    collection through the storage adapter. Insertion order is kept but
    carries no meaning.
    """

    def __init__(self, storage: TaskStorage, *, clock: Clock | None = None) -> None:
        self._storage = storage
        self._clock: Clock = clock or utc_now
        self._tasks: list[Task] = []
        self.load()
        logger.info("TaskStore ready total=%s", len(self._tasks))

    @property
    def clock(self) -> Clock:
        return self._clock

    # ---- persistence ----

    def load(self) -> list[Task]:
        """(Re)hydrate from storage. A missing or corrupt collection reads as empty."""
        self._tasks = list(self._storage.load())
        return self.all()

    def save(self) -> bool:
        ok = self._storage.save(list(self._tasks))
        if not ok:
            logger.warning("Task collection was not persisted (total=%d).", len(self._tasks))
        return ok

    # ---- queries ----

    def all(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def resolve(self, id_or_prefix: str) -> Task | None:
        """Exact id match first, then a unique id prefix."""
        key = (id_or_prefix or "").strip()
        if not key:
            return None
        exact = self.get(key)
        if exact is not None:
            return exact
        matches = [t for t in self._tasks if t.id.startswith(key)]
        return matches[0] if len(matches) == 1 else None

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    # ---- mutations ----

    def add(self, task: Task) -> Task:
        if self.get(task.id) is not None:
            raise DuplicateTaskError(f"task id already present: {task.id}")
        self._tasks.append(task)
        logger.debug("Task added id=%s due=%s priority=%s", task.id, task.due_date, task.priority)
        self.save()
        return task

    def update(self, task_id: str, **changes: Any) -> Task:
        """
        Apply a partial update and refresh updated_at.

        id and created_at cannot be changed. Enum fields accept their string
        values; progress must stay within 0..100. A rejected patch leaves the
        collection untouched.
        """
        bad = set(changes) & _IMMUTABLE_FIELDS
        if bad:
            raise ValueError(f"immutable task fields: {', '.join(sorted(bad))}")
        unknown = set(changes) - _TASK_FIELDS
        if unknown:
            raise ValueError(f"unknown task fields: {', '.join(sorted(unknown))}")
        changes = _coerce_changes(changes)

        for i, t in enumerate(self._tasks):
            if t.id != task_id:
                continue
            changes.pop("updated_at", None)
            now = self._clock()
            updated = dataclasses.replace(t, **changes, updated_at=max(now, t.updated_at))
            self._tasks[i] = updated
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
            self.save()
            return updated

        raise TaskNotFoundError(task_id)

    def remove(self, task_id: str) -> bool:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                del self._tasks[i]
                logger.debug("Task removed id=%s", task_id)
                self.save()
                return True
        return False

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Wholesale replacement (import). No per-task validation."""
        self._tasks = list(tasks)
        dupes = sorted(task_id for task_id, n in Counter(t.id for t in self._tasks).items() if n > 1)
        if dupes:
            logger.warning("Replaced collection has duplicate ids: %s", ", ".join(dupes))
        logger.info("Task collection replaced total=%d", len(self._tasks))
        self.save()
