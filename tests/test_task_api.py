# tests/test_task_api.py

from __future__ import annotations

import json

import pytest

from smart_calendar.tasks.task_api import advance_progress, bump_progress, complete_task
from smart_calendar.tasks.task_models import TaskStatus
from smart_calendar.tasks.task_storage import InMemoryTaskStorage
from smart_calendar.tasks.task_store import TaskNotFoundError, TaskStore

from .helpers import make_task


@pytest.mark.parametrize(
    "progress,status,expected",
    [
        (0, TaskStatus.NOT_STARTED, (25, TaskStatus.IN_PROGRESS)),
        (0, TaskStatus.BLOCKED, (25, TaskStatus.IN_PROGRESS)),
        (50, TaskStatus.IN_PROGRESS, (75, TaskStatus.IN_PROGRESS)),
        (74, TaskStatus.IN_PROGRESS, (99, TaskStatus.IN_PROGRESS)),
        (75, TaskStatus.IN_PROGRESS, (100, TaskStatus.COMPLETED)),
        (90, TaskStatus.ON_HOLD, (100, TaskStatus.COMPLETED)),
        (100, TaskStatus.COMPLETED, (100, TaskStatus.COMPLETED)),
    ],
)
def test_advance_progress(progress: int, status: TaskStatus, expected: tuple[int, TaskStatus]) -> None:
    assert advance_progress(progress, status) == expected


def test_bump_converges_to_completed(store: TaskStore) -> None:
    store.add(make_task(id="a", progress=10))

    seen = []
    for _ in range(6):
        task = bump_progress(store, "a")
        seen.append(task.progress)
        assert task.progress <= 100

    assert seen == [35, 60, 85, 100, 100, 100]
    final = store.get("a")
    assert final is not None
    assert final.progress == 100
    assert final.status == TaskStatus.COMPLETED


def test_bump_refreshes_updated_at(store: TaskStore) -> None:
    before = store.add(make_task(id="a"))
    after = bump_progress(store, "a")
    assert after.updated_at > before.updated_at
    assert after.created_at == before.created_at


def test_complete_task_persists(store: TaskStore, storage: InMemoryTaskStorage) -> None:
    store.add(make_task(id="a", progress=30, status=TaskStatus.BLOCKED))

    done = complete_task(store, "a")

    assert (done.progress, done.status) == (100, TaskStatus.COMPLETED)
    persisted = json.loads(storage.blob or "[]")
    assert persisted[0]["progress"] == 100
    assert persisted[0]["status"] == "completed"


def test_quick_actions_unknown_id(store: TaskStore) -> None:
    with pytest.raises(TaskNotFoundError):
        bump_progress(store, "missing")
    with pytest.raises(TaskNotFoundError):
        complete_task(store, "missing")
