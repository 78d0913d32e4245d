# src/smart_calendar/tasks/task_api.py

from __future__ import annotations

import logging

from .task_models import Task, TaskStatus
from .task_store import TaskNotFoundError, TaskStore

logger = logging.getLogger(__name__)

PROGRESS_STEP = 25
COMPLETE_THRESHOLD = 75


def advance_progress(progress: int, status: TaskStatus | str) -> tuple[int, TaskStatus]:
    """
    The "+25%" rule.

    Progress grows by one step, capped at 100. The threshold is checked on the
    value before the increment: from 75% or more the task becomes completed,
    otherwise it is (now) in progress. `status` does not affect the result.
    """
    new_progress = min(int(progress) + PROGRESS_STEP, 100)
    new_status = TaskStatus.COMPLETED if int(progress) >= COMPLETE_THRESHOLD else TaskStatus.IN_PROGRESS
    return new_progress, new_status


def bump_progress(store: TaskStore, task_id: str) -> Task:
    """Quick action: +25% on one task (write-through)."""
    task = store.get(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)

    progress, status = advance_progress(task.progress, task.status)
    updated = store.update(task_id, progress=progress, status=status)
    logger.info("Progress id=%s %d%% -> %d%% status=%s", task_id, task.progress, progress, status)
    return updated


def complete_task(store: TaskStore, task_id: str) -> Task:
    """Quick action: mark done (progress 100, status completed)."""
    updated = store.update(task_id, progress=100, status=TaskStatus.COMPLETED)
    logger.info("Completed id=%s", task_id)
    return updated
