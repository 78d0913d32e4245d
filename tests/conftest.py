# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from smart_calendar.core.state import AppState
from smart_calendar.tasks.task_form import FormController
from smart_calendar.tasks.task_storage import InMemoryTaskStorage
from smart_calendar.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="smart-calendar-test",
        data_dir=tmp_path,
        db_path=tmp_path / "storage.sqlite3",
        export_dir=tmp_path / "exports",
        storage_key="ceo-smart-tasks",
        export_prefix="ceo-smart-tasks",
        calendar_preview=2,
    )

@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()

@pytest.fixture()
def storage() -> InMemoryTaskStorage:
    return InMemoryTaskStorage()

@pytest.fixture()
def store(storage: InMemoryTaskStorage, clock: FakeClock) -> TaskStore:
    return TaskStore(storage, clock=clock)

@pytest.fixture()
def form(store: TaskStore) -> FormController:
    return FormController(store)

@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, form: FormController) -> AppState:
    return AppState(
        settings=settings,
        store=store,
        form=form,
        selected_date=date(2025, 9, 30),
        calendar_year=2025,
        calendar_month=8,
    )

