# tests/test_commands.py

from __future__ import annotations

from datetime import date
from pathlib import Path

from smart_calendar.cli.commands import CommandRegistry, registry
from smart_calendar.core.state import AppState
from smart_calendar.tasks.task_models import Priority, TaskStatus

from .helpers import make_task


def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def _run(state: AppState, *lines: str) -> str:
    out = ""
    for line in lines:
        out = registry.handle(state, line) or ""
    return out


def test_create_goal_through_console(state: AppState) -> None:
    reply = _run(
        state,
        "/new",
        "/set title Q3 Revenue Target",
        "/set specific Grow ARR in EMEA",
        "/set measurable +15% ARR",
        "/set achievable Two new AEs hired",
        "/set relevant Board plan",
        "/set timebound End of Q3",
        "/set dueDate 2025-09-30",
        "/set category financial",
        "/save",
    )

    assert reply.startswith("Created goal")
    (task,) = state.store.all()
    assert task.title == "Q3 Revenue Target"
    assert task.measurable == "+15% ARR"


def test_save_with_missing_field_keeps_draft(state: AppState) -> None:
    reply = _run(state, "/new", "/set title Only a title", "/save")

    assert "Please fill in all required fields" in reply
    assert "measurable" in reply
    assert len(state.store) == 0
    assert state.form.draft.title == "Only a title"


def test_bump_complete_delete_by_prefix(state: AppState) -> None:
    state.store.add(make_task(id="3f2a9c0d", progress=70))

    assert "95%" in _run(state, "/bump 3f2a")
    assert "completed" in _run(state, "/complete 3f2a")
    assert state.store.get("3f2a9c0d").status == TaskStatus.COMPLETED  # type: ignore[union-attr]

    assert "Deleted" in _run(state, "/delete 3f2a")
    assert len(state.store) == 0
    assert "No goal matches" in _run(state, "/delete 3f2a")


def test_filters_and_views(state: AppState) -> None:
    state.store.add(make_task(id="a", title="Critical goal", priority=Priority.CRITICAL))
    state.store.add(make_task(id="b", title="Low goal", priority=Priority.LOW))

    assert "Unknown priority" in _run(state, "/filter priority urgent")
    _run(state, "/filter priority critical")
    listing = _run(state, "/list")
    assert "Critical goal" in listing
    assert "Low goal" not in listing
    assert "Total goals: 2" in listing

    _run(state, "/filter reset")
    cal = _run(state, "/calendar 2025-09")
    assert "September 2025" in cal
    assert "Critical goal" in cal

    assert "October 2025" in _run(state, "/calendar next")


def test_import_and_export_commands(state: AppState, tmp_path: Path) -> None:
    state.store.add(make_task(id="a"))

    reply = _run(state, f"/export {tmp_path}")
    assert "Exported 1 goals" in reply
    (exported,) = tmp_path.glob("ceo-smart-tasks-*.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", "utf-8")
    assert "Error importing tasks" in _run(state, f"/import {broken}")
    assert [t.id for t in state.store] == ["a"]

    empty = tmp_path / "empty.json"
    empty.write_text("[]", "utf-8")
    assert "imported successfully" in _run(state, f"/import {empty}")
    assert len(state.store) == 0

    assert "(1 goals)" in _run(state, f"/import {exported}")
    assert [t.id for t in state.store] == ["a"]


def test_edit_through_console(state: AppState) -> None:
    original = state.store.add(make_task(id="a1b2c3d4"))

    assert "Edit SMART Goal (a1b2c3d4)" in _run(state, "/edit a1b2")
    reply = _run(state, "/set title Q3 Revenue Target v2", "/set status in-progress", "/save")

    assert reply.startswith("Updated goal a1b2c3d4")
    (task,) = state.store.all()
    assert task.id == original.id
    assert task.created_at == original.created_at
    assert task.title == "Q3 Revenue Target v2"
    assert task.status == TaskStatus.IN_PROGRESS
    assert "Missing goal id" in _run(state, "/edit")


def test_day_selects_date(state: AppState) -> None:
    state.store.add(make_task(id="a", title="Board deck", due_date="2025-10-02"))

    reply = _run(state, "/day 2025-10-02")
    assert reply.startswith("Thursday, October 2")
    assert "Board deck" in reply
    assert state.selected_date == date(2025, 10, 2)

    assert "No tasks scheduled" in _run(state, "/day 2025-10-03")
    assert "Usage" in _run(state, "/day tomorrow")
    assert state.selected_date == date(2025, 10, 3)


def test_view_switching(state: AppState) -> None:
    state.store.add(make_task(id="a", title="Board deck"))

    listing = _run(state, "/view list")
    assert state.view == "list"
    assert "Board deck" in listing
    assert "September 2025" not in listing

    cal = _run(state, "/view calendar")
    assert state.view == "calendar"
    assert "September 2025" in cal

    assert "Usage" in _run(state, "/view board")
    assert state.view == "calendar"
