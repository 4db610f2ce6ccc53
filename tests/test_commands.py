# tests/test_commands.py

from __future__ import annotations

import pytest

from taskdeck.board.models import SelectionKind
from taskdeck.cli.commands import CommandRegistry, registry
from taskdeck.cli.forms import InvalidInput, parse_project_form, parse_task_text
from taskdeck.cli.views import render_board


@pytest.mark.asyncio
async def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called: list[list[str]] = []
    raw: list[str] = []

    async def handler(state, args, rest, emit):
        called.append(args)
        raw.append(rest)
        if emit is not None:
            emit("note")
        return "ok"

    reg.register("a", handler, "a", aliases=["alpha"])

    assert await reg.handle(state, "/a x y") == "ok"
    assert await reg.handle(state, "/ALPHA", emit=lambda _: None) == "ok"
    assert called == [["x", "y"], []]
    assert raw == ["x y", ""]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_free_text_keeps_inner_whitespace(state, documents) -> None:
    await registry.handle(state, "/login")
    await registry.handle(state, "/new")
    assert await registry.handle(state, "/save  Big   Garden | plant  tulips | 2026-04-01") == (
        "Project 'Big   Garden' created."
    )

    assert await registry.handle(state, "/task buy  two   apples ") == "Task added."

    project = state.projects.selected_project()
    assert project.description == "plant  tulips"
    assert [t.text for t in project.tasks] == ["buy  two   apples"]
    assert documents.writes[-1].fields == {"tasks": [{"id": "t1", "text": "buy  two   apples"}]}


def test_forms_reject_blank_input() -> None:
    with pytest.raises(InvalidInput):
        parse_task_text("   ")
    with pytest.raises(InvalidInput):
        parse_project_form("title | | 2026-01-01")
    with pytest.raises(InvalidInput):
        parse_project_form("title | desc | tomorrow")

    draft = parse_project_form(" Garden | plant tulips | 2026-04-01 ")
    assert draft.title == "Garden"
    assert draft.due_date.isoformat() == "2026-04-01"


@pytest.mark.asyncio
async def test_blank_task_is_rejected_before_the_store(state, documents) -> None:
    await registry.handle(state, "/login")
    await registry.handle(state, "/new")
    await registry.handle(state, "/save Chores | weekly | 2026-11-01")

    reply = await registry.handle(state, "/task    ")
    assert reply is not None and reply.startswith("Invalid input")
    writes_before = len(documents.writes)

    assert await registry.handle(state, "/task buy milk") == "Task added."

    project = state.projects.selected_project()
    assert [t.text for t in project.tasks] == ["buy milk"]
    assert len(documents.writes) == writes_before + 1


@pytest.mark.asyncio
async def test_console_flow(state, documents) -> None:
    assert "Sign in first" in await registry.handle(state, "/new")

    assert (await registry.handle(state, "/login")).startswith("Signed in as")
    await registry.handle(state, "/new")
    assert state.board.state.selection.kind == SelectionKind.CREATING
    assert "New project" in render_board(state.board.state)

    assert await registry.handle(state, "/save Garden | plant | 2026-04-01") == "Project 'Garden' created."
    await registry.handle(state, "/task water")
    await registry.handle(state, "/task weed")

    board = render_board(state.board.state)
    assert "Garden" in board and "water" in board and "weed" in board

    assert await registry.handle(state, "/untask 1") == "Task removed."
    assert [t.text for t in state.projects.selected_project().tasks] == ["weed"]

    await registry.handle(state, "/cancel")
    assert "No project selected" in render_board(state.board.state)
    await registry.handle(state, "/select 1")
    assert state.projects.selected_project().title == "Garden"

    assert await registry.handle(state, "/delete") == "Project deleted."
    assert state.board.state.projects == ()

    assert await registry.handle(state, "/logout") == "Signed out."
    assert "Not signed in" in render_board(state.board.state)


@pytest.mark.asyncio
async def test_failed_write_is_reported_by_status_only(state, documents) -> None:
    await registry.handle(state, "/login")
    await registry.handle(state, "/new")
    documents.fail_writes = True

    assert await registry.handle(state, "/save A | b | 2026-01-01") == "Not saved (failed)."
    assert state.board.state.projects == ()


@pytest.mark.asyncio
async def test_refresh_picks_up_remote_projects(state, documents, identity) -> None:
    assert "Nothing to do" in await registry.handle(state, "/refresh")

    await registry.handle(state, "/login")
    documents.seed(
        "projects",
        "added-elsewhere",
        {"title": "Remote", "description": "", "dueDate": "2026-02-02", "tasks": [],
         "userId": identity.session.user_id, "createdAt": 5.0},
    )

    assert await registry.handle(state, "/refresh") == "Loaded 1 projects."
    assert [p.title for p in state.board.state.projects] == ["Remote"]
