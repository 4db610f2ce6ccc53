# src/taskdeck/cli/commands.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Awaitable, Callable

from ..board.models import SelectionKind
from ..board.project_store import OpStatus
from ..core.state import AppState
from .forms import InvalidInput, parse_project_form, parse_task_text
from .views import render_board, render_sidebar

CommandEmitter = Callable[[str], None]
# (state, whitespace-split args, raw text after the command name, emit)
CommandHandler = Callable[[AppState, list[str], str, CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /new, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        body = line[1:].lstrip()
        parts = body.split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        # Free text (task text, project form) keeps its inner whitespace.
        rest = body[len(parts[0]):].strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args, rest, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _status_reply(status: OpStatus, done: str) -> str:
    if status == OpStatus.APPLIED:
        return done
    if status == OpStatus.SKIPPED:
        return "Nothing to do (sign in and select a project first)."
    if status == OpStatus.NOT_FOUND:
        return "Nothing changed."
    # FAILED / CONFLICT: details are in the log.
    return f"Not saved ({status.value})."


def _resolve_index(ref: str, ids: list[str]) -> str:
    """'2' -> ids[1] when in range; anything else is taken as a literal id."""
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(ids):
            return ids[n - 1]
    return ref


async def cmd_help(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    snap = state.board.state
    who = f"{snap.session.display_name} ({snap.session.user_id})" if snap.session else "signed out"
    atomic = "ON" if getattr(state.settings, "atomic_task_writes", False) else "OFF"
    return (
        "Status:\n"
        f"  User: {who}\n"
        f"  Projects loaded: {len(snap.projects)}\n"
        f"  Collection: {getattr(state.settings, 'projects_collection', 'projects')}\n"
        f"  Atomic task writes: {atomic}"
    )


async def cmd_login(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    if state.sessions.session is not None:
        return f"Already signed in as {state.sessions.session.display_name}."
    session = await state.sessions.sign_in()
    if session is None:
        return "Sign-in did not complete."
    return f"Signed in as {session.display_name}."


async def cmd_logout(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    if state.sessions.session is None:
        return "Not signed in."
    ok = await state.sessions.sign_out()
    return "Signed out." if ok else "Sign-out failed."


async def cmd_refresh(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    status = await state.projects.refresh()
    return _status_reply(status, f"Loaded {len(state.board.state.projects)} projects.")


async def cmd_projects(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    return render_sidebar(state.board.state)


async def cmd_show(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    return render_board(state.board.state)


async def cmd_new(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    if state.board.state.session is None:
        return "Sign in first (/login)."
    state.projects.start_add_project()
    return "Composing a new project."


async def cmd_save(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    """
    /save <title> | <description> | <YYYY-MM-DD>
    Only valid while composing a new project (/new).
    """
    if state.board.state.selection.kind != SelectionKind.CREATING:
        return "Start a new project with /new first."
    try:
        draft = parse_project_form(rest)
    except InvalidInput as e:
        return str(e)

    status = await state.projects.create_project(draft)
    return _status_reply(status, f"Project '{draft.title}' created.")


async def cmd_cancel(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    state.projects.cancel_add_project()
    return "Cancelled."


async def cmd_select(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /select <n|project-id>"
    ids = [p.id for p in state.board.state.projects]
    project_id = _resolve_index(args[0], ids)
    logger.debug("select ref=%s -> project_id=%s", args[0], project_id)
    state.projects.select_project(project_id)
    return "Selected."


async def cmd_delete(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    status = await state.projects.delete_project()
    return _status_reply(status, "Project deleted.")


async def cmd_task(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    try:
        text = parse_task_text(rest)
    except InvalidInput as e:
        return str(e)

    status = await state.projects.add_task(text)
    return _status_reply(status, "Task added.")


async def cmd_untask(state: AppState, args: list[str], rest: str, emit: CommandEmitter | None = None) -> str:
    """
    /untask <n>         -> remove the n-th task of the selected project
    /untask <task-id>   -> remove by id
    """
    if not args:
        return "Usage: /untask <n|task-id>"

    project = state.projects.selected_project()
    ids = [t.id for t in project.tasks] if project else []
    task_id = _resolve_index(args[0], ids)

    if emit:
        with contextlib.suppress(Exception):
            emit(f"Removing task {task_id}...")

    status = await state.projects.delete_task(task_id)
    return _status_reply(status, "Task removed.")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current user and store settings.")
registry.register("login", cmd_login, help_text="Sign in and load your projects.")
registry.register("logout", cmd_logout, help_text="Sign out and clear the board.")
registry.register("refresh", cmd_refresh, help_text="Reload your projects from the store.")
registry.register("projects", cmd_projects, help_text="List your projects.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show the board.")
registry.register("new", cmd_new, help_text="Start composing a new project.")
registry.register(
    "save", cmd_save, help_text="Save the new project: /save <title> | <description> | <YYYY-MM-DD>."
)
registry.register("cancel", cmd_cancel, help_text="Cancel the new project.")
registry.register("select", cmd_select, help_text="Select a project: /select <n|id>.")
registry.register("delete", cmd_delete, help_text="Delete the selected project.")
registry.register("task", cmd_task, help_text="Add a task to the selected project: /task <text>.")
registry.register("untask", cmd_untask, help_text="Remove a task: /untask <n|task-id>.")
