# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (document store, identity provider, ids) into AppState.
"""

from __future__ import annotations

import logging

from ..auth.local_provider import LocalIdentityProvider, Prompt
from ..board.board_state import BoardStateContainer
from ..board.project_store import ProjectTaskStore
from ..config import get_settings
from ..core.ports import DocumentStore, IdentityProvider, IdGenerator
from ..core.state import AppState
from ..ids import UuidIdGenerator
from ..session.session_manager import SessionManager
from ..storage.sqlite_documents import SqliteDocumentStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.documents_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_state(
        settings,
        *,
        documents: DocumentStore,
        identity: IdentityProvider,
        ids: IdGenerator | None = None,
) -> AppState:
    """Wire an AppState from already-constructed adapters (used by tests too)."""
    board = BoardStateContainer()
    projects = ProjectTaskStore(
        board,
        documents,
        ids or UuidIdGenerator(),
        collection=str(getattr(settings, "projects_collection", "projects")),
        atomic_task_writes=bool(getattr(settings, "atomic_task_writes", False)),
    )
    sessions = SessionManager(identity, board, projects)
    return AppState(
        settings=settings,
        board=board,
        documents=documents,
        identity=identity,
        projects=projects,
        sessions=sessions,
    )


def create_initial_state(*, settings=None, prompt: Prompt | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    identity = LocalIdentityProvider(
        prompt=prompt,
        default_name=str(getattr(settings, "display_name", "") or ""),
    )
    state = build_state(
        settings,
        documents=SqliteDocumentStore(settings.documents_db_path),
        identity=identity,
    )
    logger.debug(
        "State ready collection=%s atomic_task_writes=%s",
        state.settings.projects_collection,
        state.settings.atomic_task_writes,
    )
    return state
