# src/taskdeck/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..board.board_state import BoardStateContainer
from ..board.project_store import ProjectTaskStore
from ..session.session_manager import SessionManager
from .ports import DocumentStore, IdentityProvider


@dataclass
class AppState:
    """
    Top-level application wiring.

    Board data (session, projects, selection) is NOT stored here directly:
    it lives in `board` and changes only through its actions.
    """

    # Settings-like object (Settings in prod, SimpleNamespace in tests).
    settings: Any

    board: BoardStateContainer
    documents: DocumentStore
    identity: IdentityProvider
    projects: ProjectTaskStore
    sessions: SessionManager
