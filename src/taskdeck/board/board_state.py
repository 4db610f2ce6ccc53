# src/taskdeck/board/board_state.py

"""
Board state container.

All board state (session, project list, selection) lives in one immutable
BoardSnapshot. The only way to change it is BoardStateContainer.dispatch(action),
which runs the pure `reduce` function and notifies subscribers (the console
re-renders on every change).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from .models import Project, Selection, Session, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    session: Session | None = None
    projects: tuple[Project, ...] = field(default_factory=tuple)
    selection: Selection = field(default_factory=Selection.none)

    def find_project(self, project_id: str | None) -> Project | None:
        if project_id is None:
            return None
        for p in self.projects:
            if p.id == project_id:
                return p
        return None

    @property
    def selected_project(self) -> Project | None:
        """The selected project, or None (nothing selected, creating, or a stale id)."""
        return self.find_project(self.selection.concrete_id)


# ---- actions ----


@dataclass(frozen=True, slots=True)
class SessionStarted:
    session: Session


@dataclass(frozen=True, slots=True)
class SessionEnded:
    pass


@dataclass(frozen=True, slots=True)
class ProjectsLoaded:
    projects: tuple[Project, ...]


@dataclass(frozen=True, slots=True)
class CreationStarted:
    pass


@dataclass(frozen=True, slots=True)
class CreationCancelled:
    pass


@dataclass(frozen=True, slots=True)
class ProjectSelected:
    project_id: str


@dataclass(frozen=True, slots=True)
class ProjectCreated:
    project: Project


@dataclass(frozen=True, slots=True)
class ProjectDeleted:
    project_id: str


@dataclass(frozen=True, slots=True)
class TasksReplaced:
    project_id: str
    tasks: tuple[Task, ...]


Action = (
    SessionStarted
    | SessionEnded
    | ProjectsLoaded
    | CreationStarted
    | CreationCancelled
    | ProjectSelected
    | ProjectCreated
    | ProjectDeleted
    | TasksReplaced
)


def reduce(state: BoardSnapshot, action: Action) -> BoardSnapshot:
    if isinstance(action, SessionStarted):
        # A new identity never inherits the previous one's projects or selection.
        return BoardSnapshot(session=action.session)

    if isinstance(action, SessionEnded):
        # Signing out also forgets the previous user's projects.
        return BoardSnapshot()

    if isinstance(action, ProjectsLoaded):
        # Last fetch wins: no merge with what we held before.
        return replace(state, projects=tuple(action.projects))

    if isinstance(action, CreationStarted):
        return replace(state, selection=Selection.creating())

    if isinstance(action, CreationCancelled):
        return replace(state, selection=Selection.none())

    if isinstance(action, ProjectSelected):
        return replace(state, selection=Selection.project(action.project_id))

    if isinstance(action, ProjectCreated):
        return replace(
            state,
            projects=(*state.projects, action.project),
            selection=Selection.project(action.project.id),
        )

    if isinstance(action, ProjectDeleted):
        return replace(
            state,
            projects=tuple(p for p in state.projects if p.id != action.project_id),
            selection=Selection.none(),
        )

    if isinstance(action, TasksReplaced):
        return replace(
            state,
            projects=tuple(
                replace(p, tasks=tuple(action.tasks)) if p.id == action.project_id else p
                for p in state.projects
            ),
        )

    raise TypeError(f"unknown action: {action!r}")


Listener = Callable[[BoardSnapshot], None]


class BoardStateContainer:
    """Owns the current BoardSnapshot; mutation goes through dispatch() only."""

    def __init__(self, initial: BoardSnapshot | None = None) -> None:
        self._state = initial or BoardSnapshot()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> BoardSnapshot:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: Action) -> BoardSnapshot:
        self._state = reduce(self._state, action)
        logger.debug("dispatch %s -> projects=%d selection=%s",
                     type(action).__name__, len(self._state.projects), self._state.selection.kind.value)

        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Board listener failed (%s).", type(action).__name__)
        return self._state
