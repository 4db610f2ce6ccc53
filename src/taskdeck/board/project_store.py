# src/taskdeck/board/project_store.py

from __future__ import annotations

"""
Project/Task store.

Mirrors the remote "projects" collection into the board state container.

Every mutation follows the same order:
- check preconditions (session, concrete selection) -> SKIPPED if missing,
- perform the remote call(s),
- only on success dispatch the matching action to the local state.

Remote failures are caught here, logged, and reported as FAILED; local state is
never touched on failure, so there is nothing to roll back.

Task edits are read-modify-write on the whole embedded `tasks` list. Without
atomic_task_writes two concurrent edits of the same project race and the last
write wins. With atomic_task_writes the write is conditional on the revision
seen by the read; a mismatch is reported as CONFLICT and nothing is retried.
"""

import logging
import time
from enum import StrEnum

from ..core.ports import DocumentStore, IdGenerator
from ..errors import ConflictError
from .board_state import (
    BoardStateContainer,
    CreationCancelled,
    CreationStarted,
    ProjectCreated,
    ProjectDeleted,
    ProjectSelected,
    ProjectsLoaded,
    TasksReplaced,
)
from .models import Project, ProjectDraft, Task, tasks_from_fields

logger = logging.getLogger(__name__)


class OpStatus(StrEnum):
    APPLIED = "applied"
    SKIPPED = "skipped"  # precondition missing (no session / no selection)
    NOT_FOUND = "not_found"  # remote document vanished; silently abandoned
    FAILED = "failed"  # remote call raised; already logged
    CONFLICT = "conflict"  # conditional write lost the race (atomic mode only)


class ProjectTaskStore:
    def __init__(
            self,
            board: BoardStateContainer,
            documents: DocumentStore,
            ids: IdGenerator,
            *,
            collection: str = "projects",
            atomic_task_writes: bool = False,
    ) -> None:
        self._board = board
        self._documents = documents
        self._ids = ids
        self._collection = collection
        self._atomic = bool(atomic_task_writes)

    def selected_project(self) -> Project | None:
        return self._board.state.selected_project

    # ---- selection (local only) ----

    def start_add_project(self) -> None:
        self._board.dispatch(CreationStarted())

    def cancel_add_project(self) -> None:
        self._board.dispatch(CreationCancelled())

    def select_project(self, project_id: str) -> None:
        # Not validated: an unknown id simply resolves to "no match" on lookup.
        self._board.dispatch(ProjectSelected(project_id))

    # ---- remote-backed operations ----

    async def fetch_projects_for_user(self, user_id: str) -> OpStatus:
        """
        Replace the local project list with every project owned by user_id.

        The whole collection is scanned and filtered here, so the cost grows
        with the collection, not with the user's own project count.
        """
        try:
            docs = await self._documents.list_all(self._collection)
        except Exception:
            logger.exception("list_all(%s) failed user=%s", self._collection, user_id)
            return OpStatus.FAILED

        projects = tuple(
            Project.from_document(d.id, d.fields)
            for d in docs
            if d.fields.get("userId") == user_id
        )
        self._board.dispatch(ProjectsLoaded(projects))
        logger.info("Loaded %d/%d projects for user=%s", len(projects), len(docs), user_id)
        return OpStatus.APPLIED

    async def refresh(self) -> OpStatus:
        session = self._board.state.session
        if session is None:
            return OpStatus.SKIPPED
        return await self.fetch_projects_for_user(session.user_id)

    async def create_project(self, draft: ProjectDraft) -> OpStatus:
        session = self._board.state.session
        if session is None:
            logger.debug("create_project skipped: no session")
            return OpStatus.SKIPPED

        pending = Project(
            id="",
            title=draft.title,
            description=draft.description,
            due_date=draft.due_date,
            user_id=session.user_id,
            created_at=time.time(),
            tasks=(),
        )

        try:
            project_id = await self._documents.insert(self._collection, pending.to_fields())
        except Exception:
            logger.exception("insert(%s) failed user=%s", self._collection, session.user_id)
            return OpStatus.FAILED

        project = Project(
            id=project_id,
            title=pending.title,
            description=pending.description,
            due_date=pending.due_date,
            user_id=pending.user_id,
            created_at=pending.created_at,
            tasks=(),
        )
        self._board.dispatch(ProjectCreated(project))
        logger.info("Project created id=%s user=%s", project_id, session.user_id)
        return OpStatus.APPLIED

    async def delete_project(self) -> OpStatus:
        snap = self._board.state
        project_id = snap.selection.concrete_id
        if snap.session is None or project_id is None:
            logger.debug("delete_project skipped: session=%s selection=%s",
                         snap.session is not None, snap.selection.kind.value)
            return OpStatus.SKIPPED

        try:
            await self._documents.delete(self._collection, project_id)
        except Exception:
            logger.exception("delete(%s/%s) failed", self._collection, project_id)
            return OpStatus.FAILED

        self._board.dispatch(ProjectDeleted(project_id))
        logger.info("Project deleted id=%s", project_id)
        return OpStatus.APPLIED

    async def add_task(self, text: str) -> OpStatus:
        """Append a task to the selected project. Empty text is accepted here."""
        # The id is drawn only once the document has been read.
        return await self._rewrite_tasks(
            "add_task",
            lambda current: (*current, Task(id=self._ids.new_id(), text=text)),
        )

    async def delete_task(self, task_id: str) -> OpStatus:
        return await self._rewrite_tasks(
            "delete_task",
            lambda current: tuple(t for t in current if t.id != task_id),
        )

    async def _rewrite_tasks(self, op: str, compute) -> OpStatus:
        snap = self._board.state
        project_id = snap.selection.concrete_id
        if snap.session is None or project_id is None:
            logger.debug("%s skipped: no session or no selection", op)
            return OpStatus.SKIPPED

        # Always read fresh from the remote; the local mirror may be stale.
        try:
            doc = await self._documents.read(self._collection, project_id)
        except Exception:
            logger.exception("%s: read(%s/%s) failed", op, self._collection, project_id)
            return OpStatus.FAILED

        if doc is None:
            logger.debug("%s: project %s no longer exists; skipping", op, project_id)
            return OpStatus.NOT_FOUND

        current = tasks_from_fields(doc.fields.get("tasks"))
        updated: tuple[Task, ...] = tuple(compute(current))

        expected = doc.revision if self._atomic else None
        try:
            await self._documents.update(
                self._collection,
                project_id,
                {"tasks": [t.to_fields() for t in updated]},
                expected_revision=expected,
            )
        except ConflictError as e:
            logger.warning("%s: project %s changed concurrently (%s)", op, project_id, e)
            return OpStatus.CONFLICT
        except Exception:
            logger.exception("%s: update(%s/%s) failed", op, self._collection, project_id)
            return OpStatus.FAILED

        self._board.dispatch(TasksReplaced(project_id, updated))
        logger.debug("%s: project %s now has %d tasks", op, project_id, len(updated))
        return OpStatus.APPLIED
