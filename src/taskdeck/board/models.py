# src/taskdeck/board/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any


@dataclass(frozen=True, slots=True)
class Session:
    display_name: str
    user_id: str


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    text: str

    def to_fields(self) -> dict[str, str]:
        return {"id": self.id, "text": self.text}

    @classmethod
    def from_fields(cls, raw: Any) -> Task | None:
        if not isinstance(raw, dict):
            return None
        task_id = raw.get("id")
        if task_id is None:
            return None
        return cls(id=str(task_id), text=str(raw.get("text") or ""))


def tasks_from_fields(raw: Any) -> tuple[Task, ...]:
    """Decode a stored `tasks` list, dropping malformed entries."""
    if not isinstance(raw, list):
        return ()
    out: list[Task] = []
    for item in raw:
        task = Task.from_fields(item)
        if task is not None:
            out.append(task)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class ProjectDraft:
    """What the new-project form submits."""

    title: str
    description: str
    due_date: date


@dataclass(frozen=True, slots=True)
class Project:
    id: str
    title: str
    description: str
    due_date: date | None
    user_id: str
    created_at: float
    tasks: tuple[Task, ...] = field(default_factory=tuple)

    def to_fields(self) -> dict[str, Any]:
        """Document body as stored remotely (without the id)."""
        return {
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "tasks": [t.to_fields() for t in self.tasks],
            "userId": self.user_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, doc_id: str, fields: dict[str, Any]) -> Project:
        raw_due = fields.get("dueDate")
        due_date: date | None = None
        if isinstance(raw_due, str) and raw_due:
            try:
                due_date = date.fromisoformat(raw_due)
            except ValueError:
                due_date = None

        try:
            created_at = float(fields.get("createdAt") or 0.0)
        except (TypeError, ValueError):
            created_at = 0.0

        return cls(
            id=doc_id,
            title=str(fields.get("title") or ""),
            description=str(fields.get("description") or ""),
            due_date=due_date,
            user_id=str(fields.get("userId") or ""),
            created_at=created_at,
            tasks=tasks_from_fields(fields.get("tasks")),
        )


class SelectionKind(StrEnum):
    NONE = "none"
    CREATING = "creating"
    PROJECT = "project"


@dataclass(frozen=True, slots=True)
class Selection:
    """
    Which pane the board shows.

    Exactly one of: nothing selected, composing a new project, or a project id.
    The id is not validated against the project list; lookups may miss.
    """

    kind: SelectionKind = SelectionKind.NONE
    project_id: str | None = None

    @classmethod
    def none(cls) -> Selection:
        return cls(SelectionKind.NONE, None)

    @classmethod
    def creating(cls) -> Selection:
        return cls(SelectionKind.CREATING, None)

    @classmethod
    def project(cls, project_id: str) -> Selection:
        return cls(SelectionKind.PROJECT, project_id)

    @property
    def concrete_id(self) -> str | None:
        return self.project_id if self.kind == SelectionKind.PROJECT else None
