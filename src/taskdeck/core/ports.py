# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the identity provider and the document store swappable and makes testing easier.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from ..board.models import Session

Fields = dict[str, Any]
# JSON-compatible document body: {"title": "...", "tasks": [...], ...}.


@dataclass(slots=True)
class Document:
    id: str
    fields: Fields = field(default_factory=dict)
    # Bumped by the store on every update; used for conditional writes.
    revision: int = 0


class IdentityProvider(Protocol):
    """
    Interactive sign-in against an external identity provider.

    interactive_sign_in raises AuthenticationError on denial/cancel;
    other exceptions mean the provider itself failed.
    """

    async def interactive_sign_in(self) -> Session: ...
    async def sign_out(self) -> None: ...


class DocumentStore(Protocol):
    """
    Hosted document database, seen as a set of named collections.

    No query pushdown: callers list a whole collection and filter locally.
    """

    async def list_all(self, collection: str) -> list[Document]: ...
    async def insert(self, collection: str, fields: Fields) -> str: ...
    async def read(self, collection: str, doc_id: str) -> Document | None: ...

    async def update(
            self,
            collection: str,
            doc_id: str,
            fields: Fields,
            *,
            expected_revision: int | None = None,
    ) -> None: ...

    async def delete(self, collection: str, doc_id: str) -> None: ...


class IdGenerator(Protocol):
    def new_id(self) -> str: ...
