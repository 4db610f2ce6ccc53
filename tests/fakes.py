# tests/fakes.py

from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass, field
from typing import Any

from taskdeck.board.models import Session
from taskdeck.core.ports import Document, Fields
from taskdeck.errors import (
    AuthenticationError,
    ConflictError,
    DocumentNotFoundError,
    RemoteReadError,
    RemoteWriteError,
)


@dataclass(slots=True)
class WriteCall:
    op: str  # "insert" | "update" | "delete"
    collection: str
    doc_id: str
    fields: Fields | None = None


class InMemoryDocumentStore:
    """
    Deterministic DocumentStore for unit tests.

    - ids are "doc-1", "doc-2", ... in insert order
    - every successful write is recorded in `writes`
    - fail_reads / fail_writes make the next calls raise
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, Document]] = {}
        self.writes: list[WriteCall] = []
        self.reads: list[tuple[str, str]] = []
        self.fail_reads = False
        self.fail_writes = False
        self._seq = itertools.count(1)

    # ---- test helpers ----

    def seed(self, collection: str, doc_id: str, fields: Fields, revision: int = 0) -> None:
        self.collections.setdefault(collection, {})[doc_id] = Document(
            id=doc_id, fields=copy.deepcopy(fields), revision=revision
        )

    def get_fields(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc.fields) if doc else None

    # ---- DocumentStore port ----

    async def list_all(self, collection: str) -> list[Document]:
        if self.fail_reads:
            raise RemoteReadError("list_all unavailable")
        return [copy.deepcopy(d) for d in self.collections.get(collection, {}).values()]

    async def insert(self, collection: str, fields: Fields) -> str:
        if self.fail_writes:
            raise RemoteWriteError("insert unavailable")
        doc_id = f"doc-{next(self._seq)}"
        self.seed(collection, doc_id, fields)
        self.writes.append(WriteCall("insert", collection, doc_id, copy.deepcopy(fields)))
        return doc_id

    async def read(self, collection: str, doc_id: str) -> Document | None:
        if self.fail_reads:
            raise RemoteReadError("read unavailable")
        self.reads.append((collection, doc_id))
        doc = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc else None

    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: Fields,
        *,
        expected_revision: int | None = None,
    ) -> None:
        if self.fail_writes:
            raise RemoteWriteError("update unavailable")
        doc = self.collections.get(collection, {}).get(doc_id)
        if doc is None:
            raise DocumentNotFoundError(collection, doc_id)
        if expected_revision is not None and doc.revision != expected_revision:
            raise ConflictError(collection, doc_id, expected_revision, doc.revision)
        doc.fields.update(copy.deepcopy(fields))
        doc.revision += 1
        self.writes.append(WriteCall("update", collection, doc_id, copy.deepcopy(fields)))

    async def delete(self, collection: str, doc_id: str) -> None:
        if self.fail_writes:
            raise RemoteWriteError("delete unavailable")
        # Missing documents delete successfully, like the real store.
        self.collections.get(collection, {}).pop(doc_id, None)
        self.writes.append(WriteCall("delete", collection, doc_id))


class FakeIdentityProvider:
    """Signs in as a fixed Session unless told to deny or fail."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session or Session(display_name="Ada", user_id="user-ada")
        self.deny = False
        self.fail_sign_in = False
        self.fail_sign_out = False
        self.sign_in_calls = 0
        self.sign_out_calls = 0

    async def interactive_sign_in(self) -> Session:
        self.sign_in_calls += 1
        if self.deny:
            raise AuthenticationError("popup closed by user")
        if self.fail_sign_in:
            raise ConnectionError("identity provider unreachable")
        return self.session

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        if self.fail_sign_out:
            raise ConnectionError("identity provider unreachable")


@dataclass(slots=True)
class SequentialIds:
    prefix: str = "t"
    issued: list[str] = field(default_factory=list)

    def new_id(self) -> str:
        value = f"{self.prefix}{len(self.issued) + 1}"
        self.issued.append(value)
        return value
