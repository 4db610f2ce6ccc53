# src/taskdeck/errors.py

"""
Error taxonomy.

Remote calls raise these; the project store and the session manager catch them
at the call site, log, and report an OpStatus instead of propagating.
"""

from __future__ import annotations


class TaskdeckError(Exception):
    """Base class for all taskdeck errors."""


class AuthenticationError(TaskdeckError):
    """Sign-in was denied, cancelled, or the identity provider failed."""


class DocumentStoreError(TaskdeckError):
    """Any failure reported by a document store."""


class RemoteReadError(DocumentStoreError):
    pass


class RemoteWriteError(DocumentStoreError):
    pass


class DocumentNotFoundError(DocumentStoreError):
    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"document {collection}/{doc_id} does not exist")
        self.collection = collection
        self.doc_id = doc_id


class ConflictError(RemoteWriteError):
    """A conditional update saw a different revision than expected."""

    def __init__(self, collection: str, doc_id: str, expected: int, actual: int) -> None:
        super().__init__(
            f"document {collection}/{doc_id} is at revision {actual}, expected {expected}"
        )
        self.collection = collection
        self.doc_id = doc_id
        self.expected = expected
        self.actual = actual
