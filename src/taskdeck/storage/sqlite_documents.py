# src/taskdeck/storage/sqlite_documents.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sqlite3
import uuid
from pathlib import Path
from typing import Any

from ..core.ports import Document, Fields
from ..errors import ConflictError, DocumentNotFoundError, RemoteReadError, RemoteWriteError

logger = logging.getLogger(__name__)


class SqliteDocumentStore:
    """
    SQLite-backed document store.

    One table holds every collection:
      (collection, id) -> fields (JSON object), revision (int)

    - ids are assigned by the store on insert (uuid4 hex)
    - update merges top-level fields and bumps revision
    - update of a missing document raises DocumentNotFoundError
    - delete of a missing document is a no-op (idempotent)

    Thread-safety:
    - each call opens its own SQLite connection
    - the async API runs each call on a worker thread (asyncio.to_thread)
    """

    def __init__(self, db_path: str | Path = "documents.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self._count_sync()
        except Exception:
            total = -1
        logger.info("SqliteDocumentStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    id TEXT NOT NULL,
                    fields TEXT NOT NULL DEFAULT '{}',
                    revision INTEGER NOT NULL DEFAULT 0,
                    PRIMARY KEY (collection, id)
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _fields_to_str(fields: Fields) -> str:
        return json.dumps(fields, ensure_ascii=False)

    @staticmethod
    def _str_to_fields(s: str | None) -> dict[str, Any]:
        if not s:
            return {}
        try:
            val = json.loads(s)
            return val if isinstance(val, dict) else {}
        except ValueError:
            logger.warning("Corrupt document body; treating as empty.")
            return {}

    def _row_to_document(self, row: sqlite3.Row) -> Document:
        return Document(
            id=str(row["id"]),
            fields=self._str_to_fields(row["fields"]),
            revision=int(row["revision"] or 0),
        )

    # ---- sync implementation ----

    def _count_sync(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM documents").fetchone()
            return int(n)
        finally:
            conn.close()

    def _list_all_sync(self, collection: str) -> list[Document]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute(
                    "SELECT id, fields, revision FROM documents WHERE collection = ? ORDER BY rowid ASC",
                    (collection,),
                ).fetchall()
                return [self._row_to_document(r) for r in rows]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise RemoteReadError(f"list_all({collection}) failed: {e}") from e

    def _read_sync(self, collection: str, doc_id: str) -> Document | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT id, fields, revision FROM documents WHERE collection = ? AND id = ?",
                    (collection, doc_id),
                ).fetchone()
                return self._row_to_document(row) if row else None
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise RemoteReadError(f"read({collection}/{doc_id}) failed: {e}") from e

    def _insert_sync(self, collection: str, fields: Fields) -> str:
        doc_id = uuid.uuid4().hex
        try:
            body = self._fields_to_str(fields)
        except (TypeError, ValueError) as e:
            raise RemoteWriteError(f"fields are not JSON-serializable: {e}") from e

        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    "INSERT INTO documents(collection, id, fields, revision) VALUES (?, ?, ?, 0)",
                    (collection, doc_id, body),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise RemoteWriteError(f"insert({collection}) failed: {e}") from e

        logger.debug("Document inserted %s/%s", collection, doc_id)
        return doc_id

    def _update_sync(
            self,
            collection: str,
            doc_id: str,
            fields: Fields,
            expected_revision: int | None,
    ) -> None:
        try:
            conn = self._get_conn()
            try:
                # Read + write inside one IMMEDIATE transaction so the revision check holds.
                conn.execute("BEGIN IMMEDIATE")
                row = conn.execute(
                    "SELECT fields, revision FROM documents WHERE collection = ? AND id = ?",
                    (collection, doc_id),
                ).fetchone()
                if row is None:
                    conn.rollback()
                    raise DocumentNotFoundError(collection, doc_id)

                revision = int(row["revision"] or 0)
                if expected_revision is not None and revision != int(expected_revision):
                    conn.rollback()
                    raise ConflictError(collection, doc_id, int(expected_revision), revision)

                merged = self._str_to_fields(row["fields"])
                merged.update(fields)
                try:
                    body = self._fields_to_str(merged)
                except (TypeError, ValueError) as e:
                    conn.rollback()
                    raise RemoteWriteError(f"fields are not JSON-serializable: {e}") from e

                conn.execute(
                    "UPDATE documents SET fields = ?, revision = ? WHERE collection = ? AND id = ?",
                    (body, revision + 1, collection, doc_id),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise RemoteWriteError(f"update({collection}/{doc_id}) failed: {e}") from e

        logger.debug("Document updated %s/%s rev=%s", collection, doc_id, revision + 1)

    def _delete_sync(self, collection: str, doc_id: str) -> None:
        try:
            conn = self._get_conn()
            try:
                cur = conn.execute(
                    "DELETE FROM documents WHERE collection = ? AND id = ?",
                    (collection, doc_id),
                )
                conn.commit()
                deleted = cur.rowcount
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise RemoteWriteError(f"delete({collection}/{doc_id}) failed: {e}") from e

        if deleted != 1:
            # Already gone (e.g. removed by another client): deleting is idempotent.
            logger.debug("Document %s/%s already absent", collection, doc_id)
            return
        logger.debug("Document deleted %s/%s", collection, doc_id)

    # ---- public API (DocumentStore port) ----

    async def list_all(self, collection: str) -> list[Document]:
        return await asyncio.to_thread(self._list_all_sync, collection)

    async def insert(self, collection: str, fields: Fields) -> str:
        return await asyncio.to_thread(self._insert_sync, collection, dict(fields))

    async def read(self, collection: str, doc_id: str) -> Document | None:
        return await asyncio.to_thread(self._read_sync, collection, doc_id)

    async def update(
            self,
            collection: str,
            doc_id: str,
            fields: Fields,
            *,
            expected_revision: int | None = None,
    ) -> None:
        await asyncio.to_thread(self._update_sync, collection, doc_id, dict(fields), expected_revision)

    async def delete(self, collection: str, doc_id: str) -> None:
        await asyncio.to_thread(self._delete_sync, collection, doc_id)
