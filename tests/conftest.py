# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.cli.bootstrap import build_state
from taskdeck.core.state import AppState

from .fakes import FakeIdentityProvider, InMemoryDocumentStore, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        documents_db_path=tmp_path / "documents.sqlite3",
        projects_collection="projects",
        atomic_task_writes=False,
        display_name="",
    )


@pytest.fixture()
def documents() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture()
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    documents: InMemoryDocumentStore,
    identity: FakeIdentityProvider,
    ids: SequentialIds,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    The board container, project store and session manager are the real ones:
    their behaviour is what we want to test.
    """
    return build_state(settings, documents=documents, identity=identity, ids=ids)
