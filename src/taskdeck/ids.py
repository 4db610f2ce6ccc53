# src/taskdeck/ids.py

from __future__ import annotations

import uuid


class UuidIdGenerator:
    """Task ids: opaque random hex strings (uuid4)."""

    def new_id(self) -> str:
        return uuid.uuid4().hex
