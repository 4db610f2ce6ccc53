# src/taskdeck/cli/forms.py

"""
Input-layer validation.

Blank input is rejected here, before anything reaches the project store
(the store itself accepts any text).
"""

from __future__ import annotations

from datetime import date

from ..board.models import ProjectDraft


class InvalidInput(ValueError):
    pass


INVALID_INPUT_HINT = "Invalid input: looks like at least one value is not filled."


def parse_task_text(raw: str) -> str:
    text = (raw or "").strip()
    if not text:
        raise InvalidInput(f"{INVALID_INPUT_HINT} Please fill the task you want to do.")
    return text


def parse_project_form(raw: str) -> ProjectDraft:
    """
    Parse "<title> | <description> | <YYYY-MM-DD>".

    All three parts are required; the due date must be an ISO date.
    """
    parts = [p.strip() for p in (raw or "").split("|")]
    if len(parts) != 3 or not all(parts):
        raise InvalidInput(
            f"{INVALID_INPUT_HINT} Usage: /save <title> | <description> | <YYYY-MM-DD>"
        )

    title, description, due_raw = parts
    try:
        due_date = date.fromisoformat(due_raw)
    except ValueError as e:
        raise InvalidInput(f"Invalid due date: {due_raw!r} (expected YYYY-MM-DD).") from e

    return ProjectDraft(title=title, description=description, due_date=due_date)
