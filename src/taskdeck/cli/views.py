# src/taskdeck/cli/views.py

from __future__ import annotations

from ..board.board_state import BoardSnapshot
from ..board.models import Project, SelectionKind


def format_due(project: Project) -> str:
    if project.due_date is None:
        return "no due date"
    return project.due_date.strftime("%b %d, %Y")


def render_sidebar(snap: BoardSnapshot) -> str:
    lines = ["YOUR PROJECTS"]
    if not snap.projects:
        lines.append("  (none yet, use /new)")
        return "\n".join(lines)

    selected_id = snap.selection.concrete_id
    for i, p in enumerate(snap.projects, start=1):
        marker = ">" if p.id == selected_id else " "
        lines.append(f" {marker}{i}. {p.title}")
    return "\n".join(lines)


def render_project(project: Project) -> str:
    lines = [
        project.title,
        f"  due: {format_due(project)}",
        f"  {project.description}",
        "",
        "Tasks",
    ]
    if not project.tasks:
        lines.append("  This project does not have any tasks yet.")
    for i, t in enumerate(project.tasks, start=1):
        lines.append(f"  {i}. {t.text}  [{t.id}]")
    return "\n".join(lines)


def render_content(snap: BoardSnapshot) -> str:
    """Main pane: new-project form, the selected project, or the empty state."""
    if snap.session is None:
        return "Not signed in. Use /login."

    if snap.selection.kind == SelectionKind.CREATING:
        return (
            "New project\n"
            "  /save <title> | <description> | <YYYY-MM-DD>   or   /cancel"
        )

    project = snap.selected_project
    if project is None:
        # Nothing selected, or the selected id is gone.
        return "No project selected. Select a project or start a new one with /new."

    return render_project(project)


def render_board(snap: BoardSnapshot) -> str:
    header = f"[{snap.session.display_name}]" if snap.session else "[signed out]"
    return "\n".join([header, render_sidebar(snap), "", render_content(snap)])
