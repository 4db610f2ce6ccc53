# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit a real .env.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKDECK_APP_NAME": "App display name (default: taskdeck).",
    "TASKDECK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKDECK_DATA_DIR": "Local data directory, also holds taskdeck.log (default: .local/taskdeck).",
    "TASKDECK_DOCUMENTS_DB_PATH": (
        "Document store SQLite path (default: <data_dir>/documents.sqlite3)."
    ),
    # Document store
    "TASKDECK_PROJECTS_COLLECTION": "Collection holding project documents (default: projects).",
    "TASKDECK_ATOMIC_TASK_WRITES": (
        "Make task edits conditional on the revision read (true/false, default: false). "
        "When off, concurrent edits of one project are last-write-wins."
    ),
    # Identity
    "TASKDECK_DISPLAY_NAME": "Sign in as this name without prompting (default: ask on /login).",
}
