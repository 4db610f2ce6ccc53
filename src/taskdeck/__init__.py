"""taskdeck: a console project/task board kept in sync with a document store."""

__version__ = "0.1.0"
