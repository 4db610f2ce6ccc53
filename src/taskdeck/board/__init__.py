"""
Board subsystem.

Components:
- models.py: data structures (Project, Task, Selection, Session)
- board_state.py: immutable snapshot + reducer + state container
- project_store.py: remote-backed project/task operations
"""
