"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority) and the snapshot wire form
- task_store.py: ordered in-memory store with positional lookup and fuzzy search
"""
