# src/voice_todo/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from .task_models import Priority, Task, new_task_id, utc_now

logger = logging.getLogger(__name__)

# Fields a partial update may touch (id / created_at are immutable).
UPDATABLE_FIELDS = ("title", "scheduled_time", "priority", "category")

# Search tier 3 only considers query words longer than this.
SIGNIFICANT_WORD_MIN_LEN = 4


def _haystack(task: Task) -> tuple[str, str]:
    return task.title.lower(), (task.category or "").lower()


def _contains(task: Task, needle: str) -> bool:
    title, category = _haystack(task)
    return needle in title or needle in category


class TaskStore:
    """
    Ordered in-memory task store.

    One instance is scoped to one request cycle: hydrate it from the caller's
    snapshot, run a command against it, read `all()` / `snapshot()` back out.
    Positions (1-based indexes) follow the current list order and shift after
    every delete, so they are always resolved against the live list.

    Not thread-safe; callers sharing an instance must serialize access.
    """

    def __init__(self, tasks: Iterable[Task | Mapping[str, Any]] | None = None) -> None:
        self._tasks: list[Task] = []
        if tasks is not None:
            self.hydrate(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- lifecycle ----

    def hydrate(self, snapshot: Iterable[Task | Mapping[str, Any]]) -> None:
        """Replace all contents with `snapshot` (Task objects or wire dicts)."""
        tasks: list[Task] = []
        for item in snapshot:
            if isinstance(item, Task):
                tasks.append(item)
            elif isinstance(item, Mapping):
                tasks.append(Task.from_dict(item))
            else:
                logger.debug("Skipping snapshot entry of type %s", type(item).__name__)
        self._tasks = tasks
        logger.debug("TaskStore hydrated total=%s", len(tasks))

    def clear(self) -> None:
        self._tasks = []

    def snapshot(self) -> list[dict[str, Any]]:
        return [t.to_dict() for t in self._tasks]

    # ---- queries ----

    def all(self) -> list[Task]:
        return list(self._tasks)

    def count(self) -> int:
        return len(self._tasks)

    def by_id(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def by_index(self, index: int) -> Task | None:
        """1-based position lookup; None outside [1, count]."""
        if 1 <= index <= len(self._tasks):
            return self._tasks[index - 1]
        return None

    def by_category(self, category: str) -> list[Task]:
        needle = category.lower()
        return [t for t in self._tasks if t.category and needle in t.category.lower()]

    def by_priority(self, priority: Priority | str | None) -> list[Task]:
        level = Priority.from_raw(priority)
        if level is None:
            return []
        return [t for t in self._tasks if t.priority == level]

    def search(self, query: str) -> list[Task]:
        """
        Tiered fuzzy search over title and category.

        Tiers are tried in order and the first one with any match wins:
        1. the whole query is a substring
        2. every query word is a substring (multi-word queries only)
        3. any query word longer than 3 chars is a substring
        Matches keep store order.
        """
        q = (query or "").lower().strip()
        if not q:
            return []

        hits = [t for t in self._tasks if _contains(t, q)]
        if hits:
            return hits

        words = q.split()
        if len(words) > 1:
            hits = [t for t in self._tasks if all(_contains(t, w) for w in words)]
            if hits:
                return hits

        significant = [w for w in words if len(w) >= SIGNIFICANT_WORD_MIN_LEN]
        if not significant:
            return []
        return [t for t in self._tasks if any(_contains(t, w) for w in significant)]

    # ---- mutations ----

    def create(
        self,
        *,
        title: str | None = None,
        scheduled_time: str | None = None,
        priority: Priority | str | None = None,
        category: str | None = None,
    ) -> Task:
        now = utc_now()
        task = Task(
            id=new_task_id(),
            title=(title or "").strip() or "Untitled Task",
            created_at=now,
            updated_at=now,
            scheduled_time=scheduled_time,
            priority=Priority.from_raw(priority) or Priority.MEDIUM,
            category=category,
        )
        self._tasks.append(task)
        logger.debug("Task created id=%s title=%r", task.id, task.title)
        return task

    def update(self, task_id: str, updates: Mapping[str, Any]) -> Task | None:
        unknown = set(updates) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update task fields: {', '.join(sorted(unknown))}")

        for pos, t in enumerate(self._tasks):
            if t.id != task_id:
                continue
            changes = dict(updates)
            if "priority" in changes:
                changes["priority"] = Priority.from_raw(changes["priority"])
            updated = replace(t, **changes, updated_at=utc_now())
            self._tasks[pos] = updated
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
            return updated
        return None

    def delete_by_id(self, task_id: str) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        return len(self._tasks) < before

    def delete_by_index(self, index: int) -> bool:
        if 1 <= index <= len(self._tasks):
            removed = self._tasks.pop(index - 1)
            logger.debug("Task deleted index=%s id=%s", index, removed.id)
            return True
        return False
