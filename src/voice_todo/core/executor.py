# src/voice_todo/core/executor.py

"""
IntentRecord + TaskStore -> CommandResult.

The executor holds no state: everything it changes lives in the store it is
handed. Each intent has its own precedence order for the optional fields,
written out below as ordered tuples. The first field that is present decides
the branch; later fields are not consulted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..intents.models import Intent, IntentRecord
from ..tasks.task_models import Priority, Task
from ..tasks.task_store import TaskStore
from .errors import MissingField, TaskNotFound, UnknownIntent

logger = logging.getLogger(__name__)

# (record field, store lookup, message template)
_Lookup = tuple[str, Callable[[TaskStore, Any], list[Task]], str]

_BY_CATEGORY: _Lookup = (
    "category",
    lambda store, v: store.by_category(v),
    'Found {n} tasks in category "{v}"',
)
_BY_PRIORITY: _Lookup = (
    "priority",
    lambda store, v: store.by_priority(v),
    "Found {n} tasks with {v} priority",
)
_BY_SEARCH: _Lookup = (
    "search_query",
    lambda store, v: store.search(v),
    'Found {n} tasks matching "{v}"',
)

READ_PRECEDENCE: tuple[_Lookup, ...] = (_BY_CATEGORY, _BY_PRIORITY)
FILTER_PRECEDENCE: tuple[_Lookup, ...] = (_BY_CATEGORY, _BY_SEARCH, _BY_PRIORITY)

UPDATE_TARGET_PRECEDENCE: tuple[str, ...] = ("task_index", "search_query", "task_id")
DELETE_TARGET_PRECEDENCE: tuple[str, ...] = ("task_index", "search_query")

# Intents whose result carries the full, changed task list.
MUTATING_INTENTS = frozenset({Intent.CREATE, Intent.UPDATE, Intent.DELETE})

# record field -> Task field, applied only when present
UPDATE_FIELDS: tuple[tuple[str, str], ...] = (
    ("scheduled_time", "scheduled_time"),
    ("priority", "priority"),
    ("task_title", "title"),
    ("category", "category"),
)


@dataclass(slots=True)
class CommandResult:
    intent: IntentRecord
    message: str
    tasks: list[Task] | None = None
    task: Task | None = None
    deleted: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": True, "intent": self.intent.to_dict()}
        if self.task is not None:
            out["task"] = self.task.to_dict()
        if self.tasks is not None:
            out["tasks"] = [t.to_dict() for t in self.tasks]
        if self.deleted is not None:
            out["deleted"] = self.deleted
        out["message"] = self.message
        return out


def _first_present(record: IntentRecord, names: tuple[str, ...]) -> str | None:
    for name in names:
        if getattr(record, name) is not None:
            return name
    return None


def _available_titles(store: TaskStore) -> tuple[list[str], str]:
    tasks = store.all()
    titles = [t.title for t in tasks]
    listing = ", ".join(f'#{i}: "{t}"' for i, t in enumerate(titles, start=1))
    return titles, listing


def _task_not_found(store: TaskStore, prefix: str) -> TaskNotFound:
    titles, listing = _available_titles(store)
    return TaskNotFound(f"{prefix}. Available tasks: {listing}", available_tasks=titles)


def _run_lookups(record: IntentRecord, store: TaskStore, lookups: tuple[_Lookup, ...]) -> CommandResult:
    for name, lookup, template in lookups:
        value = getattr(record, name)
        if value is None:
            continue
        tasks = lookup(store, value)
        return CommandResult(
            intent=record,
            tasks=tasks,
            message=template.format(n=len(tasks), v=value),
        )
    tasks = store.all()
    return CommandResult(intent=record, tasks=tasks, message=f"Found {len(tasks)} tasks")


def _create(record: IntentRecord, store: TaskStore) -> CommandResult:
    if record.task_title is None:
        raise MissingField("Task title is required for create command", fields=("taskTitle",))

    priority = Priority.from_raw(record.priority)
    if record.priority is not None and priority is None:
        logger.info("Ignoring unknown priority %r on create", record.priority)

    task = store.create(
        title=record.task_title,
        scheduled_time=record.scheduled_time,
        priority=priority,
        category=record.category,
    )
    return CommandResult(
        intent=record,
        task=task,
        tasks=store.all(),
        message=f"Created task: {task.title}",
    )


def _resolve_update_target(record: IntentRecord, store: TaskStore) -> Task:
    ref = _first_present(record, UPDATE_TARGET_PRECEDENCE)

    if ref == "task_index":
        task = store.by_index(record.task_index)  # type: ignore[arg-type]
    elif ref == "search_query":
        matches = store.search(record.search_query)  # type: ignore[arg-type]
        if not matches:
            raise _task_not_found(store, f'Task not found matching "{record.search_query}"')
        # Several matches: the earliest in store order wins.
        task = matches[0]
    elif ref == "task_id":
        task = store.by_id(record.task_id)  # type: ignore[arg-type]
    else:
        task = None

    if task is None:
        raise _task_not_found(store, "Task not found")
    return task


def _update(record: IntentRecord, store: TaskStore) -> CommandResult:
    target = _resolve_update_target(record, store)

    updates: dict[str, Any] = {}
    for src, dst in UPDATE_FIELDS:
        value = getattr(record, src)
        if value is None:
            continue
        if src == "priority":
            value = Priority.from_raw(value)
            if value is None:
                logger.info("Ignoring unknown priority %r on update", record.priority)
                continue
        updates[dst] = value

    updated = store.update(target.id, updates)
    if updated is None:
        raise _task_not_found(store, "Task not found")

    return CommandResult(
        intent=record,
        task=updated,
        tasks=store.all(),
        message=f"Updated task: {updated.title}",
    )


def _delete(record: IntentRecord, store: TaskStore) -> CommandResult:
    ref = _first_present(record, DELETE_TARGET_PRECEDENCE)

    if ref == "task_index":
        index = record.task_index
        deleted = store.delete_by_index(index)  # type: ignore[arg-type]
        message = f"Deleted task at index {index}" if deleted else f"Task at index {index} not found"
    elif ref == "search_query":
        matches = store.search(record.search_query)  # type: ignore[arg-type]
        if matches:
            # Several matches: only the earliest in store order is removed.
            target = matches[0]
            deleted = store.delete_by_id(target.id)
            message = f"Deleted task: {target.title}" if deleted else "Failed to delete task"
        else:
            # Understood but nothing matched: a no-op, not an error.
            deleted = False
            message = f'No tasks found matching "{record.search_query}"'
    else:
        raise MissingField(
            "Task identifier (index or search query) is required for delete command",
            fields=("taskIndex", "searchQuery"),
        )

    return CommandResult(intent=record, deleted=deleted, tasks=store.all(), message=message)


_HANDLERS: dict[Intent, Callable[[IntentRecord, TaskStore], CommandResult]] = {
    Intent.CREATE: _create,
    Intent.READ: lambda record, store: _run_lookups(record, store, READ_PRECEDENCE),
    Intent.LIST: lambda record, store: _run_lookups(record, store, READ_PRECEDENCE),
    Intent.FILTER: lambda record, store: _run_lookups(record, store, FILTER_PRECEDENCE),
    Intent.UPDATE: _update,
    Intent.DELETE: _delete,
}


def execute_intent(record: IntentRecord, store: TaskStore) -> CommandResult:
    intent = Intent.from_raw(record.intent)
    if intent is None:
        raise UnknownIntent(record.intent)

    result = _HANDLERS[intent](record, store)
    logger.debug("Executed intent=%s message=%r", intent.value, result.message)
    return result
