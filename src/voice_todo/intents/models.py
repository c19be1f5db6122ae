# src/voice_todo/intents/models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any


class Intent(StrEnum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"
    FILTER = "filter"

    @classmethod
    def from_raw(cls, raw: Any) -> Intent | None:
        if raw is None:
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


# python attribute -> key used by the model / result payload
WIRE_KEYS: dict[str, str] = {
    "intent": "intent",
    "task_title": "taskTitle",
    "task_id": "taskId",
    "task_index": "taskIndex",
    "category": "category",
    "priority": "priority",
    "scheduled_time": "scheduledTime",
    "search_query": "searchQuery",
}


def _opt_str(raw: Any) -> str | None:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


@dataclass(frozen=True, slots=True)
class IntentRecord:
    """
    One parsed voice command.

    Optional fields are None when the model did not mention them; their
    presence drives how the executor resolves the target task(s).
    `intent` is carried verbatim so the executor can name unknown values.
    """

    intent: str | None
    task_title: str | None = None
    task_id: str | None = None
    task_index: int | None = None
    category: str | None = None
    priority: str | None = None
    scheduled_time: str | None = None
    search_query: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IntentRecord:
        """Build from model JSON. Blank strings count as absent; task_index must already be an int."""
        index = data.get("taskIndex")
        return cls(
            intent=_opt_str(data.get("intent")),
            task_title=_opt_str(data.get("taskTitle")),
            task_id=_opt_str(data.get("taskId")),
            task_index=index if isinstance(index, int) else None,
            category=_opt_str(data.get("category")),
            priority=_opt_str(data.get("priority")),
            scheduled_time=_opt_str(data.get("scheduledTime")),
            search_query=_opt_str(data.get("searchQuery")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                out[WIRE_KEYS[f.name]] = value
        return out
