# src/voice_todo/tasks/task_models.py

from __future__ import annotations

import secrets
import string
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

_ID_ALPHABET = string.ascii_lowercase + string.digits


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_raw(cls, raw: Any) -> Priority | None:
        """Lenient parse: unknown or empty values map to None."""
        if raw is None:
            return None
        if isinstance(raw, Priority):
            return raw
        s = str(raw).strip().lower()
        if not s:
            return None
        try:
            return cls(s)
        except ValueError:
            return None


def new_task_id() -> str:
    """Opaque id: task_<epoch ms>_<9 random chars>."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"task_{int(time.time() * 1000)}_{suffix}"


def utc_now() -> datetime:
    return datetime.now(UTC)


def _format_ts(dt: datetime) -> str:
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_ts(raw: Any, default: datetime) -> datetime:
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=UTC)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return datetime.fromtimestamp(float(raw), tz=UTC)
    if isinstance(raw, str) and raw.strip():
        try:
            dt = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            return default
        return dt if dt.tzinfo else dt.replace(tzinfo=UTC)
    return default


def _opt_str(raw: Any) -> str | None:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    created_at: datetime
    updated_at: datetime

    scheduled_time: str | None = None
    priority: Priority | None = Priority.MEDIUM
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire form (camelCase keys, ISO timestamps)."""
        out: dict[str, Any] = {"id": self.id, "title": self.title}
        if self.scheduled_time is not None:
            out["scheduledTime"] = self.scheduled_time
        if self.priority is not None:
            out["priority"] = self.priority.value
        if self.category is not None:
            out["category"] = self.category
        out["createdAt"] = _format_ts(self.created_at)
        out["updatedAt"] = _format_ts(self.updated_at)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Task:
        """
        Build a Task from a caller-supplied snapshot entry.

        Snapshots come from outside the process (browser storage, a JSON file),
        so missing or odd values are tolerated rather than rejected.
        """
        now = utc_now()
        created_at = _parse_ts(data.get("createdAt", data.get("created_at")), now)
        updated_at = _parse_ts(data.get("updatedAt", data.get("updated_at")), created_at)
        scheduled = data.get("scheduledTime", data.get("scheduled_time"))
        return cls(
            id=_opt_str(data.get("id")) or new_task_id(),
            title=_opt_str(data.get("title")) or "Untitled Task",
            created_at=created_at,
            updated_at=updated_at,
            scheduled_time=_opt_str(scheduled),
            priority=Priority.from_raw(data.get("priority")) or Priority.MEDIUM,
            category=_opt_str(data.get("category")),
        )
