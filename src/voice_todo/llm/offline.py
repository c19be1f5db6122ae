# src/voice_todo/llm/offline.py

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from typing import Any

from ..core.ports import ChatMessage

_COMMAND_RE = re.compile(r'User command:\s*"(.*)"', re.DOTALL)

_ORDINALS = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
    "sixth": 6,
    "seventh": 7,
    "eighth": 8,
    "ninth": 9,
    "tenth": 10,
}
_INDEX_RE = re.compile(r"\b(?:(\d+)(?:st|nd|rd|th)?|(" + "|".join(_ORDINALS) + r"))\s+task\b")
_ABOUT_RE = re.compile(r"\btask\s+(?:about|of|for|called|named)\s+(.+?)(?:\s+(?:to|as|on|by)\s+.*)?$")
_WEEKDAYS = "monday|tuesday|wednesday|thursday|friday|saturday|sunday"
_TIME_RE = re.compile(
    r"(?:\b(?:to|on|by|for|until)\s+)?\b("
    r"today|tomorrow|next\s+(?:week|month|" + _WEEKDAYS + r")|\d+(?:st|nd|rd|th)?\s+(?:days?|weeks?|months?)|"
    + _WEEKDAYS
    + r")\b"
)
_PRIORITY_RE = re.compile(r"\b(low|medium|high)\s+priority\b")
_CATEGORY_RE = re.compile(r"\b(?:show|list|filter)\s+(?:me\s+)?(?:all\s+)?(?:my\s+)?(\w+)\s+tasks\b")
_CREATE_RE = re.compile(r"^(?:please\s+)?(?:add|create|make|new)\s+(?:a\s+)?(?:new\s+)?(?:task\s+)?(?:to\s+)?(.+)$")
_RENAME_RE = re.compile(r"\b(?:as|to)\s+\"?([^\"]+)\"?$")

_GENERIC_CATEGORY_WORDS = {"all", "my", "the", "open", "pending"}


def _transcript_from(messages: list[ChatMessage]) -> str:
    for m in reversed(messages):
        if m.get("role") != "user":
            continue
        content = m.get("content", "")
        found = _COMMAND_RE.search(content)
        return (found.group(1) if found else content).strip()
    return ""


def _task_index(text: str) -> int | None:
    m = _INDEX_RE.search(text)
    if not m:
        return None
    if m.group(1):
        return int(m.group(1))
    return _ORDINALS[m.group(2)]


def parse_offline_command(text: str) -> dict[str, Any]:
    """Best-effort keyword parse of a spoken command into the model's JSON shape."""
    lower = " ".join(text.lower().strip().rstrip(".!?").split())
    out: dict[str, Any] = {}

    if re.match(r"^(?:delete|remove|drop|cancel)\b", lower):
        out["intent"] = "delete"
    elif re.match(r"^(?:update|move|push|postpone|reschedule|change|rename|set|mark)\b", lower):
        out["intent"] = "update"
    elif re.match(r"^(?:add|create|make|new|please add)\b", lower):
        out["intent"] = "create"
    elif re.match(r"^(?:show|list|filter|find|what)\b", lower):
        out["intent"] = "list"
    else:
        out["intent"] = "read"

    m = _PRIORITY_RE.search(lower)
    if m:
        out["priority"] = m.group(1)

    m = _TIME_RE.search(lower)
    if m:
        out["scheduledTime"] = m.group(1)

    if out["intent"] == "create":
        m = _CREATE_RE.match(lower)
        title = m.group(1) if m else lower
        if m and "scheduledTime" in out:
            title = _TIME_RE.split(title)[0]
        title = _PRIORITY_RE.sub("", title).strip(" ,")
        if title:
            out["taskTitle"] = title[:1].upper() + title[1:]
        return out

    if out["intent"] in ("update", "delete"):
        index = _task_index(lower)
        if index is not None:
            out["taskIndex"] = index
        else:
            m = _ABOUT_RE.search(lower)
            if m:
                out["searchQuery"] = m.group(1).strip()
        if out["intent"] == "update" and lower.startswith("rename"):
            m = _RENAME_RE.search(lower)
            if m:
                out["taskTitle"] = m.group(1).strip()
        return out

    m = _CATEGORY_RE.search(lower)
    if m and m.group(1) not in _GENERIC_CATEGORY_WORDS and m.group(1) not in ("low", "medium", "high"):
        out["intent"] = "filter"
        out["category"] = m.group(1)
    return out


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Understands a handful of command shapes ("add X", "delete the 2nd task",
    "move the task about X to tomorrow", "show admin tasks") and answers with
    the same JSON an instructed model would, so the rest of the pipeline runs
    unchanged.
    """

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        text = _transcript_from(messages)
        yield json.dumps(parse_offline_command(text), ensure_ascii=False)
