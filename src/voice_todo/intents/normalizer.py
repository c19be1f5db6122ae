# src/voice_todo/intents/normalizer.py

"""
Raw model text -> IntentRecord.

Models wrap JSON in prose, in Markdown fences, or get cut off mid-object, so
the text goes through three stages before parsing:
fence stripping, brace-matched extraction, then json.loads.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime
from typing import Any

from ..core.errors import MalformedResponse
from .models import IntentRecord
from .timeparse import resolve_time_expression

logger = logging.getLogger(__name__)

_FENCED_BLOCK_RE = re.compile(r"```[\w+-]*[ \t]*\n?(.*?)\s*```", re.DOTALL)
_OPENING_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_ABSOLUTE_DATE_RE = re.compile(r"^\d{4}")

_PREVIEW_CHARS = 300


def strip_code_fence(text: str) -> str:
    """
    Return the interior of the first fenced block, if any.

    A dangling opening fence (the closing one was lost to truncation) is
    dropped so the brace scan below still sees the object.
    """
    text = text.strip()
    m = _FENCED_BLOCK_RE.search(text)
    if m:
        return m.group(1).strip()
    return _OPENING_FENCE_RE.sub("", text, count=1).strip()


def extract_json_object(text: str) -> str | None:
    """
    Find the first '{' and return the span up to its matching '}'.

    Nesting is tracked by counting braces; braces inside JSON string literals
    are skipped (escape-aware). Returns None if there is no '{' or it never
    closes.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def _coerce_task_index(raw: Any, *, original: str, extracted: str) -> int | None:
    if raw is None:
        return None
    value: int | None = None
    if isinstance(raw, bool):
        value = None
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, float) and raw.is_integer():
        value = int(raw)
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())

    # Positions are 1-based: 0 is a bad reference, not "no index".
    if value is None or value < 1:
        raise MalformedResponse(
            f"taskIndex must be a positive integer, got {raw!r}",
            original=original,
            extracted=extracted,
        )
    return value


def normalize_model_output(raw_text: str, now: datetime | date | None = None) -> IntentRecord:
    original = raw_text or ""
    unfenced = strip_code_fence(original)
    span = extract_json_object(unfenced)
    if span is None:
        # Unbalanced or missing object: hand json.loads what is left so the
        # error message shows where it broke.
        first = unfenced.find("{")
        extracted = unfenced[first:] if first != -1 else unfenced
    else:
        extracted = span

    try:
        data = json.loads(extracted)
    except json.JSONDecodeError as e:
        logger.info(
            "Model output is not valid JSON: %s original=%r extracted=%r",
            e,
            original[:_PREVIEW_CHARS],
            extracted[:_PREVIEW_CHARS],
        )
        raise MalformedResponse(
            "Failed to parse model response as JSON.\n"
            f"Original: {original[:_PREVIEW_CHARS]}\n"
            f"Extracted: {extracted[:_PREVIEW_CHARS]}\n"
            f"Error: {e}",
            original=original,
            extracted=extracted,
        ) from e

    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Model response is not a JSON object: {extracted[:_PREVIEW_CHARS]}",
            original=original,
            extracted=extracted,
        )

    data["taskIndex"] = _coerce_task_index(data.get("taskIndex"), original=original, extracted=extracted)

    scheduled = data.get("scheduledTime")
    if scheduled is not None and not isinstance(scheduled, str):
        scheduled = str(scheduled)
    if scheduled and not _ABSOLUTE_DATE_RE.match(scheduled.strip()):
        resolved = resolve_time_expression(scheduled, now)
        logger.debug("Resolved scheduledTime %r -> %r", scheduled, resolved)
        scheduled = resolved
    data["scheduledTime"] = scheduled

    return IntentRecord.from_dict(data)
