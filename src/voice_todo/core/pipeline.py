# src/voice_todo/core/pipeline.py

"""
Command pipeline: transcript -> model -> IntentRecord -> executor -> payload.

This module is the request boundary. Each call builds its own TaskStore from
the caller's snapshot, so concurrent commands never share mutable state; the
caller persists `payload["tasks"]` if it wants durability.

Every VoiceTodoError is turned into an error payload here. Nothing a model or
a user says should crash the process.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from ..intents.models import IntentRecord
from ..intents.normalizer import normalize_model_output
from ..intents.prompt import SYSTEM_PROMPT, build_command_prompt
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from .errors import InvalidRequest, ModelTimeout, VoiceTodoError
from .executor import execute_intent
from .ports import LLMClient

logger = logging.getLogger(__name__)

Snapshot = Iterable[Task | Mapping[str, Any]]


def interpret_command(
    llm: LLMClient,
    transcript: str,
    now: datetime | date | None = None,
) -> IntentRecord:
    """Ask the model about one transcript and normalize its answer."""
    raw = ""
    for piece in llm.stream_chat(
        [{"role": "user", "content": build_command_prompt(transcript)}],
        SYSTEM_PROMPT,
    ):
        raw += piece

    logger.debug("Model raw output=%r", raw[:2000])
    record = normalize_model_output(raw, now)
    logger.info("Interpreted command intent=%s", record.intent)
    return record


def error_payload(err: VoiceTodoError) -> dict[str, Any]:
    payload = err.to_payload()
    payload["status"] = err.status
    return payload


def process_command(
    llm: LLMClient,
    transcript: Any,
    snapshot: Snapshot | None = None,
    now: datetime | date | None = None,
) -> dict[str, Any]:
    """
    Run one voice command end to end.

    Returns the success payload ({success, intent, task?, tasks?, deleted?,
    message}) or an error payload ({error, availableTasks?, status}).
    """
    try:
        if not isinstance(transcript, str) or not transcript.strip():
            raise InvalidRequest("Transcript is required")

        store = TaskStore(snapshot)
        record = interpret_command(llm, transcript, now)
        result = execute_intent(record, store)
        return result.to_dict()

    except VoiceTodoError as e:
        logger.info("Command failed (%s): %s", e.__class__.__name__, e.message)
        return error_payload(e)

    except Exception:
        logger.exception("Unexpected error while processing voice command.")
        return {"error": "Failed to process voice command", "status": 500}


async def process_command_async(
    llm: LLMClient,
    transcript: Any,
    snapshot: Snapshot | None = None,
    now: datetime | date | None = None,
    *,
    timeout: float | None = None,
) -> dict[str, Any]:
    """
    Same contract as process_command, for async callers.

    The model call blocks on network I/O, so the whole pipeline runs in a
    worker thread. `timeout` (seconds) bounds the wall-clock time; on expiry
    the worker is abandoned and a ModelTimeout payload is returned.
    """
    # Materialize the snapshot here: the worker must not iterate a caller-owned generator.
    tasks = list(snapshot) if snapshot is not None else None
    call = asyncio.to_thread(process_command, llm, transcript, tasks, now)
    if not timeout or timeout <= 0:
        return await call
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError:
        err = ModelTimeout(f"Voice command timed out after {timeout:.1f}s")
        logger.info("Command failed (ModelTimeout): %s", err.message)
        return error_payload(err)
