# src/voice_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the model client into AppState (OpenRouter, or the offline fallback),
- persists the task snapshot as JSON between sessions (optional).
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..config import get_settings
from ..core.errors import LLMConfigurationError
from ..core.ports import LLMClient
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_snapshot_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    llm_client: LLMClient
    offline = False
    try:
        llm_client = OpenRouterLLMClient(settings)
    except LLMConfigurationError as e:
        # Fallback for demos / local runs without external services.
        logger.info("Using offline model client: %s", e)
        llm_client = OfflineLLMClient()
        offline = True

    return AppState(
        settings=settings,
        llm=llm_client,
        save_tasks=bool(getattr(settings, "save_tasks", True)),
        offline=offline,
    )


def load_task_snapshot(state: AppState) -> list[dict[str, Any]]:
    if not state.save_tasks:
        return []
    raw_path = getattr(state.settings, "tasks_snapshot_path", None)
    if not raw_path:
        return []
    path = Path(raw_path)
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, ValueError):
        logger.exception("Failed to load task snapshot from %s", path)
        return []

    if isinstance(data, dict):
        data = data.get("tasks", [])
    if not isinstance(data, list):
        logger.warning("Ignoring task snapshot %s: expected a list", path)
        return []

    out = [t for t in data if isinstance(t, dict)]
    logger.info("Loaded task snapshot: %d tasks from %s", len(out), path)
    return out


def save_task_snapshot(state: AppState) -> None:
    if not state.save_tasks:
        return
    raw_path = getattr(state.settings, "tasks_snapshot_path", None)
    if not raw_path:
        return
    path = Path(raw_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(state.tasks, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(OSError):
            os.chmod(path, 0o600)
        logger.info("Saved task snapshot: %d tasks to %s", len(state.tasks), path)
    except OSError:
        logger.exception("Failed to save task snapshot to %s", path)
