# src/voice_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .ports import LLMClient


@dataclass
class AppState:
    """
    Long-lived state of one console session.

    `tasks` is the caller-side copy of the task list (the "requester's storage").
    Each command hydrates a fresh TaskStore from it and writes the result back,
    so nothing in the core holds tasks between commands.
    """

    settings: Any
    llm: LLMClient
    save_tasks: bool

    tasks: list[dict[str, Any]] = field(default_factory=list)
    offline: bool = False
