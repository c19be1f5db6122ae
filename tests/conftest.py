# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from voice_todo.core.state import AppState
from voice_todo.tasks.task_store import TaskStore

from .fakes import FakeLLMClient

# Wednesday. Weekday arithmetic in the tests is relative to this.
FIXED_NOW = datetime(2026, 10, 21, 15, 30, tzinfo=UTC)


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the LLM client.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="voice-todo-test",
        log_level="DEBUG",
        console_enabled=False,
        openrouter_api_key=None,
        openrouter_base_url="https://openrouter.ai/api/v1",
        llm_models=["model-a", "model-b"],
        extra_headers={},
        llm_temperature=0.3,
        llm_max_tokens=300,
        llm_first_token_timeout=5.0,
        llm_read_timeout=5.0,
        llm_connect_timeout=1.0,
        command_timeout=0.0,
        data_dir=tmp_path,
        tasks_snapshot_path=tmp_path / "tasks.json",
        save_tasks=True,
    )


@pytest.fixture()
def store() -> TaskStore:
    """Three tasks, indices 1-3."""
    s = TaskStore()
    s.create(title="Fix bug", category="development", priority="high")
    s.create(title="Write docs", category="documentation", priority="low")
    s.create(title="Compliance review", category="administrative")
    return s


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return AppState(settings=settings, llm=FakeLLMClient(), save_tasks=True)
