# tests/test_commands.py

from __future__ import annotations

from voice_todo.cli.commands import CommandRegistry, cmd_add, cmd_clear, cmd_status, cmd_tasks, format_task_lines
from voice_todo.cli.commands import registry as default_registry
from voice_todo.core.state import AppState


def test_command_registry_routes_args_and_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def handler(state, args):
        seen.append(args)
        return "ok"

    reg.register("echo", handler, "echo", aliases=["e"])

    assert reg.handle(state, "/echo a b") == "ok"
    assert reg.handle(state, "/E c") == "ok"
    assert seen == [["a", "b"], ["c"]]
    assert "/echo - echo" in reg.build_help()


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_default_registry_has_help(state: AppState) -> None:
    text = default_registry.handle(state, "/help") or ""
    for name in ("/help", "/status", "/tasks", "/add", "/clear"):
        assert name in text


def test_add_then_list(state: AppState) -> None:
    assert cmd_add(state, ["buy", "milk"]) == "Created task: buy milk"
    assert cmd_add(state, []) == "Usage: /add <task title>"
    assert len(state.tasks) == 1
    assert state.tasks[0]["priority"] == "medium"
    assert cmd_tasks(state, []) == "#1 [medium] buy milk"


def test_tasks_filters_by_category(state: AppState) -> None:
    state.tasks = [
        {"id": "task_1", "title": "Fix bug", "category": "development", "priority": "high"},
        {"id": "task_2", "title": "Audit", "category": "administrative", "scheduledTime": "2026-10-22"},
    ]
    out = cmd_tasks(state, ["admin"])
    assert "Audit" in out
    assert "Fix bug" not in out
    assert cmd_tasks(state, ["finance"]) == "No tasks."


def test_clear_and_status(state: AppState) -> None:
    cmd_add(state, ["one"])
    cmd_add(state, ["two"])
    assert cmd_clear(state, []) == "Removed 2 tasks."
    assert state.tasks == []

    status = cmd_status(state, [])
    assert "Mode: LLM" in status
    assert "model-a, model-b" in status


def test_format_task_lines() -> None:
    lines = format_task_lines(
        [
            {"title": "Fix bug", "priority": "high", "scheduledTime": "2026-10-22", "category": "development"},
            {"title": "Bare"},
        ]
    )
    assert lines == ["#1 [high] Fix bug (due 2026-10-22) {development}", "#2 Bare"]
