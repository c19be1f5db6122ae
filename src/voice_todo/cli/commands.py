# src/voice_todo/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..core.state import AppState
from ..tasks.task_store import TaskStore

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."
        return handler(state, parts[1:])

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task_lines(tasks: Iterable[Mapping[str, Any]]) -> list[str]:
    """One line per task in wire form: `#1 [high] Title (due 2026-10-20) {category}`."""
    lines: list[str] = []
    for i, t in enumerate(tasks, start=1):
        prio = f" [{t['priority']}]" if t.get("priority") else ""
        due = f" (due {t['scheduledTime']})" if t.get("scheduledTime") else ""
        cat = f" {{{t['category']}}}" if t.get("category") else ""
        lines.append(f"#{i}{prio} {t.get('title', '')}{due}{cat}")
    return lines


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    mode = "OFFLINE (keyword parser)" if state.offline else "LLM"
    models = ", ".join(list(getattr(state.settings, "llm_models", []) or []))
    saving = "ON" if state.save_tasks else "OFF"
    return (
        "Status:\n"
        f"  Mode: {mode}\n"
        f"  Tasks: {len(state.tasks)} (saving {saving})\n"
        f"  Models (priority -> fallback): {models}"
    )


def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks            -> list all tasks
    /tasks <category> -> tasks whose category contains <category>
    """
    if args:
        store = TaskStore(state.tasks)
        tasks = [t.to_dict() for t in store.by_category(" ".join(args))]
    else:
        tasks = state.tasks
    if not tasks:
        return "No tasks."
    return "\n".join(format_task_lines(tasks))


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> -> create a task directly, without the model."""
    title = " ".join(args).strip()
    if not title:
        return "Usage: /add <task title>"
    store = TaskStore(state.tasks)
    task = store.create(title=title)
    state.tasks = store.snapshot()
    logger.debug("Task added via /add id=%s", task.id)
    return f"Created task: {task.title}"


def cmd_clear(state: AppState, args: list[str]) -> str:
    n = len(state.tasks)
    state.tasks = []
    return f"Removed {n} tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current mode, task count and models.")
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks [category].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task without the model: /add <title>.")
registry.register("clear", cmd_clear, help_text="Remove all tasks.")
