# src/voice_todo/connectors/console_connector.py

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import datetime
from typing import Any

from ..cli.commands import format_task_lines
from ..cli.commands import registry as command_registry
from ..core.errors import ModelTimeout
from ..core.executor import MUTATING_INTENTS
from ..core.pipeline import error_payload, process_command
from ..core.state import AppState
from ..intents.models import Intent

logger = logging.getLogger(__name__)

# Commands that outlive the timeout keep running here; the REPL does not wait for them.
_COMMAND_POOL = ThreadPoolExecutor(max_workers=4, thread_name_prefix="voice-todo-cmd")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def apply_payload(state: AppState, payload: dict[str, Any]) -> str:
    """
    Fold one pipeline payload back into the session and render it.

    Only mutating intents replace the session's task list; read/list/filter
    payloads carry a filtered view that must not overwrite it.
    """
    if "error" in payload:
        return f"[ERROR] {payload['error']}"

    intent = Intent.from_raw((payload.get("intent") or {}).get("intent"))
    tasks = payload.get("tasks")
    if intent in MUTATING_INTENTS and isinstance(tasks, list):
        state.tasks = tasks

    lines = [str(payload.get("message", ""))]
    if intent not in MUTATING_INTENTS and isinstance(tasks, list):
        lines.extend(format_task_lines(tasks))
    return "\n".join(lines)


def _run_command(state: AppState, transcript: str) -> dict[str, Any]:
    timeout = float(getattr(state.settings, "command_timeout", 0.0) or 0.0)
    if timeout <= 0:
        return process_command(state.llm, transcript, state.tasks)

    future = _COMMAND_POOL.submit(process_command, state.llm, transcript, list(state.tasks))
    try:
        return future.result(timeout=timeout)
    except FutureTimeout:
        # The worker keeps running against its own TaskStore; its result is dropped.
        future.cancel()
        err = ModelTimeout(f"Voice command timed out after {timeout:.1f}s")
        logger.info("Command failed (ModelTimeout): %s", err.message)
        return error_payload(err)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (offline=%s).", state.offline)
    _print_ts("[CONSOLE] Say (type) a command, e.g. 'add buy milk tomorrow'. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> You: ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            cmd_response = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)
            continue

        _print_ts(apply_payload(state, _run_command(state, user_input)))

    logger.info("Console connector finished.")
