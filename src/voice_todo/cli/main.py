# src/voice_todo/cli/main.py

"""
`voice-todo` entrypoint.

Order matters: logging first, then AppState (which may log the offline
fallback), then the saved task snapshot. The snapshot is written back even
when the REPL exits through Ctrl-C or an exception.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, load_task_snapshot, save_task_snapshot
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    console_level = logging.getLevelName(str(settings.log_level).upper())
    if not isinstance(console_level, int):
        console_level = logging.INFO
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)
    logger.info("Starting %s (log file: %s)", settings.app_name, log_file)

    state = create_initial_state(settings=settings)
    state.tasks = load_task_snapshot(state)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled (VOICE_TODO_CONSOLE_ENABLED=false); nothing to run.")
    finally:
        save_task_snapshot(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
