# src/voice_todo/logging_setup.py

from __future__ import annotations

import logging
import logging.handlers
import sys
from collections.abc import Iterable
from pathlib import Path

LOG_FILE_NAME = "voice_todo.log"

# Chatty client libraries; their INFO/DEBUG lines drown the REPL.
NOISY_LOGGERS = ("httpx", "httpcore", "openai")

_FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while someone is typing commands:
    records from `own_prefix` loggers pass, everything else (third-party
    libraries, captured `py.warnings`) only from `foreign_level` up.
    """

    def __init__(self, own_prefix: str = "voice_todo", foreign_level: int = logging.ERROR) -> None:
        super().__init__()
        self.own_prefix = own_prefix
        self.foreign_level = foreign_level

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self.own_prefix or name.startswith(self.own_prefix + "."):
            return True
        return record.levelno >= self.foreign_level


def setup_logging(
    *,
    log_dir: str | Path = ".local/voice_todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> Path:
    """
    Configure root logging for the CLI and return the log file path.

    Console (stderr): filtered, `console_level` and up.
    File (`<log_dir>/voice_todo.log`, rotated at 1 MiB): everything from
    `file_level`, including raw model output logged at DEBUG.

    Call once, before the first log record. Existing root handlers are removed.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=1_048_576,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(file_handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    # warnings.warn(...) -> 'py.warnings' logger
    logging.captureWarnings(True)
    return log_file
