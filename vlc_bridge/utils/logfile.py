# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""File logging for one bridge invocation.

Each invocation appends a block to a single log file:

    <blank line>
    ============================================================
    [2026-10-19T10:00:00+02:00] INFO  Hayase VLC Bridge v1.1.0
    [2026-10-19T10:00:00+02:00] INFO  ===== START =====
    ...
    [2026-10-19T10:00:01+02:00] INFO  ===== END =====
    ============================================================

Verbosity 0 disables the file entirely, 1 logs INFO and above, 2 adds DEBUG
lines (masked config dump, every URL form). Errors are always echoed to
stderr, whatever the verbosity.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path


SEPARATOR = "=" * 60

# Level names as they appear in the log file
LEVEL_NAMES = {"WARNING": "WARN", "CRITICAL": "ERROR"}

_VERBOSITY_LEVELS = {1: logging.INFO, 2: logging.DEBUG}


class BridgeFormatter(logging.Formatter):
    """Format records as ``[<ISO-8601 timestamp>] <LEVEL> <message>``.

    Records logged with ``extra={"raw": True}`` are written verbatim, which is
    how separators and blank lines get into the file.
    """

    def formatTime(self, record, datefmt=None):
        return datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds")

    def format(self, record):
        if getattr(record, "raw", False):
            return record.getMessage()

        level = LEVEL_NAMES.get(record.levelname, record.levelname)
        line = f"[{self.formatTime(record)}] {level:<5} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _open_log_file(log_dir: str, log_file: str) -> logging.Handler:
    Path(log_dir).expanduser().mkdir(mode=0o700, parents=True, exist_ok=True)
    path = Path(log_file).expanduser()
    # Create with owner-only permissions before the handler opens it for append
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
    os.close(fd)

    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(BridgeFormatter())
    return handler


def setup_logging(verbosity: int, log_file: str, log_dir: str | None = None) -> int:
    """Configure file logging and return the effective verbosity.

    If the log directory or file cannot be created, file logging is disabled
    and a warning goes to stderr. Playback is never blocked by logging.
    """
    verbosity = max(0, min(int(verbosity), 2))

    if verbosity > 0:
        try:
            handler = _open_log_file(log_dir or str(Path(log_file).expanduser().parent), log_file)
        except OSError:
            print(
                f"WARN: cannot create LOG_DIR ({log_dir or log_file}). Disabling file logging.",
                file=sys.stderr,
            )
            verbosity = 0

    if verbosity == 0:
        logging.basicConfig(
            level=logging.CRITICAL + 1,
            handlers=[logging.NullHandler()],
            force=True,
        )
        return 0

    logging.basicConfig(
        level=_VERBOSITY_LEVELS[verbosity],
        handlers=[handler],
        force=True,
    )
    return verbosity


def begin_block(version: str) -> None:
    """Mark the start of one invocation in the log file."""
    logger = logging.getLogger("bridge")
    logger.info("", extra={"raw": True})
    logger.info(SEPARATOR, extra={"raw": True})
    logger.info(f"Hayase VLC Bridge v{version}")
    logger.info("===== START =====")


def finish_block() -> None:
    """Mark the end of one invocation in the log file."""
    logger = logging.getLogger("bridge")
    logger.info("===== END =====")
    logger.info(SEPARATOR, extra={"raw": True})
    logger.info("", extra={"raw": True})


def report_error(message: str, logger: logging.Logger | None = None) -> None:
    """Log an error and always print it to stderr."""
    (logger or logging.getLogger("bridge")).error(f"✗ {message}")
    print(f"ERROR: {message}", file=sys.stderr)
