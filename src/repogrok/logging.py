from __future__ import annotations

import logging
import sys
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

LOGGER_NAME = "repogrok"

_LOGGING_CONFIGURED = False


def setup_logging(
    filename: str | Path | None = None,
    level: str = "INFO",
    *,
    force: bool = False,
) -> structlog.BoundLogger:
    """Set up structured JSON logging for the repogrok package.

    Importing this module configures stderr logging once. Pass `force=True`
    to redirect to a log file (or change the level) after that first setup.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        level: Minimum level name, e.g. "INFO" or "DEBUG".
        force: Reconfigure even if logging was already set up.

    Returns:
        A structlog logger bound to the "repogrok" name.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if force or not _LOGGING_CONFIGURED:
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO

        handler: logging.Handler
        if filename:
            handler = logging.FileHandler(str(filename), encoding="utf-8")
        else:
            handler = logging.StreamHandler(sys.stderr)

        logging.basicConfig(
            level=numeric_level,
            handlers=[handler],
            format="%(message)s",
            force=force,
        )
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )
        _LOGGING_CONFIGURED = True

    return structlog.get_logger(LOGGER_NAME)


logger = setup_logging()


@contextmanager
def log_to_file(filename: str | Path, level: str = "INFO") -> Iterator[None]:
    """Copy the calling thread's repogrok events to a file for the duration of the block.

    The handler is attached to the "repogrok" stdlib logger only and removed on
    exit, so handlers installed by the host application are left alone and
    concurrent runs in other threads write to their own files.

    Args:
        filename: Path of the log file, opened in append mode.
        level: Minimum level name written to the file.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    owner = threading.get_ident()
    handler = logging.FileHandler(str(filename), encoding="utf-8")
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(lambda record: record.thread == owner)

    target = logging.getLogger(LOGGER_NAME)
    target.addHandler(handler)
    try:
        yield
    finally:
        target.removeHandler(handler)
        handler.close()
