from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_LOGGING_CONFIGURED = False


def setup_logging(filename: str | Path | None = None, *, debug: bool = False) -> structlog.BoundLogger:
    """Set up structured logging for the byteweaver package.

    The first call configures structlog. Later calls re-route the stdlib
    handlers when a log file is given; a debug-only call just lowers the
    threshold and keeps the current handlers.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        debug: Lower the threshold from INFO to DEBUG.

    Returns:
        A structlog logger instance configured for the byteweaver package.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED and debug and not filename:
        logging.getLogger().setLevel(logging.DEBUG)
    elif not _LOGGING_CONFIGURED or filename:
        handlers: list[logging.Handler] = []
        if filename:
            handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
        else:
            handlers.append(logging.StreamHandler(sys.stderr))

        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            handlers=handlers,
            format="%(message)s",
            force=_LOGGING_CONFIGURED,
        )
    if not _LOGGING_CONFIGURED:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            # stdlib levels decide what is emitted, see basicConfig above
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_CONFIGURED = True

    return structlog.get_logger("byteweaver")


logger = setup_logging()
