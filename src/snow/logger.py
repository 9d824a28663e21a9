"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from .config import LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL) -> structlog.typing.FilteringBoundLogger:
    """Configure structlog with console output on stderr."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger()


logger: structlog.typing.FilteringBoundLogger = setup_logging()


def install_exception_hooks() -> None:
    """Route uncaught exceptions through structlog."""

    def handle_exception(exc_type, exc_value, exc_traceback):  # type: ignore[no-untyped-def]
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception
