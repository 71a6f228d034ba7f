"""
Logging utilities: console setup for the CLI and a queue handler that lets
a front end show engine progress and warnings as status messages.
"""
from __future__ import annotations

import logging
import sys
from queue import Empty, Queue
from typing import List, NamedTuple, Optional, TextIO

PACKAGE_LOGGER = "page_assembler"


class StatusMessage(NamedTuple):
    """One line for a status bar: text, severity and the emitting component."""

    text: str
    severity: str
    component: str = ""


def severity_for(levelno: int) -> str:
    """Collapse logging levels into the three severities a status bar shows."""
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warning"
    return "info"


class StatusLogHandler(logging.Handler):
    """
    A logging handler that turns package log records into StatusMessages.

    Used to surface progress ("Exported report_split_2.pdf") and recoverable
    failures ("Skipping scan.pdf: ...") to whatever front end drives the
    engine. The component is the logger name relative to the package, e.g.
    "export.exporter".
    """

    def __init__(self, status_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.status_queue = status_queue

    def emit(self, record: logging.LogRecord) -> None:
        try:
            component = record.name
            if component.startswith(PACKAGE_LOGGER + "."):
                component = component[len(PACKAGE_LOGGER) + 1:]
            self.status_queue.put(StatusMessage(record.getMessage(), severity_for(record.levelno), component))
        except Exception:
            self.handleError(record)


def attach_status_handler(
    status_queue: Queue,
    logger_name: Optional[str] = PACKAGE_LOGGER,
    level: int = logging.INFO,
) -> StatusLogHandler:
    """
    Attach a StatusLogHandler to the package logger (or another logger).

    Returns:
        The attached handler (for later removal).
    """
    logger = logging.getLogger(logger_name)
    handler = StatusLogHandler(status_queue, level)
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    return handler


def detach_status_handler(handler: StatusLogHandler, logger_name: Optional[str] = PACKAGE_LOGGER) -> None:
    logging.getLogger(logger_name).removeHandler(handler)


def drain_status(status_queue: Queue) -> List[StatusMessage]:
    """Return every queued StatusMessage without blocking."""
    messages = []
    while True:
        try:
            messages.append(status_queue.get_nowait())
        except Empty:
            return messages


def configure_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Console logging for the command line.

    Args:
        verbose: DEBUG instead of INFO
        stream: Defaults to stderr

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s" if verbose else "%(message)s"))
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers = [h for h in logger.handlers if not getattr(h, "_page_assembler_console", False)]
    handler._page_assembler_console = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler
