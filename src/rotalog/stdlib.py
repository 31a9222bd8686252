"""
Bridge from the standard ``logging`` module into the published logger.
"""

from __future__ import annotations

import logging

from .default import current_registry
from .record import CALLER_KEY, LOGGER_KEY, format_caller
from .severity import Severity


class RedirectStdLibHandler(logging.Handler):
    """
    Forward standard-library records to the published rotalog logger.

    The record keeps its own source location as caller and its logger name,
    so third-party output lands in the same sinks with the same layout.
    Records emitted while this thread is building the published logger are
    dropped.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "rotalog" or record.name.startswith("rotalog."):
            return
        registry = current_registry()
        if registry.initializing:
            return
        try:
            message = record.getMessage()
            fields = {
                CALLER_KEY: format_caller(record.pathname, record.lineno),
                LOGGER_KEY: record.name,
            }
            if record.exc_info:
                fields["exc_info"] = record.exc_info
            registry.get().log(Severity.from_stdlib(record.levelno), message, **fields)
        except Exception:
            self.handleError(record)


def redirect_stdlib_logging(level: int | str = logging.INFO) -> RedirectStdLibHandler:
    """Make ``RedirectStdLibHandler`` the only handler of the root logger."""
    handler = RedirectStdLibHandler()
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    return handler
