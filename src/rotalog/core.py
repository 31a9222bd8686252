"""
Core composition and the structlog processor chain.
"""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Any, Iterable

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from .record import LEVEL_KEY, TIMESTAMP_KEY
from .severity import Severity
from .sinks import Sink


def report_internal_error(message: str) -> None:
    """Last-resort diagnostics; the library never logs through itself."""
    try:
        sys.stderr.write(f"rotalog: {message}\n")
        sys.stderr.flush()
    except Exception:
        pass


# =============================================================================
# Logger Core
# =============================================================================


class LoggerCore:
    """
    Fan-out over an ordered, immutable tuple of sinks.

    A record goes to every sink whose minimum severity admits it, in sink
    order. Sinks are isolated: a failing write is reported on stderr and the
    remaining sinks still receive the record.
    """

    __slots__ = ("_sinks",)

    def __init__(self, sinks: Iterable[Sink]):
        self._sinks: tuple[Sink, ...] = tuple(sinks)

    @property
    def sinks(self) -> tuple[Sink, ...]:
        return self._sinks

    def enabled(self, severity: Severity) -> bool:
        return any(sink.enabled(severity) for sink in self._sinks)

    def dispatch(self, event_dict: EventDict) -> int:
        """Write the record to every admitting sink; return how many took it."""
        severity = event_dict.get(LEVEL_KEY, Severity.INFO)
        delivered = 0
        for sink in self._sinks:
            if not sink.enabled(severity):
                continue
            try:
                sink.write(event_dict)
            except Exception as exc:
                report_internal_error(f"write to {type(sink.writer).__name__} failed: {exc!r}")
            else:
                delivered += 1
        return delivered

    def sync(self) -> None:
        for sink in self._sinks:
            try:
                sink.writer.sync()
            except Exception as exc:
                report_internal_error(f"sync of {type(sink.writer).__name__} failed: {exc!r}")

    def close(self) -> None:
        for sink in self._sinks:
            try:
                sink.writer.close()
            except Exception as exc:
                report_internal_error(f"close of {type(sink.writer).__name__} failed: {exc!r}")


def compose(sinks: Iterable[Sink]) -> LoggerCore:
    return LoggerCore(sinks)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp the record with the local, timezone-aware time."""
    event_dict.setdefault(TIMESTAMP_KEY, datetime.now().astimezone())
    return event_dict


def core_dispatcher(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> Any:
    """Final processor: hand the whole event dict to ``LoggerCore.dispatch``."""
    return (event_dict,), {}


def default_processors() -> list[Processor]:
    return [
        add_timestamp,
        structlog.processors.format_exc_info,
        core_dispatcher,
    ]
