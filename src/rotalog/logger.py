"""
Structured logger bound to a ``LoggerCore``.

``Logger`` is a structlog bound logger: named fields are bound with ``bind``
or passed per call and travel through the processor chain as typed values.
The wrapped "logger" is the core itself; the last processor hands the event
dict to ``LoggerCore.dispatch``.

Panic and fatal records have side effects after they are written, even when
no sink admits them:

- ``panic`` raises ``PanicError`` carrying the message.
- ``dpanic`` raises ``PanicError`` only in development mode.
- ``fatal`` calls ``on_fatal(message)``. The default hook, ``hard_exit``,
  terminates the process with ``os._exit(1)``: ``finally`` blocks, context
  managers and ``atexit`` handlers are NOT run. Pass another hook to let the
  caller's own control flow decide how to stop.
"""

from __future__ import annotations

import os
import sys
from typing import Any, Callable, Iterable, Optional

from structlog import BoundLoggerBase
from structlog.typing import Processor

from .core import LoggerCore, default_processors, report_internal_error
from .exceptions import PanicError
from .record import CALLER_KEY, LEVEL_KEY, LOGGER_KEY, format_caller, safe_str
from .severity import Severity

FATAL_EXIT_CODE = 1

FatalHook = Callable[[str], Any]


def hard_exit(message: str) -> None:
    """Terminate immediately without unwinding; see the module docstring."""
    os._exit(FATAL_EXIT_CODE)


class Logger(BoundLoggerBase):
    """Severity-named entry points over a composed core."""

    def __init__(
        self,
        core: LoggerCore,
        processors: Optional[Iterable[Processor]] = None,
        context: Optional[dict[str, Any]] = None,
        *,
        caller_skip: int = 0,
        development: bool = False,
        on_fatal: Optional[FatalHook] = None,
    ):
        super().__init__(
            core,
            list(processors) if processors is not None else default_processors(),
            dict(context) if context is not None else {},
        )
        self._caller_skip = caller_skip
        self._development = development
        self._on_fatal = on_fatal or hard_exit

    @property
    def core(self) -> LoggerCore:
        return self._logger

    @property
    def caller_skip(self) -> int:
        return self._caller_skip

    def with_options(
        self,
        *,
        caller_skip: Optional[int] = None,
        development: Optional[bool] = None,
        on_fatal: Optional[FatalHook] = None,
    ) -> "Logger":
        return Logger(
            self._logger,
            self._processors,
            self._context,
            caller_skip=self._caller_skip if caller_skip is None else caller_skip,
            development=self._development if development is None else development,
            on_fatal=on_fatal or self._on_fatal,
        )

    def bind(self, **new_values: Any) -> "Logger":
        bound = self.with_options()
        bound._context.update(new_values)
        return bound

    def named(self, name: str) -> "Logger":
        return self.bind(**{LOGGER_KEY: name})

    def enabled(self, severity: Severity) -> bool:
        return self._logger.enabled(severity)

    # -------------------------------------------------------------------------
    # Entry points. Each calls _log directly so the caller frame is always two
    # frames above _log.
    # -------------------------------------------------------------------------

    def debug(self, event: Any = None, **fields: Any) -> None:
        self._log(Severity.DEBUG, event, fields)

    def info(self, event: Any = None, **fields: Any) -> None:
        self._log(Severity.INFO, event, fields)

    def warn(self, event: Any = None, **fields: Any) -> None:
        self._log(Severity.WARN, event, fields)

    warning = warn

    def error(self, event: Any = None, **fields: Any) -> None:
        self._log(Severity.ERROR, event, fields)

    def dpanic(self, event: Any = None, **fields: Any) -> None:
        self._log(Severity.DPANIC, event, fields)

    def panic(self, event: Any = None, **fields: Any) -> None:
        self._log(Severity.PANIC, event, fields)

    def fatal(self, event: Any = None, **fields: Any) -> None:
        self._log(Severity.FATAL, event, fields)

    def log(self, severity: Severity | int, event: Any = None, /, **fields: Any) -> None:
        self._log(Severity(severity), event, fields)

    def sync(self) -> None:
        self._logger.sync()

    def close(self) -> None:
        self._logger.close()

    def _find_caller(self) -> str:
        # 0: _find_caller, 1: _log, 2: entry point, 3: its caller.
        try:
            frame = sys._getframe(3 + self._caller_skip)
        except ValueError:
            return ""
        return format_caller(frame.f_code.co_filename, frame.f_lineno)

    def _log(self, severity: Severity, event: Any, fields: dict[str, Any]) -> None:
        if self._logger.enabled(severity):
            if CALLER_KEY not in fields:
                fields[CALLER_KEY] = self._find_caller()
            fields[LEVEL_KEY] = severity
            try:
                args, kw = self._process_event(severity.name.lower(), event, fields)
                self._logger.dispatch(*args, **kw)
            except Exception as exc:
                report_internal_error(f"dropped {severity.name} record: {exc!r}")

        if severity is Severity.PANIC or (severity is Severity.DPANIC and self._development):
            raise PanicError(safe_str(event) if event is not None else "")
        if severity is Severity.FATAL:
            self._logger.sync()
            self._on_fatal(safe_str(event) if event is not None else "")
