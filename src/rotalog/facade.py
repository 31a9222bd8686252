"""
Severity-named entry points over the process-wide logger.

Each severity has a plain form joining its arguments with a space
(``info("user", 42)``) and a ``%``-formatted form (``infof("user %d", 42)``).
Keyword arguments become named fields of the record.

When nothing has been initialized, the first call publishes the console-only
default logger. ``error``, ``panic`` and ``fatal`` attach the caller's stack
to the record. ``panic`` raises ``PanicError`` after logging; ``fatal`` runs
the fatal hook, which by default exits the process with status 1 without
running ``finally`` blocks or ``atexit`` handlers.
"""

from __future__ import annotations

from typing import Any, Optional

from .config import LoggingSettings
from .core import compose
from .default import current_registry
from .logger import FatalHook, Logger
from .record import LOGGER_KEY, STACK_KEY, format_message, join_args
from .rotation import RollingBy, resolve_policy
from .severity import Severity, parse_severity
from .sinks import build_sinks
from .stacktrace import capture_stack

# =============================================================================
# Initialization
# =============================================================================


def init(
    filename: str,
    level: str = "INFO",
    max_size_mb: int = 100,
    max_backups: int = 7,
    max_age_days: int = 7,
    rolling_by: RollingBy | str = RollingBy.BY_SIZE,
    console: bool = False,
    *,
    time_format: Optional[str] = None,
    separator: str = "\t",
    on_fatal: Optional[FatalHook] = None,
) -> bool:
    """
    Publish a logger writing to a rotating file and, optionally, stdout.

    Only the first initialization of the process takes effect; if a logger
    is already published (explicitly or as the lazy default) this returns
    ``False`` and changes nothing.

    Raises:
        InvalidPolicyError: the rotation parameters are invalid.
        WriterSetupError: the log file cannot be opened. Nothing is
            published in that case.
    """

    def factory() -> Logger:
        policy = resolve_policy(filename, max_size_mb, max_backups, max_age_days, rolling_by)
        sinks = build_sinks(
            policy,
            parse_severity(level),
            console,
            time_format=time_format,
            separator=separator,
        )
        return Logger(compose(sinks), caller_skip=1, on_fatal=on_fatal)

    return current_registry().install(factory)


def init_from_settings(settings: Optional[LoggingSettings] = None) -> bool:
    """``init`` with values from ``LoggingSettings`` (``ROTALOG_LOG_*``)."""
    settings = settings or LoggingSettings()
    return init(
        settings.filename,
        settings.level,
        settings.max_size_mb,
        settings.max_backups,
        settings.max_age_days,
        settings.rolling_by,
        settings.console,
        time_format=settings.time_format,
        separator=settings.separator,
    )


def get_logger(name: Optional[str] = None) -> Logger:
    """The published logger for direct use, optionally named."""
    logger = current_registry().get().with_options(caller_skip=0)
    if name:
        return logger.bind(**{LOGGER_KEY: name})
    return logger


def sync() -> None:
    """Flush every sink of the published logger."""
    current_registry().sync()


def _logger() -> Logger:
    return current_registry().get()


# =============================================================================
# Entry points
# =============================================================================


def debug(*args: Any, **fields: Any) -> None:
    _logger().log(Severity.DEBUG, join_args(args), **fields)


def debugf(template: str, *args: Any, **fields: Any) -> None:
    _logger().log(Severity.DEBUG, format_message(template, args), **fields)


def info(*args: Any, **fields: Any) -> None:
    _logger().log(Severity.INFO, join_args(args), **fields)


def infof(template: str, *args: Any, **fields: Any) -> None:
    _logger().log(Severity.INFO, format_message(template, args), **fields)


def warn(*args: Any, **fields: Any) -> None:
    _logger().log(Severity.WARN, join_args(args), **fields)


def warnf(template: str, *args: Any, **fields: Any) -> None:
    _logger().log(Severity.WARN, format_message(template, args), **fields)


def error(*args: Any, **fields: Any) -> None:
    fields[STACK_KEY] = capture_stack(skip=1)
    _logger().log(Severity.ERROR, join_args(args), **fields)


def errorf(template: str, *args: Any, **fields: Any) -> None:
    fields[STACK_KEY] = capture_stack(skip=1)
    _logger().log(Severity.ERROR, format_message(template, args), **fields)


def panic(*args: Any, **fields: Any) -> None:
    fields[STACK_KEY] = capture_stack(skip=1)
    _logger().log(Severity.PANIC, join_args(args), **fields)


def panicf(template: str, *args: Any, **fields: Any) -> None:
    fields[STACK_KEY] = capture_stack(skip=1)
    _logger().log(Severity.PANIC, format_message(template, args), **fields)


def fatal(*args: Any, **fields: Any) -> None:
    fields[STACK_KEY] = capture_stack(skip=1)
    _logger().log(Severity.FATAL, join_args(args), **fields)


def fatalf(template: str, *args: Any, **fields: Any) -> None:
    fields[STACK_KEY] = capture_stack(skip=1)
    _logger().log(Severity.FATAL, format_message(template, args), **fields)
