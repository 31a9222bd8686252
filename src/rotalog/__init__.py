"""
rotalog: leveled, structured logging into rotating files.

Provides a process-wide logger with:
- size- or date-based file rotation with count/age retention
- an optional colored console copy of every record
- caller location on every record, call stacks on error and above
- a console-only default published on first use when ``init`` was never called

Library: structlog for the record pipeline, orjson for field encoding,
pydantic-settings for configuration.
"""

from .exceptions import InvalidPolicyError, PanicError, ReentrantInitError, RotalogError, WriterSetupError
from .facade import (
    debug,
    debugf,
    error,
    errorf,
    fatal,
    fatalf,
    get_logger,
    info,
    infof,
    init,
    init_from_settings,
    panic,
    panicf,
    sync,
    warn,
    warnf,
)
from .logger import Logger
from .rotation import BY_DATE, BY_SIZE, RollingBy
from .severity import Severity, parse_severity

__all__ = [
    "BY_DATE",
    "BY_SIZE",
    "InvalidPolicyError",
    "Logger",
    "PanicError",
    "ReentrantInitError",
    "RollingBy",
    "RotalogError",
    "Severity",
    "WriterSetupError",
    "debug",
    "debugf",
    "error",
    "errorf",
    "fatal",
    "fatalf",
    "get_logger",
    "info",
    "infof",
    "init",
    "init_from_settings",
    "panic",
    "panicf",
    "parse_severity",
    "sync",
    "warn",
    "warnf",
]
