"""
Line encoders and color utilities.

Both styles render ``<time> <LEVEL> [<logger>] <caller> <message> [<fields>]``
joined by a separator, then the stack trace and formatted exception on the
following lines. The production style keeps the level plain and renders
extra fields as compact JSON; the development style colors the level and
renders fields as ``key=value`` pairs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, ClassVar, Literal, Optional

import orjson
from structlog.typing import EventDict

from .record import (
    CALLER_KEY,
    EXCEPTION_KEY,
    LEVEL_KEY,
    LOGGER_KEY,
    MESSAGE_KEY,
    RESERVED_KEYS,
    STACK_KEY,
    TIMESTAMP_KEY,
    safe_str,
)
from .severity import Severity
from .stacktrace import format_stack

EncoderStyle = Literal["production", "development"]

# =============================================================================
# Colors
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "magenta": "\033[35m",
    "blue": "\033[34m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "key": "\033[36m",
}

LEVEL_COLORS = {
    Severity.DEBUG: "magenta",
    Severity.INFO: "blue",
    Severity.WARN: "yellow",
    Severity.ERROR: "red",
    Severity.DPANIC: "red",
    Severity.PANIC: "red",
    Severity.FATAL: "red",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def orjson_dumps(v: Any, *, default: Any = safe_str) -> str:
    """Compact JSON; values orjson cannot serialize go through ``default``."""
    return orjson.dumps(v, default=default, option=orjson.OPT_NON_STR_KEYS | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Encoders
# =============================================================================


class LineEncoder(ABC):
    """Renders an event dict into one (possibly multi-line) text record."""

    style: ClassVar[EncoderStyle]

    def __init__(self, *, time_format: Optional[str] = None, separator: str = "\t"):
        self.time_format = time_format
        self.separator = separator

    def format_time(self, value: Any) -> str:
        if value is None:
            value = datetime.now().astimezone()
        if isinstance(value, datetime):
            if self.time_format:
                return value.strftime(self.time_format)
            return value.isoformat(timespec="seconds")
        return safe_str(value)

    def format_level(self, level: Any, colorize_level: bool) -> str:
        try:
            severity = Severity(level)
        except ValueError:
            return safe_str(level).upper()
        if colorize_level:
            return colorize(severity.label, LEVEL_COLORS[severity])
        return severity.label

    @abstractmethod
    def format_fields(self, fields: dict[str, Any], colorize_fields: bool) -> str:
        ...

    def encode(self, event_dict: EventDict, *, colorize: bool = False) -> str:
        parts = [
            self.format_time(event_dict.get(TIMESTAMP_KEY)),
            self.format_level(event_dict.get(LEVEL_KEY, Severity.INFO), colorize),
        ]
        if event_dict.get(LOGGER_KEY):
            parts.append(safe_str(event_dict[LOGGER_KEY]))
        if event_dict.get(CALLER_KEY):
            parts.append(safe_str(event_dict[CALLER_KEY]))
        parts.append(safe_str(event_dict.get(MESSAGE_KEY, "")))

        fields = {k: v for k, v in event_dict.items() if k not in RESERVED_KEYS}
        if fields:
            parts.append(self.format_fields(fields, colorize))

        line = self.separator.join(parts)
        if event_dict.get(STACK_KEY):
            line += "\n" + format_stack(event_dict[STACK_KEY])
        if event_dict.get(EXCEPTION_KEY):
            line += "\n" + safe_str(event_dict[EXCEPTION_KEY]).rstrip("\n")
        return line + "\n"


class ProductionEncoder(LineEncoder):
    """Plain capital levels, JSON fields. Meant for files."""

    style = "production"

    def format_fields(self, fields: dict[str, Any], colorize_fields: bool) -> str:
        try:
            return orjson_dumps(fields)
        except TypeError:
            return safe_str(fields)


class DevelopmentEncoder(LineEncoder):
    """Colored capital levels, ``key=value`` fields. Meant for terminals."""

    style = "development"

    def format_fields(self, fields: dict[str, Any], colorize_fields: bool) -> str:
        pairs = []
        for key, value in fields.items():
            key_text = colorize(key, "key") if colorize_fields else key
            pairs.append(f"{key_text}={safe_str(value)}")
        return " ".join(pairs)


def encoder_for(style: EncoderStyle, *, time_format: Optional[str] = None, separator: str = "\t") -> LineEncoder:
    if style == "development":
        return DevelopmentEncoder(time_format=time_format, separator=separator)
    return ProductionEncoder(time_format=time_format, separator=separator)
