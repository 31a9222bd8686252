"""
Record keys and best-effort message building.

A record is the structlog event dict handed to the core. Building the
message must never raise back into the caller, so every conversion here
degrades to a printable placeholder instead.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Sequence

TIMESTAMP_KEY = "timestamp"
LEVEL_KEY = "level"
CALLER_KEY = "caller"
MESSAGE_KEY = "event"
STACK_KEY = "stack"
EXCEPTION_KEY = "exception"
LOGGER_KEY = "logger"

RESERVED_KEYS = frozenset(
    {TIMESTAMP_KEY, LEVEL_KEY, CALLER_KEY, MESSAGE_KEY, STACK_KEY, EXCEPTION_KEY, LOGGER_KEY}
)

ARG_SEPARATOR = " "


def safe_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def join_args(args: Sequence[Any], separator: str = ARG_SEPARATOR) -> str:
    return separator.join(safe_str(arg) for arg in args)


def format_message(template: str, args: Sequence[Any]) -> str:
    """
    ``%``-format ``template`` with ``args``.

    Without arguments the template is returned untouched. A single mapping
    argument feeds ``%(name)s`` placeholders. On a mismatch the template is
    followed by the joined arguments.
    """
    template = safe_str(template)
    if not args:
        return template
    values: Any = tuple(args)
    if len(args) == 1 and isinstance(args[0], Mapping):
        values = args[0]
    try:
        return template % values
    except Exception:
        return f"{template} {join_args(args)}"


def format_caller(pathname: str, lineno: int) -> str:
    """Shorten a path to ``<parent dir>/<file>:<line>``."""
    directory, filename = os.path.split(pathname)
    parent = os.path.basename(directory)
    short = f"{parent}/{filename}" if parent else filename
    return f"{short}:{lineno}"
