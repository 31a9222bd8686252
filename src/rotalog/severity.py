"""
Ordered log severities and level-name parsing.
"""

from __future__ import annotations

import logging
from enum import IntEnum


class Severity(IntEnum):
    """Total order of record severities.

    Values line up with the standard library where a counterpart exists so
    that ``Severity.WARN > logging.INFO`` reads naturally.
    """

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    DPANIC = 50
    PANIC = 60
    FATAL = 70

    @classmethod
    def parse(cls, name: str) -> "Severity":
        return parse_severity(name)

    @classmethod
    def from_stdlib(cls, levelno: int) -> "Severity":
        """Map a standard-library ``levelno`` onto the closest severity."""
        if levelno <= logging.DEBUG:
            return cls.DEBUG
        if levelno <= logging.INFO:
            return cls.INFO
        if levelno <= logging.WARNING:
            return cls.WARN
        return cls.ERROR

    @property
    def label(self) -> str:
        return self.name


def parse_severity(name: str) -> Severity:
    """
    Resolve a level name, case-insensitively.

    The empty string is INFO so that an unset configuration value is usable.
    Any other unknown name prints a notice to stdout and falls back to INFO.
    """
    key = (name or "").strip().upper()
    if not key:
        return Severity.INFO
    try:
        return Severity[key]
    except KeyError:
        print(f"invalid log level {name!r}, using INFO")
        return Severity.INFO
