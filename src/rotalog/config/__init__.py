"""
rotalog configuration.

Each settings class reads its own environment variable prefix:

- ``LoggingSettings``: ``ROTALOG_LOG_*``, the parameters of ``rotalog.init``.
- ``DefaultLoggerSettings``: ``ROTALOG_DEBUG``, the lazy default's threshold.

Usage:
    from rotalog import init_from_settings
    from rotalog.config import LoggingSettings

    init_from_settings(LoggingSettings(filename="logs/app.log", console=True))
"""

from .logging import DefaultLoggerSettings, LoggingSettings

__all__ = [
    "DefaultLoggerSettings",
    "LoggingSettings",
]
