"""
Process-wide logger registry.

The registry publishes exactly one logger per process. Whichever comes
first wins: an explicit ``install`` (from ``rotalog.init``) or the lazy
console-only default built on the first facade call. Once a logger is
published it is never replaced, and every later ``install`` is a no-op.

While a thread builds the logger, the registry marks that thread as
initializing. Anything that logs from inside the build (``.env`` parsing
warnings routed through the stdlib bridge, for instance) must not ask the
registry for the logger again: the bridge drops such records, and a direct
``get`` raises ``ReentrantInitError`` instead of waiting on the lock the same
thread already holds.
"""

from __future__ import annotations

import sys
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from .config import DefaultLoggerSettings
from .core import compose
from .exceptions import ReentrantInitError
from .logger import Logger
from .severity import Severity
from .sinks import console_sink


def default_severity(settings: Optional[DefaultLoggerSettings] = None) -> Severity:
    settings = settings or DefaultLoggerSettings()
    return Severity.DEBUG if settings.debug_enabled else Severity.INFO


def build_default_logger(severity: Severity) -> Logger:
    """Console-only logger used when nothing was initialized explicitly."""
    sys.stderr.write("rotalog: no explicit init, logging to stdout\n")
    core = compose([console_sink(severity)])
    return Logger(core, caller_skip=1)


class LoggerRegistry:
    """Holds the published logger; initialization runs at most once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._local = threading.local()
        self._logger: Optional[Logger] = None
        self._explicit = False

    @property
    def initialized(self) -> bool:
        return self._logger is not None

    @property
    def explicit(self) -> bool:
        return self._explicit

    @property
    def initializing(self) -> bool:
        """True while the calling thread is building the published logger."""
        return getattr(self._local, "active", False)

    @contextmanager
    def _initializing(self) -> Iterator[None]:
        if self.initializing:
            raise ReentrantInitError()
        self._local.active = True
        try:
            yield
        finally:
            self._local.active = False

    def get(self) -> Logger:
        """Return the published logger, building the default on first use."""
        logger = self._logger
        if logger is not None:
            return logger
        with self._initializing():
            # Settings are read before taking the lock; reading .env may log.
            severity = default_severity()
            with self._lock:
                if self._logger is None:
                    self._logger = build_default_logger(severity)
                return self._logger

    def install(self, factory: Callable[[], Logger]) -> bool:
        """
        Publish the logger built by ``factory`` unless one already exists.

        Returns ``False`` without calling ``factory`` when a logger was
        already published. If ``factory`` raises, nothing is published.
        """
        with self._initializing():
            with self._lock:
                if self._logger is not None:
                    return False
                self._logger = factory()
                self._explicit = True
                return True

    def sync(self) -> None:
        if self._logger is not None:
            self._logger.sync()


_registry = LoggerRegistry()


def current_registry() -> LoggerRegistry:
    return _registry
