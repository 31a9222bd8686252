"""
rotalog exception hierarchy.

Setup failures are raised where the logger is built so that no half-configured
logger is ever published. Per-record problems are never raised to the caller.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class RotalogError(Exception):
    """Base class for every rotalog error."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class InvalidPolicyError(RotalogError, ValueError):
    """Rotation parameters that cannot describe a policy."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, code="INVALID_POLICY", details=details)


class WriterSetupError(RotalogError):
    """A rotating writer could not be constructed.

    Raised from ``init`` / ``build_sinks``; the underlying ``OSError`` is
    chained as ``__cause__``.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"cannot open log writer for '{path}': {reason}",
            code="WRITER_SETUP_FAILED",
            details={"path": path, "reason": reason},
        )
        self.path = path


class PanicError(RotalogError):
    """Raised after a panic-severity record has been logged.

    Carries the logged message so supervisory code can recover from it.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PANIC")
        self.message = message


class ReentrantInitError(RotalogError, RuntimeError):
    """The published logger was requested while this thread is building it."""

    def __init__(self) -> None:
        super().__init__(
            "logger requested while it is being initialized on this thread",
            code="REENTRANT_INIT",
        )
