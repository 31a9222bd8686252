"""
Sinks: a writer paired with an encoder and a minimum severity.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional

from structlog.typing import EventDict

from .encoders import LineEncoder, encoder_for
from .exceptions import WriterSetupError
from .rotation import DateRotation, RetainByAge, RotationPolicy, SizeRotation
from .severity import Severity
from .writers import BaseWriter, ConsoleWriter, DateRotatingWriter, SizeRotatingWriter


@dataclass(frozen=True)
class Sink:
    """One write destination of a core."""

    writer: BaseWriter
    encoder: LineEncoder
    min_severity: Severity = Severity.INFO
    colorize: bool = False

    @property
    def style(self) -> str:
        return self.encoder.style

    def enabled(self, severity: Severity) -> bool:
        return severity >= self.min_severity

    def write(self, event_dict: EventDict) -> int:
        line = self.encoder.encode(event_dict, colorize=self.colorize)
        return self.writer.write(line.encode("utf-8", errors="replace"))


def open_rotating_writer(policy: RotationPolicy) -> BaseWriter:
    """Open the file writer described by ``policy``; fail fast on a bad path."""
    path = policy.filename if isinstance(policy, SizeRotation) else policy.file_pattern
    try:
        if isinstance(policy, SizeRotation):
            return SizeRotatingWriter(
                policy.filename,
                max_size_bytes=policy.max_size_bytes,
                max_backups=policy.max_backups,
                max_age_days=policy.max_age_days,
                compress=policy.compress,
                local_time=policy.local_time,
            )
        if isinstance(policy, DateRotation):
            retention = policy.retention
            if isinstance(retention, RetainByAge):
                return DateRotatingWriter(
                    policy.file_pattern,
                    link_name=policy.link_path,
                    rotation_interval=policy.rotation_interval,
                    max_age=retention.max_age,
                )
            return DateRotatingWriter(
                policy.file_pattern,
                link_name=policy.link_path,
                rotation_interval=policy.rotation_interval,
                rotation_count=retention.max_backups,
            )
    except (OSError, ValueError) as exc:
        raise WriterSetupError(path, str(exc)) from exc
    raise TypeError(f"unsupported rotation policy: {policy!r}")


def build_sinks(
    policy: RotationPolicy,
    severity: Severity,
    console: bool = False,
    *,
    time_format: Optional[str] = None,
    separator: str = "\t",
) -> list[Sink]:
    """
    Build the sinks for an explicitly initialized logger.

    The file sink always comes first and uses the production encoder. The
    console sink is only added when ``console`` is set; it writes to stdout
    with the development encoder. Both share ``severity`` as threshold.
    """
    sinks = [
        Sink(
            writer=open_rotating_writer(policy),
            encoder=encoder_for("production", time_format=time_format, separator=separator),
            min_severity=severity,
            colorize=False,
        )
    ]
    if console:
        sinks.append(console_sink(severity, time_format=time_format, separator=separator))
    return sinks


def console_sink(
    severity: Severity,
    *,
    stream=None,
    time_format: Optional[str] = None,
    separator: str = "\t",
) -> Sink:
    return Sink(
        writer=ConsoleWriter(stream or sys.stdout),
        encoder=encoder_for("development", time_format=time_format, separator=separator),
        min_severity=severity,
        colorize=True,
    )
