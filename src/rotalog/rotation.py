"""
Rotation policies.

A policy is resolved once from the ``init`` parameters and never changes
afterwards. ``SizeRotation`` caps a single active file by size;
``DateRotation`` writes one file per day behind a stable link.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Union

from .exceptions import InvalidPolicyError

# Inserted before the extension of date-rotated files.
DATE_ROLLING_SUFFIX = ".%Y%m%d"

MEGABYTE = 1024 * 1024
DEFAULT_MAX_SIZE_MB = 100
DATE_ROTATION_INTERVAL = timedelta(hours=24)


class RollingBy(str, Enum):
    BY_SIZE = "size"
    BY_DATE = "date"


BY_SIZE = RollingBy.BY_SIZE
BY_DATE = RollingBy.BY_DATE


@dataclass(frozen=True)
class RetainByAge:
    """Delete rotated files older than ``max_age_days``."""

    max_age_days: int

    @property
    def max_age(self) -> timedelta:
        return timedelta(days=self.max_age_days)


@dataclass(frozen=True)
class RetainByCount:
    """Keep at most ``max_backups`` files."""

    max_backups: int


Retention = Union[RetainByAge, RetainByCount]


@dataclass(frozen=True)
class SizeRotation:
    filename: str
    max_size_bytes: int
    max_backups: int
    max_age_days: int
    compress: bool = True
    local_time: bool = True


@dataclass(frozen=True)
class DateRotation:
    file_pattern: str
    link_path: str
    retention: Retention
    rotation_interval: timedelta = DATE_ROTATION_INTERVAL


RotationPolicy = Union[SizeRotation, DateRotation]


def date_file_pattern(path: str) -> str:
    """
    Insert the date suffix before the extension, or append it.

    ``logs/app.log`` becomes ``logs/app.%Y%m%d.log`` and ``logs/app`` becomes
    ``logs/app.%Y%m%d``.
    """
    stem, ext = os.path.splitext(path)
    if ext:
        return stem + DATE_ROLLING_SUFFIX + ext
    return path + DATE_ROLLING_SUFFIX


def select_retention(max_backups: int, max_age_days: int) -> Retention:
    """
    Pick the pruning rule for date rotation.

    Age wins only when the backup count is strictly greater than the age in
    days; a tie keeps the count rule.
    """
    if max_backups > max_age_days:
        return RetainByAge(max_age_days=max_age_days)
    return RetainByCount(max_backups=max_backups)


def resolve_policy(
    filename: str,
    max_size_mb: int,
    max_backups: int,
    max_age_days: int,
    rolling_by: RollingBy | str = RollingBy.BY_SIZE,
) -> RotationPolicy:
    """Build the immutable rotation policy for a log file."""
    if not filename:
        raise InvalidPolicyError("log filename must not be empty")
    for field_name, value in (
        ("max_size_mb", max_size_mb),
        ("max_backups", max_backups),
        ("max_age_days", max_age_days),
    ):
        if value < 0:
            raise InvalidPolicyError(f"{field_name} must not be negative, got {value}", **{field_name: value})

    try:
        mode = RollingBy(rolling_by)
    except ValueError:
        raise InvalidPolicyError(f"unknown rolling mode {rolling_by!r}", rolling_by=str(rolling_by)) from None

    if mode is RollingBy.BY_SIZE:
        return SizeRotation(
            filename=filename,
            max_size_bytes=(max_size_mb or DEFAULT_MAX_SIZE_MB) * MEGABYTE,
            max_backups=max_backups,
            max_age_days=max_age_days,
            compress=True,
            local_time=True,
        )

    return DateRotation(
        file_pattern=date_file_pattern(filename),
        link_path=filename,
        retention=select_retention(max_backups, max_age_days),
    )
