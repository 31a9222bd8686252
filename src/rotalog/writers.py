"""
Byte writers behind the sinks.

Every writer serializes its own writes with a lock, so concurrent records
sent to one writer never interleave. Writers are opened eagerly: a bad path
fails when the writer is constructed, not on the first record.
"""

from __future__ import annotations

import glob
import gzip
import os
import re
import shutil
import sys
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import IO, Any, Callable, Optional

from .rotation import DATE_ROTATION_INTERVAL, DEFAULT_MAX_SIZE_MB, MEGABYTE

Clock = Callable[[], datetime]

BACKUP_TIME_FORMAT = "%Y-%m-%dT%H-%M-%S.%f"
COMPRESS_SUFFIX = ".gz"
DEFAULT_DATE_MAX_AGE = timedelta(days=7)


class BaseWriter(ABC):
    """Abstract byte sink."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        ...

    @abstractmethod
    def sync(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class ConsoleWriter(BaseWriter):
    """Writes to a text stream (stdout by default); never closes it."""

    def __init__(self, stream: Any = None):
        self._stream = stream or sys.stdout
        self._lock = threading.Lock()

    @property
    def stream(self) -> Any:
        return self._stream

    def write(self, data: bytes) -> int:
        text = data.decode("utf-8", errors="replace")
        with self._lock:
            self._stream.write(text)
            self._stream.flush()
        return len(data)

    def sync(self) -> None:
        with self._lock:
            self._stream.flush()

    def close(self) -> None:
        self.sync()


def _format_backup_time(t: datetime) -> str:
    # Millisecond precision: 2024-05-01T13-04-05.123
    return t.strftime(BACKUP_TIME_FORMAT)[:-3]


class SizeRotatingWriter(BaseWriter):
    """
    Single active file capped by size.

    When a write would push the file past ``max_size_bytes`` the file is
    renamed to ``<stem>-<timestamp><ext>`` and a fresh one is opened. After
    each rotation old backups are pruned: only the newest ``max_backups`` are
    kept (0 keeps all) and backups older than ``max_age_days`` are removed
    (0 disables). Surviving backups are gzip-compressed when ``compress`` is
    set. Backup timestamps use local time when ``local_time`` is set, UTC
    otherwise.
    """

    def __init__(
        self,
        filename: str | Path,
        max_size_bytes: int = DEFAULT_MAX_SIZE_MB * MEGABYTE,
        max_backups: int = 0,
        max_age_days: int = 0,
        *,
        compress: bool = False,
        local_time: bool = False,
        clock: Optional[Clock] = None,
    ):
        self._path = Path(filename)
        self._max_size = max_size_bytes or DEFAULT_MAX_SIZE_MB * MEGABYTE
        self._max_backups = max_backups
        self._max_age_days = max_age_days
        self._compress = compress
        self._local_time = local_time
        self._clock = clock
        self._lock = threading.Lock()
        self._file: Optional[IO[bytes]] = None
        self._size = 0
        self._open()

    @property
    def path(self) -> Path:
        return self._path

    def _now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        if self._local_time:
            return datetime.now()
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def _open(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._path, "ab")
        self._size = os.fstat(self._file.fileno()).st_size

    def write(self, data: bytes) -> int:
        with self._lock:
            if len(data) > self._max_size:
                raise ValueError(f"write length {len(data)} exceeds maximum file size {self._max_size}")
            if self._file is None:
                self._open()
            elif self._size + len(data) > self._max_size:
                self._rotate()
            written = self._file.write(data)
            self._file.flush()
            self._size += written
            return written

    def _rotate(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
        if self._path.exists():
            os.replace(self._path, self._backup_path(self._now()))
        self._open()
        self._mill()

    def _backup_path(self, t: datetime) -> Path:
        stem, ext = os.path.splitext(self._path.name)
        while True:
            candidate = self._path.with_name(f"{stem}-{_format_backup_time(t)}{ext}")
            if not candidate.exists() and not candidate.with_name(candidate.name + COMPRESS_SUFFIX).exists():
                return candidate
            # Two rotations within the same millisecond.
            t += timedelta(milliseconds=1)

    def backups(self) -> list[tuple[datetime, Path]]:
        """Rotated files next to the active one, newest first."""
        stem, ext = os.path.splitext(self._path.name)
        prefix = f"{stem}-"
        found: list[tuple[datetime, Path]] = []
        for entry in self._path.parent.iterdir():
            name = entry.name
            if not entry.is_file() or not name.startswith(prefix):
                continue
            for suffix in (ext + COMPRESS_SUFFIX, ext):
                if suffix and not name.endswith(suffix):
                    continue
                stamp = name[len(prefix) : len(name) - len(suffix)] if suffix else name[len(prefix) :]
                try:
                    found.append((datetime.strptime(stamp, BACKUP_TIME_FORMAT), entry))
                    break
                except ValueError:
                    continue
        found.sort(key=lambda item: item[0], reverse=True)
        return found

    def _mill(self) -> None:
        files = self.backups()
        remove: list[Path] = []

        if self._max_backups > 0 and len(files) > self._max_backups:
            preserved: set[str] = set()
            kept = []
            for stamp, path in files:
                preserved.add(path.name.removesuffix(COMPRESS_SUFFIX))
                if len(preserved) > self._max_backups:
                    remove.append(path)
                else:
                    kept.append((stamp, path))
            files = kept

        if self._max_age_days > 0:
            cutoff = self._now() - timedelta(days=self._max_age_days)
            kept = []
            for stamp, path in files:
                if stamp < cutoff:
                    remove.append(path)
                else:
                    kept.append((stamp, path))
            files = kept

        for path in remove:
            path.unlink(missing_ok=True)

        if self._compress:
            for _, path in files:
                if not path.name.endswith(COMPRESS_SUFFIX):
                    _compress_file(path)

    def sync(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()
                os.fsync(self._file.fileno())

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


def _compress_file(src: Path) -> None:
    dst = src.with_name(src.name + COMPRESS_SUFFIX)
    with open(src, "rb") as fin, gzip.open(dst, "wb") as fout:
        shutil.copyfileobj(fin, fout)
    src.unlink()


def _pattern_to_glob(pattern: str) -> str:
    return "%".join(re.sub(r"%[A-Za-z]", "*", part) for part in pattern.split("%%"))


def _truncate(t: datetime, interval: timedelta) -> datetime:
    midnight = t.replace(hour=0, minute=0, second=0, microsecond=0)
    if interval >= timedelta(days=1):
        return midnight
    return midnight + ((t - midnight) // interval) * interval


class DateRotatingWriter(BaseWriter):
    """
    One file per rotation period, named by expanding a strftime pattern.

    ``link_name`` is kept as a symlink to the current file. Old files matching
    the pattern are pruned whenever a new period starts: either every file
    older than ``max_age`` or all but the newest ``rotation_count``. Setting
    both is an error; setting neither falls back to a seven day age limit.
    The clock must return naive local time.
    """

    def __init__(
        self,
        pattern: str,
        *,
        link_name: Optional[str] = None,
        rotation_interval: timedelta = DATE_ROTATION_INTERVAL,
        max_age: Optional[timedelta] = None,
        rotation_count: int = 0,
        clock: Optional[Clock] = None,
    ):
        if max_age and rotation_count:
            raise ValueError("max_age and rotation_count cannot both be set")
        if not max_age and not rotation_count:
            max_age = DEFAULT_DATE_MAX_AGE
        if rotation_interval <= timedelta(0):
            raise ValueError("rotation_interval must be positive")

        self._pattern = pattern
        self._glob = _pattern_to_glob(pattern)
        self._link_name = link_name
        self._interval = rotation_interval
        self._max_age = max_age
        self._rotation_count = rotation_count
        self._clock = clock or datetime.now
        self._lock = threading.Lock()
        self._file: Optional[IO[bytes]] = None
        self._current: Optional[str] = None

        with self._lock:
            self._rotate_if_needed()

    @property
    def current_filename(self) -> Optional[str]:
        return self._current

    @property
    def max_age(self) -> Optional[timedelta]:
        return self._max_age

    @property
    def rotation_count(self) -> int:
        return self._rotation_count

    def filename_for(self, t: datetime) -> str:
        return _truncate(t, self._interval).strftime(self._pattern)

    def write(self, data: bytes) -> int:
        with self._lock:
            self._rotate_if_needed()
            written = self._file.write(data)
            self._file.flush()
            return written

    def _rotate_if_needed(self) -> None:
        filename = self.filename_for(self._clock())
        if self._file is not None and filename == self._current:
            return

        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(path, "ab")
        if self._file is not None:
            self._file.close()
        self._file, self._current = handle, filename

        if self._link_name:
            self._update_link(filename)
        self._prune()

    def _update_link(self, target: str) -> None:
        link = Path(self._link_name)
        link.parent.mkdir(parents=True, exist_ok=True)
        tmp = link.with_name(link.name + "_symlink")
        if tmp.is_symlink() or tmp.exists():
            tmp.unlink()
        os.symlink(os.path.relpath(target, link.parent), tmp)
        os.replace(tmp, link)

    def _candidates(self) -> list[Path]:
        link = os.path.abspath(self._link_name) if self._link_name else None
        found = []
        for name in glob.glob(self._glob):
            path = Path(name)
            if path.is_symlink() or os.path.abspath(name) == link:
                continue
            if self._current and os.path.abspath(name) == os.path.abspath(self._current):
                continue
            found.append(path)
        return found

    def _prune(self) -> None:
        candidates = self._candidates()
        if self._max_age:
            cutoff = self._clock() - self._max_age
            stale = [p for p in candidates if datetime.fromtimestamp(p.stat().st_mtime) < cutoff]
        else:
            # The current file counts towards rotation_count.
            keep = max(self._rotation_count - 1, 0)
            ordered = sorted(candidates, key=lambda p: p.stat().st_mtime)
            stale = ordered[: max(len(ordered) - keep, 0)]
        for path in stale:
            path.unlink(missing_ok=True)

    def sync(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()
                os.fsync(self._file.fileno())

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None
