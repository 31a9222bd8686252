"""
In-memory writers and encoders shared by the test suite.
"""

import typing as t

from rotalog.encoders import ProductionEncoder
from rotalog.logger import Logger
from rotalog.writers import BaseWriter


class MemoryWriter(BaseWriter):
    """Collects encoded lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.synced = 0
        self.closed = False

    def write(self, data: bytes) -> int:
        self.lines.append(data.decode("utf-8"))
        return len(data)

    def sync(self) -> None:
        self.synced += 1

    def close(self) -> None:
        self.closed = True

    @property
    def text(self) -> str:
        return "".join(self.lines)


class RecordingEncoder(ProductionEncoder):
    """Production encoder that also keeps a copy of every event dict."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[dict[str, t.Any]] = []

    def encode(self, event_dict, *, colorize: bool = False) -> str:
        self.records.append(dict(event_dict))
        return super().encode(event_dict, colorize=colorize)


class MemoryLogger(t.NamedTuple):
    logger: Logger
    writer: MemoryWriter
    encoder: RecordingEncoder
    fatal_calls: list[str]

    @property
    def records(self) -> list[dict[str, t.Any]]:
        return self.encoder.records
