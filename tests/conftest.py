import logging
import typing as t

import pytest

from rotalog import default as rotalog_default
from rotalog.core import compose
from rotalog.logger import Logger
from rotalog.severity import Severity
from rotalog.sinks import Sink
from tests.helpers import MemoryLogger, MemoryWriter, RecordingEncoder


@pytest.fixture(autouse=True)
def fresh_registry(monkeypatch):
    """
    Every test starts with an empty process-wide registry and without the
    debug toggle in the environment.
    """
    monkeypatch.delenv("ROTALOG_DEBUG", raising=False)
    registry = rotalog_default.LoggerRegistry()
    monkeypatch.setattr(rotalog_default, "_registry", registry)
    yield registry
    if registry.initialized:
        registry.get().close()


@pytest.fixture
def memory_writer() -> MemoryWriter:
    return MemoryWriter()


@pytest.fixture
def recording_encoder() -> RecordingEncoder:
    return RecordingEncoder()


@pytest.fixture
def make_memory_logger():
    """Factory for a logger with one in-memory sink and a recording fatal hook."""

    def _make(min_severity: Severity = Severity.DEBUG, **options: t.Any) -> MemoryLogger:
        writer = MemoryWriter()
        encoder = RecordingEncoder()
        fatal_calls: list[str] = []
        options.setdefault("on_fatal", fatal_calls.append)
        logger = Logger(compose([Sink(writer, encoder, min_severity)]), **options)
        return MemoryLogger(logger, writer, encoder, fatal_calls)

    return _make


@pytest.fixture
def installed_logger(fresh_registry, make_memory_logger) -> MemoryLogger:
    """Publish an in-memory logger the way ``rotalog.init`` does (caller_skip=1)."""
    memory = make_memory_logger(caller_skip=1)
    assert fresh_registry.install(lambda: memory.logger)
    return memory


@pytest.fixture
def restore_root_logger():
    """Give the test the root logger and put its handlers and level back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)
