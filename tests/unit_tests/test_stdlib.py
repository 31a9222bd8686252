"""
Standard-library logging bridge.
"""

from __future__ import annotations

import logging

from rotalog.severity import Severity
from rotalog.stdlib import RedirectStdLibHandler, redirect_stdlib_logging


class TestRedirectStdLibHandler:
    def test_forwards_records(self, installed_logger, restore_root_logger) -> None:
        redirect_stdlib_logging(logging.DEBUG)
        logging.getLogger("thirdparty.client").warning("retrying %s", "request")

        (record,) = installed_logger.records
        assert record["level"] is Severity.WARN
        assert record["event"] == "retrying request"
        assert record["logger"] == "thirdparty.client"
        assert record["caller"].startswith("unit_tests/test_stdlib.py:")

    def test_respects_root_level(self, installed_logger, restore_root_logger) -> None:
        redirect_stdlib_logging(logging.WARNING)
        logging.getLogger("thirdparty").info("chatter")
        assert installed_logger.records == []

    def test_exception_is_carried(self, installed_logger, restore_root_logger) -> None:
        redirect_stdlib_logging()
        try:
            raise KeyError("missing")
        except KeyError:
            logging.getLogger("thirdparty").exception("lookup failed")
        record = installed_logger.records[0]
        assert record["level"] is Severity.ERROR
        assert "KeyError: 'missing'" in record["exception"]

    def test_own_records_are_skipped(self, installed_logger) -> None:
        handler = RedirectStdLibHandler()
        handler.handle(logging.LogRecord("rotalog.internal", logging.ERROR, __file__, 1, "loop", None, None))
        assert installed_logger.records == []

    def test_replaces_root_handlers(self, installed_logger, restore_root_logger) -> None:
        restore_root_logger.addHandler(logging.NullHandler())
        handler = redirect_stdlib_logging()
        assert restore_root_logger.handlers == [handler]

    def test_drops_records_while_registry_initializes(self, fresh_registry, make_memory_logger) -> None:
        memory = make_memory_logger()
        handler = RedirectStdLibHandler()
        seen: list[bool] = []

        def factory():
            seen.append(fresh_registry.initializing)
            handler.handle(logging.LogRecord("dotenv.main", logging.WARNING, __file__, 1, "bad line", None, None))
            return memory.logger

        assert fresh_registry.install(factory)
        assert seen == [True]
        assert not fresh_registry.initializing
        assert memory.records == []
