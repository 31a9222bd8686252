"""
Module-level entry points over the published logger.
"""

from __future__ import annotations

import sys
import traceback

import pytest

import rotalog
from rotalog.exceptions import InvalidPolicyError, PanicError
from rotalog.severity import Severity
from rotalog.stacktrace import STACK_HEADER


def _next_line() -> int:
    return sys._getframe(1).f_lineno + 1


class Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("no")


class TestMessages:
    """Plain forms join arguments, f-forms %-format them."""

    def test_plain_form_joins_with_space(self, installed_logger) -> None:
        rotalog.info("user", 42, "logged in")
        assert installed_logger.records[0]["event"] == "user 42 logged in"

    def test_plain_form_without_args(self, installed_logger) -> None:
        rotalog.warn()
        assert installed_logger.records[0]["event"] == ""

    def test_format_form(self, installed_logger) -> None:
        rotalog.infof("x=%d y=%s", 5, "z")
        assert installed_logger.records[0]["event"] == "x=5 y=z"

    def test_format_form_with_mapping(self, installed_logger) -> None:
        rotalog.infof("%(user)s did %(what)s", {"user": "ada", "what": "it"})
        assert installed_logger.records[0]["event"] == "ada did it"

    def test_format_without_args_keeps_template(self, installed_logger) -> None:
        rotalog.infof("100% done")
        assert installed_logger.records[0]["event"] == "100% done"

    @pytest.mark.parametrize(
        "template, args, expected",
        [
            ("%d items", ("many",), "%d items many"),
            ("%s and %s", ("one",), "%s and %s one"),
            ("plain", (1, 2), "plain 1 2"),
        ],
    )
    def test_format_mismatch_falls_back(self, installed_logger, template, args, expected) -> None:
        rotalog.warnf(template, *args)
        assert installed_logger.records[0]["event"] == expected

    def test_unprintable_argument_degrades(self, installed_logger) -> None:
        rotalog.info("value:", Unprintable())
        assert installed_logger.records[0]["event"] == "value: <unprintable Unprintable>"

    def test_keyword_fields(self, installed_logger) -> None:
        rotalog.infof("order %s", "o-1", amount=12.5)
        assert installed_logger.records[0]["amount"] == 12.5

    @pytest.mark.parametrize(
        "name, severity",
        [
            ("debug", Severity.DEBUG),
            ("debugf", Severity.DEBUG),
            ("info", Severity.INFO),
            ("infof", Severity.INFO),
            ("warn", Severity.WARN),
            ("warnf", Severity.WARN),
            ("error", Severity.ERROR),
            ("errorf", Severity.ERROR),
        ],
    )
    def test_severity_of_each_entry_point(self, installed_logger, name: str, severity: Severity) -> None:
        getattr(rotalog, name)("msg")
        assert installed_logger.records[0]["level"] is severity


class TestCallerAndStack:
    """Location and stack point at the code calling the facade."""

    def test_caller_is_user_code(self, installed_logger) -> None:
        line = _next_line()
        rotalog.info("here")
        assert installed_logger.records[0]["caller"] == f"unit_tests/test_facade.py:{line}"

    def test_caller_of_format_form(self, installed_logger) -> None:
        line = _next_line()
        rotalog.errorf("failed %s", "job")
        assert installed_logger.records[0]["caller"] == f"unit_tests/test_facade.py:{line}"

    def test_error_attaches_stack(self, installed_logger) -> None:
        rotalog.error("broken")
        stack = installed_logger.records[0]["stack"]
        assert isinstance(stack, traceback.StackSummary)
        assert stack[-1].name == "test_error_attaches_stack"
        assert all(not frame.filename.endswith("facade.py") for frame in stack)
        assert STACK_HEADER in installed_logger.writer.text

    @pytest.mark.parametrize("name", ["debug", "debugf", "info", "infof", "warn", "warnf"])
    def test_lower_severities_have_no_stack(self, installed_logger, name: str) -> None:
        getattr(rotalog, name)("calm")
        assert "stack" not in installed_logger.records[0]
        assert STACK_HEADER not in installed_logger.writer.text


class TestPanicAndFatal:
    def test_panic_raises(self, installed_logger) -> None:
        with pytest.raises(PanicError) as exc_info:
            rotalog.panic("out of", "memory")
        assert exc_info.value.message == "out of memory"
        record = installed_logger.records[0]
        assert record["level"] is Severity.PANIC
        assert record["stack"][-1].name == "test_panic_raises"

    def test_panicf_raises(self, installed_logger) -> None:
        with pytest.raises(PanicError, match="code 7"):
            rotalog.panicf("code %d", 7)

    def test_fatal_runs_hook(self, installed_logger) -> None:
        rotalog.fatal("shutting", "down")
        assert installed_logger.fatal_calls == ["shutting down"]
        assert installed_logger.writer.synced == 1
        assert "stack" in installed_logger.records[0]

    def test_fatalf_runs_hook(self, installed_logger) -> None:
        rotalog.fatalf("exit %s", "now")
        assert installed_logger.fatal_calls == ["exit now"]


class TestInitAndAccessors:
    def test_init_returns_false_once_published(self, tmp_path, installed_logger) -> None:
        assert not rotalog.init(str(tmp_path / "app.log"))
        assert not (tmp_path / "app.log").exists()

    def test_init_rejects_invalid_policy(self, tmp_path, fresh_registry) -> None:
        with pytest.raises(InvalidPolicyError):
            rotalog.init(str(tmp_path / "app.log"), max_backups=-1)
        assert not fresh_registry.initialized

    def test_get_logger_reports_its_own_caller(self, installed_logger) -> None:
        logger = rotalog.get_logger()
        assert logger.caller_skip == 0
        line = _next_line()
        logger.info("direct")
        assert installed_logger.records[0]["caller"] == f"unit_tests/test_facade.py:{line}"

    def test_named_logger(self, installed_logger) -> None:
        rotalog.get_logger("jobs").info("ran")
        assert installed_logger.records[0]["logger"] == "jobs"

    def test_sync_flushes_sinks(self, installed_logger) -> None:
        rotalog.sync()
        assert installed_logger.writer.synced == 1

    def test_sync_before_any_logger_does_nothing(self, fresh_registry) -> None:
        rotalog.sync()
        assert not fresh_registry.initialized
