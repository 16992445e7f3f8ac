"""Test sln._logging."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sln._logging import LogLevels, ProgressLogger, SlnLogger

if TYPE_CHECKING:
    from pytest import LogCaptureFixture

MODULE = "sln._logging"


class TestProgressLogger:
    """Test ProgressLogger."""

    def test_log_stage(self, caplog: LogCaptureFixture) -> None:
        """Test log_stage."""
        caplog.set_level(logging.INFO, logger="sln.test")
        ProgressLogger(logging.getLogger("sln.test")).log_stage("packaging")
        assert caplog.messages == ["packaging"]

    def test_log_api_call(self, caplog: LogCaptureFixture) -> None:
        """Test log_api_call is logged at VERBOSE with sorted params."""
        caplog.set_level(LogLevels.VERBOSE, logger="sln.test")
        ProgressLogger(logging.getLogger("sln.test")).log_api_call(
            "lambda", "create_function", {"Runtime": "python3.12", "FunctionName": "x"}
        )
        assert caplog.messages == [
            'lambda.create_function {"FunctionName": "x", "Runtime": "python3.12"}'
        ]
        assert caplog.records[0].levelno == LogLevels.VERBOSE

    def test_log_api_call_disabled(self, caplog: LogCaptureFixture) -> None:
        """Test log_api_call is skipped below VERBOSE."""
        caplog.set_level(logging.INFO, logger="sln.test")
        ProgressLogger(logging.getLogger("sln.test")).log_api_call("iam", "get_role")
        assert not caplog.messages

    def test_warning(self, caplog: LogCaptureFixture) -> None:
        """Test warning."""
        caplog.set_level(logging.INFO, logger="sln.test")
        ProgressLogger(logging.getLogger("sln.test")).warning("unable to %s", "attach")
        assert caplog.records[0].levelno == logging.WARNING
        assert caplog.messages == ["unable to attach"]


def test_log_levels_has_value() -> None:
    """Test LogLevels.has_value."""
    assert LogLevels.has_value(35)
    assert not LogLevels.has_value(25)


def test_sln_logger(caplog: LogCaptureFixture) -> None:
    """Test SlnLogger extra levels."""
    logger = SlnLogger("sln.test.levels")
    logger.addHandler(caplog.handler)
    logger.setLevel(LogLevels.VERBOSE)
    logger.verbose("details")
    logger.success("done")
    logger.debug("hidden")
    assert caplog.messages == ["details", "done"]
    assert [record.levelname for record in caplog.records] == ["VERBOSE", "SUCCESS"]
