"""Pytest fixtures for CLI command tests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

if TYPE_CHECKING:
    from pytest import LogCaptureFixture
    from pytest_mock import MockerFixture


@pytest.fixture(autouse=True)
def setup_logging(caplog: LogCaptureFixture, mocker: MockerFixture) -> MagicMock:
    """Keep coloredlogs handlers off the CliRunner streams."""
    caplog.set_level(logging.DEBUG, logger="sln")
    return mocker.patch("sln._cli.main.setup_logging")
