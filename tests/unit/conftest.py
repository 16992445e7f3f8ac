"""Pytest fixtures and plugins."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, Optional
from unittest.mock import MagicMock

import pytest

from sln.models import OwnerInfo

from .factories import MockSlnContext

if TYPE_CHECKING:
    from pytest import MonkeyPatch

LOGGER = logging.getLogger(__name__)
TEST_ROOT = Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def aws_credentials() -> Iterator[None]:
    """Ensure AWS SDK finds some (bogus) credentials in the environment.

    Keeps boto3 from using other credential providers or real accounts.

    """
    overrides = {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_DEFAULT_REGION": "us-east-1",
    }
    saved_env: Dict[str, Optional[str]] = {}
    for key, value in overrides.items():
        LOGGER.info("Overriding env var: %s=%s", key, value)
        saved_env[key] = os.environ.get(key, None)
        os.environ[key] = value

    yield

    for key, value in saved_env.items():
        LOGGER.info("Restoring saved env var: %s=%s", key, value)
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value

    saved_env.clear()


@pytest.fixture
def cd_tmp_path(monkeypatch: MonkeyPatch, tmp_path: Path) -> Path:
    """Change directory to a temporary path."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def owner() -> OwnerInfo:
    """Account deployed into."""
    return OwnerInfo(account_id="123456789012", partition="aws")


@pytest.fixture
def services(owner: OwnerInfo) -> MagicMock:
    """Fake :class:`~sln.providers.aws.AwsServices`; every adapter is a mock."""
    fake = MagicMock(name="AwsServices")
    fake.account = MagicMock()
    fake.account.owner = owner
    fake.function = MagicMock()
    fake.gateway = MagicMock()
    fake.identity = MagicMock()
    fake.object_store = MagicMock()
    return fake


@pytest.fixture
def sln_context() -> MockSlnContext:
    """Mock context whose boto3 clients are stubbed."""
    return MockSlnContext(region="us-east-1")
