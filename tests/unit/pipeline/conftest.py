"""Pytest fixtures for pipeline tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from sln.config import ConfigStore, DeploymentConfig, FunctionDefinition, GatewayDefinition

PYPROJECT = """[project]
name = "test"
description = "Test project"
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project directory with a handler module."""
    source = tmp_path / "project"
    source.mkdir()
    (source / "pyproject.toml").write_text(PYPROJECT)
    (source / "app.py").write_text("def handler(event, context):\n    return event\n")
    return source


@pytest.fixture
def packager() -> MagicMock:
    """Packager writing a fake archive into the staging directory."""

    def _build(source: Path, staging_dir: Path, options: Any) -> Path:
        (staging_dir / "package").mkdir()
        archive = staging_dir / f"{options.name}.zip"
        archive.write_bytes(b"zip")
        return archive

    fake = MagicMock(name="Packager")
    fake.build.side_effect = _build
    return fake


@pytest.fixture
def deployed(project: Path) -> Path:
    """Project that was already deployed with ``sln create``."""
    ConfigStore(project / "sln.json").save(
        DeploymentConfig(
            function=FunctionDefinition(name="test", region="us-west-2", role="test-role")
        )
    )
    return project


@pytest.fixture
def deployed_api(project: Path) -> Path:
    """Project that was already deployed with a web API."""
    ConfigStore(project / "sln.json").save(
        DeploymentConfig(
            function=FunctionDefinition(name="test", region="us-west-2", role="test-role"),
            gateway=GatewayDefinition(id="abc123", module="api"),
        )
    )
    return project
