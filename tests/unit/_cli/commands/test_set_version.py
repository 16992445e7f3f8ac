"""Test ``sln set-version``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from click.testing import CliRunner

from sln._cli.main import cli
from sln.exceptions import DeploymentNotFoundError

if TYPE_CHECKING:
    from pytest import LogCaptureFixture
    from pytest_mock import MockerFixture

MODULE = "sln._cli.commands._set_version"


def test_set_version(cd_tmp_path: Path, mocker: MockerFixture) -> None:
    """Test set-version."""
    mock_pipeline = mocker.patch(f"{MODULE}.SetVersionPipeline")
    mock_pipeline.return_value.run.return_value = {"alias": "prod", "version": "3"}
    result = CliRunner().invoke(
        cli, ["set-version", "--version", "prod", "--update-env", "A=1", "--debug"]
    )
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"alias": "prod", "version": "3"}
    options = mock_pipeline.call_args.args[0]
    assert options.version == "prod"
    assert options.update_env == "A=1"
    assert options.set_env is None


def test_set_version_not_deployed(
    caplog: LogCaptureFixture, cd_tmp_path: Path, mocker: MockerFixture
) -> None:
    """Test a project that wasn't deployed exits with an error."""
    mock_pipeline = mocker.patch(f"{MODULE}.SetVersionPipeline")
    mock_pipeline.return_value.run.side_effect = DeploymentNotFoundError(
        cd_tmp_path / "sln.json"
    )
    result = CliRunner().invoke(cli, ["set-version", "--version", "prod"])
    assert result.exit_code == 1
    assert caplog.messages[-1].startswith("no deployment found")
