"""Test sln.pipeline._set_version."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from sln.exceptions import DeploymentNotFoundError, PipelineStageError, ValidationError
from sln.models import FunctionConfiguration
from sln.pipeline import SetVersionOptions, SetVersionPipeline

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from sln.models import OwnerInfo

FUNCTION_ARN = "arn:aws:lambda:us-west-2:123456789012:function:test"


@pytest.fixture
def services(services: MagicMock) -> MagicMock:
    """Adapters for a deployed function."""
    services.function.publish_version.return_value = "7"
    services.function.get_configuration.return_value = FunctionConfiguration(
        name="test", arn=FUNCTION_ARN, version="$LATEST", env_vars={"A": "1", "B": "1"}
    )
    return services


def make_pipeline(services: MagicMock, **kwargs: object) -> SetVersionPipeline:
    """Create a pipeline using fake adapters."""
    get_services = MagicMock(return_value=services)
    return SetVersionPipeline(
        SetVersionOptions.model_validate(kwargs), get_services, progress=MagicMock()
    )


class TestSetVersionPipeline:
    """Test SetVersionPipeline."""

    def test_run(self, deployed: Path, services: MagicMock) -> None:
        """Test a version is published and the alias points at it."""
        pipeline = make_pipeline(services, version="prod", source=deployed)
        assert pipeline.run() == {"alias": "prod", "version": "7"}
        pipeline.get_services.assert_called_once_with("us-west-2")  # type: ignore
        services.function.publish_version.assert_called_once_with("test")
        services.function.create_or_update_alias.assert_called_once_with("test", "7", "prod")
        services.function.update_configuration.assert_not_called()
        services.gateway.create_deployment.assert_not_called()

    def test_run_config_option(self, deployed: Path, services: MagicMock) -> None:
        """Test --config is used instead of the source directory."""
        config = deployed / "sln.json"
        config.rename(deployed / "other.json")
        pipeline = make_pipeline(services, version="prod", config=deployed / "other.json")
        assert pipeline.run()["version"] == "7"

    def test_run_update_env(self, deployed: Path, services: MagicMock) -> None:
        """Test variables are merged with those already set."""
        make_pipeline(services, version="prod", source=deployed, update_env="B=2,C=3").run()
        services.function.get_configuration.assert_called_once_with("test")
        services.function.update_configuration.assert_called_once_with(
            "test", {"A": "1", "B": "2", "C": "3"}, None
        )

    def test_run_set_env_from_json(self, deployed: Path, services: MagicMock) -> None:
        """Test variables read from a file replace those already set."""
        env_file = deployed / "env.json"
        env_file.write_text('{"C": "3"}')
        make_pipeline(
            services, version="prod", source=deployed, set_env_from_json=str(env_file)
        ).run()
        services.function.update_configuration.assert_called_once_with("test", {"C": "3"}, None)

    def test_run_kms_key_only(self, deployed: Path, services: MagicMock) -> None:
        """Test a KMS key alone keeps the existing variables."""
        key = "arn:aws:kms:us-west-2:123456789012:key/test"
        make_pipeline(services, version="prod", source=deployed, env_kms_key_arn=key).run()
        services.function.update_configuration.assert_called_once_with(
            "test", {"A": "1", "B": "1"}, key
        )

    def test_run_api(
        self, deployed_api: Path, mocker: MockerFixture, owner: OwnerInfo, services: MagicMock
    ) -> None:
        """Test the API stage named after the alias is deployed."""
        allow = mocker.patch("sln.alias.allow_api_invocation", return_value=True)
        services.gateway.get_stage_variables.return_value = {"other": "x"}
        result = make_pipeline(services, version="prod", source=deployed_api).run()
        assert result == {
            "alias": "prod",
            "version": "7",
            "url": "https://abc123.execute-api.us-west-2.amazonaws.com/prod",
        }
        allow.assert_called_once_with(
            services.function, "test", "prod", "abc123", owner, "us-west-2"
        )
        services.gateway.create_deployment.assert_called_once_with(
            "abc123", "prod", {"other": "x", "lambdaVersion": "prod"}
        )

    def test_run_no_version(self, deployed: Path, services: MagicMock) -> None:
        """Test a version label is required."""
        pipeline = make_pipeline(services, source=deployed)
        with pytest.raises(ValidationError, match="--version"):
            pipeline.run()
        pipeline.get_services.assert_not_called()  # type: ignore

    def test_run_invalid_env(self, deployed: Path, services: MagicMock) -> None:
        """Test incompatible environment options are rejected before any call."""
        pipeline = make_pipeline(
            services, version="prod", source=deployed, set_env="A=1", update_env="B=2"
        )
        with pytest.raises(ValidationError, match="incompatible arguments"):
            pipeline.run()
        pipeline.get_services.assert_not_called()  # type: ignore

    def test_run_not_deployed(self, project: Path, services: MagicMock) -> None:
        """Test a project without a deployment config is rejected."""
        with pytest.raises(DeploymentNotFoundError):
            make_pipeline(services, version="prod", source=project).run()

    def test_run_publish_error(self, deployed: Path, services: MagicMock) -> None:
        """Test a failed publish stops before the alias is moved."""
        services.function.publish_version.side_effect = RuntimeError("boom")
        with pytest.raises(PipelineStageError, match="publishing version failed"):
            make_pipeline(services, version="prod", source=deployed).run()
        services.function.create_or_update_alias.assert_not_called()
