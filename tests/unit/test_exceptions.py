"""Test sln.exceptions."""

from __future__ import annotations

import pickle
from pathlib import Path

from botocore.exceptions import ClientError

from sln.exceptions import (
    DeploymentNotFoundError,
    InvalidDeploymentConfigError,
    PipelineStageError,
    ReconciliationError,
    RetriesExhaustedError,
    ValidationError,
    error_code,
)


def client_error(code: str) -> ClientError:
    """Build a provider error."""
    return ClientError({"Error": {"Code": code, "Message": "test"}}, "Test")


def test_error_code() -> None:
    """Test error_code."""
    assert error_code(client_error("NotFoundException")) == "NotFoundException"
    assert error_code(ValueError("NotFoundException")) == ""


def test_deployment_not_found_error() -> None:
    """Test DeploymentNotFoundError."""
    err = DeploymentNotFoundError("./sln.json")
    assert err.path == Path("./sln.json")
    assert str(err) == err.message == "no deployment found; sln.json does not exist"


def test_invalid_deployment_config_error() -> None:
    """Test InvalidDeploymentConfigError."""
    err = InvalidDeploymentConfigError("sln.json", "lambda.name: Field required")
    assert err.message == "invalid deployment config sln.json; lambda.name: Field required"


def test_pipeline_stage_error() -> None:
    """Test PipelineStageError names the stage and keeps the provider code."""
    cause = client_error("ResourceConflictException")
    err = PipelineStageError("creating function", cause)
    assert err.stage == "creating function"
    assert err.message.startswith("creating function failed: ")
    assert err.code == "ResourceConflictException"


def test_pipeline_stage_error_retries_exhausted() -> None:
    """Test the code of an exhausted retry is unwrapped."""
    cause = RetriesExhaustedError(client_error("InvalidParameterValueException"), 5)
    assert PipelineStageError("creating function", cause).code == "InvalidParameterValueException"
    assert "gave up after 5 attempt(s)" in cause.message


def test_reconciliation_error() -> None:
    """Test ReconciliationError."""
    assert ReconciliationError("unable to read").message == "unable to read"
    err = ReconciliationError("unable to read", client_error("AccessDenied"))
    assert err.message.startswith("unable to read: ")


def test_validation_error_pickle() -> None:
    """Test ValidationError can be pickled."""
    err = pickle.loads(pickle.dumps(ValidationError("bad option")))
    assert isinstance(err, ValidationError)
    assert err.message == "bad option"
