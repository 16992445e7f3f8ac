"""Test sln.policies."""

from __future__ import annotations

import json

from sln.policies import (
    lambda_trust_policy,
    logging_policy,
    recursive_execution_policy,
    s3_access_policy,
)


def test_lambda_trust_policy() -> None:
    """Test lambda_trust_policy."""
    statement = json.loads(lambda_trust_policy())["Statement"][0]
    assert statement["Principal"] == {"Service": ["lambda.amazonaws.com"]}
    assert statement["Action"] == ["sts:AssumeRole"]


def test_logging_policy() -> None:
    """Test logging_policy."""
    statement = json.loads(logging_policy("aws-cn"))["Statement"][0]
    assert statement["Resource"] == ["arn:aws-cn:logs:*:*:*"]
    assert "logs:PutLogEvents" in statement["Action"]


def test_recursive_execution_policy() -> None:
    """Test recursive_execution_policy."""
    statement = json.loads(
        recursive_execution_policy("aws", "us-east-1", "123456789012", "test")
    )["Statement"][0]
    assert statement["Action"] == ["lambda:InvokeFunction"]
    assert statement["Resource"] == ["arn:aws:lambda:us-east-1:123456789012:function:test"]


def test_s3_access_policy() -> None:
    """Test s3_access_policy."""
    statement = json.loads(s3_access_policy("aws", "uploads"))["Statement"][0]
    assert statement["Action"] == ["s3:*"]
    assert statement["Resource"] == ["arn:aws:s3:::uploads/*"]
