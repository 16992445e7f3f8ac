"""Test sln.retry."""

from __future__ import annotations

from typing import Any, List
from unittest.mock import MagicMock, Mock, call

import pytest
from botocore.exceptions import ClientError

from sln.exceptions import RetriesExhaustedError
from sln.retry import RetryingProxy, is_role_propagation_error, is_throttling_error, retry


def client_error(code: str, operation: str = "CreateFunction") -> ClientError:
    """Build a provider error with a classification code."""
    return ClientError({"Error": {"Code": code, "Message": "test"}}, operation)


def test_retry_first_success() -> None:
    """Test retry returns the first result without sleeping."""
    sleep = Mock()
    assert retry(lambda: "ok", 1000, 5, lambda _: True, sleep=sleep) == "ok"
    sleep.assert_not_called()


def test_retry_succeeds_after_two_failures() -> None:
    """Test retry resolves once the transient error clears."""
    outcomes: List[Any] = [
        client_error("InvalidParameterValueException"),
        client_error("InvalidParameterValueException"),
        "created",
    ]

    def operation() -> Any:
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    on_retry = Mock()
    sleep = Mock()
    assert (
        retry(operation, 5000, 5, is_role_propagation_error, on_retry=on_retry, sleep=sleep)
        == "created"
    )
    assert on_retry.call_count == 2
    sleep.assert_has_calls([call(5.0), call(5.0)])


def test_retry_not_retryable() -> None:
    """Test a non-retryable error fails after a single attempt."""
    error = client_error("AccessDeniedException")
    operation = Mock(side_effect=error)
    on_retry = Mock()
    with pytest.raises(ClientError) as excinfo:
        retry(operation, 10, 5, is_role_propagation_error, on_retry=on_retry, sleep=Mock())
    assert excinfo.value is error
    operation.assert_called_once_with()
    on_retry.assert_not_called()


def test_retry_exhausted() -> None:
    """Test the last error is surfaced once attempts run out."""
    error = client_error("TooManyRequestsException")
    operation = Mock(side_effect=error)
    sleep = Mock()
    with pytest.raises(RetriesExhaustedError) as excinfo:
        retry(operation, 3000, 3, is_throttling_error, sleep=sleep)
    assert excinfo.value.attempts == 3
    assert excinfo.value.cause is error
    assert excinfo.value.__cause__ is error
    assert excinfo.value.code == "TooManyRequestsException"
    assert operation.call_count == 3
    assert sleep.call_count == 2


def test_retry_zero_attempts_still_calls_once() -> None:
    """Test a non-positive attempt limit still makes one attempt."""
    operation = Mock(side_effect=client_error("TooManyRequestsException"))
    with pytest.raises(RetriesExhaustedError):
        retry(operation, 0, 0, is_throttling_error, sleep=Mock())
    operation.assert_called_once_with()


@pytest.mark.parametrize(
    "error, expected",
    [
        (client_error("InvalidParameterValueException"), True),
        (client_error("ResourceConflictException"), False),
        (ValueError("InvalidParameterValueException"), False),
    ],
)
def test_is_role_propagation_error(error: Exception, expected: bool) -> None:
    """Test is_role_propagation_error."""
    assert is_role_propagation_error(error) is expected


def test_is_throttling_error() -> None:
    """Test is_throttling_error."""
    assert is_throttling_error(client_error("TooManyRequestsException"))
    assert not is_throttling_error(client_error("NotFoundException"))


class TestRetryingProxy:
    """Test RetryingProxy."""

    def test_retries_each_call(self) -> None:
        """Test methods of the target are retried."""
        target = MagicMock()
        target.create_rest_api.side_effect = [
            client_error("TooManyRequestsException", "CreateRestApi"),
            {"id": "api"},
        ]
        on_retry = Mock()
        sleep = Mock()
        proxy = RetryingProxy(target, 3000, 10, is_throttling_error, on_retry, sleep)
        assert proxy.create_rest_api(name="test") == {"id": "api"}
        assert target.create_rest_api.call_count == 2
        target.create_rest_api.assert_called_with(name="test")
        on_retry.assert_called_once_with()
        sleep.assert_called_once_with(3.0)

    def test_non_callable_attributes(self) -> None:
        """Test non-callable attributes are passed through."""
        target = Mock(meta="test-meta")
        assert RetryingProxy(target, 1, 1, is_throttling_error).meta == "test-meta"
