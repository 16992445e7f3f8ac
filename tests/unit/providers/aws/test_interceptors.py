"""Test sln.providers.aws._interceptors."""

from __future__ import annotations

from unittest.mock import MagicMock, Mock, call

from botocore.exceptions import ClientError

from sln.providers.aws import CallLoggingProxy
from sln.retry import RetryingProxy, is_throttling_error


class TestCallLoggingProxy:
    """Test CallLoggingProxy."""

    def test_logs_calls(self) -> None:
        """Test each call is reported with its parameters before it is sent."""
        target = MagicMock()
        target.get_role.return_value = {"Role": {}}
        log = Mock()
        proxy = CallLoggingProxy(target, "iam", log)
        assert proxy.get_role(RoleName="test") == {"Role": {}}
        log.assert_called_once_with("iam", "get_role", {"RoleName": "test"})
        target.get_role.assert_called_once_with(RoleName="test")

    def test_skips_helpers(self) -> None:
        """Test waiters and paginators are not reported."""
        target = MagicMock()
        log = Mock()
        proxy = CallLoggingProxy(target, "lambda", log)
        proxy.get_waiter("function_updated")
        proxy.get_paginator("list_functions")
        log.assert_not_called()

    def test_composes_with_retry(self) -> None:
        """Test every attempt is reported when retries wrap the interceptor."""
        target = MagicMock()
        target.create_rest_api.side_effect = [
            ClientError({"Error": {"Code": "TooManyRequestsException"}}, "CreateRestApi"),
            {"id": "abc123"},
        ]
        log = Mock()
        proxy = RetryingProxy(
            CallLoggingProxy(target, "apigateway", log),
            3000,
            10,
            is_throttling_error,
            sleep=Mock(),
        )
        assert proxy.create_rest_api(name="test") == {"id": "abc123"}
        assert log.call_args_list == [
            call("apigateway", "create_rest_api", {"name": "test"}),
            call("apigateway", "create_rest_api", {"name": "test"}),
        ]
