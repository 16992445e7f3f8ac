"""Test sln.providers.aws._services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sln.providers.aws import (
    AccountDetails,
    FunctionService,
    GatewayService,
    IdentityService,
    ObjectStoreService,
)
from sln.retry import RetryingProxy

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from ...factories import MockSlnContext


class TestAwsServices:
    """Test AwsServices."""

    def test_from_session(self, sln_context: MockSlnContext) -> None:
        """Test every adapter is built from the session."""
        services = sln_context.get_services()
        assert isinstance(services.account, AccountDetails)
        assert isinstance(services.function, FunctionService)
        assert isinstance(services.gateway, GatewayService)
        assert isinstance(services.identity, IdentityService)
        assert isinstance(services.object_store, ObjectStoreService)
        assert isinstance(services.gateway.client, RetryingProxy)

    def test_calls_are_reported(
        self, mocker: MockerFixture, sln_context: MockSlnContext
    ) -> None:
        """Test calls made through an adapter reach the progress logger."""
        log_api_call = mocker.patch.object(sln_context.progress, "log_api_call")
        stubber = sln_context.add_stubber("lambda")
        stubber.add_response("publish_version", {"Version": "2"}, {"FunctionName": "test"})
        services = sln_context.get_services()
        with stubber:
            assert services.function.publish_version("test") == "2"
        stubber.assert_no_pending_responses()
        log_api_call.assert_called_once_with(
            "lambda", "publish_version", {"FunctionName": "test"}
        )
