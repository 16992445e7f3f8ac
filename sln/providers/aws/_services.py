"""Adapters used by the provisioning pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...constants import GATEWAY_RETRY_ATTEMPTS, GATEWAY_RETRY_DELAY_MS
from ...retry import RetryingProxy, is_throttling_error
from ._account import AccountDetails
from ._function import FunctionService
from ._gateway import GatewayService
from ._identity import IdentityService
from ._interceptors import CallLoggingProxy
from ._object_store import ObjectStoreService

if TYPE_CHECKING:
    import boto3

    from ..._logging import ProgressLogger


@dataclass
class AwsServices:
    """Every remote capability a pipeline can drive."""

    account: AccountDetails
    function: FunctionService
    gateway: GatewayService
    identity: IdentityService
    object_store: ObjectStoreService

    @classmethod
    def from_session(cls, session: boto3.Session, progress: ProgressLogger) -> AwsServices:
        """Build adapters from a boto3 session.

        Every client reports its calls to ``progress``. API Gateway calls are
        additionally retried when throttled.

        """

        def _client(service_name: str) -> Any:
            return CallLoggingProxy(
                session.client(service_name), service_name, progress.log_api_call
            )

        gateway_client = RetryingProxy(
            _client("apigateway"),
            GATEWAY_RETRY_DELAY_MS,
            GATEWAY_RETRY_ATTEMPTS,
            is_throttling_error,
            on_retry=lambda: progress.log_stage("AWS rate limit reached; retrying"),
        )
        return cls(
            account=AccountDetails(_client("sts")),
            function=FunctionService(_client("lambda")),
            gateway=GatewayService(gateway_client),
            identity=IdentityService(_client("iam")),
            object_store=ObjectStoreService(_client("s3")),
        )
