"""Allow API Gateway to invoke the function."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, cast

from ..utils import sanitize_iam_name, timestamp_ms
from ._url import execute_api_source_arn

if TYPE_CHECKING:
    from .._logging import SlnLogger
    from ..models import OwnerInfo
    from ..providers.aws import FunctionService

LOGGER = cast("SlnLogger", logging.getLogger(__name__))

API_GATEWAY_PRINCIPAL = "apigateway.amazonaws.com"


def _statement_source_arn(statement: Dict[str, Any]) -> str:
    return statement.get("Condition", {}).get("ArnLike", {}).get("AWS:SourceArn", "")


def allow_api_invocation(
    function: FunctionService,
    function_name: str,
    alias: str,
    api_id: str,
    owner: OwnerInfo,
    region: str,
) -> bool:
    """Grant the REST API permission to invoke a function alias.

    Existing statements are read first so repeated deployments of the same
    stage don't pile up duplicate permissions.

    Returns:
        Whether a permission was added.

    """
    source_arn = execute_api_source_arn(owner.partition, region, owner.account_id, api_id)
    for statement in function.get_policy_statements(function_name, alias):
        if _statement_source_arn(statement) == source_arn:
            LOGGER.debug("%s:%s already allows invocation by %s", function_name, alias, api_id)
            return False
    function.add_invoke_permission(
        function_name,
        API_GATEWAY_PRINCIPAL,
        source_arn,
        alias,
        sanitize_iam_name(f"web-api-access-{alias}-{timestamp_ms()}"),
    )
    return True
