"""Point function aliases and API stages at versions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, cast

from .api import allow_api_invocation, api_url
from .constants import API_STAGE_VERSION_VARIABLE
from .reconcile import alias_target, merge_stage_variables

if TYPE_CHECKING:
    from ._logging import SlnLogger
    from .models import Alias, OwnerInfo
    from .providers.aws import FunctionService, GatewayService

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class AliasManager:
    """Keep alias labels and their API stages in step.

    Both operations are idempotent; running them again with the same
    arguments leaves AWS in the same state.

    """

    def __init__(
        self, function: FunctionService, gateway: Optional[GatewayService] = None
    ) -> None:
        """Instantiate class.

        Args:
            function: Lambda adapter.
            gateway: API Gateway adapter. Required for :meth:`bind_stage`.

        """
        self.function = function
        self.gateway = gateway

    def ensure_alias(self, function_name: str, version: str, label: str) -> Alias:
        """Create or move an alias so it targets ``version``."""
        target = alias_target(function_name, label, version)
        LOGGER.debug("pointing %s:%s at %s", function_name, label, version)
        return self.function.create_or_update_alias(
            target.function_name, target.target_version, target.label
        )

    def bind_stage(
        self,
        function_name: str,
        api_id: str,
        label: str,
        owner: OwnerInfo,
        region: str,
    ) -> str:
        """Deploy an API stage named after an alias that invokes that alias.

        Other stage variables already set on the stage are kept.

        Returns:
            URL of the stage.

        """
        if not self.gateway:
            raise ValueError("a gateway adapter is required to bind API stages")
        allow_api_invocation(self.function, function_name, label, api_id, owner, region)
        variables = merge_stage_variables(
            self.gateway.get_stage_variables(api_id, label),
            API_STAGE_VERSION_VARIABLE,
            label,
        )
        self.gateway.create_deployment(api_id, label, variables)
        return api_url(api_id, region, label)
