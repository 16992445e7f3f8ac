"""AWS API Gateway adapter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, cast

from botocore.exceptions import ClientError

from ...exceptions import error_code

if TYPE_CHECKING:
    from mypy_boto3_apigateway.client import APIGatewayClient

    from ..._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class GatewayService:
    """REST API management.

    API Gateway enforces low request rate ceilings; the client passed in is
    expected to already be wrapped by :class:`sln.retry.RetryingProxy`.

    """

    def __init__(self, client: APIGatewayClient | Any) -> None:
        """Instantiate class.

        Args:
            client: boto3 API Gateway client.

        """
        self.client = client

    def create_api(self, name: str) -> str:
        """Create a REST API and return its ID."""
        return self.client.create_rest_api(name=name)["id"]

    def create_deployment(
        self, api_id: str, stage_name: str, stage_variables: Mapping[str, str]
    ) -> str:
        """Deploy the current resource tree to a stage.

        Returns:
            The deployment ID.

        """
        response = self.client.create_deployment(
            restApiId=api_id, stageName=stage_name, variables=dict(stage_variables)
        )
        return response["id"]

    def get_stage_variables(self, api_id: str, stage_name: str) -> Dict[str, str]:
        """Get the variables of a stage; a stage that doesn't exist has none."""
        try:
            response = self.client.get_stage(restApiId=api_id, stageName=stage_name)
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                return {}
            raise
        return dict(response.get("variables") or {})

    def get_resources(self, api_id: str) -> List[Dict[str, Any]]:
        """List every resource of the API."""
        resources: List[Dict[str, Any]] = []
        position: Optional[str] = None
        while True:
            kwargs: Dict[str, Any] = {"restApiId": api_id, "limit": 500}
            if position:
                kwargs["position"] = position
            response = self.client.get_resources(**kwargs)
            resources.extend(response.get("items", []))
            position = response.get("position")
            if not position:
                return resources

    def create_resource(self, api_id: str, parent_id: str, path_part: str) -> str:
        """Create a child resource and return its ID."""
        response = self.client.create_resource(
            restApiId=api_id, parentId=parent_id, pathPart=path_part
        )
        return response["id"]

    def delete_resource(self, api_id: str, resource_id: str) -> None:
        """Delete a resource and everything beneath it."""
        self.client.delete_resource(restApiId=api_id, resourceId=resource_id)

    def put_method(
        self,
        api_id: str,
        resource_id: str,
        http_method: str,
        authorization_type: str = "NONE",
        **kwargs: Any,
    ) -> None:
        """Add a method to a resource."""
        self.client.put_method(
            restApiId=api_id,
            resourceId=resource_id,
            httpMethod=http_method,
            authorizationType=authorization_type,
            **kwargs,
        )

    def put_integration(
        self, api_id: str, resource_id: str, http_method: str, uri: str
    ) -> None:
        """Send requests for a method to Lambda using proxy integration."""
        self.client.put_integration(
            restApiId=api_id,
            resourceId=resource_id,
            httpMethod=http_method,
            type="AWS_PROXY",
            integrationHttpMethod="POST",
            uri=uri,
        )

    def delete_method(self, api_id: str, resource_id: str, http_method: str) -> None:
        """Remove a method from a resource."""
        self.client.delete_method(
            restApiId=api_id, resourceId=resource_id, httpMethod=http_method
        )
