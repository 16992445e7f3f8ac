"""AWS Lambda adapter."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, cast

from botocore.exceptions import ClientError

from ...exceptions import error_code
from ...models import Alias, FunctionConfiguration, FunctionResource, FunctionSpec

if TYPE_CHECKING:
    from mypy_boto3_lambda.client import LambdaClient

    from ..._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class FunctionService:
    """Create, configure, publish and alias a Lambda function."""

    def __init__(self, client: LambdaClient | Any) -> None:
        """Instantiate class.

        Args:
            client: boto3 Lambda client (optionally wrapped by an interceptor).

        """
        self.client = client

    def get_configuration(
        self, name: str, qualifier: Optional[str] = None
    ) -> FunctionConfiguration:
        """Get the configuration of a function or one of its versions/aliases."""
        kwargs: Dict[str, Any] = {"FunctionName": name}
        if qualifier:
            kwargs["Qualifier"] = qualifier
        response = self.client.get_function_configuration(**kwargs)
        return FunctionConfiguration(
            name=response["FunctionName"],
            arn=response["FunctionArn"],
            version=response.get("Version", "$LATEST"),
            env_vars=(response.get("Environment") or {}).get("Variables") or {},
            kms_key_arn=response.get("KMSKeyArn"),
        )

    def create(self, spec: FunctionSpec) -> FunctionResource:
        """Create a function.

        A name that is already taken results in ``ResourceConflictException``;
        it is never converted into an update.

        """
        kwargs: Dict[str, Any] = {
            "Code": spec.code,
            "FunctionName": spec.name,
            "Handler": spec.handler,
            "Publish": spec.publish,
            "Role": spec.role_arn,
            "Runtime": spec.runtime,
        }
        if spec.description:
            kwargs["Description"] = spec.description
        if spec.memory:
            kwargs["MemorySize"] = spec.memory
        if spec.timeout:
            kwargs["Timeout"] = spec.timeout
        if spec.env_vars:
            kwargs["Environment"] = {"Variables": spec.env_vars}
        if spec.kms_key_arn:
            kwargs["KMSKeyArn"] = spec.kms_key_arn
        if spec.layers:
            kwargs["Layers"] = spec.layers
        response = self.client.create_function(**kwargs)
        return FunctionResource(
            name=response["FunctionName"],
            arn=response["FunctionArn"],
            version=response["Version"],
        )

    def publish_version(self, name: str) -> str:
        """Publish the current code and configuration as a new version."""
        return self.client.publish_version(FunctionName=name)["Version"]

    def create_or_update_alias(self, name: str, version: str, label: str) -> Alias:
        """Point an alias at a version, creating the alias if needed."""
        try:
            self.client.create_alias(FunctionName=name, FunctionVersion=version, Name=label)
        except ClientError as err:
            if error_code(err) != "ResourceConflictException":
                raise
            LOGGER.debug("alias %s already exists on %s; updating", label, name)
            self.client.update_alias(FunctionName=name, FunctionVersion=version, Name=label)
        return Alias(function_name=name, label=label, target_version=version)

    def add_invoke_permission(
        self,
        name: str,
        principal: str,
        source_arn: str,
        qualifier: Optional[str],
        statement_id: str,
    ) -> None:
        """Allow a service principal to invoke the function."""
        kwargs: Dict[str, Any] = {
            "Action": "lambda:InvokeFunction",
            "FunctionName": name,
            "Principal": principal,
            "SourceArn": source_arn,
            "StatementId": statement_id,
        }
        if qualifier:
            kwargs["Qualifier"] = qualifier
        self.client.add_permission(**kwargs)

    def get_policy_statements(
        self, name: str, qualifier: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Get the statements of the function's resource policy.

        A function without a resource policy has no statements.

        """
        kwargs: Dict[str, Any] = {"FunctionName": name}
        if qualifier:
            kwargs["Qualifier"] = qualifier
        try:
            response = self.client.get_policy(**kwargs)
        except ClientError as err:
            if error_code(err) == "ResourceNotFoundException":
                return []
            raise
        return json.loads(response["Policy"]).get("Statement", [])

    def update_configuration(
        self,
        name: str,
        env_vars: Mapping[str, str],
        kms_key_arn: Optional[str] = None,
    ) -> None:
        """Replace the environment variables of the function.

        Waits for the update to finish so a version can be published right
        after.

        """
        kwargs: Dict[str, Any] = {
            "FunctionName": name,
            "Environment": {"Variables": dict(env_vars)},
        }
        if kms_key_arn:
            kwargs["KMSKeyArn"] = kms_key_arn
        self.client.update_function_configuration(**kwargs)
        self.client.get_waiter("function_updated").wait(FunctionName=name)
