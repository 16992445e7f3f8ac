"""AWS IAM adapter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from ...models import ExecutionRole

if TYPE_CHECKING:
    from mypy_boto3_iam.client import IAMClient

    from ..._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


def is_role_arn(value: str) -> bool:
    """Determine if a role reference is a fully qualified ARN."""
    return value.startswith("arn:") and ":role/" in value


class IdentityService:
    """Execution role management.

    Nothing here retries; callers decide where eventual consistency is
    expected.

    """

    def __init__(self, client: IAMClient | Any) -> None:
        """Instantiate class.

        Args:
            client: boto3 IAM client (optionally wrapped by an interceptor).

        """
        self.client = client

    def get_role(self, name: str) -> ExecutionRole:
        """Get an existing role by name."""
        response = self.client.get_role(RoleName=name)
        return ExecutionRole(
            name=response["Role"]["RoleName"], arn=response["Role"]["Arn"], created=False
        )

    def create_role(self, name: str, trust_policy_document: str) -> ExecutionRole:
        """Create a new role.

        Args:
            name: Name of the role.
            trust_policy_document: JSON assume role policy.

        """
        response = self.client.create_role(
            RoleName=name, AssumeRolePolicyDocument=trust_policy_document
        )
        LOGGER.debug("created role %s", response["Role"]["Arn"])
        return ExecutionRole(
            name=response["Role"]["RoleName"], arn=response["Role"]["Arn"], created=True
        )

    def put_inline_policy(self, role_name: str, policy_name: str, document: str) -> None:
        """Add or replace an inline policy on a role."""
        self.client.put_role_policy(
            RoleName=role_name, PolicyName=policy_name, PolicyDocument=document
        )
