"""AWS account."""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Any

from ...models import OwnerInfo

if TYPE_CHECKING:
    from mypy_boto3_sts.client import STSClient


class AccountDetails:
    """AWS account details."""

    def __init__(self, client: STSClient | Any) -> None:
        """Instantiate class.

        Args:
            client: boto3 STS client.

        """
        self.client = client

    @cached_property
    def owner(self) -> OwnerInfo:
        """Get the ID and partition of the AWS account being deployed into."""
        response = self.client.get_caller_identity()
        account_id = response.get("Account")
        if not account_id:
            raise ValueError("get_caller_identity did not return Account")
        return OwnerInfo(account_id=account_id, partition=response["Arn"].split(":")[1])
