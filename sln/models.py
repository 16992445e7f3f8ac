"""Resources created or referenced by sln."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ExecutionRole(BaseModel):
    """IAM role assumed by the function."""

    name: str
    """Role name."""

    arn: str
    """Role ARN."""

    created: bool = False
    """Whether the role was created by this deployment.

    Roles that were only referenced are shared and never modified beyond
    best-effort policy attachment.

    """


class FunctionSpec(BaseModel):
    """Arguments used to create a Lambda function."""

    name: str
    role_arn: str
    handler: str
    runtime: str
    code: Dict[str, Any]
    """Either ``{"ZipFile": ...}`` style content or ``S3Bucket``/``S3Key``."""

    description: Optional[str] = None
    memory: Optional[int] = None
    timeout: Optional[int] = None
    env_vars: Optional[Dict[str, str]] = None
    kms_key_arn: Optional[str] = None
    layers: List[str] = Field(default_factory=list)
    publish: bool = True


class FunctionResource(BaseModel):
    """A deployed Lambda function."""

    name: str
    arn: str
    version: str
    """Version published when the function was created."""


class FunctionConfiguration(BaseModel):
    """Subset of ``GetFunctionConfiguration`` used by the pipelines."""

    name: str
    arn: str
    version: str
    env_vars: Dict[str, str] = Field(default_factory=dict)
    kms_key_arn: Optional[str] = None

    @property
    def partition(self) -> str:
        """AWS partition parsed from the function ARN."""
        return self.arn.split(":")[1]


class Alias(BaseModel):
    """Named pointer at an immutable function version."""

    function_name: str
    label: str
    target_version: str


class OwnerInfo(BaseModel):
    """The AWS account the pipeline is deploying into."""

    account_id: str
    partition: str
