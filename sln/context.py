"""sln context."""

from __future__ import annotations

import logging
import os
from functools import cached_property
from typing import TYPE_CHECKING, Any, Dict, Optional, Union, cast

import boto3

from ._logging import ProgressLogger
from .providers.aws import AwsServices

if TYPE_CHECKING:
    from ._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class SlnContext:
    """Information shared by every command of a single CLI invocation."""

    env_vars: Dict[str, str]
    """Environment variables; credentials and region are read from here."""

    logger: Union[logging.LoggerAdapter, SlnLogger]
    """Custom logger."""

    def __init__(
        self,
        *,
        env_vars: Optional[Dict[str, str]] = None,
        logger: Union[logging.LoggerAdapter, SlnLogger] = LOGGER,
        **_: Any,
    ) -> None:
        """Instantiate class.

        Args:
            env_vars: Environment variables. Defaults to a copy of ``os.environ``.
            logger: Custom logger.

        """
        self.env_vars = env_vars if env_vars is not None else os.environ.copy()
        self.logger = logger

    @cached_property
    def progress(self) -> ProgressLogger:
        """Stage reporting for pipelines."""
        return ProgressLogger(self.logger)

    def get_services(self, region: Optional[str] = None) -> AwsServices:
        """Get the AWS adapters for a region."""
        return AwsServices.from_session(self.get_session(region=region), self.progress)

    def get_session(
        self,
        *,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        aws_session_token: Optional[str] = None,
        profile: Optional[str] = None,
        region: Optional[str] = None,
    ) -> boto3.Session:
        """Create a boto3 session.

        If ``profile`` is provided, it will take priority.

        If no credential arguments are passed, will attempt to find them in
        environment variables.

        Args:
            aws_access_key_id: AWS Access Key ID.
            aws_secret_access_key: AWS secret Access Key.
            aws_session_token: AWS session token.
            profile: The profile for the session.
            region: The region for the session.

        """
        if profile:
            self.logger.debug(
                'building session using profile "%s" in region "%s"',
                profile,
                region or "default",
            )
        else:
            aws_access_key_id = aws_access_key_id or self.env_vars.get("AWS_ACCESS_KEY_ID")
            aws_secret_access_key = aws_secret_access_key or self.env_vars.get(
                "AWS_SECRET_ACCESS_KEY"
            )
            aws_session_token = aws_session_token or self.env_vars.get("AWS_SESSION_TOKEN")
            if aws_access_key_id:
                self.logger.debug(
                    'building session with Access Key "%s" in region "%s"',
                    aws_access_key_id,
                    region or "default",
                )
        return boto3.Session(
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            aws_session_token=aws_session_token,
            region_name=region
            or self.env_vars.get("AWS_REGION")
            or self.env_vars.get("AWS_DEFAULT_REGION"),
            profile_name=profile,
        )
