"""Invoke a deployed function when objects change in a bucket."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, cast

from botocore.exceptions import ClientError
from pydantic import BaseModel, Field

from ..config import ConfigStore
from ..constants import DEFAULT_S3_EVENTS
from ..exceptions import ReconciliationError, ValidationError
from ..policies import s3_access_policy
from ..reconcile import append_notification_rule, build_notification_rule
from ..utils import sanitize_iam_name, timestamp_ms
from ._base import BasePipeline

if TYPE_CHECKING:
    from .._logging import ProgressLogger, SlnLogger
    from ..providers.aws import ObjectStoreService
    from ._base import ServicesFactory

LOGGER = cast("SlnLogger", logging.getLogger(__name__))

S3_PRINCIPAL = "s3.amazonaws.com"


class AddS3EventOptions(BaseModel):
    """Options of ``sln add-s3-event-source``."""

    bucket: Optional[str] = None
    prefix: Optional[str] = None
    suffix: Optional[str] = None
    version: Optional[str] = None
    source: Path = Field(default_factory=Path.cwd)
    config: Optional[Path] = None
    events: str = ",".join(DEFAULT_S3_EVENTS)
    """Comma separated S3 event types."""

    @property
    def event_list(self) -> List[str]:
        """Event types as a list."""
        return [event.strip() for event in self.events.split(",") if event.strip()]

    def validate_options(self) -> None:
        """Reject unusable options.

        Raises:
            ValidationError: The first problem found.

        """
        if not self.bucket:
            raise ValidationError("bucket name not specified; specify it with --bucket")
        if not self.event_list:
            raise ValidationError("--events must name at least one event type")


def _notification_config(object_store: ObjectStoreService, bucket: str) -> Dict[str, Any]:
    try:
        return object_store.get_notification_config(bucket)
    except ClientError as exc:
        raise ReconciliationError(
            f"unable to read the notification configuration of {bucket}", exc
        ) from exc


class AddS3EventPipeline(BasePipeline):
    """Subscribe a function (or one of its aliases) to bucket notifications.

    Existing subscriptions of the bucket are kept. Two runs against the same
    bucket at the same time can overwrite each other's subscription.

    """

    def __init__(
        self,
        options: AddS3EventOptions,
        get_services: ServicesFactory,
        *,
        progress: Optional[ProgressLogger] = None,
    ) -> None:
        """Instantiate class.

        Args:
            options: Validated when the pipeline runs.
            get_services: Builds the AWS adapters for the deployed region.
            progress: Stage reporter.

        """
        super().__init__(get_services, progress)
        self.options = options

    def run(self) -> Dict[str, Any]:
        """Run the pipeline.

        Returns:
            The notification configuration written to the bucket.

        """
        self.options.validate_options()
        bucket = cast(str, self.options.bucket)
        config = ConfigStore.from_options(self.options.source, self.options.config).load()
        name = config.function.name
        services = self.get_services(config.function.region)
        suffix = timestamp_ms()

        with self.stage("reading function configuration"):
            function = services.function.get_configuration(name, self.options.version)
        with self.stage(f"granting {config.function.role} access to {bucket}"):
            services.identity.put_inline_policy(
                config.function.role,
                sanitize_iam_name(f"s3-{bucket}-access-{suffix}"),
                s3_access_policy(function.partition, bucket),
            )
        with self.stage(f"allowing {bucket} to invoke {name}"):
            services.function.add_invoke_permission(
                name,
                S3_PRINCIPAL,
                f"arn:{function.partition}:s3:::{bucket}",
                self.options.version,
                sanitize_iam_name(f"{bucket}-access-{suffix}"),
            )
        with self.stage(f"registering notification on {bucket}"):
            merged = append_notification_rule(
                _notification_config(services.object_store, bucket),
                build_notification_rule(
                    function.arn,
                    self.options.event_list,
                    self.options.prefix,
                    self.options.suffix,
                ),
            )
            services.object_store.put_notification_config(bucket, merged)
        return merged
