"""AWS S3 adapter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, cast

if TYPE_CHECKING:
    from pathlib import Path

    from mypy_boto3_s3.client import S3Client

    from ..._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class ObjectStoreService:
    """Bucket notification configuration and artifact upload."""

    def __init__(self, client: S3Client | Any) -> None:
        """Instantiate class.

        Args:
            client: boto3 S3 client (optionally wrapped by an interceptor).

        """
        self.client = client

    def get_notification_config(self, bucket: str) -> Dict[str, Any]:
        """Get a bucket's notification configuration.

        Response metadata is dropped so the result can be written back as is.
        A bucket without notifications results in an empty dict.

        """
        response = self.client.get_bucket_notification_configuration(Bucket=bucket)
        return {k: v for k, v in (response or {}).items() if k != "ResponseMetadata"}

    def put_notification_config(self, bucket: str, config: Mapping[str, Any]) -> None:
        """Replace a bucket's notification configuration."""
        self.client.put_bucket_notification_configuration(
            Bucket=bucket, NotificationConfiguration=dict(config)
        )

    def upload_artifact(
        self, bucket: str, key: str, path: Path, sse: Optional[str] = None
    ) -> Dict[str, str]:
        """Upload a deployment package.

        Returns:
            The ``Code`` argument for creating a function from the object.

        """
        kwargs: Dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": path.read_bytes(),
            "ContentType": "application/zip",
        }
        if sse:
            kwargs["ServerSideEncryption"] = sse
        LOGGER.info("uploading package to s3://%s/%s", bucket, key)
        self.client.put_object(**kwargs)
        return {"S3Bucket": bucket, "S3Key": key}
