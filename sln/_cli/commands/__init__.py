"""sln command import aggregation."""

from ._add_s3_event_source import add_s3_event_source
from ._create import create
from ._set_version import set_version

__all__ = [
    "add_s3_event_source",
    "create",
    "set_version",
]
