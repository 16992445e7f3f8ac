"""Utility functions."""

from __future__ import annotations

import re
import time
from typing import Optional, Union

from ._json_encoder import JsonEncoder  # noqa: F401

IAM_NAME_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")


def sanitize_iam_name(name: str) -> str:
    """Replace characters IAM and Lambda statement IDs don't accept with ``-``."""
    return IAM_NAME_INVALID_CHARS.sub("-", name)


def str_to_bool(value: Optional[Union[bool, str]]) -> bool:
    """Convert a string flag (e.g. from an environment variable) to a bool."""
    if isinstance(value, bool):
        return value
    if not value:
        return False
    return value.strip().lower() in ("1", "on", "t", "true", "y", "yes")


def timestamp_ms() -> int:
    """Current time in milliseconds; used to make resource names unique."""
    return int(time.time() * 1000)
