"""State threaded through a single pipeline run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from pathlib import Path

    from ..models import ExecutionRole


@dataclass
class PipelineContext:
    """Everything one run of a pipeline learns along the way.

    Owned by a single run and never persisted; the staging directory it
    points at is removed when the run ends.

    """

    function_name: Optional[str] = None
    function_description: Optional[str] = None
    function_arn: Optional[str] = None
    function_version: Optional[str] = None
    role: Optional[ExecutionRole] = None
    owner_account_id: Optional[str] = None
    partition: Optional[str] = None
    staging_dir: Optional[Path] = None
    package_dir: Optional[Path] = None
    artifact_path: Optional[Path] = None
    storage_key: Optional[str] = None
    env_vars: Dict[str, str] = field(default_factory=dict)
    api: Optional[Dict[str, Any]] = None
    """Deployed API metadata (``id``, ``module``, ``url``, ``deploy``)."""
