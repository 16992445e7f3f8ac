"""Publish a new version of a deployed function under an alias."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, cast

from pydantic import BaseModel, Field

from ..alias import AliasManager
from ..config import ConfigStore
from ..env_vars import read_env_vars_from_options
from ..exceptions import ValidationError
from ..reconcile import merge_env_vars
from ._base import BasePipeline

if TYPE_CHECKING:
    from .._logging import ProgressLogger, SlnLogger
    from ._base import ServicesFactory

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class SetVersionOptions(BaseModel):
    """Options of ``sln set-version``."""

    version: Optional[str] = None
    source: Path = Field(default_factory=Path.cwd)
    config: Optional[Path] = None
    update_env: Optional[str] = None
    set_env: Optional[str] = None
    update_env_from_json: Optional[str] = None
    set_env_from_json: Optional[str] = None
    env_kms_key_arn: Optional[str] = None

    def env_options(self) -> Dict[str, Optional[str]]:
        """Environment variable options that were supplied."""
        return {
            "set_env": self.set_env,
            "set_env_from_json": self.set_env_from_json,
            "update_env": self.update_env,
            "update_env_from_json": self.update_env_from_json,
        }

    def validate_options(self) -> None:
        """Reject unusable option combinations.

        Raises:
            ValidationError: The first problem found.

        """
        if not self.version:
            raise ValidationError("version is missing; specify it with --version")
        read_env_vars_from_options(self.env_options())


class SetVersionPipeline(BasePipeline):
    """Publish the current state of a function and point an alias at it."""

    def __init__(
        self,
        options: SetVersionOptions,
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
            Published version, alias and, when the function has a web API,
            the URL of the alias stage.

        """
        self.options.validate_options()
        label = cast(str, self.options.version)
        env = read_env_vars_from_options(self.options.env_options())
        config = ConfigStore.from_options(self.options.source, self.options.config).load()
        name = config.function.name
        region = config.function.region
        services = self.get_services(region)
        manager = AliasManager(services.function, services.gateway)

        if env or self.options.env_kms_key_arn:
            with self.stage("updating environment variables"):
                mode, proposed = env or ("merge", {})
                existing = services.function.get_configuration(name)
                services.function.update_configuration(
                    name,
                    merge_env_vars(existing.env_vars, proposed, mode),
                    self.options.env_kms_key_arn,
                )
        with self.stage("publishing version"):
            version = services.function.publish_version(name)
        with self.stage(f"pointing alias {label} at version {version}"):
            manager.ensure_alias(name, version, label)
        result: Dict[str, Any] = {"alias": label, "version": version}
        if config.gateway:
            with self.stage(f"deploying web api stage {label}"):
                result["url"] = manager.bind_stage(
                    name, config.gateway.id, label, services.account.owner, region
                )
        return result
