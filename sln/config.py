"""Deployment descriptor persisted next to the project."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union, cast

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .constants import DEFAULT_CONFIG_FILE
from .exceptions import DeploymentNotFoundError, InvalidDeploymentConfigError
from .utils import JsonEncoder

if TYPE_CHECKING:
    from ._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FunctionDefinition(_ConfigModel):
    """The deployed function."""

    name: str
    """Function name. Never changes once deployed."""

    region: str
    """Region the function lives in. Never changes once deployed."""

    role: str
    """Name of the execution role."""

    shared_role: Optional[bool] = Field(default=None, alias="sharedRole")
    """The role was referenced, not created, by ``sln create``."""


class GatewayDefinition(_ConfigModel):
    """REST API created for the function."""

    id: str
    module: Optional[str] = None
    """API module the routes were loaded from; absent for proxy APIs."""


class DeploymentConfig(_ConfigModel):
    """Identifiers of everything ``sln create`` deployed.

    Example:
        .. code-block:: json

            {
              "lambda": {"name": "hello", "role": "hello-role", "region": "us-east-1"},
              "api": {"id": "abc123", "module": "web"}
            }

    """

    function: FunctionDefinition = Field(..., alias="lambda")
    gateway: Optional[GatewayDefinition] = Field(default=None, alias="api")
    storage_key: Optional[str] = Field(default=None, alias="s3key")
    """Key of the uploaded artifact when ``--use-s3-bucket`` was used."""


class ConfigStore:
    """Load and save a :class:`DeploymentConfig`."""

    def __init__(self, path: Union[Path, str]) -> None:
        """Instantiate class.

        Args:
            path: Path to the descriptor file.

        """
        self.path = Path(path)

    @classmethod
    def from_options(
        cls, source: Union[Path, str, None] = None, config: Union[Path, str, None] = None
    ) -> ConfigStore:
        """Resolve the descriptor path from ``--source`` and ``--config``.

        ``--config`` wins; otherwise the default file name in ``--source``
        (or the current directory) is used.

        """
        if config:
            return cls(Path(config))
        return cls(Path(source or Path.cwd()) / DEFAULT_CONFIG_FILE)

    def exists(self) -> bool:
        """Whether the descriptor file exists."""
        return self.path.is_file()

    def load(self) -> DeploymentConfig:
        """Load the descriptor.

        Raises:
            DeploymentNotFoundError: The file does not exist.
            InvalidDeploymentConfigError: The file isn't JSON or a required
                field is missing.

        """
        if not self.exists():
            raise DeploymentNotFoundError(self.path)
        try:
            data = json.loads(self.path.read_text())
        except ValueError as exc:
            raise InvalidDeploymentConfigError(self.path, f"not valid JSON ({exc})") from exc
        try:
            return DeploymentConfig.model_validate(data)
        except pydantic.ValidationError as exc:
            reasons = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise InvalidDeploymentConfigError(self.path, reasons) from exc

    def save(self, config: DeploymentConfig) -> Path:
        """Write the descriptor, replacing any existing file."""
        self.path.write_text(
            json.dumps(
                config.model_dump(by_alias=True, exclude_none=True),
                cls=JsonEncoder,
                indent=2,
            )
            + "\n"
        )
        LOGGER.verbose("saved deployment config to %s", self.path)
        return self.path
