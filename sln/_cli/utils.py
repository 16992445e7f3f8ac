"""CLI utils."""

from __future__ import annotations

import json
import logging
from functools import cached_property
from typing import TYPE_CHECKING, Any, Dict, cast

import click

from ..context import SlnContext
from ..utils import JsonEncoder

if TYPE_CHECKING:
    from .._logging import SlnLogger
    from ..providers.aws import AwsServices

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class CliContext:
    """CLI context object."""

    def __init__(
        self,
        *,
        debug: int = 0,
        no_color: bool = False,
        verbose: bool = False,
        **_: Any,
    ) -> None:
        """Instantiate class.

        Args:
            debug: Debug level.
            no_color: Whether color was disabled in logs.
            verbose: Whether to display verbose logs.

        """
        self.debug = debug
        self.no_color = no_color
        self.verbose = verbose

    @cached_property
    def sln_context(self) -> SlnContext:
        """Context shared by the pipelines of this invocation."""
        return SlnContext()

    def get_services(self, region: str) -> AwsServices:
        """Build the AWS adapters for a region."""
        LOGGER.debug("building AWS clients for %s", region)
        return self.sln_context.get_services(region)


def drop_unset(values: Dict[str, Any]) -> Dict[str, Any]:
    """Remove options that weren't supplied so model defaults apply."""
    return {key: val for key, val in values.items() if val is not None}


def echo_json(data: Any) -> None:
    """Print a command result."""
    click.echo(json.dumps(data, cls=JsonEncoder, indent=4))
