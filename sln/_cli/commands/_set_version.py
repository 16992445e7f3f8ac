"""``sln set-version`` command."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

import click
from pydantic import ValidationError

from ...exceptions import SlnError
from ...pipeline import SetVersionOptions, SetVersionPipeline
from .. import options
from ..utils import drop_unset, echo_json

if TYPE_CHECKING:
    from ..._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__.replace("._", ".")))


@click.command("set-version", short_help="publish a version under an alias")
@click.option("--version", metavar="<label>", help="Alias to point at the new version.")
@options.source
@options.config
@click.option(
    "--update-env",
    metavar="<KEY=VALUE,...>",
    help="Comma separated environment variables to set, merged with existing ones.",
)
@options.set_env
@click.option(
    "--update-env-from-json",
    metavar="<path>",
    help="JSON file with environment variables to set, merged with existing ones.",
)
@options.set_env_from_json
@options.env_kms_key_arn
@options.debug
@options.no_color
@options.verbose
@click.pass_context
def set_version(ctx: click.Context, debug: int, **kwargs: Any) -> None:
    """Publish the current function and point an alias (and its API stage) at it."""
    kwargs.pop("no_color", None)
    kwargs.pop("verbose", None)
    try:
        result = SetVersionPipeline(
            SetVersionOptions.model_validate(drop_unset(kwargs)),
            ctx.obj.get_services,
            progress=ctx.obj.sln_context.progress,
        ).run()
    except ValidationError as err:
        LOGGER.error(err, exc_info=bool(debug))
        ctx.exit(1)
    except SlnError as err:
        LOGGER.error(err.message, exc_info=bool(debug))
        ctx.exit(1)
    LOGGER.success("%s now points at version %s", result["alias"], result["version"])
    echo_json(result)
