"""``sln add-s3-event-source`` command."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

import click
from pydantic import ValidationError

from ...constants import DEFAULT_S3_EVENTS
from ...exceptions import SlnError
from ...pipeline import AddS3EventOptions, AddS3EventPipeline
from .. import options
from ..utils import drop_unset, echo_json

if TYPE_CHECKING:
    from ..._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__.replace("._", ".")))


@click.command("add-s3-event-source", short_help="invoke the function on bucket events")
@click.option("--bucket", metavar="<bucket>", help="Bucket to subscribe to.")
@click.option("--prefix", metavar="<prefix>", help="Only objects with keys starting with this.")
@click.option("--suffix", metavar="<suffix>", help="Only objects with keys ending with this.")
@click.option("--version", metavar="<label>", help="Alias or version to invoke.")
@options.source
@options.config
@click.option(
    "--events",
    default=",".join(DEFAULT_S3_EVENTS),
    show_default=True,
    metavar="<event,...>",
    help="Comma separated S3 event types.",
)
@options.debug
@options.no_color
@options.verbose
@click.pass_context
def add_s3_event_source(ctx: click.Context, debug: int, **kwargs: Any) -> None:
    """Add a bucket notification invoking the function.

    Existing notifications of the bucket are kept.

    """
    kwargs.pop("no_color", None)
    kwargs.pop("verbose", None)
    try:
        result = AddS3EventPipeline(
            AddS3EventOptions.model_validate(drop_unset(kwargs)),
            ctx.obj.get_services,
            progress=ctx.obj.sln_context.progress,
        ).run()
    except ValidationError as err:
        LOGGER.error(err, exc_info=bool(debug))
        ctx.exit(1)
    except SlnError as err:
        LOGGER.error(err.message, exc_info=bool(debug))
        ctx.exit(1)
    LOGGER.success("added %s notification", kwargs["bucket"])
    echo_json(result)
