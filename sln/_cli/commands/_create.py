"""``sln create`` command."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, cast

import click
from pydantic import ValidationError

from ...constants import (
    DEFAULT_AWS_DELAY_MS,
    DEFAULT_AWS_RETRIES,
    DEFAULT_RUNTIME,
    MEMORY_MIN,
)
from ...exceptions import SlnError
from ...pipeline import CreateOptions, CreatePipeline
from .. import options
from ..utils import drop_unset, echo_json

if TYPE_CHECKING:
    from ..._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__.replace("._", ".")))


@click.command("create", short_help="create a new function")
@click.option("--region", envvar="AWS_REGION", metavar="<region>", help="AWS region.")
@click.option("--handler", metavar="<module.function>", help="Function handler.")
@click.option(
    "--api-module",
    metavar="<module>",
    help="Module providing api_config(); creates a REST API from its routes.",
)
@click.option(
    "--deploy-proxy-api",
    is_flag=True,
    default=False,
    help="Create a REST API forwarding every request to the handler.",
)
@click.option("--name", metavar="<name>", help="Function name. [default: pyproject.toml name]")
@click.option("--version", metavar="<label>", help="Alias to point at the published version.")
@options.source
@options.config
@click.option(
    "--policies",
    metavar="<dir-or-glob>",
    help="Directory or glob of IAM policy documents to attach to the role.",
)
@click.option(
    "--allow-recursion",
    is_flag=True,
    default=False,
    help="Allow the function to invoke itself.",
)
@click.option("--role", metavar="<name|arn>", help="Existing execution role.")
@click.option("--runtime", default=DEFAULT_RUNTIME, show_default=True, help="Lambda runtime.")
@click.option("--description", metavar="<text>", help="Function description.")
@click.option("--memory", type=int, default=MEMORY_MIN, show_default=True, help="Memory in MB.")
@click.option("--timeout", type=int, default=3, show_default=True, help="Timeout in seconds.")
@click.option("--layers", metavar="<arn,...>", help="Comma separated layer ARNs.")
@click.option(
    "--use-local-dependencies",
    is_flag=True,
    default=False,
    help="Package dependencies vendored in the project instead of running pip.",
)
@click.option("--pip-options", metavar="<args>", help="Extra arguments for pip install.")
@click.option(
    "--cache-api-config",
    metavar="<stage-variable>",
    help="Stage variable holding a hash of the routes; unchanged routes are not rebuilt.",
)
@click.option("--keep", is_flag=True, default=False, help="Keep the deployment archive.")
@click.option("--use-s3-bucket", metavar="<bucket>", help="Upload the archive to this bucket.")
@click.option("--s3-key", metavar="<key>", help="Object key for the uploaded archive.")
@click.option("--s3-sse", metavar="<algorithm>", help="Server side encryption for the archive.")
@click.option(
    "--aws-delay",
    type=int,
    envvar="AWS_DELAY",
    default=DEFAULT_AWS_DELAY_MS,
    show_default=True,
    help="Milliseconds to wait between function creation attempts.",
)
@click.option(
    "--aws-retries",
    type=int,
    envvar="AWS_RETRIES",
    default=DEFAULT_AWS_RETRIES,
    show_default=True,
    help="Function creation attempts while the role propagates.",
)
@options.set_env
@options.set_env_from_json
@options.env_kms_key_arn
@options.debug
@options.no_color
@options.verbose
@click.pass_context
def create(ctx: click.Context, debug: int, layers: Optional[str], **kwargs: Any) -> None:
    """Create a Lambda function from the project in the source directory.

    \b
    Process
    -------
    1. Validates options.
    2. Packages the project (installing requirements.txt with pip).
    3. Creates or references the execution role.
    4. Creates the function, retrying while the role propagates.
    5. Points the "latest" alias and the --version alias at it.
    6. Optionally creates a REST API.
    7. Saves the deployment config (sln.json).

    """  # noqa: D301
    kwargs.pop("no_color", None)
    kwargs.pop("verbose", None)
    if layers:
        kwargs["layers"] = [layer.strip() for layer in layers.split(",") if layer.strip()]
    try:
        result = CreatePipeline(
            CreateOptions.model_validate(drop_unset(kwargs)),
            ctx.obj.get_services,
            progress=ctx.obj.sln_context.progress,
        ).run()
    except ValidationError as err:
        LOGGER.error(err, exc_info=bool(debug))
        ctx.exit(1)
    except SlnError as err:
        LOGGER.error(err.message, exc_info=bool(debug))
        ctx.exit(1)
    LOGGER.success("created %s", result["lambda"]["name"])
    echo_json(result)
