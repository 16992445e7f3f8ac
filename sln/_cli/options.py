"""Click options shared by sln commands."""

# pylint: disable=invalid-name
import click

config = click.option(
    "--config",
    metavar="<path>",
    help="Deployment config file. [default: <source>/sln.json]",
)

debug = click.option(
    "--debug",
    count=True,
    envvar="DEBUG",
    help="Supply once to display sln debug logs. Supply twice to display all debug logs.",
)

no_color = click.option(
    "--no-color",
    default=False,
    envvar="SLN_NO_COLOR",
    is_flag=True,
    help="Disable color in sln's logs.",
)

source = click.option(
    "--source",
    metavar="<dir>",
    help="Directory with the project files. [default: current directory]",
)

verbose = click.option(
    "--verbose",
    default=False,
    envvar="VERBOSE",
    is_flag=True,
    help="Display sln verbose logs, including every AWS API call.",
)

env_kms_key_arn = click.option(
    "--env-kms-key-arn",
    metavar="<arn>",
    help="KMS key used to encrypt and decrypt the environment variables.",
)

set_env = click.option(
    "--set-env",
    metavar="<KEY=VALUE,...>",
    help="Comma separated environment variables to set, replacing the whole set.",
)

set_env_from_json = click.option(
    "--set-env-from-json",
    metavar="<path>",
    help="JSON file with environment variables to set, replacing the whole set.",
)
