"""Console logging of the sln CLI.

Records go to stderr so stdout only ever holds the JSON result of a command.

"""

from __future__ import annotations

import logging
import os
import sys
from functools import cached_property
from typing import Any, Dict, Mapping, Optional, TextIO

import coloredlogs
from humanfriendly.terminal import terminal_supports_colors  # type: ignore
from typing_extensions import TypedDict

from .. import LogLevels
from ..utils import str_to_bool

LOGGER = logging.getLogger("sln")

LOG_FORMAT = "[sln] %(message)s"
LOG_FORMAT_VERBOSE = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FIELD_STYLES: Dict[str, Dict[str, Any]] = {
    "asctime": {"faint": True},
    "levelname": {},
    "message": {},
    "name": {"color": "blue"},
}
LOG_LEVEL_STYLES: Dict[str, Dict[str, Any]] = {
    "critical": {"color": "red", "bold": True},
    "debug": {"color": "green"},
    "error": {"color": "red"},
    "info": {},
    "success": {"color": "green", "bold": True},
    "verbose": {"color": "cyan"},
    "warning": {"color": 214},
}

DEPENDENCY_LOGGERS = ("boto3", "botocore", "urllib3")
"""Loggers that only get handlers with ``--debug --debug``."""


class LogOverrides(TypedDict):
    """Logging overrides read from ``SLN_*`` environment variables."""

    field_styles: Optional[str]
    fmt: Optional[str]
    force_color: Optional[str]
    level_styles: Optional[str]


def read_overrides(environ: Mapping[str, str]) -> LogOverrides:
    """Pick the logging overrides out of an environment."""
    return {
        "field_styles": environ.get("SLN_LOG_FIELD_STYLES") or None,
        "fmt": environ.get("SLN_LOG_FORMAT") or None,
        "force_color": environ.get("SLN_FORCE_COLOR") or None,
        "level_styles": environ.get("SLN_LOG_LEVEL_STYLES") or None,
    }


def _merge_styles(defaults: Dict[str, Dict[str, Any]], encoded: Optional[str]) -> Dict[str, Any]:
    styles = dict(defaults)
    if encoded:
        styles.update(coloredlogs.parse_encoded_styles(encoded))  # type: ignore
    return styles


class LogSettings:
    """Resolved console log settings for one CLI invocation."""

    def __init__(
        self,
        *,
        debug: int = 0,
        no_color: bool = False,
        verbose: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Instantiate class.

        Args:
            debug: Number of times ``--debug`` was given.
            no_color: Never emit ANSI escape sequences.
            verbose: Show API call traces.
            environ: Source of the ``SLN_*`` overrides. Defaults to ``os.environ``.

        """
        self.debug = debug
        self.no_color = no_color
        self.verbose = verbose
        self.overrides = read_overrides(os.environ if environ is None else environ)

    @property
    def stream(self) -> TextIO:
        """Stream the handlers write to."""
        return sys.stderr

    @cached_property
    def log_level(self) -> LogLevels:
        """Level of the ``sln`` logger."""
        if self.debug:
            return LogLevels.DEBUG
        return LogLevels.VERBOSE if self.verbose else LogLevels.INFO

    @cached_property
    def fmt(self) -> str:
        """Record format; ``SLN_LOG_FORMAT`` wins over the built-in ones."""
        if self.overrides["fmt"]:
            return self.overrides["fmt"]
        return LOG_FORMAT_VERBOSE if self.debug or self.verbose else LOG_FORMAT

    @cached_property
    def field_styles(self) -> Dict[str, Any]:
        """Field styles, updated from ``SLN_LOG_FIELD_STYLES``."""
        if self.no_color:
            return {}
        return _merge_styles(LOG_FIELD_STYLES, self.overrides["field_styles"])

    @cached_property
    def level_styles(self) -> Dict[str, Any]:
        """Level styles, updated from ``SLN_LOG_LEVEL_STYLES``."""
        if self.no_color:
            return {}
        return _merge_styles(LOG_LEVEL_STYLES, self.overrides["level_styles"])

    @cached_property
    def supports_colors(self) -> bool:
        """Whether ``stream`` understands ANSI escape sequences.

        ``SLN_FORCE_COLOR`` turns detection off for CI systems without a TTY.

        """
        if str_to_bool(self.overrides["force_color"]):
            return True
        return terminal_supports_colors(self.stream)  # type: ignore

    def install_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments of :func:`coloredlogs.install`."""
        return {
            "field_styles": self.field_styles,
            "fmt": self.fmt,
            "isatty": None if self.no_color else self.supports_colors,
            "level_styles": self.level_styles,
            "stream": self.stream,
        }


def setup_logging(*, debug: int = 0, no_color: bool = False, verbose: bool = False) -> None:
    """Install console handlers on the ``sln`` logger.

    With ``debug`` above one, the AWS SDK loggers get handlers as well.

    """
    settings = LogSettings(debug=debug, no_color=no_color, verbose=verbose)
    kwargs = settings.install_kwargs()
    names = ("sln",) + (DEPENDENCY_LOGGERS if debug > 1 else ())
    for name in names:
        coloredlogs.install(settings.log_level, logger=logging.getLogger(name), **kwargs)
    LOGGER.debug("console logging set up for %s at level %s", ", ".join(names), settings.log_level)
