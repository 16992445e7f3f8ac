"""sln logging."""

from __future__ import annotations

import json
import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Text, Union

if TYPE_CHECKING:
    from collections.abc import Mapping


class LogLevels(IntEnum):
    """Log levels understood by sln.

    ``VERBOSE`` sits between debug and info and carries API call traces.
    ``SUCCESS`` sits above warning so a command's outcome is shown even when
    the logger is quieted down to warnings.

    """

    NOTSET = 0
    DEBUG = 10
    VERBOSE = 15
    INFO = 20
    WARNING = 30
    SUCCESS = 35
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def has_value(cls, value: int) -> bool:
        """Whether ``value`` is one of the levels."""
        return value in cls._value2member_map_  # pylint: disable=no-member


class SlnLogger(logging.Logger):
    """Logger with ``success`` and ``verbose`` methods."""

    def __init__(self, name: str, level: Union[int, Text] = logging.NOTSET) -> None:
        """Instantiate the class.

        Args:
            name: Logger name.
            level: Log level.

        """
        super().__init__(name, level)
        for extra in (LogLevels.VERBOSE, LogLevels.SUCCESS):
            logging.addLevelName(extra, extra.name)

    def success(self, msg: Union[Exception, str], *args: Any, **kwargs: Any) -> None:
        """Log 'msg % args' with severity `SUCCESS`."""
        if self.isEnabledFor(LogLevels.SUCCESS):
            self._log(LogLevels.SUCCESS, msg, args, **kwargs)

    def verbose(self, msg: Union[Exception, str], *args: Any, **kwargs: Any) -> None:
        """Log 'msg % args' with severity `VERBOSE`."""
        if self.isEnabledFor(LogLevels.VERBOSE):
            self._log(LogLevels.VERBOSE, msg, args, **kwargs)


class ProgressLogger:
    """Stage and API call reporting used by the provisioning pipelines.

    The pipelines only ever talk to this object. Formatting belongs to the
    handlers installed on the underlying logger.

    """

    def __init__(self, logger: Union[logging.Logger, logging.LoggerAdapter]) -> None:
        """Instantiate class.

        Args:
            logger: Logger that records will be sent to.

        """
        self.logger = logger

    def log_stage(self, message: str) -> None:
        """Report the start of a pipeline stage or substage."""
        self.logger.log(LogLevels.INFO, message)

    def log_api_call(
        self, service: str, operation: str, params: Mapping[str, Any] | None = None
    ) -> None:
        """Report a call made against a remote endpoint."""
        if not self.logger.isEnabledFor(LogLevels.VERBOSE):
            return
        self.logger.log(
            LogLevels.VERBOSE,
            "%s.%s %s",
            service,
            operation,
            json.dumps(params or {}, default=str, sort_keys=True),
        )

    def warning(self, message: str, *args: Any) -> None:
        """Report a non-fatal problem."""
        self.logger.warning(message, *args)
