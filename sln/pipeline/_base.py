"""Shared pipeline plumbing."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, Optional, cast

from .._logging import ProgressLogger
from ..exceptions import PipelineStageError

if TYPE_CHECKING:
    from .._logging import SlnLogger
    from ..providers.aws import AwsServices

LOGGER = cast("SlnLogger", logging.getLogger(__name__))

ServicesFactory = Callable[[str], "AwsServices"]
"""Build the AWS adapters for a region."""


class BasePipeline:
    """Base class for provisioning pipelines."""

    def __init__(
        self,
        get_services: ServicesFactory,
        progress: Optional[ProgressLogger] = None,
    ) -> None:
        """Instantiate class.

        Args:
            get_services: Called once with the target region.
            progress: Stage reporter.

        """
        self.get_services = get_services
        self.progress = progress or ProgressLogger(LOGGER)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """Report a stage and convert its failure into :class:`PipelineStageError`.

        Nothing created by earlier stages is rolled back.

        """
        self.progress.log_stage(name)
        try:
            yield
        except PipelineStageError:
            raise
        except Exception as exc:  # noqa: BLE001
            LOGGER.debug("stage %s failed", name, exc_info=True)
            raise PipelineStageError(name, exc) from exc
