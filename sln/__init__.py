"""Set package version."""

from __future__ import annotations

import logging

from ._logging import LogLevels, SlnLogger  # noqa: F401

logging.setLoggerClass(SlnLogger)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__: str = version("sln")
    """Version of the Python package presented as a :class:`string`.

    Set upon release by `setuptools_scm`.

    """
except PackageNotFoundError:  # cov: ignore
    __version__ = "0.0.0"
