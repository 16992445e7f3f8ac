"""sln exceptions."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from botocore.exceptions import ClientError


def error_code(error: BaseException) -> str:
    """Get the classification code of a provider error.

    Args:
        error: Any exception. Only :class:`botocore.exceptions.ClientError`
            carries a code; everything else results in an empty string.

    """
    if isinstance(error, ClientError):
        return str(error.response.get("Error", {}).get("Code", ""))
    return ""


class SlnError(Exception):
    """Base class for custom exceptions raised by sln."""

    message: str
    """Error message."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Instantiate class."""
        if getattr(self, "message", None):
            super().__init__(self.message, *args, **kwargs)
        else:
            super().__init__(*args, **kwargs)

    def __str__(self) -> str:
        """Return the error message."""
        return getattr(self, "message", None) or super().__str__()


class ValidationError(SlnError):
    """An option supplied by the user was missing, malformed or conflicting.

    Always raised before any remote resource has been touched.

    """

    def __init__(self, message: str) -> None:
        """Instantiate class.

        Args:
            message: Description of the offending option.

        """
        self.message = message
        super().__init__()

    def __reduce__(self) -> tuple[type[Exception], tuple[Any, ...]]:
        """Support for pickling."""
        return self.__class__, (self.message,)


class DeploymentNotFoundError(SlnError):
    """The deployment descriptor could not be found."""

    path: Path

    def __init__(self, path: Union[Path, str]) -> None:
        """Instantiate class.

        Args:
            path: Where the descriptor was expected to be found.

        """
        self.path = Path(path)
        self.message = f"no deployment found; {self.path} does not exist"
        super().__init__()


class InvalidDeploymentConfigError(SlnError):
    """The deployment descriptor exists but can't be used."""

    path: Path
    reason: str

    def __init__(self, path: Union[Path, str], reason: str) -> None:
        """Instantiate class.

        Args:
            path: Path to the descriptor.
            reason: Why the descriptor was rejected.

        """
        self.path = Path(path)
        self.reason = reason
        self.message = f"invalid deployment config {self.path}; {reason}"
        super().__init__()


class PackageError(SlnError):
    """The project could not be packaged."""

    def __init__(self, message: str) -> None:
        """Instantiate class."""
        self.message = message
        super().__init__()


class PipInstallFailedError(PackageError):
    """pip failed to install dependencies into the package."""

    def __init__(self) -> None:
        """Instantiate class."""
        super().__init__(
            "pip failed to install dependencies; review pip's output above to troubleshoot"
        )


class ReconciliationError(SlnError):
    """Existing remote state could not be read or merged."""

    cause: Optional[BaseException]

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        """Instantiate class.

        Args:
            message: What was being reconciled.
            cause: The underlying error, if any.

        """
        self.cause = cause
        self.message = f"{message}: {cause}" if cause else message
        super().__init__()


class RetriesExhaustedError(SlnError):
    """A retryable error kept occurring until the attempt limit was reached."""

    attempts: int
    cause: BaseException

    def __init__(self, cause: BaseException, attempts: int) -> None:
        """Instantiate class.

        Args:
            cause: The error raised by the last attempt.
            attempts: Number of attempts that were made.

        """
        self.attempts = attempts
        self.cause = cause
        self.message = f"gave up after {attempts} attempt(s): {cause}"
        super().__init__()

    @property
    def code(self) -> str:
        """Classification code of the last error."""
        return error_code(self.cause)


class RouteSpecError(SlnError):
    """The API module could not provide a route specification."""

    def __init__(self, message: str) -> None:
        """Instantiate class."""
        self.message = message
        super().__init__()


class PipelineStageError(SlnError):
    """A provisioning pipeline stage failed.

    This is the single error surfaced to the user when a pipeline is rejected
    after validation. Remote resources created by earlier stages are left in
    place.

    """

    cause: BaseException
    stage: str

    def __init__(self, stage: str, cause: BaseException) -> None:
        """Instantiate class.

        Args:
            stage: Name of the stage that failed.
            cause: The error raised by the stage.

        """
        self.cause = cause
        self.stage = stage
        self.message = f"{stage} failed: {cause}"
        super().__init__()

    @property
    def code(self) -> str:
        """Classification code of the underlying error."""
        if isinstance(self.cause, RetriesExhaustedError):
            return self.cause.code
        return error_code(self.cause)
