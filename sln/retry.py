"""Bounded retry with a fixed delay.

Remote operations that are expected to fail transiently (a role that was just
created and isn't visible to Lambda yet, API Gateway's low request rate
ceiling) are wrapped here. The decision to retry is made solely by the
predicate passed in, which only ever looks at the provider's error code.

"""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar, cast

from .exceptions import RetriesExhaustedError, error_code

if TYPE_CHECKING:
    from ._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__))

_T = TypeVar("_T")

ROLE_PROPAGATION_ERROR_CODES = frozenset({"InvalidParameterValueException"})
THROTTLING_ERROR_CODES = frozenset({"TooManyRequestsException"})


def retry(
    operation: Callable[[], _T],
    delay_ms: int,
    max_attempts: int,
    is_retryable: Callable[[BaseException], bool],
    on_retry: Optional[Callable[[], Any]] = None,
    sleep: Callable[[float], Any] = time.sleep,
) -> _T:
    """Invoke an operation, retrying it while its error is classified as retryable.

    Args:
        operation: Callable taking no arguments.
        delay_ms: Fixed delay between attempts in milliseconds.
        max_attempts: Maximum number of times ``operation`` will be called.
        is_retryable: Predicate deciding whether an error is transient.
        on_retry: Called before each delay. Used for progress reporting only.
        sleep: Used to wait between attempts.

    Returns:
        The result of the first successful call.

    Raises:
        RetriesExhaustedError: The error was retryable but ``max_attempts``
            was reached.

    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except Exception as err:  # noqa: BLE001
            if not is_retryable(err):
                raise
            if attempt >= max(max_attempts, 1):
                raise RetriesExhaustedError(err, attempt) from err
            LOGGER.debug(
                "attempt %s of %s failed with %s; retrying in %sms",
                attempt,
                max_attempts,
                error_code(err) or type(err).__name__,
                delay_ms,
            )
        if on_retry:
            on_retry()
        sleep(delay_ms / 1000)


def is_role_propagation_error(error: BaseException) -> bool:
    """Lambda rejected a role that IAM hasn't finished propagating."""
    return error_code(error) in ROLE_PROPAGATION_ERROR_CODES


def is_throttling_error(error: BaseException) -> bool:
    """The request rate ceiling was hit."""
    return error_code(error) in THROTTLING_ERROR_CODES


class RetryingProxy:
    """Wrap every method of an object with :func:`retry`.

    Attribute access is forwarded to the wrapped object; callables are
    returned wrapped so that each call is retried independently.

    Example:
        >>> gateway = RetryingProxy(client, 3000, 10, is_throttling_error)
        ... gateway.create_rest_api(name="example")

    """

    def __init__(
        self,
        target: Any,
        delay_ms: int,
        max_attempts: int,
        is_retryable: Callable[[BaseException], bool],
        on_retry: Optional[Callable[[], Any]] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        """Instantiate class.

        Args:
            target: Object whose methods will be retried.
            delay_ms: Fixed delay between attempts in milliseconds.
            max_attempts: Maximum number of attempts per call.
            is_retryable: Predicate deciding whether an error is transient.
            on_retry: Called before each delay.
            sleep: Used to wait between attempts.

        """
        self._target = target
        self._delay_ms = delay_ms
        self._max_attempts = max_attempts
        self._is_retryable = is_retryable
        self._on_retry = on_retry
        self._sleep = sleep

    def __getattr__(self, name: str) -> Any:
        """Get an attribute of the wrapped object, wrapping callables."""
        attr = getattr(self._target, name)
        if not callable(attr):
            return attr

        @wraps(attr)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            return retry(
                lambda: attr(*args, **kwargs),
                self._delay_ms,
                self._max_attempts,
                self._is_retryable,
                self._on_retry,
                self._sleep,
            )

        return _wrapper
