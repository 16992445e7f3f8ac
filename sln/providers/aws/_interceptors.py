"""Interceptors applied to boto3 clients."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Mapping, Optional

ApiCallLog = Callable[[str, str, Optional[Mapping[str, Any]]], Any]


class CallLoggingProxy:
    """Report every method call made on a client before it is sent.

    Composes with :class:`sln.retry.RetryingProxy` in either order; when the
    retry proxy is outermost each attempt is reported.

    """

    def __init__(self, target: Any, log_name: str, log: ApiCallLog) -> None:
        """Instantiate class.

        Args:
            target: Object whose method calls will be reported.
            log_name: Name used for the target in the report (e.g. ``iam``).
            log: Receives ``(log_name, method_name, kwargs)``.

        """
        self._target = target
        self._log_name = log_name
        self._log = log

    def __getattr__(self, name: str) -> Any:
        """Get an attribute of the wrapped object, wrapping callables."""
        attr = getattr(self._target, name)
        if not callable(attr) or name.startswith("_") or name in ("get_waiter", "get_paginator"):
            return attr

        @wraps(attr)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            self._log(self._log_name, name, kwargs)
            return attr(*args, **kwargs)

        return _wrapper
