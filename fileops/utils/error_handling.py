"""
Error handling utilities.

Provides a decorator for consistent error logging and helpers that turn
exceptions into the payloads returned to tool callers.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from fileops.exceptions import FileOpsError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def log_errors(operation_name: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator to log errors with context.

    Expected failures (FileOpsError subclasses) are logged at WARNING with
    their context; anything else is logged with a traceback. The exception
    is re-raised after logging.

    Args:
        operation_name: Name of the operation for logging context

    Example:
        @log_errors("replace_line")
        async def replace_line(self, path: str, index: int, content: str) -> EditResult:
            ...
    """

    def _log(func: Callable[..., Any], e: Exception) -> None:
        extra = {
            "operation": operation_name,
            "error_type": type(e).__name__,
            "function": func.__name__,
        }
        if isinstance(e, FileOpsError):
            logger.warning(f"{operation_name} failed: {e}", extra={**extra, **e.context})
        else:
            logger.exception(f"Error in {operation_name}", extra=extra)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                _log(func, e)
                raise

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log(func, e)
                raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore[return-value]
        return sync_wrapper  # type: ignore[return-value]

    return decorator


def format_error_text(e: Exception) -> str:
    """Render an exception as the single line shown in a tool error envelope."""
    message = str(e) or type(e).__name__
    return f"Error: {message}"
