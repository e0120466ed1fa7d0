"""
Request context management using ContextVars.

Tracks the request ID and the tool being executed across async boundaries
(including worker threads started with asyncio.to_thread, which copy the
current context) so log lines can be correlated.
"""

from __future__ import annotations

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id",
    default=None,
)
tool_name_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "tool_name",
    default=None,
)


def get_request_id() -> str | None:
    """Get current request ID from context."""
    return request_id_var.get()


def set_request_id(request_id: str) -> contextvars.Token[str | None]:
    """Set request ID in context."""
    return request_id_var.set(request_id)


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return uuid.uuid4().hex


def clear_request_id(token: contextvars.Token[str | None] | None = None) -> None:
    """Clear request ID from context, restoring the previous value when a token is given."""
    if token is not None:
        request_id_var.reset(token)
    else:
        request_id_var.set(None)


def get_tool_name() -> str | None:
    return tool_name_var.get()


@contextmanager
def tool_context(name: str) -> Iterator[None]:
    """Mark the tool currently being executed for the duration of the block."""
    token = tool_name_var.set(name)
    try:
        yield
    finally:
        tool_name_var.reset(token)
