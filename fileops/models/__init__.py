"""Models for the file operations server."""

from fileops.models.edit import EditResult
from fileops.models.search import (
    LineHit,
    NameMatch,
    SearchMatch,
    SearchResult,
    TraversalOptions,
)
from fileops.models.tools import (
    ToolCallRequest,
    ToolCallResponse,
    ToolContent,
    ToolDefinition,
    ToolListResponse,
)

__all__ = [
    "EditResult",
    "LineHit",
    "NameMatch",
    "SearchMatch",
    "SearchResult",
    "ToolCallRequest",
    "ToolCallResponse",
    "ToolContent",
    "ToolDefinition",
    "ToolListResponse",
    "TraversalOptions",
]
