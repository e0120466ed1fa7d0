"""
Custom exception classes with context for the file operations server.

All exceptions inherit from FileOpsError and support attaching contextual
information for logging and for the error envelope returned to tool callers.
"""

from __future__ import annotations


class FileOpsError(Exception):
    """
    Base exception for the file operations server.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary with additional context for logging/debugging
    """

    def __init__(self, message: str, context: dict[str, object] | None = None):
        """
        Initialize exception with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dictionary with contextual information
                    (operation name, file paths, indices, etc.)
        """
        super().__init__(message)
        self.context = context or {}


class DirectoryNotFoundError(FileOpsError):
    """
    Traversal root does not exist.

    Checked by the caller-facing layer before a tree walk starts.

    Example:
        raise DirectoryNotFoundError(
            "Directory /project does not exist",
            context={"directory": "/project"}
        )
    """


class LineIndexOutOfRangeError(FileOpsError):
    """
    Line index outside the valid range for a mutation.

    Replace and delete accept 1..N, insert accepts 1..N+1.

    Example:
        raise LineIndexOutOfRangeError(
            "Line 12 is out of range (file has 10 lines)",
            context={"index": 12, "line_count": 10, "operation": "replace_line"}
        )
    """

    @property
    def index(self) -> object:
        return self.context.get("index")


class FileOperationError(FileOpsError):
    """
    Filesystem operation failed.

    Wraps OSError (permission denial, disk failure) raised while reading or
    writing a single file. Not retried.
    """


class ValidationError(FileOpsError):
    """
    Input validation failed.

    Raised for invalid tool arguments, uncompilable patterns and paths that
    escape the configured workspace root.

    Example:
        raise ValidationError(
            "Invalid file name pattern",
            context={"field": "pattern", "value": "[abc"}
        )
    """


class ToolNotFoundError(FileOpsError):
    """Requested tool name is not in the catalog."""


class CommandError(FileOpsError):
    """
    Shell command could not be run.

    Raised when the command runner is disabled, the process cannot be
    spawned, or it exceeds its timeout. A non-zero exit code is a result,
    not an error.
    """
