"""Path validation utilities to keep tool paths inside the workspace root."""

from __future__ import annotations

import os
from pathlib import Path


class PathValidationError(ValueError):
    """Raised when path validation fails."""


def validate_path_within_root(path: str | Path, root: Path) -> Path:
    """Validate that path stays within root and return its absolute form.

    Args:
        path: Path to validate (absolute, or relative to root)
        root: Workspace root directory

    Returns:
        Absolute path within root. Symlinks are not resolved in the returned
        path, but a path whose resolved target escapes root is rejected.

    Raises:
        PathValidationError: If path is invalid or outside root
    """
    root_resolved = root.resolve()
    path_str = str(path)

    if "\x00" in path_str:
        msg = "Path contains null bytes"
        raise PathValidationError(msg)

    candidate = Path(os.path.expanduser(path_str))
    if ".." in candidate.parts:
        msg = "Path contains '..' which is not allowed"
        raise PathValidationError(msg)

    if candidate.is_absolute():
        try:
            candidate.relative_to(root_resolved)
        except ValueError:
            msg = f"Absolute path {candidate} is outside workspace root {root_resolved}"
            raise PathValidationError(msg) from None
        full_path = candidate
    else:
        full_path = root_resolved / candidate

    # The target may not exist yet (write_file, create_directory)
    try:
        resolved_path = full_path.resolve()
    except (OSError, RuntimeError) as e:
        msg = f"Cannot resolve path: {e}"
        raise PathValidationError(msg) from e

    try:
        resolved_path.relative_to(root_resolved)
    except ValueError:
        msg = f"Path {full_path} resolves outside workspace root {root_resolved}"
        raise PathValidationError(msg) from None

    return full_path


def resolve_tool_path(path: str | Path, root: Path | None = None) -> Path:
    """Turn a caller-supplied path into an absolute path.

    Without a workspace root any path is accepted and made absolute against
    the current working directory; with one, validate_path_within_root applies.
    """
    if not isinstance(path, (str, Path)) or not str(path).strip():
        msg = "Path must be a non-empty string"
        raise PathValidationError(msg)

    if root is not None:
        return validate_path_within_root(str(path).strip(), root)

    path_str = str(path).strip()
    if "\x00" in path_str:
        msg = "Path contains null bytes"
        raise PathValidationError(msg)
    return Path(os.path.abspath(os.path.expanduser(path_str)))
