import logging
from pathlib import Path

from fileops.exceptions import DirectoryNotFoundError, ValidationError
from fileops.utils.path_validation import PathValidationError, resolve_tool_path

logger = logging.getLogger(__name__)


class WorkspaceService:
    """Resolves caller-supplied paths, optionally confined to a workspace root."""

    def __init__(self, root: str | None = None):
        self.root = Path(root).resolve() if root else None

    @property
    def confined(self) -> bool:
        return self.root is not None

    def resolve(self, path: str, field: str = "path") -> Path:
        """Resolve a tool path to an absolute path.

        Raises:
            ValidationError: Path is empty, malformed or escapes the workspace root
        """
        try:
            return resolve_tool_path(path, self.root)
        except PathValidationError as exc:
            msg = f"Invalid path: {exc}"
            raise ValidationError(
                msg,
                context={
                    "field": field,
                    "path": path,
                    "reason": "invalid_path",
                },
            ) from exc

    def resolve_directory(self, directory: str, field: str = "directory") -> Path:
        """Resolve a traversal root and check that it exists.

        Raises:
            ValidationError: Path invalid or not a directory
            DirectoryNotFoundError: Path does not exist
        """
        resolved = self.resolve(directory, field=field)

        if not resolved.exists():
            msg = f"Directory {directory} does not exist"
            raise DirectoryNotFoundError(msg, context={"directory": str(resolved)})

        if not resolved.is_dir():
            msg = f"Path {directory} is not a directory"
            raise ValidationError(
                msg,
                context={
                    "field": field,
                    "path": str(resolved),
                    "reason": "not_a_directory",
                },
            )

        return resolved

    def ensure_root(self) -> None:
        """Create the workspace root when confinement is configured."""
        if self.root is None:
            return
        if not self.root.exists():
            self.root.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created workspace root: {self.root}")
