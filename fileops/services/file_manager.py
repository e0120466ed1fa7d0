from __future__ import annotations

import asyncio
import logging
import os
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel

from fileops.exceptions import FileOperationError, ValidationError
from fileops.services.lock import PathLockRegistry

if TYPE_CHECKING:
    from fileops.services.workspace import WorkspaceService

logger = logging.getLogger(__name__)

WriteMode = Literal["write", "append"]


class DirectoryEntry(BaseModel):
    """One entry of a directory listing."""

    name: str
    is_dir: bool


def _wrap_os_error(exc: OSError, operation: str, path: Path) -> FileOperationError:
    msg = f"{operation} failed for {path}: {exc.strerror or exc}"
    return FileOperationError(
        msg,
        context={
            "operation": operation,
            "path": str(path),
            "errno": exc.errno,
        },
    )


class FileManagerService:
    """Whole-file operations: read, write, mkdir, list and delete."""

    def __init__(
        self,
        workspace: WorkspaceService,
        locks: PathLockRegistry | None = None,
    ) -> None:
        self.workspace = workspace
        self.locks = locks or PathLockRegistry()

    async def read_file(self, file_path: str) -> str:
        path = self.workspace.resolve(file_path, field="file_path")
        return await asyncio.to_thread(self._read_file_sync, path)

    async def write_file(self, file_path: str, content: str, mode: WriteMode = "write") -> Path:
        """Write or append content, creating parent directories as needed."""
        if mode not in ("write", "append"):
            msg = "mode must be 'write' or 'append'"
            raise ValidationError(msg, context={"field": "mode", "value": mode})

        path = self.workspace.resolve(file_path, field="file_path")
        async with self.locks.hold(path):
            await asyncio.to_thread(self._write_file_sync, path, content, mode)
        logger.info(
            "File written",
            extra={"path": str(path), "mode": mode, "size": len(content)},
        )
        return path

    async def create_directory(self, dir_path: str) -> Path:
        """Create a directory and any missing parents (no error if it exists)."""
        path = self.workspace.resolve(dir_path, field="dir_path")
        try:
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise _wrap_os_error(exc, "create_directory", path) from exc
        logger.info("Directory created", extra={"path": str(path)})
        return path

    async def list_directory(self, dir_path: str) -> list[DirectoryEntry]:
        """List entries of a directory in listing order."""
        path = self.workspace.resolve(dir_path, field="dir_path")
        return await asyncio.to_thread(self._list_directory_sync, path)

    async def delete_path(self, file_path: str) -> bool:
        """Delete a file or a whole directory tree.

        Returns False when there was nothing to delete.
        """
        path = self.workspace.resolve(file_path, field="file_path")
        if self.workspace.root is not None and path == self.workspace.root:
            msg = "Refusing to delete the workspace root"
            raise ValidationError(msg, context={"field": "file_path", "path": str(path)})

        async with self.locks.hold(path):
            deleted = await asyncio.to_thread(self._delete_sync, path)
        logger.info("Path deleted", extra={"path": str(path), "existed": deleted})
        return deleted

    def _read_file_sync(self, path: Path) -> str:
        try:
            with open(path, encoding="utf-8", newline="") as handle:
                return handle.read()
        except UnicodeDecodeError as exc:
            msg = f"File is not valid UTF-8 text: {path}"
            raise FileOperationError(msg, context={"path": str(path), "reason": "decode_error"}) from exc
        except OSError as exc:
            raise _wrap_os_error(exc, "read_file", path) from exc

    def _write_file_sync(self, path: Path, content: str, mode: WriteMode) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a" if mode == "append" else "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
        except OSError as exc:
            raise _wrap_os_error(exc, "write_file", path) from exc

    def _list_directory_sync(self, path: Path) -> list[DirectoryEntry]:
        try:
            with os.scandir(path) as iterator:
                return [
                    DirectoryEntry(name=entry.name, is_dir=entry.is_dir())
                    for entry in iterator
                ]
        except OSError as exc:
            raise _wrap_os_error(exc, "list_directory", path) from exc

    def _delete_sync(self, path: Path) -> bool:
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
                return True
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise _wrap_os_error(exc, "delete_file", path) from exc
