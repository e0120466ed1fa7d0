"""File hashing and summary helpers exposed as the file_hash and file_summary tools."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel

from fileops.exceptions import FileOperationError, ValidationError

if TYPE_CHECKING:
    from fileops.services.workspace import WorkspaceService

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("md5", "sha1", "sha256", "sha512")
CHUNK_SIZE = 1024 * 1024


class FileSummary(BaseModel):
    """Size and text statistics of a file."""

    path: str
    size_bytes: int
    lines: int
    words: int
    characters: int


def hash_file(path: Path, algorithm: str = "sha256") -> str:
    digest = hashlib.new(algorithm)
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def summarize_text(text: str) -> tuple[int, int, int]:
    """Return (lines, words, characters); a trailing newline does not open a new line."""
    lines = len(text.splitlines())
    return lines, len(text.split()), len(text)


class HashingService:
    """Content digests and summaries of single files."""

    def __init__(self, workspace: WorkspaceService) -> None:
        self.workspace = workspace

    async def file_hash(self, file_path: str, algorithm: str = "sha256") -> str:
        algorithm = algorithm.lower()
        if algorithm not in SUPPORTED_ALGORITHMS:
            msg = f"Unsupported hash algorithm: {algorithm}"
            raise ValidationError(
                msg,
                context={"field": "algorithm", "allowed_values": list(SUPPORTED_ALGORITHMS)},
            )

        path = self.workspace.resolve(file_path, field="file_path")
        try:
            return await asyncio.to_thread(hash_file, path, algorithm)
        except OSError as exc:
            msg = f"Failed to hash {path}: {exc.strerror or exc}"
            raise FileOperationError(msg, context={"path": str(path), "errno": exc.errno}) from exc

    async def file_summary(self, file_path: str) -> FileSummary:
        path = self.workspace.resolve(file_path, field="file_path")
        return await asyncio.to_thread(self._summary_sync, path)

    def _summary_sync(self, path: Path) -> FileSummary:
        try:
            size = path.stat().st_size
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            msg = f"File is not valid UTF-8 text: {path}"
            raise FileOperationError(msg, context={"path": str(path), "reason": "decode_error"}) from exc
        except OSError as exc:
            msg = f"Failed to read {path}: {exc.strerror or exc}"
            raise FileOperationError(msg, context={"path": str(path), "errno": exc.errno}) from exc

        lines, words, characters = summarize_text(text)
        return FileSummary(
            path=str(path),
            size_bytes=size,
            lines=lines,
            words=words,
            characters=characters,
        )
