from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from fileops.exceptions import FileOperationError, LineIndexOutOfRangeError, ValidationError
from fileops.models.edit import EditResult
from fileops.services.lock import PathLockRegistry
from fileops.utils.error_handling import log_errors

if TYPE_CHECKING:
    from fileops.services.workspace import WorkspaceService

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class LineDocument:
    """A text file modeled as lines 1..N, each with its own terminator.

    Every line keeps the terminator it was read with ("\\r\\n", "\\n", or ""
    for the last line), so files mixing CRLF and LF render back byte for
    byte and an edit touches only the addressed line. New line breaks use
    the dominant terminator of the file (`newline`).
    """

    def __init__(
        self,
        lines: list[str],
        endings: list[str] | None = None,
        newline: str = "\n",
    ) -> None:
        self.lines = lines
        self.newline = newline
        if endings is None:
            endings = [newline] * len(lines)
            if endings:
                endings[-1] = ""
        self.endings = endings

    @classmethod
    def from_text(cls, text: str) -> LineDocument:
        if not text:
            return cls([], [])

        pieces = text.split("\n")
        lines: list[str] = []
        endings: list[str] = []
        for piece in pieces[:-1]:
            if piece.endswith("\r"):
                lines.append(piece[:-1])
                endings.append("\r\n")
            else:
                lines.append(piece)
                endings.append("\n")
        lines.append(pieces[-1])
        endings.append("")

        crlf_count = endings.count("\r\n")
        newline = "\r\n" if crlf_count > endings.count("\n") else "\n"
        return cls(lines, endings, newline)

    def to_text(self) -> str:
        return "".join(line + ending for line, ending in zip(self.lines, self.endings, strict=True))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def _check_index(self, index: int, upper: int, operation: str) -> None:
        if index < 1 or index > upper:
            msg = f"Line {index} is out of range (file has {self.line_count} lines)"
            raise LineIndexOutOfRangeError(
                msg,
                context={
                    "operation": operation,
                    "index": index,
                    "line_count": self.line_count,
                },
            )

    def replace(self, index: int, content: str) -> None:
        self._check_index(index, self.line_count, "replace_line")
        self.lines[index - 1] = content

    def insert(self, index: int, content: str) -> None:
        """Insert before index; index N+1 appends."""
        self._check_index(index, self.line_count + 1, "insert_line")
        if index > self.line_count:
            # Appending: the old last line gains a terminator, the new one has none
            if self.lines:
                self.endings[-1] = self.newline
            ending = ""
        else:
            ending = self.newline
        self.lines.insert(index - 1, content)
        self.endings.insert(index - 1, ending)

    def delete(self, index: int) -> None:
        self._check_index(index, self.line_count, "delete_line")
        removed_ending = self.endings[index - 1]
        del self.lines[index - 1]
        del self.endings[index - 1]
        if index > self.line_count and self.lines:
            # The new last line takes over the removed line's terminator
            self.endings[-1] = removed_ending


def _read_text(path: Path) -> str:
    try:
        with open(path, encoding=ENCODING, newline="") as handle:
            return handle.read()
    except FileNotFoundError as exc:
        msg = f"File not found: {path}"
        raise FileOperationError(msg, context={"path": str(path)}) from exc
    except UnicodeDecodeError as exc:
        msg = f"File is not valid UTF-8 text: {path}"
        raise FileOperationError(msg, context={"path": str(path), "reason": "decode_error"}) from exc
    except OSError as exc:
        msg = f"Failed to read {path}: {exc.strerror or exc}"
        raise FileOperationError(msg, context={"path": str(path), "errno": exc.errno}) from exc


def _write_text(path: Path, text: str) -> None:
    try:
        with open(path, "w", encoding=ENCODING, newline="") as handle:
            handle.write(text)
    except OSError as exc:
        msg = f"Failed to write {path}: {exc.strerror or exc}"
        raise FileOperationError(msg, context={"path": str(path), "errno": exc.errno}) from exc


def edit_lines(path: Path, mutate: Callable[[LineDocument], None]) -> LineDocument:
    """Read path, apply mutate to its lines and write the result back.

    Nothing is written when mutate raises.
    """
    document = LineDocument.from_text(_read_text(path))
    mutate(document)
    _write_text(path, document.to_text())
    return document


def replace_line(path: Path, index: int, content: str) -> LineDocument:
    return edit_lines(path, lambda doc: doc.replace(index, content))


def insert_line(path: Path, index: int, content: str) -> LineDocument:
    return edit_lines(path, lambda doc: doc.insert(index, content))


def delete_line(path: Path, index: int) -> LineDocument:
    return edit_lines(path, lambda doc: doc.delete(index))


def replace_substring(path: Path, search: str, replacement: str) -> tuple[LineDocument, int]:
    """Replace every match of the regular expression search across the whole file.

    The replacement follows re.sub template rules (\\1, \\g<name>).
    Returns the rewritten document and the number of replacements. The file
    is left untouched when nothing matches.
    """
    try:
        pattern = re.compile(search)
    except re.error as exc:
        msg = f"Invalid search pattern: {exc}"
        raise ValidationError(
            msg,
            context={"field": "search", "value": search, "reason": "invalid_pattern"},
        ) from exc

    text = _read_text(path)
    try:
        new_text, count = pattern.subn(replacement, text)
    except re.error as exc:
        msg = f"Invalid replacement: {exc}"
        raise ValidationError(
            msg,
            context={"field": "replacement", "reason": "invalid_template"},
        ) from exc

    if count:
        _write_text(path, new_text)
    return LineDocument.from_text(new_text), count


class LineEditorService:
    """Service for positional line edits and pattern replacement on text files."""

    def __init__(
        self,
        workspace: WorkspaceService,
        locks: PathLockRegistry | None = None,
    ) -> None:
        self.workspace = workspace
        self.locks = locks or PathLockRegistry()

    @log_errors("replace_line")
    async def replace_line(self, file_path: str, index: int, content: str) -> EditResult:
        """Overwrite line index (1..N)."""
        path = self.workspace.resolve(file_path, field="file_path")
        async with self.locks.hold(path):
            document = await asyncio.to_thread(replace_line, path, index, content)
        return self._finish("replace_line", path, document, line_number=index)

    @log_errors("insert_line")
    async def insert_line(self, file_path: str, index: int, content: str) -> EditResult:
        """Insert content before line index (1..N+1)."""
        path = self.workspace.resolve(file_path, field="file_path")
        async with self.locks.hold(path):
            document = await asyncio.to_thread(insert_line, path, index, content)
        return self._finish("insert_line", path, document, line_number=index)

    @log_errors("delete_line")
    async def delete_line(self, file_path: str, index: int) -> EditResult:
        """Remove line index (1..N)."""
        path = self.workspace.resolve(file_path, field="file_path")
        async with self.locks.hold(path):
            document = await asyncio.to_thread(delete_line, path, index)
        return self._finish("delete_line", path, document, line_number=index)

    @log_errors("replace_in_file")
    async def replace_in_file(self, file_path: str, search: str, replacement: str) -> EditResult:
        """Replace every match of search across the file."""
        path = self.workspace.resolve(file_path, field="file_path")
        async with self.locks.hold(path):
            document, count = await asyncio.to_thread(replace_substring, path, search, replacement)
        return self._finish("replace_in_file", path, document, replacements=count)

    def _finish(
        self,
        operation: str,
        path: Path,
        document: LineDocument,
        line_number: int | None = None,
        replacements: int | None = None,
    ) -> EditResult:
        logger.info(
            "File edited",
            extra={
                "operation": operation,
                "path": str(path),
                "line_number": line_number,
                "line_count": document.line_count,
                "replacements": replacements,
            },
        )
        return EditResult(
            path=str(path),
            operation=operation,
            line_count=document.line_count,
            line_number=line_number,
            replacements=replacements,
        )
