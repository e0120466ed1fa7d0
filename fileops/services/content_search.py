from __future__ import annotations

import asyncio
import logging
import os
import re
import time
from pathlib import Path
from typing import TYPE_CHECKING

from fileops.models.search import LineHit, SearchMatch, SearchResult, TraversalOptions

if TYPE_CHECKING:
    from fileops.services.workspace import WorkspaceService

logger = logging.getLogger(__name__)

HIGHLIGHT_MARKER = "**"


def highlight_term(line: str, term: str, case_sensitive: bool) -> str:
    """Wrap every literal occurrence of term in line with emphasis markers."""
    if not term:
        return line
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.sub(
        re.escape(term),
        lambda match: f"{HIGHLIGHT_MARKER}{match.group(0)}{HIGHLIGHT_MARKER}",
        line,
        flags=flags,
    )


def find_line_hits(content: str, term: str, case_sensitive: bool) -> list[LineHit]:
    """Return a LineHit for every line of content that contains term."""
    needle = term if case_sensitive else term.lower()
    hits: list[LineHit] = []

    for index, line in enumerate(content.split("\n")):
        haystack = line if case_sensitive else line.lower()
        if needle not in haystack:
            continue
        hits.append(
            LineHit(
                line_number=index + 1,
                content=line.strip(),
                highlighted=highlight_term(line, term, case_sensitive).strip(),
            )
        )

    return hits


class _ContentWalker:
    """Depth-first walk that accumulates SearchMatch entries up to a cap."""

    def __init__(self, term: str, root: str, options: TraversalOptions) -> None:
        self.term = term
        self.needle = term if options.case_sensitive else term.lower()
        self.root = root
        self.options = options
        self.results: list[SearchMatch] = []
        self.skipped = 0

    def walk(self, dir_path: str) -> bool:
        """Visit dir_path recursively. Returns True once the cap is reached."""
        try:
            with os.scandir(dir_path) as iterator:
                entries = list(iterator)
        except OSError:
            self.skipped += 1
            logger.debug("Skipping inaccessible directory", extra={"path": dir_path})
            return False

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file(follow_symlinks=False)
            except OSError:
                self.skipped += 1
                continue

            if is_dir:
                if self.walk(entry.path):
                    return True
            elif is_file:
                self._scan_file(entry)
                if len(self.results) >= self.options.max_results:
                    return True

        return False

    def _scan_file(self, entry: os.DirEntry[str]) -> None:
        extensions = self.options.file_extensions
        if extensions:
            ext = os.path.splitext(entry.name)[1].lower()
            if ext not in extensions:
                return

        try:
            size = entry.stat(follow_symlinks=False).st_size
        except OSError:
            self.skipped += 1
            return

        if size > self.options.max_file_size:
            self.skipped += 1
            logger.debug(
                "Skipping oversized file",
                extra={"path": entry.path, "size": size, "max_file_size": self.options.max_file_size},
            )
            return

        content = self._read_text(entry.path)
        if content is None:
            self.skipped += 1
            return

        haystack = content if self.options.case_sensitive else content.lower()
        if self.needle not in haystack:
            return

        hits: list[LineHit] = []
        if self.options.include_line_numbers:
            hits = find_line_hits(content, self.term, self.options.case_sensitive)

        self.results.append(
            SearchMatch(
                file=entry.path,
                relative_path=os.path.relpath(entry.path, self.root),
                matches=hits,
            )
        )

    def _read_text(self, path: str) -> str | None:
        try:
            with open(path, encoding="utf-8", newline="") as handle:
                content = handle.read()
        except (OSError, UnicodeDecodeError):
            logger.debug("Skipping unreadable file", extra={"path": path})
            return None

        if "\x00" in content:
            logger.debug("Skipping binary file", extra={"path": path})
            return None

        return content


def search_content(
    term: str,
    root: str | Path,
    options: TraversalOptions | None = None,
) -> SearchResult:
    """Search every file under root for term.

    Results follow depth-first visitation order with directory entries in
    listing order. Unreadable, oversized and binary files are skipped
    silently and only counted in skipped_count. The cap is checked after each
    file, and reaching it ends the whole walk.

    The caller is responsible for checking that root exists; a missing root
    yields an empty result.
    """
    options = options or TraversalOptions()
    walker = _ContentWalker(term, os.path.abspath(root), options)
    truncated = walker.walk(walker.root)

    return SearchResult(
        matches=walker.results,
        skipped_count=walker.skipped,
        truncated=truncated,
    )


class ContentSearchService:
    """Service for searching file contents under a directory tree."""

    def __init__(self, workspace: WorkspaceService) -> None:
        self.workspace = workspace

    async def search(
        self,
        term: str,
        directory: str,
        options: TraversalOptions | None = None,
    ) -> SearchResult:
        """Search directory recursively for term.

        Raises:
            ValidationError: Directory path invalid
            DirectoryNotFoundError: Directory does not exist
        """
        options = options or TraversalOptions()
        root = self.workspace.resolve_directory(directory)

        start_time = time.monotonic()
        result = await asyncio.to_thread(search_content, term, root, options)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        logger.info(
            "Content search completed",
            extra={
                "term_length": len(term),
                "directory": str(root),
                "case_sensitive": options.case_sensitive,
                "extensions_count": len(options.file_extensions or ()),
                "max_results": options.max_results,
                "result_count": len(result.matches),
                "skipped_count": result.skipped_count,
                "truncated": result.truncated,
                "duration_ms": duration_ms,
            },
        )

        return result
