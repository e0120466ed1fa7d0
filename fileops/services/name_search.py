from __future__ import annotations

import asyncio
import logging
import os
import re
import time
from pathlib import Path
from typing import TYPE_CHECKING

from fileops.exceptions import ValidationError
from fileops.models.search import NameMatch

if TYPE_CHECKING:
    from fileops.services.workspace import WorkspaceService

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 100


def glob_to_regex(pattern: str) -> str:
    """Translate a name glob into a regular expression body.

    Only three characters are rewritten: `.` becomes a literal dot, `*` any
    run of characters and `?` exactly one character. Every other regex
    metacharacter passes through unchanged and keeps its regex meaning.
    """
    return pattern.replace(".", r"\.").replace("*", ".*").replace("?", ".")


def compile_name_pattern(pattern: str, case_sensitive: bool = False) -> re.Pattern[str]:
    """Compile a glob into a pattern meant for whole-name matching.

    Raises:
        ValidationError: The translated pattern is not a valid regex
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(glob_to_regex(pattern), flags)
    except re.error as exc:
        msg = f"Invalid file name pattern: {exc}"
        raise ValidationError(
            msg,
            context={
                "field": "pattern",
                "value": pattern,
                "reason": "invalid_pattern",
            },
        ) from exc


def find_by_name(
    pattern: str,
    root: str | Path,
    case_sensitive: bool = False,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[NameMatch]:
    """Return files anywhere under root whose base name matches pattern.

    The pattern is anchored to the entire name. Directories are always
    recursed; symlinks are neither followed nor reported. Inaccessible
    directories are skipped silently. Collection stops once max_results
    matches have been found.
    """
    if max_results <= 0:
        msg = "max_results must be > 0"
        raise ValidationError(msg, context={"field": "max_results", "value": max_results})

    regex = compile_name_pattern(pattern, case_sensitive)
    base = os.path.abspath(root)
    results: list[NameMatch] = []

    def walk(dir_path: str) -> bool:
        try:
            with os.scandir(dir_path) as iterator:
                entries = list(iterator)
        except OSError:
            logger.debug("Skipping inaccessible directory", extra={"path": dir_path})
            return False

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file(follow_symlinks=False)
            except OSError:
                continue

            if is_dir:
                if walk(entry.path):
                    return True
            elif is_file and regex.fullmatch(entry.name):
                results.append(
                    NameMatch(
                        name=entry.name,
                        path=entry.path,
                        relative_path=os.path.relpath(entry.path, base),
                        directory=os.path.dirname(entry.path),
                    )
                )
                if len(results) >= max_results:
                    return True

        return False

    walk(base)
    return results


class NameSearchService:
    """Service for finding files by name pattern."""

    def __init__(self, workspace: WorkspaceService) -> None:
        self.workspace = workspace

    async def find(
        self,
        pattern: str,
        directory: str,
        case_sensitive: bool = False,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> list[NameMatch]:
        """Find files under directory whose name matches pattern.

        Raises:
            ValidationError: Directory path or pattern invalid
            DirectoryNotFoundError: Directory does not exist
        """
        root = self.workspace.resolve_directory(directory)
        # Fail on a bad pattern before handing work to a thread
        compile_name_pattern(pattern, case_sensitive)

        start_time = time.monotonic()
        results = await asyncio.to_thread(
            find_by_name,
            pattern,
            root,
            case_sensitive,
            max_results,
        )
        duration_ms = int((time.monotonic() - start_time) * 1000)

        logger.info(
            "Name search completed",
            extra={
                "pattern": pattern,
                "directory": str(root),
                "case_sensitive": case_sensitive,
                "max_results": max_results,
                "result_count": len(results),
                "duration_ms": duration_ms,
            },
        )

        return results
