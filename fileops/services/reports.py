"""Human-readable report text for tool results."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fileops.models.search import NameMatch, SearchResult
    from fileops.services.command import CommandResult
    from fileops.services.file_manager import DirectoryEntry
    from fileops.services.hashing import FileSummary
    from fileops.services.http_client import HttpResult

PREVIEW_HITS = 3


def render_search_report(term: str, directory: str, result: SearchResult) -> str:
    """Numbered per-file report showing the first PREVIEW_HITS line hits of each file."""
    if not result.matches:
        return f'No matches for "{term}" in any file under {directory}'

    lines = [
        f'🔍 Search for "{term}" in {directory}',
        f"📊 Found in {len(result.matches)} file(s):",
        "",
    ]

    for number, match in enumerate(result.matches, start=1):
        lines.append(f"{number}. 📄 {match.relative_path}")
        lines.append(f"   └─ {match.total_matches} match(es)")

        for hit in match.matches[:PREVIEW_HITS]:
            lines.append(f"   └─ Line {hit.line_number}: {hit.highlighted}")

        remaining = match.total_matches - PREVIEW_HITS
        if remaining > 0:
            lines.append(f"   └─ ... and {remaining} more match(es)")
        lines.append("")

    if result.truncated:
        lines.append("⚠️ Result limit reached; more files may match.")

    return "\n".join(lines).rstrip("\n") + "\n"


def render_name_report(pattern: str, directory: str, matches: list[NameMatch]) -> str:
    if not matches:
        return f'No files matching pattern "{pattern}" in {directory}'

    lines = [
        f'🔍 Files matching "{pattern}" in {directory}',
        f"📊 Found {len(matches)} file(s):",
        "",
    ]
    lines.extend(
        f"{number}. 📄 {match.relative_path}" for number, match in enumerate(matches, start=1)
    )
    return "\n".join(lines) + "\n"


def render_directory_listing(dir_path: str, entries: list[DirectoryEntry]) -> str:
    listing = "\n".join(f"{'📁' if entry.is_dir else '📄'} {entry.name}" for entry in entries)
    return f"Contents of directory {dir_path}:\n\n{listing}"


def render_command_result(result: CommandResult) -> str:
    lines = [f"$ {result.command}", f"Exit code: {result.exit_code}"]
    if result.stdout:
        lines.extend(["", "stdout:", result.stdout.rstrip("\n")])
    if result.stderr:
        lines.extend(["", "stderr:", result.stderr.rstrip("\n")])
    if result.truncated:
        lines.extend(["", "(output truncated)"])
    return "\n".join(lines)


def render_http_result(result: HttpResult) -> str:
    status_line = f"{result.method} {result.url} -> {result.status_code} {result.reason_phrase}".rstrip()
    body = result.body
    if result.truncated:
        body += "\n(body truncated)"
    return f"{status_line}\n\n{body}"


def render_file_summary(summary: FileSummary) -> str:
    return (
        f"File {summary.path}:\n"
        f"  size: {summary.size_bytes} bytes\n"
        f"  lines: {summary.lines}\n"
        f"  words: {summary.words}\n"
        f"  characters: {summary.characters}"
    )
