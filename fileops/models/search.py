"""Models for content search and file name matching."""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field, field_validator

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class TraversalOptions(BaseModel):
    """Options shared by a recursive content search."""

    case_sensitive: bool = Field(False, description="Use case-sensitive matching")
    file_extensions: set[str] | None = Field(
        None,
        description="Extensions to include (e.g. {'.js', '.py'}); None or empty = all files",
    )
    max_results: int = Field(100, gt=0, description="Maximum number of files to return")
    max_file_size: int = Field(
        DEFAULT_MAX_FILE_SIZE,
        gt=0,
        description="Files larger than this many bytes are skipped",
    )
    include_line_numbers: bool = Field(True, description="Capture line-level hits")

    @field_validator("file_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        normalized = set()
        for ext in value:  # type: ignore[union-attr]
            ext = str(ext).strip().lower()
            if not ext:
                continue
            normalized.add(ext if ext.startswith(".") else f".{ext}")
        return normalized or None


class LineHit(BaseModel):
    """A single matching line inside a file."""

    line_number: int = Field(..., ge=1, description="1-based line number")
    content: str = Field(..., description="Trimmed line text")
    highlighted: str = Field(..., description="Trimmed line with occurrences wrapped in **")


class SearchMatch(BaseModel):
    """A file containing the search term."""

    file: str = Field(..., description="Absolute file path")
    relative_path: str = Field(..., description="Path relative to the search root")
    matches: list[LineHit] = Field(default_factory=list, description="Matching lines")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_matches(self) -> int:
        return len(self.matches)


class SearchResult(BaseModel):
    """Outcome of one content search traversal."""

    matches: list[SearchMatch] = Field(default_factory=list)
    skipped_count: int = Field(0, description="Entries skipped as oversized, unreadable or binary")
    truncated: bool = Field(False, description="Whether the result cap was reached")


class NameMatch(BaseModel):
    """A file whose name matches a glob pattern."""

    name: str
    path: str = Field(..., description="Absolute file path")
    relative_path: str = Field(..., description="Path relative to the search root")
    directory: str = Field(..., description="Containing directory")
