"""Models for line-oriented file edits."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EditResult(BaseModel):
    """Outcome of a single-file mutation."""

    path: str = Field(..., description="Absolute path of the edited file")
    operation: str = Field(..., description="replace_line, insert_line, delete_line or replace_in_file")
    line_count: int = Field(..., ge=0, description="Number of lines after the edit")
    line_number: int | None = Field(None, description="Line addressed by a positional edit")
    replacements: int | None = Field(None, description="Occurrences replaced by a pattern edit")
