"""Argument models for each tool; their JSON schemas are published as inputSchema."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ReadFileArgs(BaseModel):
    file_path: str = Field(..., description="Path of the file to read")


class WriteFileArgs(BaseModel):
    file_path: str = Field(..., description="Path of the file to write")
    content: str = Field(..., description="Content to write")
    mode: Literal["write", "append"] = Field(
        "write",
        description="'write' overwrites the file, 'append' adds to the end",
    )


class CreateDirectoryArgs(BaseModel):
    dir_path: str = Field(..., description="Directory to create (parents included)")


class ListDirectoryArgs(BaseModel):
    dir_path: str = Field(..., description="Directory to list")


class DeleteFileArgs(BaseModel):
    file_path: str = Field(..., description="File or directory to delete")


class SearchTextArgs(BaseModel):
    search_text: str = Field(..., description="Text to search for")
    directory: str = Field(..., description="Directory to search recursively")
    case_sensitive: bool = Field(False, description="Use case-sensitive matching")
    file_extensions: list[str] | None = Field(
        None,
        description="Extensions to include (e.g. ['.js', '.py']); all files when omitted",
    )
    max_results: int | None = Field(None, gt=0, description="Maximum number of files to return")
    include_line_numbers: bool = Field(True, description="Include line numbers and matching lines")


class FindFilesArgs(BaseModel):
    pattern: str = Field(..., description="File name pattern (e.g. '*.js', 'config*', 'test.txt')")
    directory: str = Field(..., description="Directory to search recursively")
    case_sensitive: bool = Field(False, description="Use case-sensitive matching")
    max_results: int | None = Field(None, gt=0, description="Maximum number of files to return")


class ReplaceLineArgs(BaseModel):
    file_path: str = Field(..., description="File to edit")
    line_number: int = Field(..., description="1-based line to overwrite")
    content: str = Field(..., description="New line content")


class InsertLineArgs(BaseModel):
    file_path: str = Field(..., description="File to edit")
    line_number: int = Field(
        ...,
        description="1-based line to insert before; line count + 1 appends",
    )
    content: str = Field(..., description="Line content to insert")


class DeleteLineArgs(BaseModel):
    file_path: str = Field(..., description="File to edit")
    line_number: int = Field(..., description="1-based line to remove")


class ReplaceInFileArgs(BaseModel):
    file_path: str = Field(..., description="File to edit")
    search: str = Field(..., description="Regular expression to replace everywhere in the file")
    replacement: str = Field(..., description="Replacement text (\\1 refers to groups)")


class RunCommandArgs(BaseModel):
    command: str = Field(..., description="Shell command to run")
    cwd: str | None = Field(None, description="Working directory")
    timeout_seconds: int | None = Field(None, gt=0, description="Timeout override in seconds")


class HttpRequestArgs(BaseModel):
    url: str = Field(..., description="Request URL (http or https)")
    method: str = Field("GET", description="HTTP method")
    headers: dict[str, str] | None = Field(None, description="Request headers")
    body: Any = Field(None, description="Request body; objects and arrays are sent as JSON")


class FileHashArgs(BaseModel):
    file_path: str = Field(..., description="File to hash")
    algorithm: str = Field("sha256", description="md5, sha1, sha256 or sha512")


class FileSummaryArgs(BaseModel):
    file_path: str = Field(..., description="File to summarize")
