"""
Tool catalog and dispatcher.

Receives a tool name and an argument bag, validates the arguments against the
tool's pydantic model, routes to the owning service and wraps the outcome in
a text envelope. Every failure becomes a single error envelope; nothing is
raised to the transport layer.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fileops.exceptions import FileOpsError, ToolNotFoundError
from fileops.models.search import DEFAULT_MAX_FILE_SIZE, TraversalOptions
from fileops.models.tool_args import (
    CreateDirectoryArgs,
    DeleteFileArgs,
    DeleteLineArgs,
    FileHashArgs,
    FileSummaryArgs,
    FindFilesArgs,
    HttpRequestArgs,
    InsertLineArgs,
    ListDirectoryArgs,
    ReadFileArgs,
    ReplaceInFileArgs,
    ReplaceLineArgs,
    RunCommandArgs,
    SearchTextArgs,
    WriteFileArgs,
)
from fileops.models.tools import ToolCallResponse, ToolDefinition
from fileops.services import reports
from fileops.utils.error_handling import format_error_text
from fileops.utils.request_context import tool_context

if TYPE_CHECKING:
    from fileops.services.command import CommandService
    from fileops.services.content_search import ContentSearchService
    from fileops.services.file_manager import FileManagerService
    from fileops.services.hashing import HashingService
    from fileops.services.http_client import HttpClientService
    from fileops.services.line_editor import LineEditorService
    from fileops.services.name_search import NameSearchService

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    arguments: type[BaseModel]
    handler: Handler

    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=self.arguments.model_json_schema(),
        )


def describe_validation_error(tool: str, exc: PydanticValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        problems.append(f"{location}: {error['msg']}")
    return f"Invalid arguments for {tool}: " + "; ".join(problems)


class ToolDispatcher:
    """Routes tool calls to services and renders their results."""

    def __init__(
        self,
        file_manager: FileManagerService,
        content_search: ContentSearchService,
        name_search: NameSearchService,
        line_editor: LineEditorService,
        command_service: CommandService,
        http_client: HttpClientService,
        hashing: HashingService,
        default_max_results: int = 100,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        self.file_manager = file_manager
        self.content_search = content_search
        self.name_search = name_search
        self.line_editor = line_editor
        self.command_service = command_service
        self.http_client = http_client
        self.hashing = hashing
        self.default_max_results = default_max_results
        self.max_file_size = max_file_size
        self._tools = {tool.name: tool for tool in self._build_catalog()}

    def _build_catalog(self) -> list[Tool]:
        return [
            Tool("read_file", "Read the contents of a file", ReadFileArgs, self._read_file),
            Tool(
                "write_file",
                "Write content to a file, creating parent directories",
                WriteFileArgs,
                self._write_file,
            ),
            Tool("create_directory", "Create a directory", CreateDirectoryArgs, self._create_directory),
            Tool("list_directory", "List the contents of a directory", ListDirectoryArgs, self._list_directory),
            Tool("delete_file", "Delete a file or directory", DeleteFileArgs, self._delete_file),
            Tool(
                "search_text",
                "Search for a text string in files under a directory (recursively)",
                SearchTextArgs,
                self._search_text,
            ),
            Tool(
                "find_files",
                "Find files by name or glob pattern under a directory",
                FindFilesArgs,
                self._find_files,
            ),
            Tool("replace_line", "Replace one line of a text file", ReplaceLineArgs, self._replace_line),
            Tool(
                "insert_line",
                "Insert a line before the given line of a text file",
                InsertLineArgs,
                self._insert_line,
            ),
            Tool("delete_line", "Delete one line of a text file", DeleteLineArgs, self._delete_line),
            Tool(
                "replace_in_file",
                "Replace every match of a regular expression in a file",
                ReplaceInFileArgs,
                self._replace_in_file,
            ),
            Tool("run_command", "Run a shell command", RunCommandArgs, self._run_command),
            Tool("http_request", "Send an HTTP request", HttpRequestArgs, self._http_request),
            Tool("file_hash", "Compute the hash of a file", FileHashArgs, self._file_hash),
            Tool(
                "file_summary",
                "Summarize a text file (size, lines, words, characters)",
                FileSummaryArgs,
                self._file_summary,
            ),
        ]

    def list_tools(self) -> list[ToolDefinition]:
        return [tool.definition() for tool in self._tools.values()]

    def tool_names(self) -> list[str]:
        return list(self._tools)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolCallResponse:
        """Invoke a tool and wrap its outcome in an envelope."""
        start_time = time.monotonic()
        with tool_context(name):
            try:
                text = await self._dispatch(name, arguments or {})
            except ToolNotFoundError as exc:
                logger.warning("Unknown tool requested", extra={"requested_tool": name})
                return ToolCallResponse.text(format_error_text(exc), is_error=True)
            except PydanticValidationError as exc:
                message = describe_validation_error(name, exc)
                logger.warning("Invalid tool arguments", extra={"error_count": exc.error_count()})
                return ToolCallResponse.text(f"Error: {message}", is_error=True)
            except FileOpsError as exc:
                logger.warning(
                    "Tool call failed",
                    extra={"error_type": type(exc).__name__, "error": str(exc)},
                )
                return ToolCallResponse.text(format_error_text(exc), is_error=True)
            except httpx.HTTPError as exc:
                logger.warning(
                    "HTTP request failed",
                    extra={"error_type": type(exc).__name__, "error": str(exc)},
                )
                return ToolCallResponse.text(format_error_text(exc), is_error=True)
            except Exception as exc:
                logger.exception(
                    "Unexpected error in tool call",
                    extra={"error_type": type(exc).__name__},
                )
                return ToolCallResponse.text(format_error_text(exc), is_error=True)

            logger.info(
                "Tool call completed",
                extra={"duration_ms": int((time.monotonic() - start_time) * 1000)},
            )
            return ToolCallResponse.text(text)

    async def _dispatch(self, name: str, arguments: dict[str, Any]) -> str:
        tool = self._tools.get(name)
        if tool is None:
            msg = f"Unknown tool: {name}"
            raise ToolNotFoundError(msg, context={"tool": name, "available": self.tool_names()})
        args = tool.arguments.model_validate(arguments)
        return await tool.handler(args)

    async def _read_file(self, args: ReadFileArgs) -> str:
        content = await self.file_manager.read_file(args.file_path)
        return f"Contents of file {args.file_path}:\n\n{content}"

    async def _write_file(self, args: WriteFileArgs) -> str:
        await self.file_manager.write_file(args.file_path, args.content, args.mode)
        action = "updated" if args.mode == "append" else "created"
        return f"File {args.file_path} {action} successfully"

    async def _create_directory(self, args: CreateDirectoryArgs) -> str:
        await self.file_manager.create_directory(args.dir_path)
        return f"Directory {args.dir_path} created successfully"

    async def _list_directory(self, args: ListDirectoryArgs) -> str:
        entries = await self.file_manager.list_directory(args.dir_path)
        return reports.render_directory_listing(args.dir_path, entries)

    async def _delete_file(self, args: DeleteFileArgs) -> str:
        existed = await self.file_manager.delete_path(args.file_path)
        if not existed:
            return f"Nothing to delete at {args.file_path}"
        return f"File/directory {args.file_path} deleted successfully"

    async def _search_text(self, args: SearchTextArgs) -> str:
        options = TraversalOptions(
            case_sensitive=args.case_sensitive,
            file_extensions=args.file_extensions,
            max_results=args.max_results or self.default_max_results,
            max_file_size=self.max_file_size,
            include_line_numbers=args.include_line_numbers,
        )
        result = await self.content_search.search(args.search_text, args.directory, options)
        return reports.render_search_report(args.search_text, args.directory, result)

    async def _find_files(self, args: FindFilesArgs) -> str:
        matches = await self.name_search.find(
            args.pattern,
            args.directory,
            case_sensitive=args.case_sensitive,
            max_results=args.max_results or self.default_max_results,
        )
        return reports.render_name_report(args.pattern, args.directory, matches)

    async def _replace_line(self, args: ReplaceLineArgs) -> str:
        result = await self.line_editor.replace_line(args.file_path, args.line_number, args.content)
        return f"Line {args.line_number} of {args.file_path} replaced ({result.line_count} lines)"

    async def _insert_line(self, args: InsertLineArgs) -> str:
        result = await self.line_editor.insert_line(args.file_path, args.line_number, args.content)
        return f"Line inserted at {args.line_number} in {args.file_path} ({result.line_count} lines)"

    async def _delete_line(self, args: DeleteLineArgs) -> str:
        result = await self.line_editor.delete_line(args.file_path, args.line_number)
        return f"Line {args.line_number} deleted from {args.file_path} ({result.line_count} lines)"

    async def _replace_in_file(self, args: ReplaceInFileArgs) -> str:
        result = await self.line_editor.replace_in_file(args.file_path, args.search, args.replacement)
        return f"{result.replacements} replacement(s) made in {args.file_path}"

    async def _run_command(self, args: RunCommandArgs) -> str:
        result = await self.command_service.run(args.command, args.cwd, args.timeout_seconds)
        return reports.render_command_result(result)

    async def _http_request(self, args: HttpRequestArgs) -> str:
        result = await self.http_client.request(args.url, args.method, args.headers, args.body)
        return reports.render_http_result(result)

    async def _file_hash(self, args: FileHashArgs) -> str:
        digest = await self.hashing.file_hash(args.file_path, args.algorithm)
        return f"{args.algorithm.lower()} {digest}  {args.file_path}"

    async def _file_summary(self, args: FileSummaryArgs) -> str:
        summary = await self.hashing.file_summary(args.file_path)
        return reports.render_file_summary(summary)
