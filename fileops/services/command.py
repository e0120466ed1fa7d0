"""Shell command runner exposed as the run_command tool."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import time
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from fileops.exceptions import CommandError

if TYPE_CHECKING:
    from fileops.services.workspace import WorkspaceService

logger = logging.getLogger(__name__)

MAX_OUTPUT_CHARS = 100_000


class CommandResult(BaseModel):
    """Outcome of one shell command."""

    command: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    truncated: bool = Field(False, description="Whether stdout or stderr was cut")


def _clip(text: str) -> tuple[str, bool]:
    if len(text) <= MAX_OUTPUT_CHARS:
        return text, False
    return text[:MAX_OUTPUT_CHARS], True


class CommandService:
    """Runs shell commands with a timeout. A non-zero exit code is a result, not an error."""

    def __init__(
        self,
        workspace: WorkspaceService,
        enabled: bool = True,
        timeout_seconds: int = 30,
    ) -> None:
        self.workspace = workspace
        self.enabled = enabled
        self.timeout_seconds = timeout_seconds

    async def run(
        self,
        command: str,
        cwd: str | None = None,
        timeout_seconds: int | None = None,
    ) -> CommandResult:
        """Run command through the shell.

        Raises:
            CommandError: Runner disabled, spawn failure or timeout
            ValidationError: cwd invalid
        """
        if not self.enabled:
            msg = "Command execution is disabled"
            raise CommandError(msg, context={"reason": "disabled"})

        if cwd is not None:
            work_dir = str(self.workspace.resolve_directory(cwd, field="cwd"))
        elif self.workspace.root is not None:
            work_dir = str(self.workspace.root)
        else:
            work_dir = None

        timeout = timeout_seconds or self.timeout_seconds
        start_time = time.monotonic()

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=work_dir,
                start_new_session=True,
            )
        except OSError as exc:
            msg = f"Failed to start command: {exc}"
            raise CommandError(msg, context={"reason": "spawn_failed"}) from exc

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except TimeoutError as exc:
            # The shell leads its own session, so the group kill reaches its children too
            try:
                os.killpg(process.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            await process.communicate()
            msg = f"Command timed out after {timeout}s"
            raise CommandError(
                msg,
                context={
                    "reason": "timeout",
                    "timeout_seconds": timeout,
                },
            ) from exc

        duration_ms = int((time.monotonic() - start_time) * 1000)
        exit_code = process.returncode if process.returncode is not None else -1
        stdout_text, stdout_cut = _clip(stdout.decode("utf-8", errors="replace"))
        stderr_text, stderr_cut = _clip(stderr.decode("utf-8", errors="replace"))

        logger.info(
            "Command finished",
            extra={
                "exit_code": exit_code,
                "cwd": work_dir,
                "duration_ms": duration_ms,
                "stdout_length": len(stdout_text),
                "stderr_length": len(stderr_text),
            },
        )

        return CommandResult(
            command=command,
            exit_code=exit_code,
            stdout=stdout_text,
            stderr=stderr_text,
            duration_ms=duration_ms,
            truncated=stdout_cut or stderr_cut,
        )
