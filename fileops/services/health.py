"""Health check service."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING

from fileops.models.health import HealthCheckResponse, HealthStatus, ServiceHealth

if TYPE_CHECKING:
    from fileops.services.workspace import WorkspaceService

logger = logging.getLogger(__name__)


class HealthCheckService:
    """Service for checking system health."""

    def __init__(
        self,
        workspace: WorkspaceService,
        tool_count: int,
        commands_enabled: bool = True,
        version: str = "unknown",
    ) -> None:
        self.workspace = workspace
        self.tool_count = tool_count
        self.commands_enabled = commands_enabled
        self.version = version

    async def check_workspace_health(self) -> ServiceHealth:
        """
        Check that the workspace root exists and is writable.

        Without a configured root the server works on the whole file system
        and the current working directory is checked instead.
        """
        start = time.monotonic()
        root = self.workspace.root or Path.cwd()
        details = {"path": str(root), "confined": self.workspace.confined}

        try:
            if not root.is_dir():
                return ServiceHealth(
                    name="workspace",
                    status=HealthStatus.UNHEALTHY,
                    message="Workspace directory does not exist",
                    details=details,
                )

            writable = await asyncio.to_thread(os.access, root, os.W_OK)
            elapsed = (time.monotonic() - start) * 1000

            if not writable:
                return ServiceHealth(
                    name="workspace",
                    status=HealthStatus.DEGRADED,
                    message="Workspace is read-only; edit tools will fail",
                    response_time_ms=elapsed,
                    details=details,
                )

            return ServiceHealth(
                name="workspace",
                status=HealthStatus.HEALTHY,
                message="Workspace accessible and writable",
                response_time_ms=elapsed,
                details=details,
            )

        except OSError as e:
            logger.exception("Workspace health check failed")
            return ServiceHealth(
                name="workspace",
                status=HealthStatus.UNHEALTHY,
                message=f"Workspace check failed: {e}",
            )

    async def check_tools_health(self) -> ServiceHealth:
        if self.tool_count == 0:
            return ServiceHealth(
                name="tools",
                status=HealthStatus.UNHEALTHY,
                message="No tools registered",
            )
        return ServiceHealth(
            name="tools",
            status=HealthStatus.HEALTHY,
            message=f"{self.tool_count} tools registered",
            details={"tool_count": self.tool_count, "commands_enabled": self.commands_enabled},
        )

    async def check_health(self) -> HealthCheckResponse:
        """
        Perform complete health check.

        Returns:
            HealthCheckResponse with overall status and service details
        """
        services = list(
            await asyncio.gather(
                self.check_workspace_health(),
                self.check_tools_health(),
            )
        )

        if any(s.status == HealthStatus.UNHEALTHY for s in services):
            overall_status = HealthStatus.UNHEALTHY
        elif any(s.status == HealthStatus.DEGRADED for s in services):
            overall_status = HealthStatus.DEGRADED
        else:
            overall_status = HealthStatus.HEALTHY

        return HealthCheckResponse(
            status=overall_status,
            version=self.version,
            services=services,
        )
