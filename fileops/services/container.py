"""
Service dependency container.

Centralizes service creation and access; API modules obtain services through
FastAPI's Depends() instead of module-level globals.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fileops.config import Settings
    from fileops.services.health import HealthCheckService
    from fileops.services.lock import PathLockRegistry
    from fileops.services.tools import ToolDispatcher
    from fileops.services.workspace import WorkspaceService


class ServiceContainer:
    """Container for application services."""

    def __init__(
        self,
        workspace: WorkspaceService,
        tool_dispatcher: ToolDispatcher,
        health_service: HealthCheckService,
    ) -> None:
        self.workspace = workspace
        self.tool_dispatcher = tool_dispatcher
        self.health_service = health_service


_container: ServiceContainer | None = None


def build_services(
    settings: Settings,
    locks: PathLockRegistry | None = None,
    version: str = "unknown",
) -> ServiceContainer:
    """Wire every service from settings."""
    from fileops.services.command import CommandService
    from fileops.services.content_search import ContentSearchService
    from fileops.services.file_manager import FileManagerService
    from fileops.services.hashing import HashingService
    from fileops.services.health import HealthCheckService
    from fileops.services.http_client import HttpClientService
    from fileops.services.line_editor import LineEditorService
    from fileops.services.name_search import NameSearchService
    from fileops.services.tools import ToolDispatcher
    from fileops.services.workspace import WorkspaceService

    from fileops.services.lock import PathLockRegistry

    locks = locks or PathLockRegistry()
    workspace = WorkspaceService(settings.workspace_root)
    command_service = CommandService(
        workspace,
        enabled=settings.commands_enabled,
        timeout_seconds=settings.command_timeout_seconds,
    )
    dispatcher = ToolDispatcher(
        file_manager=FileManagerService(workspace, locks=locks),
        content_search=ContentSearchService(workspace),
        name_search=NameSearchService(workspace),
        line_editor=LineEditorService(workspace, locks=locks),
        command_service=command_service,
        http_client=HttpClientService(timeout_seconds=settings.http_timeout_seconds),
        hashing=HashingService(workspace),
        default_max_results=settings.default_max_results,
        max_file_size=settings.max_file_size,
    )
    health_service = HealthCheckService(
        workspace=workspace,
        tool_count=len(dispatcher.tool_names()),
        commands_enabled=settings.commands_enabled,
        version=version,
    )
    return ServiceContainer(
        workspace=workspace,
        tool_dispatcher=dispatcher,
        health_service=health_service,
    )


def init_container(container: ServiceContainer) -> None:
    """Install the service container (called once in FastAPI lifespan)."""
    global _container
    _container = container


def get_container() -> ServiceContainer:
    """Get service container (use via FastAPI Depends).

    Raises:
        RuntimeError: If container not initialized (lifespan not running)
    """
    if _container is None:
        msg = "Service container not initialized - application lifespan may not be running"
        raise RuntimeError(msg)
    return _container


def clear_container() -> None:
    global _container
    _container = None
