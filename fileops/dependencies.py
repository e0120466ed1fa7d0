from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fileops.config import settings
from fileops.services.container import get_container

if TYPE_CHECKING:
    from fileops.services.health import HealthCheckService
    from fileops.services.tools import ToolDispatcher

security = HTTPBearer()


async def verify_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> None:
    """Verify the bearer token matches the configured auth token."""
    if credentials.credentials != settings.auth_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        )


async def get_tool_dispatcher() -> ToolDispatcher:
    """Get tool dispatcher via dependency injection."""
    return get_container().tool_dispatcher


async def get_health_service() -> HealthCheckService:
    """Get health check service via dependency injection."""
    return get_container().health_service
