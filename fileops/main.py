import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fileops.api import health, tools
from fileops.config import get_settings
from fileops.logging_config import configure_json_logging
from fileops.middleware.request_id import RequestIDMiddleware
from fileops.services.container import build_services, init_container
from fileops.services.lock import clear_path_locks, get_path_locks, init_path_locks
from fileops.version import get_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup and shutdown."""
    settings = get_settings()
    configure_json_logging(log_level=settings.log_level, use_json=settings.log_json)
    logger.info("Starting file operations server...")

    # Locks must be created inside the running event loop
    await init_path_locks()

    container = build_services(settings, locks=get_path_locks(), version=get_version())
    container.workspace.ensure_root()
    init_container(container)

    if container.workspace.confined:
        logger.info(f"File operations server ready (workspace: {container.workspace.root})")
    else:
        logger.warning("File operations server ready (no workspace root, all paths reachable)")

    yield

    logger.info("File operations server shutting down")
    await clear_path_locks()


def create_app() -> FastAPI:
    app = FastAPI(
        title="File Operations Server",
        description="File, text-search and shell/network tools for tool-calling clients",
        version=get_version(),
        lifespan=lifespan,
    )
    app.add_middleware(RequestIDMiddleware)
    app.include_router(health.router)
    app.include_router(tools.router)
    return app


app = create_app()
