import os
import tempfile
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Set up minimal test configuration BEFORE any imports from fileops
_tmp_dir = tempfile.TemporaryDirectory(prefix="pytest_config_")
_config_file = Path(_tmp_dir.name) / "config.yaml"
_config_file.write_text(
    """
auth:
  token: test-token-123

logging:
  level: DEBUG
  json: false
"""
)
os.environ["CONFIG_PATH"] = str(_config_file)


@pytest.fixture(autouse=True)
async def reset_shared_state_after_test():
    """Reset lock registry and service container so tests cannot leak into each other."""
    yield
    from fileops.services.container import clear_container
    from fileops.services.lock import clear_path_locks

    clear_container()
    await clear_path_locks()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A small project tree.

    project/
        a.js        "foo\\nbar\\nfoo"
        b.txt       "foo"
        src/
            config.json
            configs
            myconfig
            notes.TXT
            notes.TXT.bak
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.js").write_text("foo\nbar\nfoo")
    (root / "b.txt").write_text("foo")
    src = root / "src"
    src.mkdir()
    (src / "config.json").write_text('{"debug": true}')
    (src / "configs").write_text("settings")
    (src / "myconfig").write_text("settings")
    (src / "notes.TXT").write_text("Remember the FOO meeting")
    (src / "notes.TXT.bak").write_text("old foo notes")
    return root


@pytest.fixture
def workspace():
    """Unconfined workspace (any path reachable)."""
    from fileops.services.workspace import WorkspaceService

    return WorkspaceService(None)


@pytest.fixture
def test_settings(tmp_path: Path):
    from fileops.config import Settings

    return Settings(auth_token="test-token-123", workspace_root=str(tmp_path))


@pytest.fixture
def dispatcher(test_settings):
    """Tool dispatcher confined to tmp_path."""
    from fileops.services.container import build_services

    return build_services(test_settings, version="test-version").tool_dispatcher


@pytest.fixture
def test_app() -> FastAPI:
    """Create a test FastAPI app without the lifespan."""
    from fileops.api import health, tools
    from fileops.middleware.request_id import RequestIDMiddleware

    app = FastAPI(title="File Operations Server Test")
    app.add_middleware(RequestIDMiddleware)
    app.include_router(health.router)
    app.include_router(tools.router)
    return app


@pytest.fixture
def client(test_app: FastAPI, test_settings):
    """Test client with services confined to tmp_path."""
    from fileops.services.container import build_services, init_container

    init_container(build_services(test_settings, version="test-version"))

    with TestClient(test_app) as c:
        yield c


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Valid authorization headers."""
    return {"Authorization": "Bearer test-token-123"}
