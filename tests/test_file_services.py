"""Tests for whole-file operations, hashing and summaries."""

import asyncio
import hashlib
from pathlib import Path

import pytest

from fileops.exceptions import FileOperationError, ValidationError
from fileops.services.file_manager import FileManagerService
from fileops.services.hashing import HashingService, summarize_text
from fileops.services.lock import PathLockRegistry
from fileops.services.workspace import WorkspaceService


@pytest.mark.asyncio
class TestFileManagerService:
    async def test_write_creates_parents(self, tmp_path: Path, workspace: WorkspaceService):
        service = FileManagerService(workspace)
        target = tmp_path / "a" / "b" / "c.txt"

        await service.write_file(str(target), "content")

        assert target.read_text() == "content"

    async def test_write_preserves_newlines(self, tmp_path: Path, workspace: WorkspaceService):
        service = FileManagerService(workspace)
        target = tmp_path / "crlf.txt"

        await service.write_file(str(target), "x\r\ny")

        assert target.read_bytes() == b"x\r\ny"
        assert await service.read_file(str(target)) == "x\r\ny"

    async def test_invalid_mode(self, tmp_path: Path, workspace: WorkspaceService):
        service = FileManagerService(workspace)

        with pytest.raises(ValidationError, match="mode"):
            await service.write_file(str(tmp_path / "f"), "x", mode="truncate")  # type: ignore[arg-type]

    async def test_read_non_utf8(self, tmp_path: Path, workspace: WorkspaceService):
        path = tmp_path / "latin1.txt"
        path.write_bytes(b"caf\xe9")

        with pytest.raises(FileOperationError, match="not valid UTF-8"):
            await FileManagerService(workspace).read_file(str(path))

    async def test_list_directory(self, project_dir: Path, workspace: WorkspaceService):
        entries = await FileManagerService(workspace).list_directory(str(project_dir))

        by_name = {entry.name: entry.is_dir for entry in entries}
        assert by_name == {"a.js": False, "b.txt": False, "src": True}

    async def test_list_missing_directory(self, tmp_path: Path, workspace: WorkspaceService):
        with pytest.raises(FileOperationError, match="list_directory failed"):
            await FileManagerService(workspace).list_directory(str(tmp_path / "missing"))

    async def test_create_directory_is_idempotent(self, tmp_path: Path, workspace: WorkspaceService):
        service = FileManagerService(workspace)

        await service.create_directory(str(tmp_path / "d"))
        await service.create_directory(str(tmp_path / "d"))

        assert (tmp_path / "d").is_dir()

    async def test_delete_missing_returns_false(self, tmp_path: Path, workspace: WorkspaceService):
        assert await FileManagerService(workspace).delete_path(str(tmp_path / "ghost")) is False

    async def test_delete_symlink_keeps_target(self, tmp_path: Path, workspace: WorkspaceService):
        target = tmp_path / "real"
        target.mkdir()
        (target / "keep.txt").write_text("x")
        link = tmp_path / "link"
        link.symlink_to(target, target_is_directory=True)

        assert await FileManagerService(workspace).delete_path(str(link)) is True

        assert not link.exists()
        assert (target / "keep.txt").exists()

    async def test_write_waits_for_path_lock(self, tmp_path: Path, workspace: WorkspaceService):
        locks = PathLockRegistry()
        service = FileManagerService(workspace, locks=locks)
        target = tmp_path / "shared.txt"

        async with locks.hold(target):
            task = asyncio.create_task(service.write_file(str(target), "late"))
            await asyncio.sleep(0.05)
            assert not task.done()
            assert not target.exists()

        await task
        assert target.read_text() == "late"

    async def test_delete_waits_for_path_lock(self, tmp_path: Path, workspace: WorkspaceService):
        locks = PathLockRegistry()
        service = FileManagerService(workspace, locks=locks)
        target = tmp_path / "shared.txt"
        target.write_text("keep for now")

        async with locks.hold(target):
            task = asyncio.create_task(service.delete_path(str(target)))
            await asyncio.sleep(0.05)
            assert not task.done()
            assert target.exists()

        assert await task is True
        assert not target.exists()
        assert locks.active_paths() == []


class TestSummarizeText:
    def test_counts(self):
        assert summarize_text("one two\nthree\n") == (2, 3, 14)

    def test_empty(self):
        assert summarize_text("") == (0, 0, 0)


@pytest.mark.asyncio
class TestHashingService:
    @pytest.mark.parametrize("algorithm", ["md5", "sha1", "sha256", "sha512"])
    async def test_supported_algorithms(self, tmp_path: Path, workspace: WorkspaceService, algorithm: str):
        path = tmp_path / "data.bin"
        path.write_bytes(b"payload")

        digest = await HashingService(workspace).file_hash(str(path), algorithm)

        assert digest == hashlib.new(algorithm, b"payload").hexdigest()

    async def test_missing_file(self, tmp_path: Path, workspace: WorkspaceService):
        with pytest.raises(FileOperationError, match="Failed to hash"):
            await HashingService(workspace).file_hash(str(tmp_path / "none"))

    async def test_summary(self, tmp_path: Path, workspace: WorkspaceService):
        path = tmp_path / "doc.txt"
        path.write_text("alpha beta\ngamma")

        summary = await HashingService(workspace).file_summary(str(path))

        assert summary.size_bytes == 16
        assert summary.lines == 2
        assert summary.words == 3
        assert summary.characters == 16
