"""
Per-path locks for file mutations.

Line edits, whole-file writes and deletes hold the lock of their target
path for the whole operation, so two mutations of the same file inside
this process cannot interleave and lose an update. Mutations of different
paths do not block each other. There is no protection against other processes.

IMPORTANT: The registry is created inside the running event loop via
init_path_locks(), not at module import time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


class PathLockRegistry:
    """Hands out one asyncio.Lock per resolved path, dropping idle ones."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @staticmethod
    def key_for(path: str | Path) -> str:
        return str(Path(path).resolve())

    @asynccontextmanager
    async def hold(self, path: str | Path) -> AsyncIterator[None]:
        """Acquire the lock for path for the duration of the block."""
        key = self.key_for(path)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._holders[key] = self._holders.get(key, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]

    def active_paths(self) -> list[str]:
        """Paths with a holder or waiter (for diagnostics and tests)."""
        return sorted(self._locks)


_path_locks: PathLockRegistry | None = None


def get_path_locks() -> PathLockRegistry:
    """
    Get the path lock registry, raising error if not initialized.

    Raises:
        RuntimeError: If registry not initialized (must call init_path_locks() in app lifespan)
    """
    if _path_locks is None:
        raise RuntimeError(
            "Path locks not initialized. Must call init_path_locks() in app lifespan."
        )
    return _path_locks


async def init_path_locks() -> PathLockRegistry:
    """
    Initialize the path lock registry in the running event loop.

    Raises:
        RuntimeError: If called when the registry is already initialized
    """
    global _path_locks
    if _path_locks is not None:
        raise RuntimeError("Path locks already initialized")
    _path_locks = PathLockRegistry()
    logger.debug("Path lock registry initialized in event loop")
    return _path_locks


async def clear_path_locks() -> None:
    """Drop the registry (application shutdown and test teardown)."""
    global _path_locks
    _path_locks = None
