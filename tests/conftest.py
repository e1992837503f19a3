"""
Shared fixtures and fake collaborators for reposcope tests.
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

import pytest

from reposcope import (
    Repository,
    RepoStatus,
    ScanBackend,
    CacheBackend,
    BatchExecutor,
    BatchOperation,
    BatchOperationResult,
    BatchResult,
    CacheSnapshot,
)


def build_repo(name: str, path: Optional[str] = None, **kwargs) -> Repository:
    """Build a repository with sensible defaults for tests."""
    data = {
        "name": name,
        "path": path or f"/work/{name}",
        "is_git_repo": True,
        "remotes": ["origin"],
        "status": RepoStatus.CLEAN,
    }
    data.update(kwargs)
    return Repository(**data)


def build_ts(day: int) -> datetime:
    return datetime(2024, 1, day, tzinfo=timezone.utc)


class FakeScanBackend(ScanBackend):
    """
    Returns canned results per directory.

    A result may be an exception instance, which is raised instead. When a
    gate is set, every scan waits for it, which keeps the scan in flight.
    """

    def __init__(self, results: Optional[Dict[str, Union[List[Repository], Exception]]] = None):
        self.results = results or {}
        self.calls: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None
        self.started: Optional[asyncio.Event] = None

    def hold(self) -> None:
        """Block scans until release() is called. Must run inside the loop."""
        self.gate = asyncio.Event()
        self.started = asyncio.Event()

    def release(self) -> None:
        self.gate.set()

    async def scan(self, directory_path, add_mode, progress=None):
        self.calls.append((directory_path, add_mode))
        if self.started is not None:
            self.started.set()
        if progress is not None:
            progress(directory_path, 1, 1)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        result = self.results.get(directory_path, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeCacheBackend(CacheBackend):
    def __init__(self, repositories=None, error: Optional[Exception] = None, save_error: Optional[Exception] = None):
        self.repositories = repositories
        self.error = error
        self.save_error = save_error
        self.load_calls = 0
        self.saved: List[CacheSnapshot] = []

    async def load_cache(self):
        self.load_calls += 1
        if self.error is not None:
            raise self.error
        return self.repositories

    async def save_cache(self, snapshot):
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(snapshot)


class FakeBatchExecutor(BatchExecutor):
    def __init__(self, failing: Optional[set] = None, error: Optional[Exception] = None):
        self.failing = failing or set()
        self.error = error
        self.calls: List[tuple] = []

    async def execute_batch(self, paths: List[str], operation: BatchOperation) -> BatchResult:
        self.calls.append((list(paths), operation))
        if self.error is not None:
            raise self.error
        results = [
            BatchOperationResult(
                repo_path=p,
                success=p not in self.failing,
                output="" if p in self.failing else "ok",
                error="boom" if p in self.failing else None,
            )
            for p in paths
        ]
        successful = sum(1 for r in results if r.success)
        return BatchResult(
            total_repos=len(paths),
            successful=successful,
            failed=len(paths) - successful,
            results=results,
        )


@pytest.fixture
def backend():
    return FakeScanBackend()


@pytest.fixture
def cache():
    return FakeCacheBackend()


@pytest.fixture
def make_repo():
    return build_repo


@pytest.fixture
def ts():
    return build_ts


@pytest.fixture
def cache_factory():
    return FakeCacheBackend


@pytest.fixture
def executor_factory():
    return FakeBatchExecutor
