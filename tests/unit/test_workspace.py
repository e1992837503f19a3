"""
End-to-end tests through the Workspace lifecycle.
"""

import asyncio
import logging

from reposcope import Workspace, ScanMode, ReposcopeConfig


class TestWorkspace:
    """Hydrate, scan, and rescan through a single workspace."""

    def test_hydrate_then_add_scans(self, backend, cache_factory, make_repo):
        cache = cache_factory([make_repo("alpha", path="/cached/alpha")])
        backend.results["/new"] = [
            make_repo("gamma", path="/new/gamma"),
            make_repo("beta", path="/new/beta"),
        ]

        async def run():
            async with Workspace(backend, cache_backend=cache) as workspace:
                first = await workspace.coordinator.request_scan("/new", ScanMode.ADD)
                names = [r.name for r in workspace.state.repositories]
                second = await workspace.coordinator.request_scan(
                    "/new", ScanMode.ADD, confirm=lambda conflict: True
                )
                return workspace, first, names, second

        workspace, first, names, second = asyncio.run(run())

        assert names == ["alpha", "beta", "gamma"]
        assert first.added_count == 2
        assert first.duplicate_count == 0
        assert second.added_count == 0
        assert second.duplicate_count == 2
        assert len(workspace.state.repositories) == 3
        assert workspace.state.stats.total_directories == 3

    def test_initialize_sets_default_path(self, backend):
        config = ReposcopeConfig(default_path="/home/me/code")

        async def run():
            async with Workspace(backend, config=config) as workspace:
                return workspace.state.current_path, workspace.state.has_data

        current, has_data = asyncio.run(run())
        assert current == "/home/me/code"
        assert has_data is False

    def test_cache_not_contacted_for_scan_backend(self, backend, cache_factory, make_repo):
        cache = cache_factory([make_repo("alpha")])

        async def run():
            async with Workspace(backend, cache_backend=cache):
                pass

        asyncio.run(run())
        assert backend.calls == []

    def test_batch_available_only_with_executor(self, backend, executor_factory):
        assert Workspace(backend).batch is None
        assert Workspace(backend, batch_executor=executor_factory()).batch is not None


class TestWorkspaceLogging:
    """The configured log level applies to the package loggers."""

    def test_log_level_applied(self, backend):
        package_logger = logging.getLogger("reposcope")
        previous = package_logger.level
        try:
            Workspace(backend, config=ReposcopeConfig(log_level="debug"))
            assert package_logger.level == logging.DEBUG
            assert logging.getLogger("reposcope.core.coordinator").getEffectiveLevel() == logging.DEBUG

            Workspace(backend, config=ReposcopeConfig(log_level="WARNING"))
            assert package_logger.level == logging.WARNING
        finally:
            package_logger.setLevel(previous)
