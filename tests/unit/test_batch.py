"""
Unit tests for batch git operations over selected repositories.
"""

import asyncio

import pytest

from reposcope import BatchOperationType, BatchExecutionError, ReposcopeConfig, ScanMode
from reposcope.core import ScanCoordinator, StateStore
from reposcope.operations import BatchOperations


def build(backend, executor, make_repo, refresh_after_batch=True):
    backend.results["/w"] = [make_repo("a", path="/w/a"), make_repo("b", path="/w/b")]
    config = ReposcopeConfig(batch_refresh_delay=0, refresh_after_batch=refresh_after_batch)
    state = StateStore()
    coordinator = ScanCoordinator(state, backend, config=config)
    asyncio.run(coordinator.request_scan("/w", ScanMode.REPLACE))
    backend.calls.clear()
    return BatchOperations(state, executor, coordinator, config)


class TestBatchOperations:
    """Tests for BatchOperations.execute."""

    def test_runs_on_selected_known_paths(self, backend, executor_factory, make_repo):
        executor = executor_factory()
        batch = build(backend, executor, make_repo)

        result = asyncio.run(batch.execute(["/w/a", "/unknown", "/w/a"], BatchOperationType.STATUS))

        paths, operation = executor.calls[0]
        assert paths == ["/w/a"]
        assert operation.operation_type == BatchOperationType.STATUS
        assert result.total_repos == 1
        assert result.successful == 1
        assert batch.last_result is result

    def test_empty_selection_skips_executor(self, backend, executor_factory, make_repo):
        executor = executor_factory()
        batch = build(backend, executor, make_repo)
        assert asyncio.run(batch.execute([], "Pull")) is None
        assert asyncio.run(batch.execute(["/nope"], "Pull")) is None
        assert executor.calls == []

    def test_pull_triggers_refresh(self, backend, executor_factory, make_repo):
        executor = executor_factory()
        batch = build(backend, executor, make_repo)
        asyncio.run(batch.execute(["/w/a"], BatchOperationType.PULL))
        assert backend.calls == [("/w", False)]

    def test_status_does_not_refresh(self, backend, executor_factory, make_repo):
        batch = build(backend, executor_factory(), make_repo)
        asyncio.run(batch.execute(["/w/a"], BatchOperationType.STATUS))
        assert backend.calls == []

    def test_all_failed_does_not_refresh(self, backend, executor_factory, make_repo):
        batch = build(backend, executor_factory(failing={"/w/a"}), make_repo)
        result = asyncio.run(batch.execute(["/w/a"], BatchOperationType.FETCH))
        assert result.failed == 1
        assert result.results[0].error == "boom"
        assert backend.calls == []

    def test_refresh_can_be_disabled(self, backend, executor_factory, make_repo):
        batch = build(backend, executor_factory(), make_repo, refresh_after_batch=False)
        asyncio.run(batch.execute(["/w/a"], BatchOperationType.PUSH))
        assert backend.calls == []

    def test_executor_failure_wrapped(self, backend, executor_factory, make_repo):
        batch = build(backend, executor_factory(error=RuntimeError("ssh agent gone")), make_repo)
        with pytest.raises(BatchExecutionError) as info:
            asyncio.run(batch.execute(["/w/a"], BatchOperationType.PULL))
        assert isinstance(info.value.__cause__, RuntimeError)

    def test_custom_command_is_split(self, backend, executor_factory, make_repo):
        executor = executor_factory()
        batch = build(backend, executor, make_repo)
        asyncio.run(batch.execute_custom(["/w/b"], 'log -n 1 --format="%h %s"'))
        _, operation = executor.calls[0]
        assert operation.operation_type == BatchOperationType.CUSTOM
        assert operation.parameters["command"] == ["log", "-n", "1", "--format=%h %s"]

    def test_blank_custom_command_ignored(self, backend, executor_factory, make_repo):
        executor = executor_factory()
        batch = build(backend, executor, make_repo)
        assert asyncio.run(batch.execute_custom(["/w/b"], "   ")) is None
        assert executor.calls == []
