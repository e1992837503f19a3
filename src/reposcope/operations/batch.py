# src/reposcope/operations/batch.py
import asyncio
import logging
import shlex
from typing import Any, Dict, Iterable, List, Optional, Union

from ..core.types import BatchOperation, BatchOperationType, BatchResult
from ..core.config import ReposcopeConfig
from ..core.exceptions import BatchExecutionError, LockBusyError
from ..core.interfaces import BatchExecutor
from ..core.state import StateStore
from ..core.coordinator import ScanCoordinator


logger = logging.getLogger(__name__)

# Operations that change remote-tracking state and warrant a refresh
REFRESHING_OPERATIONS = {
    BatchOperationType.PULL,
    BatchOperationType.PUSH,
    BatchOperationType.FETCH,
}


class BatchOperations:
    """
    Runs a git operation over a selection of repositories.

    The selection is keyed by repository path, the same identifiers the
    StateStore uses. After operations that touch remotes a refresh-all is
    scheduled through the coordinator, which keeps it single-flight.
    """

    def __init__(
        self,
        state: StateStore,
        executor: BatchExecutor,
        coordinator: Optional[ScanCoordinator] = None,
        config: Optional[ReposcopeConfig] = None,
    ):
        self.state = state
        self.executor = executor
        self.coordinator = coordinator
        self.config = config or ReposcopeConfig()
        self.last_result: Optional[BatchResult] = None

    def _resolve_selection(self, selected_paths: Iterable[str]) -> List[str]:
        known = {r.path for r in self.state.repositories}
        paths = []
        for path in dict.fromkeys(selected_paths):
            if path in known:
                paths.append(path)
            else:
                logger.warning(f"Skipping unknown repository path: {path}")
        return paths

    async def execute(
        self,
        selected_paths: Iterable[str],
        operation_type: Union[BatchOperationType, str],
        parameters: Optional[Dict[str, Any]] = None,
    ) -> Optional[BatchResult]:
        """
        Execute `operation_type` on the selected repositories.

        Returns None without contacting the executor when nothing valid is
        selected.
        """
        paths = self._resolve_selection(selected_paths)
        if not paths:
            logger.info("No repositories selected, skipping batch operation")
            return None

        operation = BatchOperation(
            operation_type=BatchOperationType(operation_type),
            parameters=parameters or {},
        )
        logger.info(f"Running {operation.operation_type.value} on {len(paths)} repositories")

        try:
            result = await self.executor.execute_batch(paths, operation)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Batch operation failed: {e}")
            raise BatchExecutionError(f"Batch {operation.operation_type.value} failed: {e}", details=e) from e

        self.last_result = result
        logger.info(
            f"Batch {operation.operation_type.value} finished: "
            f"{result.successful}/{result.total_repos} succeeded, {result.failed} failed"
        )
        for item in result.results:
            if not item.success:
                logger.warning(f"{operation.operation_type.value} failed for {item.repo_path}: {item.error}")

        if operation.operation_type in REFRESHING_OPERATIONS and result.successful > 0:
            await self._refresh_after_batch()

        return result

    async def execute_custom(self, selected_paths: Iterable[str], command: str) -> Optional[BatchResult]:
        """Run a custom git command line, e.g. "status --porcelain"."""
        if not command or not command.strip():
            return None
        return await self.execute(
            selected_paths,
            BatchOperationType.CUSTOM,
            {"command": shlex.split(command)},
        )

    async def _refresh_after_batch(self) -> None:
        if self.coordinator is None or not self.config.refresh_after_batch:
            return
        if self.config.batch_refresh_delay > 0:
            await asyncio.sleep(self.config.batch_refresh_delay)
        try:
            await self.coordinator.refresh_all()
        except LockBusyError:
            logger.info("Skipping post-batch refresh, a scan is already running")
