# src/reposcope/workspace.py
"""
Application state lifecycle.

A Workspace is created at process start, hydrated from the cache once, then
mutated only through its coordinator, and closed at shutdown. Nothing is
held in module globals; pass the workspace to whatever needs it.
"""

import logging
from typing import Optional

from .core.config import ReposcopeConfig
from .core.interfaces import ScanBackend, CacheBackend, BatchExecutor
from .core.state import StateStore
from .core.progress import ProgressChannel
from .core.coordinator import ScanCoordinator
from .core.hydrator import CacheHydrator
from .operations.batch import BatchOperations
from .utils import AsyncContextManagerMixin


logger = logging.getLogger(__name__)


class Workspace(AsyncContextManagerMixin):
    """Wires the state store, coordinator, hydrator and batch operations together"""

    def __init__(
        self,
        scan_backend: ScanBackend,
        cache_backend: Optional[CacheBackend] = None,
        batch_executor: Optional[BatchExecutor] = None,
        config: Optional[ReposcopeConfig] = None,
    ):
        self.config = config or ReposcopeConfig()
        logging.getLogger("reposcope").setLevel(getattr(logging, self.config.log_level.upper()))
        self.state = StateStore()
        self.progress = ProgressChannel(self.config.progress_queue_size)
        self.coordinator = ScanCoordinator(
            self.state,
            scan_backend,
            cache=cache_backend,
            config=self.config,
            progress=self.progress,
        )
        self.hydrator = CacheHydrator(self.state, cache_backend, self.coordinator.aggregator)
        self.batch: Optional[BatchOperations] = None
        if batch_executor is not None:
            self.batch = BatchOperations(self.state, batch_executor, self.coordinator, self.config)
        self._initialized = False

    async def initialize(self):
        """Start the coordinator and hydrate from the cache"""
        if self._initialized:
            return

        logger.info("Initializing workspace")
        await self.coordinator.initialize()
        loaded = await self.hydrator.hydrate()

        if self.config.default_path and not self.state.current_path:
            self.state.current_path = self.config.default_path

        self._initialized = True
        logger.info(f"Workspace ready with {loaded} cached repositories")

    async def close(self):
        """Stop background work"""
        await self.coordinator.close()
        self._initialized = False
        logger.info("Workspace closed")
