# src/reposcope/core/interfaces.py
"""
Contracts for the external collaborators the coordination core depends on.

The scanning backend, the cache service and the batch git executor live
outside this package; applications wire concrete implementations in.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .types import Repository, CacheSnapshot, BatchOperation, BatchResult
from .progress import ProgressReporter


class ScanBackend(ABC):
    """Discovers repositories below a directory"""

    @abstractmethod
    async def scan(
        self,
        directory_path: str,
        add_mode: bool,
        progress: Optional[ProgressReporter] = None,
    ) -> List[Repository]:
        """
        Scan `directory_path` for repositories.

        All-or-nothing: either the full result is returned or an exception
        is raised. `progress` may be called any number of times with
        (current_directory, scanned_count, total_count).
        """
        pass


class CacheBackend(ABC):
    """Persists aggregated state between sessions"""

    @abstractmethod
    async def load_cache(self) -> Optional[List[Repository]]:
        """Return cached repositories, or None when there is no usable cache"""
        pass

    async def save_cache(self, snapshot: CacheSnapshot) -> None:
        """Persist a snapshot. Read-only caches may leave this as a no-op."""
        return None


class BatchExecutor(ABC):
    """Runs one git operation across many repositories"""

    @abstractmethod
    async def execute_batch(self, paths: List[str], operation: BatchOperation) -> BatchResult:
        pass
