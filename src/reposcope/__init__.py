"""
reposcope - Scan coordination core for a multi-repository dashboard
"""

from .core.types import (
    RepoStatus,
    RepoError,
    Repository,
    ScanMode,
    ConflictKind,
    PathConflict,
    DirectoryStats,
    ScanProgress,
    ScanOutcome,
    RefreshOutcome,
    CacheSnapshot,
    BatchOperationType,
    BatchOperation,
    BatchOperationResult,
    BatchResult,
)
from .core.config import ReposcopeConfig, ConfigManager
from .core.exceptions import (
    ReposcopeException,
    ConflictError,
    LockBusyError,
    ScanBackendError,
    PartialRefreshError,
    InvalidScanRequestError,
    ConfigurationError,
    BatchExecutionError,
)
from .core.interfaces import ScanBackend, CacheBackend, BatchExecutor
from .core.conflicts import PathConflictDetector
from .core.aggregation import AggregationEngine
from .core.merge import MergeEngine, MergeResult
from .core.state import StateStore
from .core.progress import ProgressChannel
from .core.coordinator import ScanCoordinator
from .core.hydrator import CacheHydrator
from .operations import BatchOperations, FilterOptions, apply_filters
from .workspace import Workspace

__all__ = [
    # Types
    "RepoStatus",
    "RepoError",
    "Repository",
    "ScanMode",
    "ConflictKind",
    "PathConflict",
    "DirectoryStats",
    "ScanProgress",
    "ScanOutcome",
    "RefreshOutcome",
    "CacheSnapshot",
    "BatchOperationType",
    "BatchOperation",
    "BatchOperationResult",
    "BatchResult",
    # Configuration
    "ReposcopeConfig",
    "ConfigManager",
    # Exceptions
    "ReposcopeException",
    "ConflictError",
    "LockBusyError",
    "ScanBackendError",
    "PartialRefreshError",
    "InvalidScanRequestError",
    "ConfigurationError",
    "BatchExecutionError",
    # External collaborators
    "ScanBackend",
    "CacheBackend",
    "BatchExecutor",
    # Core components
    "PathConflictDetector",
    "AggregationEngine",
    "MergeEngine",
    "MergeResult",
    "StateStore",
    "ProgressChannel",
    "ScanCoordinator",
    "CacheHydrator",
    "BatchOperations",
    "FilterOptions",
    "apply_filters",
    "Workspace",
]
