"""Core components for reposcope"""

from .types import *
from .config import *
from .exceptions import *
from .conflicts import PathConflictDetector, classify
from .aggregation import AggregationEngine, recompute
from .merge import MergeEngine, MergeResult
from .state import StateStore
from .progress import ProgressChannel
from .coordinator import ScanCoordinator
from .hydrator import CacheHydrator

__all__ = [
    "PathConflictDetector",
    "classify",
    "AggregationEngine",
    "recompute",
    "MergeEngine",
    "MergeResult",
    "StateStore",
    "ProgressChannel",
    "ScanCoordinator",
    "CacheHydrator",
]
