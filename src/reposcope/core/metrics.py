"""
Counters for scan coordination, reported through ScanCoordinator.get_status().
"""

from typing import Dict, Any
from dataclasses import dataclass, field
from collections import defaultdict


@dataclass
class ScanMetrics:
    """Container for collected scan metrics."""
    total_scans: int = 0
    successful_scans: int = 0
    failed_scans: int = 0
    rejected_busy: int = 0
    cancelled_conflicts: int = 0

    total_refreshes: int = 0
    failed_refresh_roots: int = 0

    total_duration_seconds: float = 0.0
    max_duration_seconds: float = 0.0

    errors_by_type: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_success(self, duration: float) -> None:
        self.successful_scans += 1
        self.total_duration_seconds += duration
        self.max_duration_seconds = max(self.max_duration_seconds, duration)

    def record_error(self, error: BaseException) -> None:
        self.errors_by_type[type(error).__name__] += 1

    def get_average_duration(self) -> float:
        """Calculate average duration of successful scans."""
        if self.successful_scans == 0:
            return 0.0
        return self.total_duration_seconds / self.successful_scans

    def get_success_rate(self) -> float:
        """Calculate success rate."""
        if self.total_scans == 0:
            return 0.0
        return self.successful_scans / self.total_scans

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary."""
        return {
            'total_scans': self.total_scans,
            'successful_scans': self.successful_scans,
            'failed_scans': self.failed_scans,
            'success_rate': self.get_success_rate(),
            'rejected_busy': self.rejected_busy,
            'cancelled_conflicts': self.cancelled_conflicts,
            'refresh': {
                'total': self.total_refreshes,
                'failed_roots': self.failed_refresh_roots,
            },
            'duration': {
                'average_seconds': self.get_average_duration(),
                'max_seconds': self.max_duration_seconds,
                'total_seconds': self.total_duration_seconds,
            },
            'errors_by_type': dict(self.errors_by_type),
        }
