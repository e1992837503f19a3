# src/reposcope/core/state.py
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .types import Repository, DirectoryStats, ScanProgress, CacheSnapshot


logger = logging.getLogger(__name__)


class StateStore:
    """
    Authoritative in-memory application state.

    Holds the repository collection, the scan roots (what was handed to the
    backend), the scanned paths (what the user picked, used for conflict
    detection) and the derived statistics. Only ScanCoordinator and
    CacheHydrator write to it, through `commit`. Readers get tuples so they
    can't patch the collection in place.
    """

    def __init__(self):
        self._repositories: Tuple[Repository, ...] = ()
        self._scan_roots: Tuple[str, ...] = ()
        self._scanned_paths: Tuple[str, ...] = ()
        self._stats: Optional[DirectoryStats] = None
        self.last_updated: Optional[datetime] = None

        # Transient display values, never part of the authoritative state
        self.current_path: Optional[str] = None
        self.current_status: str = ""
        self.progress: Optional[ScanProgress] = None

    @property
    def repositories(self) -> Tuple[Repository, ...]:
        return self._repositories

    @property
    def scan_roots(self) -> Tuple[str, ...]:
        return self._scan_roots

    @property
    def scanned_paths(self) -> Tuple[str, ...]:
        return self._scanned_paths

    @property
    def stats(self) -> Optional[DirectoryStats]:
        return self._stats

    @property
    def has_data(self) -> bool:
        """False until the first hydration or scan has been committed"""
        return self._stats is not None

    def get_repository(self, path: str) -> Optional[Repository]:
        for repo in self._repositories:
            if repo.path == path:
                return repo
        return None

    def commit(
        self,
        repositories: Sequence[Repository],
        stats: DirectoryStats,
        scan_roots: Optional[Sequence[str]] = None,
        scanned_paths: Optional[Sequence[str]] = None,
    ) -> None:
        """Replace the collection and its derived stats in one step."""
        repositories = tuple(repositories)
        paths = [r.path for r in repositories]
        if len(set(paths)) != len(paths):
            raise ValueError("Repository paths must be unique within the collection")

        self._repositories = repositories
        self._stats = stats
        if scan_roots is not None:
            self._scan_roots = tuple(dict.fromkeys(scan_roots))
        if scanned_paths is not None:
            self._scanned_paths = tuple(dict.fromkeys(scanned_paths))
        self.last_updated = datetime.now()

        logger.debug(
            f"State committed: {len(repositories)} repositories, "
            f"{len(self._scan_roots)} scan roots"
        )

    def set_status(self, message: str) -> None:
        self.current_status = message

    def snapshot(self) -> CacheSnapshot:
        """Snapshot of the aggregated state for persistence"""
        repos: List[Repository] = list(self._repositories)
        return CacheSnapshot(
            repositories=repos,
            scanned_paths=list(self._scanned_paths),
            scan_roots=list(self._scan_roots),
            total_repos=len(repos),
            total_git_repos=sum(1 for r in repos if r.is_git_repo),
            total_size_mb=sum((r.size_mb for r in repos), 0.0),
        )
