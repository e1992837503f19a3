# src/reposcope/core/merge.py
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .types import Repository, ScanMode, name_sort_key


logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Merged collection plus bookkeeping for one scan"""
    merged: List[Repository]
    added_count: int
    duplicate_count: int
    scan_roots: List[str] = field(default_factory=list)


def sort_by_name(repositories: Iterable[Repository]) -> List[Repository]:
    """Stable, case-insensitive ordering by display name"""
    return sorted(repositories, key=lambda r: name_sort_key(r.name))


def unique_by_path(repositories: Iterable[Repository], seen: Optional[set] = None) -> List[Repository]:
    """Drop repositories whose path was already seen; the first occurrence wins."""
    seen = set() if seen is None else seen
    unique = []
    for repo in repositories:
        if repo.path in seen:
            continue
        seen.add(repo.path)
        unique.append(repo)
    return unique


class MergeEngine:
    """Combines a fresh scan result with the authoritative collection"""

    def merge(
        self,
        existing: Sequence[Repository],
        incoming: Sequence[Repository],
        mode: ScanMode,
        scan_roots: Iterable[str] = (),
        path: Optional[str] = None,
    ) -> MergeResult:
        """
        Merge `incoming` into `existing`.

        Replace mode discards `existing` and resets the scan roots to `path`;
        paths repeated within `incoming` are counted as duplicates.
        Add mode appends only repositories with a path not already present and
        adds `path` to the scan roots. The merged list is sorted by name.
        """
        roots = list(dict.fromkeys(scan_roots))

        if mode == ScanMode.REPLACE:
            merged = unique_by_path(incoming)
            repeated = len(incoming) - len(merged)
            if repeated:
                logger.warning(f"Scan result contained {repeated} repeated paths")
            roots = [path] if path is not None else []
            return MergeResult(
                merged=sort_by_name(merged),
                added_count=len(merged),
                duplicate_count=repeated,
                scan_roots=roots,
            )

        seen = {r.path for r in existing}
        new_repos = unique_by_path(incoming, seen)
        added_count = len(new_repos)
        duplicate_count = len(incoming) - added_count

        if path is not None and path not in roots:
            roots.append(path)

        logger.debug(f"Add-mode merge: {added_count} new, {duplicate_count} duplicates skipped")
        return MergeResult(
            merged=sort_by_name(list(existing) + new_repos),
            added_count=added_count,
            duplicate_count=duplicate_count,
            scan_roots=roots,
        )
