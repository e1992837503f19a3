# src/reposcope/core/conflicts.py
"""
Detection of overlapping scan requests.

A candidate path is compared against every path the user already scanned.
Checks run per existing path in a fixed precedence: parent, child, duplicate.
"""

from typing import Iterable, Optional

from .types import ConflictKind, PathConflict


class PathConflictDetector:
    """Classifies a candidate scan path against previously scanned paths."""

    def __init__(self, separator: str = "/"):
        self.separator = separator

    def normalize(self, path: str) -> str:
        """Strip a single trailing separator."""
        if path.endswith(self.separator):
            return path[:-len(self.separator)]
        return path

    def classify(self, candidate: str, existing_paths: Iterable[str]) -> Optional[PathConflict]:
        """
        Return the first conflict between `candidate` and `existing_paths`.

        Args:
            candidate: Path the user wants to scan
            existing_paths: Previously scanned paths, iterated in the given order

        Returns:
            A PathConflict, or None when the candidate does not overlap
        """
        normalized_new = self.normalize(candidate)
        sep = self.separator

        for existing in existing_paths:
            normalized_existing = self.normalize(existing)

            if normalized_existing.startswith(normalized_new + sep):
                return PathConflict(
                    kind=ConflictKind.PARENT,
                    conflicting_path=existing,
                    message=f'"{candidate}" contains already scanned directory "{existing}"',
                )

            if normalized_new.startswith(normalized_existing + sep):
                return PathConflict(
                    kind=ConflictKind.CHILD,
                    conflicting_path=existing,
                    message=f'"{candidate}" is already included in scanned directory "{existing}"',
                )

            if normalized_new == normalized_existing:
                return PathConflict(
                    kind=ConflictKind.DUPLICATE,
                    conflicting_path=existing,
                    message=f'"{candidate}" has already been scanned',
                )

        return None


def classify(candidate: str, existing_paths: Iterable[str], separator: str = "/") -> Optional[PathConflict]:
    """Convenience wrapper around PathConflictDetector.classify"""
    return PathConflictDetector(separator).classify(candidate, existing_paths)
