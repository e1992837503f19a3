"""
Filtering and ordering for the repository list view.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from ..core.types import Repository, name_sort_key, timestamp_key


class SortKey(str, Enum):
    NAME = "name"
    SIZE = "size"
    ACTIVITY = "activity"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class FilterOptions:
    """User-selected filters for the repository list."""
    show_git_only: bool = False
    show_with_changes: bool = False
    show_without_remotes: bool = False
    search_term: str = ""
    sort_by: SortKey = SortKey.NAME
    sort_order: SortOrder = SortOrder.ASC


def matches(repo: Repository, options: FilterOptions) -> bool:
    if options.show_git_only and not repo.is_git_repo:
        return False
    if options.show_with_changes and not repo.has_uncommitted_changes:
        return False
    if options.show_without_remotes and repo.remotes:
        return False
    if options.search_term and options.search_term.lower() not in repo.name.lower():
        return False
    return True


def apply_filters(repositories: Iterable[Repository], options: FilterOptions) -> List[Repository]:
    """
    Filter then sort repositories for display.

    Activity ordering is by `last_activity` with the most recent first in
    ascending order, which is how the list view has always presented it.
    """
    filtered = [r for r in repositories if matches(r, options)]
    sort_by = SortKey(options.sort_by)
    descending = SortOrder(options.sort_order) == SortOrder.DESC

    if sort_by == SortKey.NAME:
        return sorted(filtered, key=lambda r: name_sort_key(r.name), reverse=descending)
    if sort_by == SortKey.SIZE:
        return sorted(filtered, key=lambda r: r.size_mb, reverse=descending)
    if sort_by == SortKey.ACTIVITY:
        return sorted(filtered, key=lambda r: timestamp_key(r.last_activity), reverse=not descending)
    return sorted(filtered, key=lambda r: name_sort_key(r.status_label), reverse=descending)


def select_git_repositories(repositories: Iterable[Repository]) -> List[str]:
    """Paths of every git repository ("select all")."""
    return [r.path for r in repositories if r.is_git_repo]
