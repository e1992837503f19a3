"""Operations layered on top of the aggregated repository state"""

from .batch import BatchOperations
from .filters import FilterOptions, SortKey, SortOrder, apply_filters, select_git_repositories

__all__ = [
    "BatchOperations",
    "FilterOptions",
    "SortKey",
    "SortOrder",
    "apply_filters",
    "select_git_repositories",
]
