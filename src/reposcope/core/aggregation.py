# src/reposcope/core/aggregation.py
"""
Derived statistics over the repository collection.

Statistics are always recomputed from scratch after a mutation; there is
no incremental path.
"""

from typing import Sequence

from .types import Repository, DirectoryStats, timestamp_key


DEFAULT_LARGEST_LIMIT = 10
DEFAULT_MOST_ACTIVE_LIMIT = 10
DEFAULT_ATTENTION_LIMIT = 20


class AggregationEngine:
    """Recomputes DirectoryStats from a repository collection"""

    def __init__(
        self,
        largest_limit: int = DEFAULT_LARGEST_LIMIT,
        most_active_limit: int = DEFAULT_MOST_ACTIVE_LIMIT,
        attention_limit: int = DEFAULT_ATTENTION_LIMIT,
    ):
        self.largest_limit = largest_limit
        self.most_active_limit = most_active_limit
        self.attention_limit = attention_limit

    def recompute(self, repositories: Sequence[Repository]) -> DirectoryStats:
        """
        Build statistics for `repositories`. Empty input yields zero counts.

        Sorting is stable, so ties keep the collection's relative order.
        """
        repos = list(repositories)
        git_repos = [r for r in repos if r.is_git_repo]

        largest = sorted(repos, key=lambda r: r.size_mb, reverse=True)
        most_active = sorted(repos, key=lambda r: timestamp_key(r.last_commit_date), reverse=True)
        needing_attention = [
            r for r in git_repos
            if r.has_uncommitted_changes or len(r.remotes) == 0
        ]

        return DirectoryStats(
            total_directories=len(repos),
            git_repositories=len(git_repos),
            non_git_directories=len(repos) - len(git_repos),
            repositories_with_changes=sum(1 for r in repos if r.has_uncommitted_changes),
            repositories_with_remotes=sum(1 for r in git_repos if r.remotes),
            total_size_mb=sum((r.size_mb for r in repos), 0.0),
            largest_repos=largest[:self.largest_limit],
            most_active_repos=most_active[:self.most_active_limit],
            repos_needing_attention=needing_attention[:self.attention_limit],
        )


def recompute(repositories: Sequence[Repository]) -> DirectoryStats:
    """Recompute statistics with the default list bounds"""
    return AggregationEngine().recompute(repositories)
