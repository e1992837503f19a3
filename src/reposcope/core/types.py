# src/reposcope/core/types.py
from typing import Dict, Any, Optional, Union, List, Tuple
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class RepoStatus(str, Enum):
    """Working-tree status reported by the scan backend"""
    CLEAN = "Clean"
    DIRTY = "Dirty"
    UNTRACKED = "Untracked"
    NO_GIT = "NoGit"


class RepoError(BaseModel):
    """Error payload variant of a repository status, serialized as {"Error": "..."}"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message: str = Field(..., alias="Error")


class Repository(BaseModel):
    """One discovered directory. `path` is the primary key."""
    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    is_git_repo: bool = False
    has_uncommitted_changes: bool = False
    current_branch: Optional[str] = None
    remotes: List[str] = Field(default_factory=list)
    last_commit_date: Optional[datetime] = None
    last_activity: Optional[datetime] = None
    status: Union[RepoStatus, RepoError] = RepoStatus.NO_GIT
    size_mb: float = 0.0
    commit_count: Optional[int] = None
    primary_language: Optional[str] = None
    total_lines: int = 0
    code_lines: int = 0

    @property
    def has_error(self) -> bool:
        return isinstance(self.status, RepoError)

    @property
    def status_label(self) -> str:
        """Display label for the status; the error variant reads as "Error"."""
        if isinstance(self.status, RepoError):
            return "Error"
        return self.status.value


def timestamp_key(value: Optional[datetime]) -> float:
    """Sort key for optional timestamps; missing values order as the earliest."""
    if value is None:
        return float('-inf')
    return value.timestamp()


def name_sort_key(name: str) -> Tuple[str, str]:
    """
    Collation key for display names.

    Case-insensitive first; names differing only in case put the lowercase
    form first ("alpha" < "Alpha" < "beta").
    """
    return (name.casefold(), name.swapcase())


class ScanMode(str, Enum):
    """How a scan result is combined with the existing collection"""
    REPLACE = "replace"
    ADD = "add"


class ConflictKind(str, Enum):
    """Relationship between a candidate scan path and an already scanned one"""
    PARENT = "parent"
    CHILD = "child"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class PathConflict:
    """A detected overlap between a candidate path and a scanned path"""
    kind: ConflictKind
    conflicting_path: str
    message: str


@dataclass
class DirectoryStats:
    """Aggregate statistics derived from the whole repository collection"""
    total_directories: int = 0
    git_repositories: int = 0
    non_git_directories: int = 0
    repositories_with_changes: int = 0
    repositories_with_remotes: int = 0
    total_size_mb: float = 0.0
    largest_repos: List[Repository] = field(default_factory=list)
    most_active_repos: List[Repository] = field(default_factory=list)
    repos_needing_attention: List[Repository] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_directories': self.total_directories,
            'git_repositories': self.git_repositories,
            'non_git_directories': self.non_git_directories,
            'repositories_with_changes': self.repositories_with_changes,
            'repositories_with_remotes': self.repositories_with_remotes,
            'total_size_mb': self.total_size_mb,
            'largest_repos': [r.path for r in self.largest_repos],
            'most_active_repos': [r.path for r in self.most_active_repos],
            'repos_needing_attention': [r.path for r in self.repos_needing_attention],
        }


@dataclass(frozen=True)
class ScanProgress:
    """A single progress event pushed by the scan backend"""
    current_directory: str
    scanned_count: int
    total_count: Optional[int] = None
    scan_id: Optional[str] = None

    @property
    def percentage(self) -> Optional[float]:
        if not self.total_count:
            return None
        return round(self.scanned_count * 100.0 / self.total_count, 1)

    @property
    def display_path(self) -> str:
        """Shortened form of the current directory, keeping the last three parts"""
        parts = self.current_directory.split('/')
        if len(parts) > 3:
            return ".../" + "/".join(parts[-3:])
        return self.current_directory


@dataclass
class ScanOutcome:
    """Result of a committed scan request"""
    path: str
    mode: ScanMode
    found: int
    added_count: int
    duplicate_count: int
    total: int
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class RefreshOutcome:
    """Result of refresh-all; failures are per-root and non-fatal"""
    roots: List[str] = field(default_factory=list)
    refreshed: List[str] = field(default_factory=list)
    failures: List[Any] = field(default_factory=list)  # List[PartialRefreshError]
    total: int = 0

    @property
    def succeeded(self) -> bool:
        return not self.failures


class CacheSnapshot(BaseModel):
    """Aggregated state handed to the cache backend for persistence"""
    repositories: List[Repository] = Field(default_factory=list)
    scanned_paths: List[str] = Field(default_factory=list)
    scan_roots: List[str] = Field(default_factory=list)
    saved_at: datetime = Field(default_factory=datetime.now)
    total_repos: int = 0
    total_git_repos: int = 0
    total_size_mb: float = 0.0


class BatchOperationType(str, Enum):
    """Git operations the batch executor understands"""
    PULL = "Pull"
    PUSH = "Push"
    STATUS = "Status"
    FETCH = "Fetch"
    COMMIT = "Commit"
    CUSTOM = "Custom"


class BatchOperation(BaseModel):
    """Operation sent to the batch executor"""
    operation_type: BatchOperationType
    parameters: Dict[str, Any] = Field(default_factory=dict)


class BatchOperationResult(BaseModel):
    """Per-repository result of a batch operation"""
    repo_path: str
    success: bool
    output: str = ""
    error: Optional[str] = None


class BatchResult(BaseModel):
    """Summary returned by the batch executor"""
    total_repos: int = 0
    successful: int = 0
    failed: int = 0
    results: List[BatchOperationResult] = Field(default_factory=list)
