"""
Unit tests for the repository data model.
"""

from datetime import datetime

from reposcope import Repository, RepoStatus, RepoError


class TestRepository:
    """Tests for Repository parsing."""

    def test_parse_backend_payload(self):
        repo = Repository.model_validate({
            "name": "proj",
            "path": "/code/proj",
            "is_git_repo": True,
            "has_uncommitted_changes": True,
            "current_branch": "main",
            "remotes": ["origin", "upstream"],
            "last_commit_date": "2024-03-01T12:00:00Z",
            "last_activity": None,
            "status": "Dirty",
            "size_mb": 12.5,
            "commit_count": 42,
            "primary_language": "Python",
            "total_lines": 1000,
            "code_lines": 800,
        })
        assert repo.status == RepoStatus.DIRTY
        assert repo.status_label == "Dirty"
        assert isinstance(repo.last_commit_date, datetime)
        assert repo.commit_count == 42
        assert not repo.has_error

    def test_error_status_payload(self):
        repo = Repository.model_validate({"name": "x", "path": "/x", "status": {"Error": "corrupt index"}})
        assert isinstance(repo.status, RepoError)
        assert repo.status.message == "corrupt index"
        assert repo.status_label == "Error"
        assert repo.has_error

    def test_error_status_serializes_by_alias(self):
        repo = Repository(name="x", path="/x", status=RepoError(Error="bad"))
        assert repo.model_dump(by_alias=True)["status"] == {"Error": "bad"}

    def test_defaults(self):
        repo = Repository(name="plain", path="/plain")
        assert repo.remotes == []
        assert repo.status == RepoStatus.NO_GIT
        assert repo.last_commit_date is None
