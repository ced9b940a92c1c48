"""Shared test fixtures for Drift Radar."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from driftradar.baseline.store import BaselineStore
from driftradar.exceptions import GitHubError
from driftradar.scoring.classifier import ChangedFile


class FakeGitHub:
    """In-memory stand-in for GitHubClient."""

    def __init__(
        self,
        pulls: dict[int, list[ChangedFile]] | None = None,
        merged: list[int] | None = None,
        comments: list[dict] | None = None,
        fail_history: bool = False,
        fail_comments: bool = False,
    ) -> None:
        self.repo = "acme/widgets"
        self.pulls = pulls or {}
        self.merged = merged or []
        self.comments = comments or []
        self.fail_history = fail_history
        self.fail_comments = fail_comments
        self.calls: list[tuple] = []

    def list_pull_files(self, pull_number: int) -> list[ChangedFile]:
        self.calls.append(("files", pull_number))
        if pull_number not in self.pulls:
            raise GitHubError(f"Not Found: pull {pull_number}")
        return list(self.pulls[pull_number])

    def list_merged_pulls(self, limit: int) -> list[int]:
        self.calls.append(("merged", limit))
        if self.fail_history:
            raise GitHubError("API rate limit exceeded")
        return self.merged[:limit]

    def list_issue_comments(self, issue_number: int, page: int = 1, per_page: int = 100):
        self.calls.append(("comments", issue_number, page))
        if self.fail_comments:
            raise GitHubError("Resource not accessible by integration")
        start = (page - 1) * per_page
        return self.comments[start:start + per_page]

    def create_comment(self, issue_number: int, body: str) -> None:
        self.calls.append(("create", issue_number))
        self.comments.append({"id": 1000 + len(self.comments), "body": body})

    def update_comment(self, comment_id: int, body: str) -> None:
        self.calls.append(("update", comment_id))
        for c in self.comments:
            if c["id"] == comment_id:
                c["body"] = body


@pytest.fixture
def fake_github():
    """Factory for FakeGitHub clients."""
    return FakeGitHub


@pytest.fixture
def store(tmp_path: Path):
    s = BaselineStore(tmp_path / ".driftradar" / "baseline.db")
    yield s
    s.close()


@pytest.fixture
def core_change() -> list[ChangedFile]:
    """One core file, no tests: 50 additions, 10 deletions."""
    return [ChangedFile("src/a.ext", additions=50, deletions=10)]


@pytest.fixture
def docs_change() -> list[ChangedFile]:
    return [ChangedFile("docs/readme.ext", additions=5, deletions=2)]


@pytest.fixture
def risky_change() -> list[ChangedFile]:
    """Untested core code plus dependency and CI changes."""
    return [
        ChangedFile("src/api/a.py", 150, 50),
        ChangedFile("src/api/b.py", 150, 50),
        ChangedFile("src/api/c.py", 150, 50),
        ChangedFile("src/api/d.py", 150, 50),
        ChangedFile("src/api/e.py", 150, 50),
        ChangedFile("package.json", 15, 5),
        ChangedFile("yarn.lock", 200, 100),
        ChangedFile(".github/workflows/ci.yml", 6, 4),
    ]


@pytest.fixture
def infra_change() -> list[ChangedFile]:
    """Infra-only change landing in the medium band."""
    return [
        ChangedFile("terraform/main.tf", 100, 0),
        ChangedFile(".github/workflows/deploy.yml", 100, 0),
        ChangedFile("docker-compose.yml", 50, 50),
    ]


@pytest.fixture
def files_json(tmp_path: Path) -> Path:
    """A GitHub-shaped JSON file list on disk."""
    path = tmp_path / "files.json"
    path.write_text(json.dumps([
        {"filename": "src/a.ext", "additions": 50, "deletions": 10, "status": "modified"},
    ]))
    return path


@pytest.fixture
def event_file(tmp_path: Path) -> Path:
    """A pull_request event payload as GitHub Actions writes it."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps({
        "action": "synchronize",
        "pull_request": {"number": 42},
        "repository": {"default_branch": "trunk"},
    }))
    return path
