"""Thin GitHub REST client built on the ``gh api`` command.

Works wherever ``gh`` is installed, including GitHub Actions runners. The
token is handed to ``gh`` through ``GH_TOKEN`` in the child environment.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import Any

from driftradar.exceptions import GitHubError
from driftradar.scoring.classifier import ChangedFile

logger = logging.getLogger("driftradar.github")

FILES_PER_PAGE = 100
PULLS_PER_PAGE = 50
COMMENTS_PER_PAGE = 100


class GitHubClient:
    """Minimal set of pull request and comment calls."""

    def __init__(self, repo: str, token: str | None = None, timeout: int = 30) -> None:
        self.repo = repo  # "owner/name"
        self.token = token
        self.timeout = timeout

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self.token:
            env["GH_TOKEN"] = self.token
        return env

    def api(
        self, endpoint: str, method: str = "GET", fields: dict[str, str] | None = None
    ) -> Any:
        """Run one ``gh api`` call and return the decoded JSON body."""
        cmd = ["gh", "api", "--method", method, endpoint]
        for key, value in (fields or {}).items():
            cmd += ["-f", f"{key}={value}"]

        logger.debug(f"gh api {method} {endpoint}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=self._env(),
            )
        except subprocess.TimeoutExpired as e:
            raise GitHubError(f"GitHub API call timed out: {method} {endpoint}") from e
        except FileNotFoundError as e:
            raise GitHubError("The 'gh' CLI is required but was not found on PATH") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise GitHubError(f"GitHub API call failed: {method} {endpoint}: {detail}")

        body = result.stdout.strip()
        if not body:
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise GitHubError(f"Unexpected response from {endpoint}: {e}") from e

    def _page(self, endpoint: str, **params: Any) -> list[dict]:
        query = "&".join(f"{k}={v}" for k, v in params.items())
        data = self.api(f"{endpoint}?{query}" if query else endpoint)
        if not isinstance(data, list):
            raise GitHubError(f"Expected a list from {endpoint}, got {type(data).__name__}")
        return data

    def list_pull_files(self, pull_number: int) -> list[ChangedFile]:
        """All changed files of a pull request, with per-file line counts."""
        files: list[ChangedFile] = []
        page = 1
        while True:
            items = self._page(
                f"repos/{self.repo}/pulls/{pull_number}/files",
                per_page=FILES_PER_PAGE,
                page=page,
            )
            files.extend(ChangedFile.from_api(it) for it in items)
            if len(items) < FILES_PER_PAGE:
                break
            page += 1
        return files

    def list_merged_pulls(self, limit: int) -> list[int]:
        """Numbers of the most recently merged pull requests, newest first.

        The pulls endpoint can't filter on merged, so closed pull requests
        are paged through and those without ``merged_at`` are skipped.
        """
        merged: list[int] = []
        page = 1
        while len(merged) < limit:
            items = self._page(
                f"repos/{self.repo}/pulls",
                state="closed",
                sort="updated",
                direction="desc",
                per_page=PULLS_PER_PAGE,
                page=page,
            )
            if not items:
                break
            for pr in items:
                if pr.get("merged_at"):
                    merged.append(int(pr["number"]))
                if len(merged) >= limit:
                    break
            if len(items) < PULLS_PER_PAGE:
                break
            page += 1
        return merged[:limit]

    def list_issue_comments(
        self, issue_number: int, page: int = 1, per_page: int = COMMENTS_PER_PAGE
    ) -> list[dict]:
        return self._page(
            f"repos/{self.repo}/issues/{issue_number}/comments",
            per_page=per_page,
            page=page,
        )

    def create_comment(self, issue_number: int, body: str) -> None:
        self.api(
            f"repos/{self.repo}/issues/{issue_number}/comments",
            method="POST",
            fields={"body": body},
        )

    def update_comment(self, comment_id: int, body: str) -> None:
        self.api(
            f"repos/{self.repo}/issues/comments/{comment_id}",
            method="PATCH",
            fields={"body": body},
        )
