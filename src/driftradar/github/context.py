"""Resolve which repository and pull request a run is about.

Reads the environment GitHub Actions provides: ``GITHUB_REPOSITORY`` and the
event payload at ``GITHUB_EVENT_PATH``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from driftradar.exceptions import ContextError

DEFAULT_BRANCH = "main"


@dataclass(frozen=True)
class PRContext:
    owner: str
    repo: str
    pull_number: int  # 0 when running without a pull request
    default_branch: str = DEFAULT_BRANCH

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def _load_event(env: Mapping[str, str]) -> dict:
    event_path = env.get("GITHUB_EVENT_PATH")
    if not event_path or not Path(event_path).exists():
        return {}
    try:
        with open(event_path) as f:
            event = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ContextError(f"Cannot read GitHub event payload {event_path}: {e}") from e
    return event if isinstance(event, dict) else {}


def resolve_context(
    pull_number: int | None = None,
    repository: str | None = None,
    require_pull: bool = True,
    fallback_branch: str = DEFAULT_BRANCH,
    env: Mapping[str, str] | None = None,
) -> PRContext:
    """Work out the repository and pull request for this run.

    Explicit arguments win over the environment. Without a pull request
    this raises ``ContextError`` unless ``require_pull`` is False, in which
    case ``pull_number`` is 0 (baseline-only runs).
    """
    env = os.environ if env is None else env
    event = _load_event(env)

    full_name = repository or env.get("GITHUB_REPOSITORY", "")
    owner, _, repo = full_name.partition("/")
    if not owner or not repo:
        raise ContextError(
            "Missing repository context. Set GITHUB_REPOSITORY or pass --repo owner/name."
        )

    if pull_number is None:
        pull_number = (event.get("pull_request") or {}).get("number")
    if not pull_number:
        if require_pull:
            raise ContextError(
                "No pull request in context. Provide --pull-number for manual runs."
            )
        pull_number = 0

    default_branch = (event.get("repository") or {}).get("default_branch") or fallback_branch

    return PRContext(
        owner=owner,
        repo=repo,
        pull_number=int(pull_number),
        default_branch=default_branch,
    )
