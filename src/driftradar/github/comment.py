"""Keep exactly one Drift Radar comment on a pull request.

The comment carries a hidden marker; later runs find it and edit it in
place instead of adding another comment.
"""

from __future__ import annotations

import logging

from driftradar.config import DEFAULT_COMMENT_TAG
from driftradar.exceptions import GitHubError
from driftradar.github.client import COMMENTS_PER_PAGE, GitHubClient

logger = logging.getLogger("driftradar.github")


def find_marked_comment(client: GitHubClient, pull_number: int, marker: str) -> int | None:
    """Return the id of the first comment containing `marker`, if any."""
    page = 1
    while True:
        items = client.list_issue_comments(pull_number, page=page, per_page=COMMENTS_PER_PAGE)
        for c in items:
            if marker in str(c.get("body") or ""):
                return int(c["id"])
        if len(items) < COMMENTS_PER_PAGE:
            return None
        page += 1


def upsert_comment(
    client: GitHubClient,
    pull_number: int,
    body: str,
    tag: str = DEFAULT_COMMENT_TAG,
) -> bool:
    """Create or update the marked comment. Returns False instead of raising.

    Tokens with read-only permissions are common on fork PRs, so a failure
    here must not fail the run.
    """
    marker = tag.strip()
    full_body = f"{marker}\n{body}\n"

    try:
        existing_id = find_marked_comment(client, pull_number, marker)
        if existing_id is not None:
            client.update_comment(existing_id, full_body)
            logger.info(f"Updated comment {existing_id} on #{pull_number}")
        else:
            client.create_comment(pull_number, full_body)
            logger.info(f"Created comment on #{pull_number}")
    except GitHubError as e:
        logger.warning(f"Unable to create/update PR comment (non-fatal): {e}")
        return False
    return True
