"""Local change sources: unified git diffs and JSON file lists.

Produces the same ``ChangedFile`` records the GitHub API gives, so a change
can be scored on a laptop before a pull request exists.
"""

from __future__ import annotations

import json
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from driftradar.scoring.classifier import ChangedFile

_HUNK_RE = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


@dataclass
class FileDiff:
    """Changes to a single file."""
    path: str
    status: str  # 'added', 'modified', 'deleted', 'renamed'
    old_path: str | None = None  # For renames
    hunks: int = 0
    added_lines: int = 0
    deleted_lines: int = 0

    def to_changed_file(self) -> ChangedFile:
        return ChangedFile(
            path=self.path, additions=self.added_lines, deletions=self.deleted_lines
        )


def parse_diff(diff_text: str) -> list[FileDiff]:
    """Parse unified diff text into per-file line counts."""
    files: list[FileDiff] = []
    current: FileDiff | None = None
    in_hunk = False

    for line in diff_text.splitlines():
        if line.startswith("diff --git"):
            if current:
                files.append(current)
            parts = line.split(" b/")
            path = parts[-1] if len(parts) > 1 else ""
            current = FileDiff(path=path, status="modified")
            in_hunk = False
            continue

        if current is None:
            continue

        if line.startswith("@@"):
            if _HUNK_RE.match(line):
                current.hunks += 1
                in_hunk = True
        elif in_hunk:
            if line.startswith("+"):
                current.added_lines += 1
            elif line.startswith("-"):
                current.deleted_lines += 1
        elif line.startswith("new file"):
            current.status = "added"
        elif line.startswith("deleted file"):
            current.status = "deleted"
        elif line.startswith("rename from "):
            current.old_path = line[len("rename from "):]
            current.status = "renamed"
        elif line.startswith("+++ b/"):
            current.path = line[6:]

    if current:
        files.append(current)

    return files


def to_changed_files(diffs: list[FileDiff]) -> list[ChangedFile]:
    return [d.to_changed_file() for d in diffs]


def get_git_diff(root: Path, base: str = "main") -> str:
    """Get the git diff between the current branch and base."""
    try:
        result = subprocess.run(
            ["git", "diff", f"{base}...HEAD"],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=30,
        )
        if result.returncode == 0:
            return result.stdout
        # Fallback: diff against base directly
        result = subprocess.run(
            ["git", "diff", base],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=30,
        )
        return result.stdout
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return ""


def load_changed_files(path: Path) -> list[ChangedFile]:
    """Read a JSON list of file records (``filename``/``path``, additions, deletions).

    Accepts either a bare list or an object with a ``files`` list, which is
    what ``gh api repos/{repo}/pulls/{n}/files`` output wrapped by hand
    tends to look like.
    """
    data = json.loads(Path(path).read_text())
    if isinstance(data, dict):
        data = data.get("files", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of file records")
    return [ChangedFile.from_api(item) for item in data if isinstance(item, dict)]
