"""Fold a pull request's changed files into aggregate category counts."""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from typing import Any

from driftradar.scoring.paths import (
    is_core_path,
    is_deps_path,
    is_docs_path,
    is_infra_path,
    is_tests_path,
)


def _coerce_count(value: Any) -> int:
    """Turn an API line count into a non-negative int; junk becomes 0."""
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


@dataclass(frozen=True)
class ChangedFile:
    """Diff stats for one file in a change."""

    path: str
    additions: int = 0
    deletions: int = 0

    @property
    def lines(self) -> int:
        return self.additions + self.deletions

    @classmethod
    def from_api(cls, data: dict) -> ChangedFile:
        """Build from a GitHub file record (``filename``) or a plain ``path`` record."""
        path = data.get("filename", data.get("path", ""))
        return cls(
            path=str(path or ""),
            additions=_coerce_count(data.get("additions")),
            deletions=_coerce_count(data.get("deletions")),
        )


@dataclass(frozen=True)
class ClassifiedCounts:
    """Aggregate counts over a change.

    F files, L changed lines, C core files, T test files, D dependency
    manifests, I infra/config files, H hotspot files.
    """

    F: int = 0
    L: int = 0
    C: int = 0
    T: int = 0
    D: int = 0
    I: int = 0  # noqa: E741
    H: int = 0
    docs_only: bool = False
    test_coverage: float = 0.0

    def to_dict(self) -> dict:
        return {
            "F": self.F,
            "L": self.L,
            "C": self.C,
            "T": self.T,
            "D": self.D,
            "I": self.I,
            "H": self.H,
            "docs_only": self.docs_only,
            "test_coverage": self.test_coverage,
        }


def classify_files(
    files: Iterable[ChangedFile], hotspots: Collection[str] = frozenset()
) -> ClassifiedCounts:
    """Classify every changed file and accumulate the counts.

    Hotspot membership is an exact path match, never a prefix match.
    """
    F = L = C = T = D = I = H = 0  # noqa: E741
    docs_count = 0

    for f in files:
        F += 1
        L += _coerce_count(f.additions) + _coerce_count(f.deletions)

        path = f.path
        if is_docs_path(path):
            docs_count += 1
        if is_core_path(path):
            C += 1
        if is_tests_path(path):
            T += 1
        if is_deps_path(path):
            D += 1
        if is_infra_path(path):
            I += 1
        if path in hotspots:
            H += 1

    return ClassifiedCounts(
        F=F,
        L=L,
        C=C,
        T=T,
        D=D,
        I=I,
        H=H,
        docs_only=F > 0 and docs_count == F,
        test_coverage=T / max(1, C),
    )
