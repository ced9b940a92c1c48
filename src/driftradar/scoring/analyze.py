"""One-call analysis of a change: classify, score, explain, recommend."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field

from driftradar.scoring.actions import suggested_actions
from driftradar.scoring.classifier import ChangedFile, ClassifiedCounts, classify_files
from driftradar.scoring.drivers import Driver, pick_drivers
from driftradar.scoring.engine import Scores, compute_scores


@dataclass(frozen=True)
class AnalyzeResult:
    counts: ClassifiedCounts
    scores: Scores
    drivers: list[Driver] = field(default_factory=list)
    suggested_actions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "counts": self.counts.to_dict(),
            "scores": self.scores.to_dict(),
            "drivers": [d.to_dict() for d in self.drivers],
            "suggested_actions": list(self.suggested_actions),
        }


def analyze(
    files: Iterable[ChangedFile], hotspots: Collection[str] = frozenset()
) -> AnalyzeResult:
    """Analyze a change's files against a hotspot set.

    Always returns a complete result; an empty file list is a valid change.
    """
    counts = classify_files(files, hotspots)
    scores = compute_scores(counts)
    return AnalyzeResult(
        counts=counts,
        scores=scores,
        drivers=pick_drivers(counts, scores),
        suggested_actions=suggested_actions(counts, scores.score),
    )
