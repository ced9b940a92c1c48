"""Rolling baseline from recently merged pull requests.

Two things come out of a window of historical changes:

  - hotspots: paths touched most often (top 10 by frequency, plus any
    path touched in 3 or more changes)
  - the median of each historical change's own score

Historical changes are scored with an empty hotspot set; using hotspots
derived from the same window would feed the result back into itself.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from driftradar.scoring.analyze import analyze
from driftradar.scoring.classifier import ChangedFile

HOTSPOT_TOP_N = 10
HOTSPOT_MIN_TOUCHES = 3


class BaselineData(BaseModel):
    """Baseline record for one branch. Replaced wholesale on every refresh."""

    model_config = ConfigDict(populate_by_name=True)

    computed_at: str = Field(alias="computedAt")
    history_n: int = Field(alias="historyN")
    baseline_median_score: float | None = Field(default=None, alias="baselineMedianScore")
    hotspot_files: list[str] = Field(default_factory=list, alias="hotspotFiles")

    @property
    def hotspot_set(self) -> frozenset[str]:
        return frozenset(self.hotspot_files)

    def to_record(self) -> dict:
        """Flat, JSON-ready record using the persisted field names."""
        return self.model_dump(by_alias=True)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def empty_baseline(history_n: int) -> BaselineData:
    """Baseline with no trend and no hotspots."""
    return BaselineData(
        computed_at=_now(),
        history_n=history_n,
        baseline_median_score=None,
        hotspot_files=[],
    )


def median(values: Sequence[float]) -> float | None:
    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return float(ordered[mid])


def touch_frequencies(histories: Iterable[Iterable[ChangedFile]]) -> Counter[str]:
    """Count, per exact path, how many changes touched it."""
    freq: Counter[str] = Counter()
    for files in histories:
        # A path listed twice in one change still counts as one touch
        freq.update(dict.fromkeys((f.path for f in files), 1))
    return freq


def derive_hotspots(
    freq: Counter[str],
    top_n: int = HOTSPOT_TOP_N,
    min_touches: int = HOTSPOT_MIN_TOUCHES,
) -> list[str]:
    """Top `top_n` paths by frequency, plus every path with >= `min_touches`.

    With fewer than `top_n` distinct paths, every touched path qualifies.
    """
    # Counter preserves first-seen order and sorted() is stable, so ties
    # rank by first appearance.
    ranked = sorted(freq.items(), key=lambda item: item[1], reverse=True)
    hotspots = [path for path, _ in ranked[:top_n]]
    seen = set(hotspots)
    for path, count in ranked:
        if count >= min_touches and path not in seen:
            hotspots.append(path)
            seen.add(path)
    return hotspots


def compute_baseline(
    histories: Iterable[Sequence[ChangedFile]], history_n: int
) -> BaselineData:
    """Build a baseline from historical changes' file lists (most recent first)."""
    window = [list(files) for files in histories]
    freq = touch_frequencies(window)
    scores = [analyze(files, frozenset()).scores.score for files in window]

    return BaselineData(
        computed_at=_now(),
        history_n=history_n,
        baseline_median_score=median(scores),
        hotspot_files=derive_hotspots(freq) if freq else [],
    )
