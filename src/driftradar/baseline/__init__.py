"""Historical baseline: hotspots and median score of recent merges."""

from driftradar.baseline.aggregator import (
    BaselineData,
    compute_baseline,
    derive_hotspots,
    empty_baseline,
    median,
)
from driftradar.baseline.store import BaselineStore

__all__ = [
    "BaselineData",
    "BaselineStore",
    "compute_baseline",
    "derive_hotspots",
    "empty_baseline",
    "median",
]
