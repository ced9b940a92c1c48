"""Driver attribution: which factors pushed the score up, and by how much.

Contributions are the weighted terms of ``base`` plus a flat share for the
amplification bonuses, so the ranked reasons add up to what the score engine
actually did rather than being separate heuristics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from driftradar.scoring.classifier import ClassifiedCounts
from driftradar.scoring.engine import WEIGHTS, Scores

TOP_N = 3

UNTESTED_CORE_BONUS = 12.0
UNTESTED_CORE_AMP_SHARE = 15.0
DEPS_COMBO_BONUS = 6.0
HOTSPOT_REPEAT_BONUS = 3.0


class DriverKey(str, Enum):
    CORE_WITHOUT_TESTS = "Core changed without tests"
    DEPENDENCY_CHURN = "Dependency churn"
    INFRA_TOUCHED = "Infra/config touched"
    HOTSPOT = "Hotspot repeatedly modified"
    LARGE_CHANGE = "Large change size"
    LOW_TEST_COVERAGE = "Low test coverage"


LABELS: dict[DriverKey, str] = {
    DriverKey.CORE_WITHOUT_TESTS: "Core code modified without tests",
    DriverKey.DEPENDENCY_CHURN: "Dependency churn above baseline",
    DriverKey.INFRA_TOUCHED: "Infra/config touched",
    DriverKey.HOTSPOT: "Repeated changes in hotspot folders",
    DriverKey.LARGE_CHANGE: "Large change size",
    DriverKey.LOW_TEST_COVERAGE: "Low test coverage",
}


@dataclass(frozen=True)
class Driver:
    key: DriverKey
    label: str
    contribution: float

    def to_dict(self) -> dict:
        return {
            "key": self.key.value,
            "label": self.label,
            "contribution": self.contribution,
        }


def _candidates(counts: ClassifiedCounts, scores: Scores) -> list[Driver]:
    """All applicable drivers, in generation order."""
    C, T, D, I, H = counts.C, counts.T, counts.D, counts.I, counts.H  # noqa: E741
    untested_core = C > 0 and T == 0
    core_bonus = UNTESTED_CORE_BONUS if untested_core else 0.0

    found: list[tuple[DriverKey, float]] = []

    if untested_core:
        found.append((DriverKey.CORE_WITHOUT_TESTS, core_bonus + UNTESTED_CORE_AMP_SHARE))

    found.append((DriverKey.LARGE_CHANGE, WEIGHTS["size"] * scores.S_size))

    if counts.test_coverage < 1:
        found.append(
            (DriverKey.LOW_TEST_COVERAGE, WEIGHTS["quality"] * scores.S_quality + core_bonus)
        )

    if D > 0:
        deps = WEIGHTS["deps"] * scores.S_deps
        if I > 0:
            deps += DEPS_COMBO_BONUS
        if C > 0:
            deps += DEPS_COMBO_BONUS
        found.append((DriverKey.DEPENDENCY_CHURN, deps))

    if I > 0:
        found.append((DriverKey.INFRA_TOUCHED, WEIGHTS["infra"] * scores.S_infra))

    if H > 0:
        hot = WEIGHTS["hot"] * scores.S_hot
        if H >= 2:
            hot += HOTSPOT_REPEAT_BONUS
        found.append((DriverKey.HOTSPOT, hot))

    return [Driver(key=k, label=LABELS[k], contribution=c) for k, c in found]


def pick_drivers(counts: ClassifiedCounts, scores: Scores, limit: int = TOP_N) -> list[Driver]:
    """Return the top drivers by contribution.

    One entry per key (the higher contribution wins), ties keep the order
    the drivers were generated in.
    """
    best: dict[DriverKey, Driver] = {}
    for driver in _candidates(counts, scores):
        existing = best.get(driver.key)
        if existing is None or driver.contribution > existing.contribution:
            best[driver.key] = driver

    ranked = sorted(best.values(), key=lambda d: d.contribution, reverse=True)
    return ranked[:limit]
