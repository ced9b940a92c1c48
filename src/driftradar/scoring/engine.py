"""Structural risk scoring.

Turns ``ClassifiedCounts`` into five sub-scores, a weighted base, a
non-linear amplification factor and a final 0-100 score:

  S_size    = 8F + 12*log10(1 + L)
  S_deps    = 35D
  S_infra   = 25I
  S_hot     = 20H
  S_quality = 60 * (1 - min(1, T / max(1, C)))

  base  = .35 S_size + .20 S_quality + .20 S_deps + .15 S_infra + .10 S_hot
  score = round(base * amp), amp in [1.0, 1.4]

Every value is clamped, so scoring never fails on odd input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from driftradar.scoring.classifier import ClassifiedCounts

WEIGHTS: dict[str, float] = {
    "size": 0.35,
    "quality": 0.20,
    "deps": 0.20,
    "infra": 0.15,
    "hot": 0.10,
}

# Amplification bonuses
AMP_UNTESTED_CORE = 0.15
AMP_DEPS_AND_INFRA = 0.10
AMP_CORE_AND_DEPS = 0.10
AMP_MULTI_HOTSPOT = 0.05
AMP_CAP = 1.4

DOCS_ONLY_CAP = 25
LOW_MAX = 39
MEDIUM_MAX = 69

REVIEW_MIN_MINUTES = 5
REVIEW_MAX_MINUTES = 90


class Verdict(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def emoji(self) -> str:
        return _VERDICT_EMOJI[self]


_VERDICT_EMOJI = {
    Verdict.LOW: "\U0001F7E2",
    Verdict.MEDIUM: "\U0001F7E1",
    Verdict.HIGH: "\U0001F534",
}


@dataclass(frozen=True)
class Scores:
    """Sub-scores, combined score and review estimate for one change."""

    S_size: float
    S_deps: float
    S_infra: float
    S_hot: float
    S_quality: float
    base: float
    amp: float
    score: int
    review_minutes: int
    verdict: Verdict

    @property
    def verdict_emoji(self) -> str:
        return self.verdict.emoji

    def to_dict(self) -> dict:
        return {
            "S_size": self.S_size,
            "S_deps": self.S_deps,
            "S_infra": self.S_infra,
            "S_hot": self.S_hot,
            "S_quality": self.S_quality,
            "base": self.base,
            "amp": self.amp,
            "score": self.score,
            "review_minutes": self.review_minutes,
            "verdict": self.verdict.value,
        }


def clamp(lo: float, hi: float, value: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round .5 towards +infinity; built-in ``round`` sends 26.5 to 26."""
    return math.floor(value + 0.5)


def verdict_for(score: int) -> Verdict:
    if score <= LOW_MAX:
        return Verdict.LOW
    if score <= MEDIUM_MAX:
        return Verdict.MEDIUM
    return Verdict.HIGH


def compute_review_minutes(
    F: int, L: int, C: int, T: int, D: int, I: int, H: int  # noqa: E741
) -> int:
    """Estimate human review time in minutes, clamped to [5, 90].

    Size units grow with sqrt(lines) plus two per file; core, infra, deps
    and hotspot files make review slower, accompanying tests make it faster.
    """
    size_units = math.sqrt(max(0, L)) + 2 * F

    m_core = 1 + 0.15 * min(5, C)
    m_infra = 1 + 0.2 * min(3, I)
    m_deps = 1 + 0.25 * min(2, D)
    m_hot = 1 + 0.1 * min(5, H)
    m_tests = 1 - 0.1 * min(3, T)

    raw = (size_units / 12) * m_core * m_infra * m_deps * m_hot * m_tests
    return int(clamp(REVIEW_MIN_MINUTES, REVIEW_MAX_MINUTES, round_half_up(raw)))


def compute_amplification(counts: ClassifiedCounts) -> float:
    amp = 1.0
    if counts.C > 0 and counts.T == 0:
        amp += AMP_UNTESTED_CORE
    if counts.D > 0 and counts.I > 0:
        amp += AMP_DEPS_AND_INFRA
    if counts.C > 0 and counts.D > 0:
        amp += AMP_CORE_AND_DEPS
    if counts.H >= 2:
        amp += AMP_MULTI_HOTSPOT
    return min(AMP_CAP, amp)


def compute_scores(counts: ClassifiedCounts) -> Scores:
    """Score a classified change."""
    F, L, C, T = counts.F, counts.L, counts.C, counts.T
    D, I, H = counts.D, counts.I, counts.H  # noqa: E741

    s_size = clamp(0, 100, 8 * F + 12 * math.log10(1 + max(0, L)))
    s_deps = clamp(0, 100, 35 * D)
    s_infra = clamp(0, 100, 25 * I)
    s_hot = clamp(0, 100, 20 * H)
    s_quality = clamp(0, 100, 60 * (1 - min(1.0, counts.test_coverage)))

    base = (
        WEIGHTS["size"] * s_size
        + WEIGHTS["quality"] * s_quality
        + WEIGHTS["deps"] * s_deps
        + WEIGHTS["infra"] * s_infra
        + WEIGHTS["hot"] * s_hot
    )
    amp = compute_amplification(counts)

    score = int(clamp(0, 100, round_half_up(base * amp)))
    if counts.docs_only:
        score = min(score, DOCS_ONLY_CAP)

    return Scores(
        S_size=s_size,
        S_deps=s_deps,
        S_infra=s_infra,
        S_hot=s_hot,
        S_quality=s_quality,
        base=base,
        amp=amp,
        score=score,
        review_minutes=compute_review_minutes(F, L, C, T, D, I, H),
        verdict=verdict_for(score),
    )
