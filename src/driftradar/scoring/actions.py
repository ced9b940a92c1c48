"""Recommended next steps for a scored change."""

from __future__ import annotations

from driftradar.scoring.classifier import ClassifiedCounts
from driftradar.scoring.engine import LOW_MAX, MEDIUM_MAX

MAX_ACTIONS = 2

NO_ACTION_DOCS = "No action needed (docs-only change)"
ADD_TESTS = "Add targeted tests"
SPLIT_PR = "Split this PR"
REVIEW_CHECKLIST = "Add a focused review checklist"
NORMAL_REVIEW = "Proceed with normal review"


def suggested_actions(counts: ClassifiedCounts, score: int) -> list[str]:
    """Walk the decision table; at most two actions, in table order."""
    if counts.docs_only:
        return [NO_ACTION_DOCS]

    actions: list[str] = []
    if counts.C > 0 and counts.T == 0:
        actions.append(ADD_TESTS)

    if score > MEDIUM_MAX:
        actions.append(SPLIT_PR)
    elif score > LOW_MAX and (counts.D > 0 or counts.I > 0):
        actions.append(REVIEW_CHECKLIST)

    if not actions:
        actions.append(NORMAL_REVIEW)

    return actions[:MAX_ACTIONS]
