"""Drift Radar bot: score a pull request against the project's recent history.

This is the main entry point for the GitHub Action. It:
1. Loads the branch baseline from the store (or rebuilds it from merged PRs)
2. Fetches the pull request's changed files
3. Scores them against the baseline hotspots
4. Renders the comment and upserts it on the pull request

Only resolving the pull request and reading its files can fail a run.
History, persistence and comment failures are logged and worked around.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from driftradar.baseline.aggregator import BaselineData, compute_baseline, empty_baseline
from driftradar.baseline.store import BaselineStore
from driftradar.config import DEFAULT_COMMENT_TAG
from driftradar.exceptions import CacheError, GitHubError
from driftradar.github.client import GitHubClient
from driftradar.github.comment import upsert_comment
from driftradar.github.renderer import render_risk_comment, trend_text
from driftradar.scoring.analyze import AnalyzeResult, analyze
from driftradar.scoring.classifier import ChangedFile

logger = logging.getLogger("driftradar.bot")


def iter_history(client: GitHubClient, history_n: int) -> Iterator[list[ChangedFile]]:
    """Yield file lists of the last `history_n` merged PRs, one at a time.

    Fetching sequentially keeps the request rate friendly to API limits.
    """
    for number in client.list_merged_pulls(history_n)[:history_n]:
        logger.debug(f"Fetching files of merged PR #{number}")
        yield client.list_pull_files(number)


def _save(store: BaselineStore, branch: str, baseline: BaselineData) -> None:
    try:
        store.put(branch, baseline)
    except CacheError as e:
        logger.warning(f"Baseline cache save failed (non-fatal): {e}")


def _load(store: BaselineStore, branch: str) -> BaselineData | None:
    try:
        return store.get(branch)
    except CacheError as e:
        logger.warning(f"Baseline cache restore failed (non-fatal): {e}")
        return None


def refresh_baseline(
    store: BaselineStore, client: GitHubClient, branch: str, history_n: int
) -> BaselineData:
    """Recompute the baseline from GitHub and persist it.

    ``GitHubError`` propagates: an explicit refresh that cannot read history
    should say so rather than store an empty record.
    """
    baseline = compute_baseline(iter_history(client, history_n), history_n)
    _save(store, branch, baseline)
    median = baseline.baseline_median_score
    logger.info(
        f"Baseline refreshed for {branch}. "
        f"median={'n/a' if median is None else median} "
        f"hotspots={len(baseline.hotspot_files)}"
    )
    return baseline


def load_or_refresh_baseline(
    store: BaselineStore, client: GitHubClient, branch: str, history_n: int
) -> BaselineData:
    """Stored baseline when it matches `history_n`, otherwise a fresh one.

    Never raises: without history the result is an empty baseline, so the
    analysis still runs and the trend reads ``n/a``.
    """
    baseline = _load(store, branch)
    if baseline is not None and baseline.history_n == history_n:
        logger.debug(f"Using cached baseline for {branch} from {baseline.computed_at}")
        return baseline

    logger.info(
        f"Baseline cache miss or N changed; computing baseline from GitHub "
        f"(historyN={history_n})."
    )
    try:
        return refresh_baseline(store, client, branch, history_n)
    except GitHubError as e:
        logger.warning(f"Unable to compute baseline history (non-fatal): {e}")
        return empty_baseline(history_n)


def summarize(result: AnalyzeResult, trend: str) -> str:
    drivers = " | ".join(d.label for d in result.drivers)
    return (
        f"Score={result.scores.score} Trend={trend} "
        f"Review={result.scores.review_minutes}m Drivers={drivers}"
    )


def build_report(result: AnalyzeResult, baseline: BaselineData) -> dict:
    """Everything a caller needs to print or post, as plain data."""
    trend = trend_text(result.scores.score, baseline.baseline_median_score)
    return {
        "comment": render_risk_comment(result, trend),
        "score": result.scores.score,
        "verdict": result.scores.verdict.value,
        "trend": trend,
        "review_minutes": result.scores.review_minutes,
        "drivers": [d.label for d in result.drivers],
        "actions": list(result.suggested_actions),
        "baseline": baseline.to_record(),
        "analysis": result.to_dict(),
    }


def run_pr_analysis(
    client: GitHubClient,
    store: BaselineStore,
    pull_number: int,
    branch: str,
    history_n: int,
    comment_tag: str = DEFAULT_COMMENT_TAG,
    post: bool = True,
) -> dict:
    """Run the full pull request pipeline.

    Raises ``GitHubError`` when the pull request's own files can't be read;
    there is nothing to score in that case.
    """
    baseline = load_or_refresh_baseline(store, client, branch, history_n)
    files = client.list_pull_files(pull_number)

    result = analyze(files, baseline.hotspot_set)
    report = build_report(result, baseline)
    logger.info(summarize(result, report["trend"]))

    posted = False
    if post:
        posted = upsert_comment(client, pull_number, report["comment"], tag=comment_tag)
    report["posted"] = posted
    report["pull_number"] = pull_number
    return report


def analyze_local(
    files: Sequence[ChangedFile], store: BaselineStore | None, branch: str
) -> tuple[AnalyzeResult, BaselineData]:
    """Score files against whatever baseline is stored, without network access.

    Without a stored baseline there are no hotspots and no trend.
    """
    baseline = _load(store, branch) if store is not None else None
    if baseline is None:
        baseline = empty_baseline(0)
    result = analyze(files, baseline.hotspot_set)
    logger.info(
        summarize(result, trend_text(result.scores.score, baseline.baseline_median_score))
    )
    return result, baseline
