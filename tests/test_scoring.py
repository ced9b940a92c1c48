"""Tests for file classification and the score engine."""

from __future__ import annotations

import pytest

from driftradar.scoring.analyze import analyze
from driftradar.scoring.classifier import ChangedFile, ClassifiedCounts, classify_files
from driftradar.scoring.engine import (
    Verdict,
    compute_amplification,
    compute_review_minutes,
    compute_scores,
    round_half_up,
    verdict_for,
)


class TestChangedFile:
    def test_from_github_record(self):
        f = ChangedFile.from_api({"filename": "src/a.py", "additions": 3, "deletions": 4})
        assert f == ChangedFile("src/a.py", 3, 4)
        assert f.lines == 7

    def test_from_plain_record(self):
        f = ChangedFile.from_api({"path": "README.md", "additions": "12"})
        assert f.path == "README.md"
        assert f.additions == 12
        assert f.deletions == 0

    @pytest.mark.parametrize("value", [None, "lots", -5, float("nan"), True, [1]])
    def test_malformed_counts_become_zero(self, value):
        f = ChangedFile.from_api({"filename": "x", "additions": value, "deletions": value})
        assert f.additions == 0
        assert f.deletions == 0


class TestClassifyFiles:
    def test_empty(self):
        counts = classify_files([], {"src/a.py"})
        assert counts == ClassifiedCounts()
        assert counts.docs_only is False
        assert counts.test_coverage == 0

    def test_counts(self, risky_change):
        counts = classify_files(risky_change)
        assert (counts.F, counts.L, counts.C, counts.T) == (8, 1330, 5, 0)
        assert (counts.D, counts.I, counts.H) == (2, 1, 0)
        assert counts.docs_only is False

    def test_hotspots_match_exact_paths(self):
        files = [ChangedFile("src/a.py", 1, 1), ChangedFile("src/b.py", 1, 1)]
        assert classify_files(files, {"src"}).H == 0
        assert classify_files(files, {"src/a.py"}).H == 1

    def test_test_coverage_ratio(self):
        files = [
            ChangedFile("src/a.py"),
            ChangedFile("src/b.py"),
            ChangedFile("tests/test_a.py"),
        ]
        assert classify_files(files).test_coverage == 0.5

    def test_docs_only(self, docs_change):
        assert classify_files(docs_change).docs_only is True
        mixed = docs_change + [ChangedFile("src/a.py", 1, 0)]
        assert classify_files(mixed).docs_only is False

    def test_order_does_not_matter(self, risky_change):
        assert classify_files(risky_change) == classify_files(list(reversed(risky_change)))


class TestRounding:
    def test_half_up(self):
        assert round_half_up(25.5) == 26
        assert round_half_up(26.5) == 27
        assert round_half_up(26.49) == 26

    def test_verdict_thresholds(self):
        assert verdict_for(0) is Verdict.LOW
        assert verdict_for(39) is Verdict.LOW
        assert verdict_for(40) is Verdict.MEDIUM
        assert verdict_for(69) is Verdict.MEDIUM
        assert verdict_for(70) is Verdict.HIGH
        assert verdict_for(100) is Verdict.HIGH

    def test_verdict_emoji(self):
        assert Verdict.LOW.emoji == "\U0001F7E2"
        assert Verdict.HIGH.emoji == "\U0001F534"


class TestComputeScores:
    def test_untested_core_change(self, core_change):
        counts = classify_files(core_change)
        assert (counts.F, counts.L, counts.C, counts.T) == (1, 60, 1, 0)

        scores = compute_scores(counts)
        assert scores.S_size == pytest.approx(29.42, abs=0.01)
        assert scores.S_quality == 60
        assert scores.base == pytest.approx(22.3, abs=0.01)
        assert scores.amp == pytest.approx(1.15)
        assert scores.score == 26
        assert scores.review_minutes == 5
        assert scores.verdict is Verdict.LOW

    def test_docs_change(self, docs_change):
        scores = compute_scores(classify_files(docs_change))
        assert scores.score == 19

    def test_docs_only_cap(self):
        files = [ChangedFile(f"docs/page{i}.md", 10_000, 0) for i in range(10)]
        counts = classify_files(files)
        assert counts.docs_only
        scores = compute_scores(counts)
        assert round_half_up(scores.base * scores.amp) > 25
        assert scores.score == 25

    def test_high_risk_change(self, risky_change):
        scores = compute_scores(classify_files(risky_change))
        assert scores.S_size == 100
        assert scores.S_deps == 70
        assert scores.S_infra == 25
        assert scores.base == pytest.approx(64.75)
        assert scores.amp == pytest.approx(1.35)
        assert scores.score == 87
        assert scores.review_minutes == 14
        assert scores.verdict is Verdict.HIGH

    def test_medium_infra_change(self, infra_change):
        scores = compute_scores(classify_files(infra_change))
        assert scores.S_infra == 75
        assert scores.amp == 1.0
        assert scores.score == 42
        assert scores.verdict is Verdict.MEDIUM

    def test_sub_scores_saturate(self):
        counts = ClassifiedCounts(F=50, L=10**9, C=1, T=0, D=9, I=9, H=9, test_coverage=0.0)
        scores = compute_scores(counts)
        for value in (scores.S_size, scores.S_deps, scores.S_infra, scores.S_hot, scores.S_quality):
            assert 0 <= value <= 100
        assert scores.amp == pytest.approx(1.4)
        assert scores.score == 100

    def test_amplification_bonuses(self):
        assert compute_amplification(ClassifiedCounts()) == 1.0
        assert compute_amplification(ClassifiedCounts(C=1)) == pytest.approx(1.15)
        assert compute_amplification(ClassifiedCounts(C=1, T=1, D=1)) == pytest.approx(1.10)
        assert compute_amplification(ClassifiedCounts(D=1, I=1)) == pytest.approx(1.10)
        assert compute_amplification(ClassifiedCounts(H=1)) == 1.0
        assert compute_amplification(ClassifiedCounts(H=2)) == pytest.approx(1.05)

    def test_tests_lower_quality_score(self):
        untested = compute_scores(classify_files([ChangedFile("src/a.py", 10, 0)]))
        tested = compute_scores(
            classify_files([ChangedFile("src/a.py", 10, 0), ChangedFile("tests/test_a.py", 10, 0)])
        )
        assert tested.S_quality == 0
        assert tested.score < untested.score


class TestReviewMinutes:
    def test_floor(self):
        assert compute_review_minutes(0, 0, 0, 0, 0, 0, 0) == 5

    def test_ceiling(self):
        assert compute_review_minutes(300, 10**7, 50, 0, 5, 5, 5) == 90

    def test_tests_reduce_effort(self):
        without = compute_review_minutes(20, 4000, 10, 0, 0, 0, 0)
        with_tests = compute_review_minutes(20, 4000, 10, 3, 0, 0, 0)
        assert with_tests < without

    @pytest.mark.parametrize("F,L,C,T,D,I,H", [
        (1, 60, 1, 0, 0, 0, 0),
        (8, 1330, 5, 0, 2, 1, 0),
        (100, 50_000, 40, 10, 3, 4, 7),
        (0, -10, 0, 0, 0, 0, 0),
    ])
    def test_always_in_range(self, F, L, C, T, D, I, H):  # noqa: E741
        assert 5 <= compute_review_minutes(F, L, C, T, D, I, H) <= 90


class TestAnalyze:
    def test_empty_change_is_valid(self):
        result = analyze([], frozenset())
        assert result.counts.F == 0
        assert 0 <= result.scores.score <= 100
        assert 1 <= len(result.drivers) <= 3
        assert result.suggested_actions == ["Proceed with normal review"]

    def test_docs_change(self, docs_change):
        result = analyze(docs_change, frozenset())
        assert result.counts.docs_only
        assert result.scores.score == 19
        assert result.suggested_actions == ["No action needed (docs-only change)"]

    def test_to_dict(self, core_change):
        data = analyze(core_change).to_dict()
        assert data["scores"]["score"] == 26
        assert data["scores"]["verdict"] == "low"
        assert data["counts"]["C"] == 1
        assert data["drivers"][0]["key"] == "Core changed without tests"
