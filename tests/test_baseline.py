"""Tests for the historical baseline and its store."""

from __future__ import annotations

import json
import sqlite3
from collections import Counter

import pytest

from driftradar.baseline.aggregator import (
    BaselineData,
    compute_baseline,
    derive_hotspots,
    empty_baseline,
    median,
    touch_frequencies,
)
from driftradar.baseline.store import BaselineStore
from driftradar.exceptions import CacheError
from driftradar.scoring.analyze import analyze
from driftradar.scoring.classifier import ChangedFile


class TestMedian:
    def test_empty(self):
        assert median([]) is None

    def test_single(self):
        assert median([7]) == 7

    def test_even_length_averages(self):
        assert median([1, 3]) == 2
        assert median([10, 1, 4, 3]) == 3.5

    def test_odd_length(self):
        assert median([50, 10, 30]) == 30


class TestHotspots:
    def test_top_ten_without_threshold(self):
        freq = Counter({f"src/f{i}.py": 1 for i in range(15)})
        hotspots = derive_hotspots(freq)
        assert hotspots == [f"src/f{i}.py" for i in range(10)]

    def test_threshold_extends_past_top_ten(self):
        freq = Counter({f"src/f{i}.py": 3 for i in range(12)})
        freq["src/rare.py"] = 2
        hotspots = derive_hotspots(freq)
        assert len(hotspots) == 12
        assert "src/rare.py" not in hotspots

    def test_ranked_by_frequency(self):
        freq = Counter()
        for i in range(12):
            freq[f"src/f{i}.py"] = 1
        freq["src/late.py"] = 2
        hotspots = derive_hotspots(freq)
        assert hotspots[0] == "src/late.py"
        assert len(hotspots) == 10

    def test_few_paths_all_become_hotspots(self):
        histories = [
            [ChangedFile("src/a.ext", 10, 0)],
            [ChangedFile("src/a.ext", 10, 0)],
            [ChangedFile("src/a.ext", 10, 0), ChangedFile("infra/x.yml", 1, 0)],
        ]
        baseline = compute_baseline(histories, history_n=3)
        assert baseline.hotspot_files == ["src/a.ext", "infra/x.yml"]

    def test_one_touch_per_change(self):
        freq = touch_frequencies([[ChangedFile("a"), ChangedFile("a")], [ChangedFile("a")]])
        assert freq["a"] == 2

    def test_deterministic(self, risky_change, infra_change, core_change):
        histories = [risky_change, infra_change, core_change, risky_change]
        first = compute_baseline(histories, 4)
        second = compute_baseline(list(histories), 4)
        assert first.hotspot_files == second.hotspot_files
        assert first.baseline_median_score == second.baseline_median_score


class TestComputeBaseline:
    def test_empty_window(self):
        baseline = compute_baseline([], history_n=20)
        assert baseline.history_n == 20
        assert baseline.baseline_median_score is None
        assert baseline.hotspot_files == []

    def test_median_of_historical_scores(self, core_change, docs_change, risky_change):
        baseline = compute_baseline([core_change, docs_change, risky_change], 3)
        # 26, 19, 87
        assert baseline.baseline_median_score == 26

    def test_history_scored_without_hotspots(self):
        change = [ChangedFile("src/a.py", 10, 0), ChangedFile("src/b.py", 10, 0)]
        baseline = compute_baseline([change, change], 2)
        assert set(baseline.hotspot_files) == {"src/a.py", "src/b.py"}

        plain = analyze(change, frozenset()).scores.score
        with_hotspots = analyze(change, baseline.hotspot_set).scores.score
        assert with_hotspots != plain
        assert baseline.baseline_median_score == plain

    def test_accepts_generators(self, core_change):
        baseline = compute_baseline((files for files in [core_change]), 1)
        assert baseline.baseline_median_score == 26


class TestBaselineData:
    def test_record_uses_persisted_names(self):
        data = BaselineData(
            computed_at="2026-01-01T00:00:00+00:00",
            history_n=20,
            baseline_median_score=31.5,
            hotspot_files=["src/a.py"],
        )
        assert data.to_record() == {
            "computedAt": "2026-01-01T00:00:00+00:00",
            "historyN": 20,
            "baselineMedianScore": 31.5,
            "hotspotFiles": ["src/a.py"],
        }

    def test_parse_record(self):
        data = BaselineData.model_validate({
            "computedAt": "2026-01-01T00:00:00Z",
            "historyN": 5,
            "baselineMedianScore": None,
            "hotspotFiles": [],
        })
        assert data.history_n == 5
        assert data.baseline_median_score is None

    def test_empty_baseline(self):
        data = empty_baseline(12)
        assert data.history_n == 12
        assert data.hotspot_set == frozenset()
        assert data.computed_at


class TestBaselineStore:
    def test_missing_branch(self, store: BaselineStore):
        assert store.get("main") is None

    def test_put_and_get(self, store: BaselineStore, core_change):
        baseline = compute_baseline([core_change], 1)
        store.put("main", baseline)
        loaded = store.get("main")
        assert loaded == baseline

    def test_put_replaces(self, store: BaselineStore):
        store.put("main", empty_baseline(5))
        store.put("main", empty_baseline(10))
        assert store.get("main").history_n == 10
        assert store.branches() == ["main"]

    def test_keyed_by_branch(self, store: BaselineStore):
        store.put("main", empty_baseline(5))
        store.put("develop", empty_baseline(7))
        assert store.branches() == ["develop", "main"]
        assert store.get("develop").history_n == 7

    def test_delete(self, store: BaselineStore):
        store.put("main", empty_baseline(5))
        assert store.delete("main") is True
        assert store.delete("main") is False
        assert store.get("main") is None

    def test_unreadable_record_is_absent(self, store: BaselineStore):
        store.put("main", empty_baseline(5))
        conn = sqlite3.connect(str(store.db_path))
        conn.execute("UPDATE baselines SET data = ? WHERE branch = 'main'", (json.dumps({"bogus": 1}),))
        conn.commit()
        conn.close()
        assert store.get("main") is None

    def test_persists_across_instances(self, tmp_path):
        db = tmp_path / "baseline.db"
        first = BaselineStore(db)
        first.put("main", empty_baseline(3))
        first.close()

        second = BaselineStore(db)
        assert second.get("main").history_n == 3
        second.close()

    def test_unopenable_store(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        bad = BaselineStore(blocker / "baseline.db")
        with pytest.raises(CacheError):
            bad.get("main")
