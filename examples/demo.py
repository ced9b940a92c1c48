#!/usr/bin/env python3
"""Demo: Using Drift Radar as a Python library.

This shows how to score changes programmatically, not just from the CLI
or the pull request bot.
"""

from driftradar.baseline.aggregator import compute_baseline
from driftradar.github.renderer import render_plain, render_risk_comment, trend_text
from driftradar.scoring import ChangedFile, analyze


def main():
    # A few recently merged changes stand in for the branch history
    history = [
        [ChangedFile("src/api/handlers.py", 40, 12), ChangedFile("tests/test_handlers.py", 30, 0)],
        [ChangedFile("src/api/handlers.py", 5, 5)],
        [ChangedFile("src/api/handlers.py", 18, 2), ChangedFile("docs/api.md", 10, 0)],
        [ChangedFile("README.md", 3, 1)],
    ]

    # 1. Build the baseline
    print("Building baseline...")
    baseline = compute_baseline(history, history_n=len(history))
    print(f"  Median score: {baseline.baseline_median_score}")
    print(f"  Hotspots: {len(baseline.hotspot_files)}")
    for path in baseline.hotspot_files:
        print(f"    - {path}")

    # 2. Score a new change against it
    change = [
        ChangedFile("src/api/handlers.py", 120, 40),
        ChangedFile("src/api/auth.py", 60, 10),
        ChangedFile("requirements.txt", 2, 1),
        ChangedFile(".github/workflows/ci.yml", 4, 2),
    ]
    result = analyze(change, baseline.hotspot_set)
    scores = result.scores

    print("\n--- Scores ---")
    print(f"  Score: {scores.score}/100 ({scores.verdict.value})")
    print(f"  Base: {scores.base:.2f}  Amplification: x{scores.amp:.2f}")
    print(f"  Review load: ~{scores.review_minutes} min")

    print("\n--- Drivers ---")
    for d in result.drivers:
        print(f"  {d.label}: {d.contribution:.1f}")

    # 3. Render what the bot would post
    trend = trend_text(scores.score, baseline.baseline_median_score)
    print("\n--- Plain summary ---")
    print(render_plain(result, trend))

    print("\n--- Pull request comment ---")
    print(render_risk_comment(result, trend))


if __name__ == "__main__":
    main()
