"""Markdown renderer for the pull request risk comment.

Generates a short GitHub-flavored comment with:
  - Score, verdict badge, trend against the baseline and review load
  - Main risk drivers
  - Suggested actions
"""

from __future__ import annotations

from driftradar.scoring.analyze import AnalyzeResult
from driftradar.scoring.engine import round_half_up

TITLE = "Drift Radar: Structural Risk Signal"


def format_signed(n: int) -> str:
    return f"+{n}" if n > 0 else str(n)


def trend_text(score: int, baseline_median: float | None) -> str:
    """Score relative to the baseline median, or ``n/a`` without history."""
    if baseline_median is None:
        return "n/a"
    return format_signed(score - round_half_up(baseline_median))


def render_risk_comment(result: AnalyzeResult, trend: str = "n/a") -> str:
    """Render the analysis as a GitHub markdown comment."""
    scores = result.scores
    sections: list[str] = []

    sections.append(f"## {TITLE}")
    sections.append("")
    sections.append(
        f"**Score:** {scores.score}/100 {scores.verdict_emoji} "
        f"&nbsp; **Trend:** {trend} "
        f"&nbsp; **Review Load:** ~{scores.review_minutes} min"
    )
    sections.append("")

    sections.append("**Main risk drivers:**")
    for d in result.drivers:
        sections.append(f"- {d.label}")
    sections.append("")

    sections.append("**Suggested actions:**")
    for action in result.suggested_actions:
        sections.append(f"- {action}")
    sections.append("")

    sections.append(_footer())
    return "\n".join(sections)


def render_plain(result: AnalyzeResult, trend: str = "n/a") -> str:
    """Plain-text variant for logs and terminals without markdown."""
    scores = result.scores
    lines = [
        TITLE,
        "",
        f"Score: {scores.score}/100 {scores.verdict_emoji}   Trend: {trend}   "
        f"Review Load: ~{scores.review_minutes} min",
        "",
        "Main risk drivers:",
        *(f"• {d.label}" for d in result.drivers),
        "",
        "Suggested actions:",
        *(f"• {a}" for a in result.suggested_actions),
    ]
    return "\n".join(lines)


def _footer() -> str:
    return (
        "---\n"
        "*Risk is inferred from file paths and line counts only; "
        "it does not read the code.*"
    )
