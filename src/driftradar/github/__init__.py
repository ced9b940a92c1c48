"""GitHub integration: pull request files, merged history, and the risk comment.

Runs as a GitHub Action step that comments on PRs with:
  - Structural risk score (color-coded verdict)
  - Trend against the median of recently merged PRs
  - Top risk drivers and suggested actions
"""
