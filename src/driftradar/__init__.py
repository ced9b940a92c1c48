"""Drift Radar - structural risk signal for pull requests."""

__version__ = "0.1.0"
