"""Structural risk scoring for a single change."""

from driftradar.scoring.analyze import AnalyzeResult, analyze
from driftradar.scoring.classifier import ChangedFile, ClassifiedCounts, classify_files
from driftradar.scoring.drivers import Driver, DriverKey, pick_drivers
from driftradar.scoring.engine import Scores, Verdict, compute_scores

__all__ = [
    "AnalyzeResult",
    "ChangedFile",
    "ClassifiedCounts",
    "Driver",
    "DriverKey",
    "Scores",
    "Verdict",
    "analyze",
    "classify_files",
    "compute_scores",
    "pick_drivers",
]
