"""Classifies how AI coding assistance was used and scores how well it was reviewed."""

from codepause_core.models import ReviewContext, ThresholdConfig, TrackingEvent
from codepause_core.modes import CodingModes, EventModeClassifier, ModeAggregate
from codepause_core.review_quality import ReviewQualityAnalysis, ReviewQualityAnalyzer
from codepause_core.thresholds import ThresholdManager

__all__ = [
    "CodingModes",
    "EventModeClassifier",
    "ModeAggregate",
    "ReviewContext",
    "ReviewQualityAnalysis",
    "ReviewQualityAnalyzer",
    "ThresholdConfig",
    "ThresholdManager",
    "TrackingEvent",
]
