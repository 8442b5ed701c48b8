"""Reporting-window orchestration: classify every event, score every acceptance."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from codepause_core.config import build_threshold_manager
from codepause_core.models import (
    SOURCE_MANUAL,
    SUGGESTION_ACCEPTED,
    FileReviewStatus,
    ReviewContext,
    TrackingEvent,
)
from codepause_core.modes import CodingModes, EventModeClassifier
from codepause_core.review_quality import ReviewQualityAnalysis, ReviewQualityAnalyzer, ReviewStats
from codepause_core.utils.rounding import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class ScoredAcceptance:
    event: TrackingEvent
    analysis: ReviewQualityAnalysis


@dataclass
class ReportSummary:
    """Result returned by run_report. Nothing in it is persisted by the core."""

    level: str
    total_events: int
    excluded_events: int
    modes: CodingModes
    acceptances: list[ScoredAcceptance] = field(default_factory=list)
    stats: ReviewStats | None = None
    average_score: int | None = None  # mean over every scored acceptance; None when there were none
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        data = asdict(self)
        for item, scored in zip(data["acceptances"], self.acceptances):
            item["analysis"]["is_reviewed"] = scored.analysis.is_reviewed
        return data


def _is_excluded(filename: str | None, patterns: list[str]) -> bool:
    """Return True if filename matches any exclude pattern.

    Supports:
    - fnmatch globs on the full path: "src/generated/*.py"
    - fnmatch globs on the basename: "*.lock", "*.min.js"
    - Directory names/prefixes: "migrations/", "vendor" (matches any file within that tree)
    """
    if not filename:
        return False
    filename = filename.replace("\\", "/")
    for pattern in patterns:
        if fnmatch.fnmatch(filename, pattern):
            return True
        if fnmatch.fnmatch(filename.rsplit("/", 1)[-1], pattern):
            return True
        prefix = pattern.rstrip("/") + "/"
        if filename.startswith(prefix) or ("/" + prefix) in filename:
            return True
    return False


def _is_ai_acceptance(event: TrackingEvent) -> bool:
    return event.event_type == SUGGESTION_ACCEPTED and event.source != SOURCE_MANUAL


def run_report(
    events: Iterable[TrackingEvent],
    config: dict,
    file_reviews: Iterable[FileReviewStatus] | None = None,
    analyzer: ReviewQualityAnalyzer | None = None,
) -> ReportSummary:
    """Classify and score one reporting window of events.

    The mode classifier and the review analyzer each see the window
    independently; neither feeds the other. Pass ``analyzer`` to carry the
    rolling acceptance history across windows.
    """
    manager = build_threshold_manager(config)
    patterns = list(config.get("exclude") or [])
    if analyzer is None:
        analyzer = ReviewQualityAnalyzer(manager.get_config())
    else:
        analyzer.update_thresholds(manager.get_config())

    all_events = list(events)
    window = [e for e in all_events if not _is_excluded(e.file_path, patterns)]
    excluded = len(all_events) - len(window)
    if excluded:
        logger.debug("Excluded %d event(s) by path pattern", excluded)

    modes = EventModeClassifier().summarize(window, file_reviews)

    acceptances = []
    for event in window:
        if not _is_ai_acceptance(event):
            continue
        analysis = analyzer.analyze(event, ReviewContext.from_event(event))
        logger.debug("Scored %s: %d (%s)", event.file_path or "<unknown>", analysis.score, analysis.category)
        acceptances.append(ScoredAcceptance(event=event, analysis=analysis))

    average = None
    if acceptances:
        average = round_half_up(sum(a.analysis.score for a in acceptances) / len(acceptances))

    return ReportSummary(
        level=manager.level,
        total_events=len(all_events),
        excluded_events=excluded,
        modes=modes,
        acceptances=acceptances,
        stats=analyzer.get_stats(),
        average_score=average,
    )
