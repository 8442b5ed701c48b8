"""Review-quality scoring for AI suggestion acceptances.

Four factors, each 0-100, combined by fixed weights:

    time        40%   actual vs expected review time, on a sigmoid
    complexity  30%   actual vs minimum time the change size demands
    pattern     20%   share of recent acceptances that got adequate review
    context     10%   file open/closed state and agent mode

Missing data never lowers a score. Every factor maps "unknown" to a
documented neutral value so users are not penalised for gaps in tracking.
"""

from __future__ import annotations

import logging
import math
import threading
from collections import deque
from dataclasses import asdict, dataclass, field, replace

from codepause_core.models import LIGHT, NONE, THOROUGH, ReviewContext, ThresholdConfig, TrackingEvent
from codepause_core.utils.rounding import known, round_half_up

logger = logging.getLogger(__name__)

# Multiplier on expected review time per line, by language id.
LANGUAGE_COMPLEXITY: dict[str, float] = {
    "rust": 2.0,
    "cpp": 1.8,
    "c": 1.7,
    "scala": 1.7,
    "java": 1.6,
    "typescript": 1.5,
    "javascript": 1.5,
    "csharp": 1.5,
    "swift": 1.4,
    "kotlin": 1.4,
    "python": 1.4,
    "go": 1.4,
    "ruby": 1.3,
    "php": 1.2,
}
DEFAULT_COMPLEXITY = 1.0

# The minimum-review floor uses its own flat multiplier over a smaller set.
# It is a floor, not a target, so it is kept separate from LANGUAGE_COMPLEXITY.
COMPLEX_LANGUAGES = frozenset({"typescript", "javascript", "python", "java", "cpp", "rust"})
COMPLEX_LANGUAGE_MULTIPLIER = 1.5

BASE_REVIEW_TIME_PER_LINE = 500  # ms

WEIGHTS = {
    "time": 0.40,
    "complexity": 0.30,
    "pattern": 0.20,
    "context": 0.10,
}

THOROUGH_THRESHOLD = 70
LIGHT_THRESHOLD = 40

RECENT_WINDOW = 10
MIN_PATTERN_SAMPLES = 3
ADEQUATE_REVIEW_RATIO = 0.5
SIGMOID_STEEPNESS = 3

NEUTRAL_SCORE = 50

_LARGE_CHANGE_LINES = 50
_QUICK_REVIEW_MS = 10_000


def _clamp_score(value: float) -> int:
    return int(min(100, max(0, value)))


def categorize(score: int) -> str:
    if score >= THOROUGH_THRESHOLD:
        return THOROUGH
    if score >= LIGHT_THRESHOLD:
        return LIGHT
    return NONE


def _language_key(event: TrackingEvent) -> str:
    return (event.language or "").lower()


def _line_count(event: TrackingEvent, default: float = 0) -> float:
    return known(event.lines_of_code, default)


def _review_time(event: TrackingEvent) -> float:
    return known(event.acceptance_time_delta)


def _seconds(ms: float) -> str:
    # Absurd line counts can push the expected time past float range.
    return str(round_half_up(ms / 1000)) if math.isfinite(ms) else "∞"


@dataclass(frozen=True)
class ReviewFactors:
    time_score: int
    complexity_score: int
    pattern_score: int
    context_score: int


@dataclass(frozen=True)
class ReviewQualityAnalysis:
    score: int
    category: str  # "thorough" | "light" | "none"
    factors: ReviewFactors
    expected_review_time: float  # ms
    actual_review_time: float  # ms
    insights: list[str] = field(default_factory=list)

    @property
    def is_reviewed(self) -> bool:
        return self.score >= LIGHT_THRESHOLD

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ReviewStats:
    recent_count: int
    average_score: int
    thorough_count: int
    light_count: int
    none_count: int


class ReviewQualityAnalyzer:
    """Scores acceptances and keeps the last few for pattern detection.

    The rolling window is the only state. It is a bounded FIFO: every
    ``analyze`` call pushes the new event and the oldest drops off once the
    window holds RECENT_WINDOW events. Access is serialised with a lock so
    concurrent callers cannot interleave push and score.
    """

    def __init__(self, thresholds: ThresholdConfig):
        self._thresholds = replace(thresholds)
        self._recent: deque[TrackingEvent] = deque(maxlen=RECENT_WINDOW)
        self._lock = threading.Lock()

    def update_thresholds(self, thresholds: ThresholdConfig) -> None:
        with self._lock:
            self._thresholds = replace(thresholds)

    @property
    def recent_count(self) -> int:
        return len(self._recent)

    def analyze(self, event: TrackingEvent, context: ReviewContext | None = None) -> ReviewQualityAnalysis:
        """Score one acceptance. The event joins the rolling window first."""
        with self._lock:
            if len(self._recent) == RECENT_WINDOW:
                logger.debug("Review window full, evicting oldest acceptance")
            self._recent.append(event)
            return self._score(event, context)

    def get_stats(self) -> ReviewStats:
        """Re-score every event in the window and tally categories.

        Read-only: the window is not pushed to while re-scoring.
        """
        with self._lock:
            recent = list(self._recent)
            if not recent:
                return ReviewStats(0, 0, 0, 0, 0)

            counts = {THOROUGH: 0, LIGHT: 0, NONE: 0}
            total = 0
            for event in recent:
                analysis = self._score(event, None)
                total += analysis.score
                counts[analysis.category] += 1

        return ReviewStats(
            recent_count=len(recent),
            average_score=round_half_up(total / len(recent)),
            thorough_count=counts[THOROUGH],
            light_count=counts[LIGHT],
            none_count=counts[NONE],
        )

    def reset(self) -> None:
        with self._lock:
            self._recent.clear()

    # ------------------------------------------------------------------
    # Scoring. Callers must hold the lock.
    # ------------------------------------------------------------------

    def _score(self, event: TrackingEvent, context: ReviewContext | None) -> ReviewQualityAnalysis:
        expected = self.expected_review_time(event)
        actual = _review_time(event)

        factors = ReviewFactors(
            time_score=self._time_score(actual, expected),
            complexity_score=self._complexity_score(event, actual),
            pattern_score=self._pattern_score(),
            context_score=self._context_score(context),
        )
        score = _clamp_score(
            round_half_up(
                factors.time_score * WEIGHTS["time"]
                + factors.complexity_score * WEIGHTS["complexity"]
                + factors.pattern_score * WEIGHTS["pattern"]
                + factors.context_score * WEIGHTS["context"]
            )
        )
        category = categorize(score)

        return ReviewQualityAnalysis(
            score=score,
            category=category,
            factors=factors,
            expected_review_time=expected,
            actual_review_time=actual,
            insights=_insights(category, factors, expected, actual, event, context),
        )

    def expected_review_time(self, event: TrackingEvent) -> float:
        """Target review time: lines x 500ms x language multiplier, floored at the tier minimum."""
        lines = _line_count(event, default=1)
        multiplier = LANGUAGE_COMPLEXITY.get(_language_key(event), DEFAULT_COMPLEXITY)
        return max(lines * BASE_REVIEW_TIME_PER_LINE * multiplier, self._thresholds.min_review_time)

    def minimum_review_time(self, event: TrackingEvent) -> float:
        lines = _line_count(event, default=1)
        min_time = lines * BASE_REVIEW_TIME_PER_LINE
        if _language_key(event) in COMPLEX_LANGUAGES:
            min_time *= COMPLEX_LANGUAGE_MULTIPLIER
        return max(min_time, self._thresholds.min_review_time)

    def _time_score(self, actual: float, expected: float) -> int:
        if actual <= 0 or expected <= 0:
            return NEUTRAL_SCORE

        # ratio 1.0 -> 50; longer than expected climbs toward 100, shorter falls toward 0.
        ratio = actual / expected
        score = 100 / (1 + math.exp(-SIGMOID_STEEPNESS * (ratio - 1)))
        return _clamp_score(round_half_up(score))

    def _complexity_score(self, event: TrackingEvent, actual: float) -> int:
        lines = _line_count(event)
        if lines == 0:
            return NEUTRAL_SCORE

        if actual <= 0:
            # No timing data: small changes are likely reviewed, large ones likely not.
            if lines < 20:
                return 70
            if lines < 50:
                return 50
            return 30

        minimum = self.minimum_review_time(event)
        if actual >= minimum:
            return 100
        return _clamp_score(round_half_up(actual / minimum * 100))

    def _pattern_score(self) -> int:
        if len(self._recent) < MIN_PATTERN_SAMPLES:
            return NEUTRAL_SCORE

        adequate = sum(
            1
            for e in self._recent
            if _review_time(e) >= self.expected_review_time(e) * ADEQUATE_REVIEW_RATIO
        )
        return _clamp_score(round_half_up(adequate / len(self._recent) * 100))

    def _context_score(self, context: ReviewContext | None) -> int:
        if context is None:
            return NEUTRAL_SCORE

        score = NEUTRAL_SCORE
        if context.file_was_open is True:
            score += 30
        elif context.file_was_open is False:
            score -= 30
        if context.is_agent_mode is True:
            score -= 40
        return _clamp_score(score)


def _insights(
    category: str,
    factors: ReviewFactors,
    expected: float,
    actual: float,
    event: TrackingEvent,
    context: ReviewContext | None,
) -> list[str]:
    """Human-readable notes. Factors in their middle range get no comment."""
    if category == THOROUGH:
        insights = ["✅ Thorough review - code ownership maintained"]
    elif category == LIGHT:
        insights = ["⚠️ Light review - minimal review, some risk"]
    else:
        insights = ["🚨 No review - ownership shifted to AI"]

    if factors.time_score < 40:
        insights.append(f"⏱️ Insufficient review time (expected ~{_seconds(expected)}s)")
    elif factors.time_score > 80:
        insights.append("⏱️ Adequate time spent reviewing")

    if factors.complexity_score < 40:
        insights.append(f"🔍 Review time didn't match code complexity ({_line_count(event)} lines)")

    if factors.pattern_score < 40:
        insights.append("📊 Pattern of rapid acceptances detected")
    elif factors.pattern_score > 80:
        insights.append("📊 Consistent review pattern maintained")

    if context is not None and context.is_agent_mode:
        insights.append("🤖 Agent mode - code auto-accepted without immediate review")
    if context is not None and context.file_was_open is False:
        insights.append("📄 File was closed during acceptance")

    lines = _line_count(event)
    if lines > _LARGE_CHANGE_LINES and actual < _QUICK_REVIEW_MS:
        insights.append(f"⚠️ Large code change ({lines} lines) reviewed very quickly")

    return insights
