"""Per-experience-level review policy.

Every field is clamped independently on write so partial updates can never
leave the config in an invalid state. Reads hand out copies; callers never
see the live object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from codepause_core.models import JUNIOR, MID, SENIOR, DailyMetrics, ThresholdConfig

logger = logging.getLogger(__name__)

BLIND_APPROVAL_TIME_RANGE = (500, 10_000)
MAX_AI_PERCENTAGE_RANGE = (20, 100)
MIN_REVIEW_TIME_RANGE = (500, 10_000)
STREAK_THRESHOLD_RANGE = (2, 10)

# Juniors get the longest review expectations and the lowest AI share;
# seniors are trusted to review faster and lean on AI more.
DEFAULT_THRESHOLDS: dict[str, ThresholdConfig] = {
    JUNIOR: ThresholdConfig(
        level=JUNIOR,
        blind_approval_time=5000,
        max_ai_percentage=40,
        min_review_time=5000,
        streak_threshold=3,
    ),
    MID: ThresholdConfig(
        level=MID,
        blind_approval_time=3000,
        max_ai_percentage=60,
        min_review_time=3000,
        streak_threshold=4,
    ),
    SENIOR: ThresholdConfig(
        level=SENIOR,
        blind_approval_time=2000,
        max_ai_percentage=75,
        min_review_time=2000,
        streak_threshold=5,
    ),
}

_LENIENCY_STEP_MS = 500
_LENIENCY_FACTOR = 1.5


def clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(value, high))


@dataclass(frozen=True)
class MetricsCheck:
    ai_percentage_exceeded: bool
    review_time_low: bool
    # Blind-approval tracking is disabled; the flag stays so callers keep the same shape.
    blind_approvals_high: bool = False


@dataclass(frozen=True)
class AdaptiveSuggestion:
    blind_approval_time: float
    reasoning: str


class ThresholdManager:
    """Holds the active ThresholdConfig and answers point queries against it."""

    def __init__(self, level: str = MID):
        self._config = replace(DEFAULT_THRESHOLDS[level])

    def get_config(self) -> ThresholdConfig:
        return replace(self._config)

    def set_level(self, level: str) -> None:
        """Replace the whole config with the tier's defaults. Custom values are discarded."""
        self._config = replace(DEFAULT_THRESHOLDS[level])

    @property
    def level(self) -> str:
        return self._config.level

    def get_blind_approval_time(self) -> float:
        return self._config.blind_approval_time

    def get_max_ai_percentage(self) -> float:
        return self._config.max_ai_percentage

    def get_min_review_time(self) -> float:
        return self._config.min_review_time

    def get_streak_threshold(self) -> int:
        return self._config.streak_threshold

    def set_blind_approval_time(self, ms: float) -> None:
        self._config.blind_approval_time = clamp(ms, BLIND_APPROVAL_TIME_RANGE)

    def set_max_ai_percentage(self, percentage: float) -> None:
        self._config.max_ai_percentage = clamp(percentage, MAX_AI_PERCENTAGE_RANGE)

    def set_min_review_time(self, ms: float) -> None:
        self._config.min_review_time = clamp(ms, MIN_REVIEW_TIME_RANGE)

    def set_streak_threshold(self, count: int) -> None:
        self._config.streak_threshold = clamp(count, STREAK_THRESHOLD_RANGE)

    def is_ai_percentage_exceeded(self, percentage: float) -> bool:
        return percentage > self._config.max_ai_percentage

    def is_review_time_below_threshold(self, ms: float) -> bool:
        return ms < self._config.min_review_time

    def check_metrics(self, metrics: DailyMetrics) -> MetricsCheck:
        return MetricsCheck(
            ai_percentage_exceeded=self.is_ai_percentage_exceeded(metrics.ai_percentage),
            review_time_low=self.is_review_time_below_threshold(metrics.average_review_time),
        )

    def suggest_adaptive_threshold(self, recent_metrics: list[DailyMetrics]) -> AdaptiveSuggestion:
        """Propose a blind-approval allowance from recent review behaviour.

        Only ever loosens: consistently slow reviewers (average review time more
        than double the configured minimum) earn a little more leniency. It never
        tightens thresholds on its own.
        """
        current = self._config.blind_approval_time
        if not recent_metrics:
            return AdaptiveSuggestion(current, "Not enough data for adaptive suggestion")

        avg_review_time = sum(m.average_review_time for m in recent_metrics) / len(recent_metrics)
        logger.debug(
            "Adaptive check: avg review %.0fms vs minimum %.0fms",
            avg_review_time,
            self._config.min_review_time,
        )

        if avg_review_time > self._config.min_review_time * 2:
            return AdaptiveSuggestion(
                min(current + _LENIENCY_STEP_MS, current * _LENIENCY_FACTOR),
                "Your review times are consistently high - you can afford slightly faster reviews",
            )

        return AdaptiveSuggestion(current, "Current threshold seems appropriate for your review patterns")

    def export_config(self) -> ThresholdConfig:
        return replace(self._config)

    def import_config(self, config: ThresholdConfig) -> None:
        """Load a previously exported config. Each field goes through its setter."""
        self._config = replace(config)
        self.set_blind_approval_time(config.blind_approval_time)
        self.set_max_ai_percentage(config.max_ai_percentage)
        self.set_min_review_time(config.min_review_time)
        self.set_streak_threshold(config.streak_threshold)

    @staticmethod
    def recommended_thresholds(level: str) -> ThresholdConfig:
        return replace(DEFAULT_THRESHOLDS[level])

    @staticmethod
    def all_level_thresholds() -> dict[str, ThresholdConfig]:
        return {level: replace(config) for level, config in DEFAULT_THRESHOLDS.items()}
