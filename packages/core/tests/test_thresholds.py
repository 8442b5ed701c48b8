"""Tests for ThresholdManager."""

import pytest

from codepause_core.models import DailyMetrics, ThresholdConfig
from codepause_core.thresholds import (
    BLIND_APPROVAL_TIME_RANGE,
    DEFAULT_THRESHOLDS,
    MAX_AI_PERCENTAGE_RANGE,
    MIN_REVIEW_TIME_RANGE,
    STREAK_THRESHOLD_RANGE,
    ThresholdManager,
    clamp,
)


def day(average_review_time, ai_percentage=50.0, date="2024-05-01"):
    return DailyMetrics(date=date, ai_percentage=ai_percentage, average_review_time=average_review_time)


class TestDefaults:
    @pytest.mark.parametrize(
        "level, blind, max_ai, min_review, streak",
        [
            ("junior", 5000, 40, 5000, 3),
            ("mid", 3000, 60, 3000, 4),
            ("senior", 2000, 75, 2000, 5),
        ],
    )
    def test_level_defaults(self, level, blind, max_ai, min_review, streak):
        config = ThresholdManager(level).get_config()
        assert config.level == level
        assert config.blind_approval_time == blind
        assert config.max_ai_percentage == max_ai
        assert config.min_review_time == min_review
        assert config.streak_threshold == streak

    def test_default_level_is_mid(self):
        assert ThresholdManager().level == "mid"

    def test_set_level_discards_custom_values(self):
        manager = ThresholdManager("mid")
        manager.set_min_review_time(9000)
        manager.set_level("senior")
        assert manager.get_config() == DEFAULT_THRESHOLDS["senior"]

    def test_get_config_returns_copy(self):
        manager = ThresholdManager("mid")
        config = manager.get_config()
        config.min_review_time = 1
        assert manager.get_min_review_time() == 3000

    def test_defaults_not_mutated_by_setters(self):
        ThresholdManager("junior").set_max_ai_percentage(90)
        assert DEFAULT_THRESHOLDS["junior"].max_ai_percentage == 40
        assert ThresholdManager("junior").get_max_ai_percentage() == 40

    def test_all_level_thresholds_are_copies(self):
        levels = ThresholdManager.all_level_thresholds()
        assert list(levels) == ["junior", "mid", "senior"]
        levels["mid"].streak_threshold = 9
        assert ThresholdManager.recommended_thresholds("mid").streak_threshold == 4


class TestClamping:
    @pytest.mark.parametrize("value, expected", [(100, 500), (500, 500), (4000, 4000), (10000, 10000), (20000, 10000)])
    def test_clamp(self, value, expected):
        assert clamp(value, (500, 10000)) == expected

    def test_setters_clamp_each_field(self):
        manager = ThresholdManager("mid")
        manager.set_blind_approval_time(50)
        manager.set_max_ai_percentage(150)
        manager.set_min_review_time(99999)
        manager.set_streak_threshold(1)
        config = manager.get_config()
        assert config.blind_approval_time == 500
        assert config.max_ai_percentage == 100
        assert config.min_review_time == 10000
        assert config.streak_threshold == 2

    @pytest.mark.parametrize(
        "setter, getter, bounds",
        [
            ("set_blind_approval_time", "get_blind_approval_time", BLIND_APPROVAL_TIME_RANGE),
            ("set_max_ai_percentage", "get_max_ai_percentage", MAX_AI_PERCENTAGE_RANGE),
            ("set_min_review_time", "get_min_review_time", MIN_REVIEW_TIME_RANGE),
            ("set_streak_threshold", "get_streak_threshold", STREAK_THRESHOLD_RANGE),
        ],
    )
    @pytest.mark.parametrize("value", [-1, 0, 10**12, -(10**12), float("inf"), float("-inf")])
    def test_setters_stay_in_range_for_extreme_inputs(self, setter, getter, bounds, value):
        manager = ThresholdManager("mid")
        getattr(manager, setter)(value)
        low, high = bounds
        result = getattr(manager, getter)()
        assert low <= result <= high
        assert result == (low if value <= 0 else high)

    def test_nan_falls_to_lower_bound(self):
        manager = ThresholdManager("mid")
        manager.set_min_review_time(float("nan"))
        manager.set_max_ai_percentage(float("nan"))
        assert manager.get_min_review_time() == 500
        assert manager.get_max_ai_percentage() == 20

    def test_setters_accept_in_range_values(self):
        manager = ThresholdManager("mid")
        manager.set_max_ai_percentage(45)
        assert manager.get_max_ai_percentage() == 45


class TestPredicates:
    def test_ai_percentage_strictly_greater(self):
        manager = ThresholdManager("mid")
        assert manager.is_ai_percentage_exceeded(60) is False
        assert manager.is_ai_percentage_exceeded(60.5) is True

    def test_review_time_strictly_less(self):
        manager = ThresholdManager("mid")
        assert manager.is_review_time_below_threshold(3000) is False
        assert manager.is_review_time_below_threshold(2999) is True

    def test_check_metrics(self):
        result = ThresholdManager("junior").check_metrics(day(1000, ai_percentage=55))
        assert result.ai_percentage_exceeded is True
        assert result.review_time_low is True
        assert result.blind_approvals_high is False

    def test_check_metrics_within_limits(self):
        result = ThresholdManager("senior").check_metrics(day(2500, ai_percentage=70))
        assert result.ai_percentage_exceeded is False
        assert result.review_time_low is False


class TestAdaptiveSuggestion:
    def test_no_data(self):
        suggestion = ThresholdManager("mid").suggest_adaptive_threshold([])
        assert suggestion.blind_approval_time == 3000
        assert suggestion.reasoning == "Not enough data for adaptive suggestion"

    def test_slow_reviewer_gets_more_leniency(self):
        suggestion = ThresholdManager("mid").suggest_adaptive_threshold([day(6000), day(8000)])
        assert suggestion.blind_approval_time == 3500
        assert "consistently high" in suggestion.reasoning

    def test_leniency_capped_by_factor(self):
        manager = ThresholdManager("mid")
        manager.set_blind_approval_time(500)
        manager.set_min_review_time(500)
        suggestion = manager.suggest_adaptive_threshold([day(5000)])
        assert suggestion.blind_approval_time == 750

    def test_senior_slow_reviewer(self):
        suggestion = ThresholdManager("senior").suggest_adaptive_threshold([day(5000)])
        assert suggestion.blind_approval_time == 2500

    def test_exactly_double_is_unchanged(self):
        suggestion = ThresholdManager("mid").suggest_adaptive_threshold([day(6000)])
        assert suggestion.blind_approval_time == 3000
        assert suggestion.reasoning == "Current threshold seems appropriate for your review patterns"

    def test_fast_reviewer_never_tightened(self):
        suggestion = ThresholdManager("mid").suggest_adaptive_threshold([day(100), day(200)])
        assert suggestion.blind_approval_time == 3000

    def test_suggestion_does_not_change_config(self):
        manager = ThresholdManager("mid")
        manager.suggest_adaptive_threshold([day(9000)])
        assert manager.get_blind_approval_time() == 3000


class TestExportImport:
    def test_export_is_copy(self):
        manager = ThresholdManager("mid")
        exported = manager.export_config()
        exported.max_ai_percentage = 99
        assert manager.get_max_ai_percentage() == 60

    def test_import_restores_exported(self):
        source = ThresholdManager("junior")
        source.set_min_review_time(7000)
        target = ThresholdManager("senior")
        target.import_config(source.export_config())
        assert target.get_config() == source.get_config()
        assert target.level == "junior"

    def test_import_clamps_out_of_range_values(self):
        manager = ThresholdManager("mid")
        manager.import_config(
            ThresholdConfig(
                level="mid",
                blind_approval_time=1,
                max_ai_percentage=500,
                min_review_time=20000,
                streak_threshold=0,
            )
        )
        config = manager.get_config()
        assert config.blind_approval_time == 500
        assert config.max_ai_percentage == 100
        assert config.min_review_time == 10000
        assert config.streak_threshold == 2

    def test_from_dict_accepts_camel_case(self):
        config = ThresholdConfig.from_dict(
            {
                "level": "senior",
                "blindApprovalTime": 2500,
                "maxAIPercentage": 70,
                "minReviewTime": 2200,
                "streakThreshold": 5,
            }
        )
        assert config.max_ai_percentage == 70
        assert config.min_review_time == 2200
