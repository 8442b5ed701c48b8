"""Tests for configuration loading."""

import pytest

from codepause_core.config import build_threshold_manager, load_config


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["experience_level"] == "mid"
    assert config["thresholds"] == {}
    assert config["exclude"] == []


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".codepause.yml"
    cfg.write_text("experience_level: junior\nthresholds:\n  min_review_time: 4000\n")
    config = load_config(config_path=str(cfg))
    assert config["experience_level"] == "junior"
    assert config["thresholds"] == {"min_review_time": 4000}


def test_exclude_patterns_loaded(tmp_path):
    cfg = tmp_path / ".codepause.yml"
    cfg.write_text("exclude:\n  - migrations/\n  - '*.lock'\n")
    config = load_config(config_path=str(cfg))
    assert "migrations/" in config["exclude"]
    assert "*.lock" in config["exclude"]


def test_empty_config_file_uses_defaults(tmp_path):
    cfg = tmp_path / ".codepause.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["experience_level"] == "mid"


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".codepause.yml"
    cfg.write_text("experience_level: junior\n")
    config = load_config(config_path=str(cfg), cli_overrides={"experience_level": "senior"})
    assert config["experience_level"] == "senior"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".codepause.yml"
    cfg.write_text("experience_level: junior\n")
    config = load_config(config_path=str(cfg), cli_overrides={"experience_level": None})
    assert config["experience_level"] == "junior"


def test_invalid_yaml_raises_value_error(tmp_path):
    cfg = tmp_path / ".codepause.yml"
    cfg.write_text("exclude: [unterminated\n")
    with pytest.raises(ValueError, match="Could not parse"):
        load_config(config_path=str(cfg))


def test_non_mapping_config_raises(tmp_path):
    cfg = tmp_path / ".codepause.yml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(config_path=str(cfg))


def test_exclude_list_is_not_shared_reference(tmp_path):
    """Mutating one config's exclude list must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["exclude"].append("migrations/")
    config_a["thresholds"]["min_review_time"] = 1000
    assert config_b["exclude"] == []
    assert config_b["thresholds"] == {}


class TestBuildThresholdManager:
    def test_uses_configured_level(self):
        manager = build_threshold_manager({"experience_level": "senior"})
        assert manager.level == "senior"
        assert manager.get_min_review_time() == 2000

    def test_missing_level_defaults_to_mid(self):
        assert build_threshold_manager({}).level == "mid"

    def test_unknown_level_raises(self):
        with pytest.raises(ValueError, match="Unknown experience level"):
            build_threshold_manager({"experience_level": "principal"})

    def test_overrides_applied(self):
        manager = build_threshold_manager(
            {"experience_level": "junior", "thresholds": {"min_review_time": 4000, "streak_threshold": 6}}
        )
        assert manager.get_min_review_time() == 4000
        assert manager.get_streak_threshold() == 6
        assert manager.get_max_ai_percentage() == 40

    def test_overrides_are_clamped(self):
        manager = build_threshold_manager({"thresholds": {"max_ai_percentage": 5, "blind_approval_time": 60000}})
        assert manager.get_max_ai_percentage() == 20
        assert manager.get_blind_approval_time() == 10000

    def test_unknown_override_is_ignored(self, caplog):
        manager = build_threshold_manager({"thresholds": {"coffee_breaks": 3}})
        assert manager.get_config() == build_threshold_manager({}).get_config()
        assert "coffee_breaks" in caplog.text

    @pytest.mark.parametrize("value", ["fast", True, None])
    def test_non_numeric_override_raises(self, value):
        with pytest.raises(ValueError, match="must be a number"):
            build_threshold_manager({"thresholds": {"min_review_time": value}})
