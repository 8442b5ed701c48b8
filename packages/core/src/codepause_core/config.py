import logging
from pathlib import Path
from typing import Optional

import yaml

from codepause_core.models import LEVELS
from codepause_core.thresholds import ThresholdManager

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "experience_level": "mid",
    "thresholds": {},  # per-field overrides, e.g. {"min_review_time": 4000}; clamped on apply
    "exclude": [],  # fnmatch patterns or directory names whose events are left out of reports
}

# Override key -> ThresholdManager setter name.
_THRESHOLD_SETTERS = {
    "blind_approval_time": "set_blind_approval_time",
    "max_ai_percentage": "set_max_ai_percentage",
    "min_review_time": "set_min_review_time",
    "streak_threshold": "set_streak_threshold",
}


def load_config(config_path: str = ".codepause.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .codepause.yml in the current directory
      3. CLI argument overrides
    """
    config = {
        **DEFAULT_CONFIG,
        "thresholds": dict(DEFAULT_CONFIG["thresholds"]),
        "exclude": list(DEFAULT_CONFIG["exclude"]),
    }

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            try:
                file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Could not parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a mapping at the top level.")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def build_threshold_manager(config: dict) -> ThresholdManager:
    """
    Create a ThresholdManager for the configured experience level.

    Per-field overrides under ``thresholds`` go through the manager's setters,
    so out-of-range values are clamped rather than rejected.
    """
    level = config.get("experience_level") or DEFAULT_CONFIG["experience_level"]
    if level not in LEVELS:
        raise ValueError(f"Unknown experience level: {level!r}. Choose one of {', '.join(LEVELS)}.")

    manager = ThresholdManager(level)
    for key, value in (config.get("thresholds") or {}).items():
        setter = _THRESHOLD_SETTERS.get(key)
        if setter is None:
            logger.warning("Ignoring unknown threshold override %r", key)
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Threshold override {key!r} must be a number, got {value!r}.")
        getattr(manager, setter)(value)
    return manager
