"""Data models shared by the threshold, mode and review-quality components.

Events arrive from an external tracker that serialises them with camelCase
keys. ``from_dict`` helpers accept both that shape and snake_case so the
models can be fed straight from a tracker export or from hand-written fixtures.
"""

from __future__ import annotations

import datetime
import logging
import math
from dataclasses import asdict, dataclass, field

logger = logging.getLogger(__name__)

# Experience tiers.
JUNIOR = "junior"
MID = "mid"
SENIOR = "senior"
LEVELS = (JUNIOR, MID, SENIOR)

# Code sources.
SOURCE_AI = "ai"
SOURCE_MANUAL = "manual"

# Event types.
SUGGESTION_DISPLAYED = "suggestion-displayed"
SUGGESTION_ACCEPTED = "suggestion-accepted"
SUGGESTION_REJECTED = "suggestion-rejected"
CODE_GENERATED = "code-generated"
SESSION_START = "session-start"
SESSION_END = "session-end"

# Detection methods reported by the tracker.
INLINE_COMPLETION_API = "inline-completion-api"
LARGE_PASTE = "large-paste"
EXTERNAL_FILE_CHANGE = "external-file-change"
GIT_COMMIT_MARKER = "git-commit-marker"
CHANGE_VELOCITY = "change-velocity"

# Review quality categories.
THOROUGH = "thorough"
LIGHT = "light"
NONE = "none"

# Tool identifiers.
TOOL_COPILOT = "copilot"
TOOL_CURSOR = "cursor"
TOOL_CLAUDE_CODE = "claude-code"


def _snake_case(key: str) -> str:
    out = []
    for ch in key:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


# Keys whose snake_case spelling does not follow mechanically from the camelCase one.
_KEY_ALIASES = {
    "linesOfCode": "lines_of_code",
    "maxAIPercentage": "max_ai_percentage",
    "aiPercentage": "ai_percentage",
    "totalAILines": "total_ai_lines",
    "totalAISuggestions": "total_ai_suggestions",
}


def _normalise_keys(data: dict, allowed: set[str], kind: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{kind} record must be a mapping, got {type(data).__name__}")
    out = {}
    for key, value in data.items():
        name = _KEY_ALIASES.get(key) or _snake_case(key)
        if name in allowed:
            out[name] = value
        else:
            logger.debug("Ignoring unknown %s field %r", kind, key)
    return out


def _check_types(values: dict, kind: str, numbers=(), flags=(), texts=()) -> None:
    """Reject values of the wrong type. ``None`` always passes (unknown)."""
    for name in numbers:
        value = values.get(name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{kind} field {name!r} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise ValueError(f"{kind} field {name!r} must be a finite number, got {value!r}")
    for name in flags:
        value = values.get(name)
        if value is not None and not isinstance(value, bool):
            raise ValueError(f"{kind} field {name!r} must be true or false, got {value!r}")
    for name in texts:
        value = values.get(name)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"{kind} field {name!r} must be a string, got {value!r}")


@dataclass(frozen=True)
class TrackingEvent:
    """A single observed code change, attributable (or not) to AI assistance.

    Produced by the external tracker and never mutated afterwards. Every
    numeric attribute is optional: ``None`` means the tracker did not know.
    """

    event_type: str = SUGGESTION_ACCEPTED
    timestamp: int = 0
    tool: str = ""
    source: str | None = None  # "ai" | "manual"
    lines_of_code: int | None = None
    lines_removed: int | None = None
    characters_count: int | None = None
    acceptance_time_delta: float | None = None  # ms between display and acceptance
    file_path: str | None = None
    language: str | None = None
    detection_method: str | None = None
    confidence: str | None = None
    is_agent_mode: bool | None = None
    is_agent_generated: bool | None = None
    agent_session_id: str | None = None
    file_was_open: bool | None = None  # None = unknown
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "TrackingEvent":
        values = _normalise_keys(data, _EVENT_FIELDS, "event")
        if values.get("metadata") is None:
            values.pop("metadata", None)
        elif not isinstance(values["metadata"], dict):
            raise ValueError(f"event field 'metadata' must be a mapping, got {values['metadata']!r}")
        _check_types(
            values,
            "event",
            numbers=("timestamp", "lines_of_code", "lines_removed", "characters_count", "acceptance_time_delta"),
            flags=("is_agent_mode", "is_agent_generated", "file_was_open"),
            texts=(
                "event_type",
                "tool",
                "source",
                "file_path",
                "language",
                "detection_method",
                "confidence",
                "agent_session_id",
            ),
        )
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


_EVENT_FIELDS = set(TrackingEvent.__dataclass_fields__)


@dataclass(frozen=True)
class ReviewContext:
    """Session facts known at acceptance time, supplied alongside an event."""

    file_was_open: bool | None = None
    is_agent_mode: bool | None = None
    agent_session_id: str | None = None

    @classmethod
    def from_event(cls, event: TrackingEvent) -> "ReviewContext":
        return cls(
            file_was_open=event.file_was_open,
            is_agent_mode=event.is_agent_mode,
            agent_session_id=event.agent_session_id,
        )


@dataclass
class ThresholdConfig:
    """Numeric review/usage policy for one experience tier."""

    level: str
    blind_approval_time: float  # ms
    max_ai_percentage: float
    min_review_time: float  # ms
    streak_threshold: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ThresholdConfig":
        values = _normalise_keys(data, _THRESHOLD_FIELDS, "threshold")
        _check_types(
            values,
            "threshold",
            numbers=("blind_approval_time", "max_ai_percentage", "min_review_time", "streak_threshold"),
            texts=("level",),
        )
        return cls(**values)


_THRESHOLD_FIELDS = set(ThresholdConfig.__dataclass_fields__)


@dataclass
class DailyMetrics:
    """One day of aggregated usage, as produced by the external metrics store."""

    date: str  # YYYY-MM-DD
    ai_percentage: float = 0.0
    average_review_time: float = 0.0  # ms, inline completions only
    total_events: int = 0
    total_ai_suggestions: int = 0
    total_ai_lines: int = 0
    total_manual_lines: int = 0
    review_quality_score: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "DailyMetrics":
        values = {
            k: v for k, v in _normalise_keys(data, _DAILY_FIELDS, "daily metrics").items() if v is not None
        }
        if isinstance(values.get("date"), datetime.date):
            # Unquoted YAML dates arrive as date objects.
            values["date"] = values["date"].isoformat()
        if "date" not in values:
            raise ValueError("daily metrics record is missing 'date'")
        _check_types(
            values,
            "daily metrics",
            numbers=tuple(n for n in _DAILY_FIELDS if n != "date"),
            texts=("date",),
        )
        return cls(**values)


_DAILY_FIELDS = set(DailyMetrics.__dataclass_fields__)


@dataclass
class FileReviewStatus:
    """Review state of one AI-touched file, as tracked by the external store."""

    file_path: str
    was_file_open: bool | None = None
    is_reviewed: bool = False
    review_score: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "FileReviewStatus":
        values = {
            k: v for k, v in _normalise_keys(data, _FILE_REVIEW_FIELDS, "file review").items() if v is not None
        }
        if "file_path" not in values:
            raise ValueError("file review record is missing 'filePath'")
        _check_types(
            values,
            "file review",
            numbers=("review_score",),
            flags=("was_file_open", "is_reviewed"),
            texts=("file_path",),
        )
        return cls(**values)


_FILE_REVIEW_FIELDS = set(FileReviewStatus.__dataclass_fields__)
