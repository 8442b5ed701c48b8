"""Load tracker exports: events, file review statuses and daily metrics.

Accepted formats, chosen by file extension:
  .json        a list of records, or an object holding the list under a key
  .jsonl       one record per line
  .yml/.yaml   same shapes as .json
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path

import yaml

from codepause_core.models import DailyMetrics, FileReviewStatus, TrackingEvent
from codepause_core.utils.language import language_for_path

logger = logging.getLogger(__name__)


def _read_records(path: str | Path, key: str) -> list:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {path}")

    text = p.read_text(encoding="utf-8")
    suffix = p.suffix.lower()
    try:
        if suffix == ".jsonl":
            return [json.loads(line) for line in text.splitlines() if line.strip()]
        if suffix in (".yml", ".yaml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text) if text.strip() else []
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Could not parse {path}: {e}") from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of records or an object with a {key!r} list.")
    return data


def _parse(records: list, parser, path: str | Path) -> list:
    parsed = []
    for i, record in enumerate(records, start=1):
        try:
            parsed.append(parser(record))
        except (TypeError, ValueError) as e:
            raise ValueError(f"{path}: record {i} is malformed: {e}") from e
    return parsed


def _with_language(event: TrackingEvent) -> TrackingEvent:
    if event.language:
        return event
    language = language_for_path(event.file_path)
    if language is None:
        return event
    logger.debug("Inferred language %r for %s", language, event.file_path)
    return replace(event, language=language)


def load_events(path: str | Path) -> list[TrackingEvent]:
    """Load tracking events, filling in ``language`` from the file extension where missing."""
    events = _parse(_read_records(path, "events"), TrackingEvent.from_dict, path)
    return [_with_language(e) for e in events]


def load_file_reviews(path: str | Path) -> list[FileReviewStatus]:
    return _parse(_read_records(path, "fileReviews"), FileReviewStatus.from_dict, path)


def load_daily_metrics(path: str | Path) -> list[DailyMetrics]:
    """Load daily metrics, oldest first."""
    metrics = _parse(_read_records(path, "metrics"), DailyMetrics.from_dict, path)
    return sorted(metrics, key=lambda m: m.date)
