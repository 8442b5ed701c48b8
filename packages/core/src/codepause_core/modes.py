"""Usage-mode classification: agent, inline autocomplete, or chat/paste.

Each event goes through an ordered list of rules and the first match wins.
The order matters: a large paste lands in agent or chat/paste depending on
file-open state, and that check has to run before the broader agent-signal
rule would claim it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Callable, Iterable

from codepause_core.models import (
    CHANGE_VELOCITY,
    EXTERNAL_FILE_CHANGE,
    INLINE_COMPLETION_API,
    LARGE_PASTE,
    SOURCE_MANUAL,
    SUGGESTION_ACCEPTED,
    TOOL_CLAUDE_CODE,
    FileReviewStatus,
    TrackingEvent,
)
from codepause_core.utils.rounding import known, round_half_up

logger = logging.getLogger(__name__)

AGENT = "agent"
INLINE = "inline"
CHAT_PASTE = "chat_paste"
MODES = (AGENT, INLINE, CHAT_PASTE)

QUICK_ACCEPTANCE_MS = 2000
REVIEWED_FILE_SCORE = 70


def _added_lines(event: TrackingEvent) -> int:
    return known(event.lines_of_code)


def _total_activity(event: TrackingEvent) -> int:
    # Agents delete as well as generate, so removals count toward their activity.
    return known(event.lines_of_code) + known(event.lines_removed)


def _is_inline(event: TrackingEvent) -> bool:
    return event.detection_method == INLINE_COMPLETION_API or event.event_type == SUGGESTION_ACCEPTED


def _is_open_file_paste(event: TrackingEvent) -> bool:
    return event.detection_method == LARGE_PASTE and event.file_was_open is not False


def _is_closed_file_paste(event: TrackingEvent) -> bool:
    return event.detection_method == LARGE_PASTE


def _has_agent_signal(event: TrackingEvent) -> bool:
    metadata = event.metadata or {}
    return bool(
        event.detection_method == EXTERNAL_FILE_CHANGE
        or metadata.get("closedFileModification")
        or event.is_agent_mode
        or event.agent_session_id
        or event.is_agent_generated
        or metadata.get("isAgentGenerated")
        or event.tool == TOOL_CLAUDE_CODE
    )


def _has_lines(event: TrackingEvent) -> bool:
    # An AI event with no recognised detection method is more likely an
    # unlogged agent action than an unlogged inline completion.
    return known(event.lines_of_code) > 0


@dataclass(frozen=True)
class _Rule:
    name: str
    mode: str
    matches: Callable[[TrackingEvent], bool]
    lines: Callable[[TrackingEvent], int]


_RULES: tuple[_Rule, ...] = (
    _Rule("inline-completion", INLINE, _is_inline, _added_lines),
    _Rule("open-file-paste", AGENT, _is_open_file_paste, _total_activity),
    _Rule("closed-file-paste", CHAT_PASTE, _is_closed_file_paste, _added_lines),
    _Rule("agent-signal", AGENT, _has_agent_signal, _total_activity),
    _Rule("unlabelled-ai-fallback", AGENT, _has_lines, _total_activity),
)


@dataclass(frozen=True)
class ModeAssignment:
    """Which mode one event was attributed to, and how many lines it carries."""

    mode: str  # "agent" | "inline" | "chat_paste"
    lines: int
    rule: str
    acceptance: bool = False
    quick_acceptance: bool = False


@dataclass
class ModeAggregate:
    """Cumulative activity for one usage mode over a reporting window.

    ``acceptances``/``quick_acceptances`` are only meaningful for inline;
    ``total_files``/``reviewed_files``/``avg_review_score`` only for agent.
    """

    mode: str
    lines: int = 0
    events: int = 0
    percentage: int = 0
    acceptances: int = 0
    quick_acceptances: int = 0
    total_files: int = 0
    reviewed_files: int = 0
    avg_review_score: float = 0.0


@dataclass
class CodingModes:
    agent: ModeAggregate = field(default_factory=lambda: ModeAggregate(AGENT))
    inline: ModeAggregate = field(default_factory=lambda: ModeAggregate(INLINE))
    chat_paste: ModeAggregate = field(default_factory=lambda: ModeAggregate(CHAT_PASTE))
    total_lines: int = 0

    def get(self, mode: str) -> ModeAggregate:
        return {AGENT: self.agent, INLINE: self.inline, CHAT_PASTE: self.chat_paste}[mode]

    def to_dict(self) -> dict:
        return asdict(self)


class EventModeClassifier:
    """Stateless: every call depends only on the event(s) passed in."""

    def classify(self, event: TrackingEvent) -> ModeAssignment | None:
        """Attribute one event to a mode, or return None if it belongs to none.

        Manual code never counts. Change-velocity detections are dropped
        outright: they cannot be told apart from inline acceptances, and
        misclassifying them is worse than leaving them out.
        """
        if event.source == SOURCE_MANUAL:
            return None
        if event.detection_method == CHANGE_VELOCITY:
            logger.debug("Ignoring change-velocity event for %s", event.file_path)
            return None

        for rule in _RULES:
            if not rule.matches(event):
                continue
            acceptance = rule.mode == INLINE and event.event_type == SUGGESTION_ACCEPTED
            delta = known(event.acceptance_time_delta)
            return ModeAssignment(
                mode=rule.mode,
                lines=rule.lines(event),
                rule=rule.name,
                acceptance=acceptance,
                quick_acceptance=acceptance and bool(delta) and delta < QUICK_ACCEPTANCE_MS,
            )

        return None

    def summarize(
        self,
        events: Iterable[TrackingEvent],
        file_reviews: Iterable[FileReviewStatus] | None = None,
    ) -> CodingModes:
        """Classify a window of events and aggregate lines/events per mode."""
        modes = CodingModes()

        for event in events:
            assignment = self.classify(event)
            if assignment is None:
                continue
            aggregate = modes.get(assignment.mode)
            aggregate.lines += assignment.lines
            aggregate.events += 1
            if assignment.acceptance:
                aggregate.acceptances += 1
            if assignment.quick_acceptance:
                aggregate.quick_acceptances += 1

        if file_reviews is not None:
            _apply_agent_file_stats(modes.agent, file_reviews)

        modes.total_lines = modes.agent.lines + modes.inline.lines + modes.chat_paste.lines
        for mode in MODES:
            aggregate = modes.get(mode)
            if 0 < modes.total_lines < math.inf:
                aggregate.percentage = round_half_up(aggregate.lines / modes.total_lines * 100)

        logger.debug(
            "Mode split: agent=%d inline=%d chat_paste=%d lines",
            modes.agent.lines,
            modes.inline.lines,
            modes.chat_paste.lines,
        )
        return modes


def _apply_agent_file_stats(agent: ModeAggregate, file_reviews: Iterable[FileReviewStatus]) -> None:
    # Files not seen open in the editor were written by an agent; unknown counts as closed.
    agent_files = [f for f in file_reviews if not f.was_file_open]
    agent.total_files = len(agent_files)
    agent.reviewed_files = sum(
        1 for f in agent_files if f.is_reviewed or known(f.review_score) >= REVIEWED_FILE_SCORE
    )
    if agent_files:
        agent.avg_review_score = sum(known(f.review_score) for f in agent_files) / len(agent_files)
