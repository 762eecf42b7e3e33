"""Shared match- and event-status definitions and helpers.

This module is the single source of truth for the status vocabularies used
by the bracket engine (PandaScore match statuses) and the series grouping
(derived event statuses).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Literal, Optional

logger = logging.getLogger(__name__)

# PandaScore match statuses.
ALL_MATCH_STATUSES: tuple[str, ...] = (
    "not_started",
    "running",
    "finished",
    "canceled",
)

# Canonical match status groups.
MATCH_STATUS_GROUPS: dict[str, tuple[str, ...]] = {
    # Still waiting to be played.
    "pending": ("not_started",),
    # Currently being played.
    "live": ("running",),
    # No longer actionable; scores are final.
    "terminal": ("finished", "canceled"),
    "all": ALL_MATCH_STATUSES,
}

EventStatus = Literal["ongoing", "upcoming", "completed"]

# Order used when aggregating several stages into one event: the first
# status present in any stage wins.
EVENT_STATUS_PRIORITY: tuple[EventStatus, ...] = ("ongoing", "upcoming", "completed")


def get_status_group(group_name: str) -> tuple[str, ...]:
    """Return a named status group, raising KeyError for unknown names."""
    return MATCH_STATUS_GROUPS[group_name]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an upstream ISO-8601 timestamp into an aware UTC datetime.

    PandaScore sends values like "2026-02-07T16:00:00Z"; a missing or
    unparseable value yields None.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed timestamp: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def compute_event_status(
    begin_at: Optional[str],
    end_at: Optional[str],
    now: datetime,
) -> EventStatus:
    """
    Derive an event's status from its date range.

    Args:
        begin_at: ISO-8601 begin timestamp, or None
        end_at: ISO-8601 end timestamp, or None
        now: Reference time (naive values are taken as UTC)

    Returns:
        'upcoming' if the event has not begun, 'completed' if it has ended,
        'ongoing' if it has begun and not ended. An event with no begin date
        that has not ended is treated as 'completed'.

    Examples:
        >>> now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        >>> compute_event_status("2026-04-01T00:00:00Z", None, now)
        'upcoming'
        >>> compute_event_status("2026-02-01T00:00:00Z", "2026-03-10T00:00:00Z", now)
        'ongoing'
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    begin = parse_timestamp(begin_at)
    end = parse_timestamp(end_at)

    if begin and now < begin:
        return "upcoming"
    if end and now > end:
        return "completed"
    if begin:
        return "ongoing"
    return "completed"


def aggregate_event_status(statuses: Iterable[str]) -> EventStatus:
    """Combine stage statuses: any ongoing, else any upcoming, else completed."""
    present = set(statuses)
    for status in EVENT_STATUS_PRIORITY:
        if status in present:
            return status
    return "completed"
