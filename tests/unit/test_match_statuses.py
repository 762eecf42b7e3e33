"""Tests for status vocabularies and event-status helpers."""

from datetime import datetime, timezone

import pytest

from fragdash.match_statuses import (
    ALL_MATCH_STATUSES,
    aggregate_event_status,
    compute_event_status,
    get_status_group,
    parse_timestamp,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_status_groups_cover_all_statuses():
    grouped = set(get_status_group("pending") + get_status_group("live") + get_status_group("terminal"))
    assert grouped == set(ALL_MATCH_STATUSES)


def test_unknown_status_group_raises():
    with pytest.raises(KeyError):
        get_status_group("bogus")


def test_parse_timestamp_zulu():
    assert parse_timestamp("2026-02-07T16:00:00Z") == datetime(2026, 2, 7, 16, 0, tzinfo=timezone.utc)


def test_parse_timestamp_naive_is_utc():
    assert parse_timestamp("2026-02-07T16:00:00").tzinfo == timezone.utc


def test_parse_timestamp_malformed(caplog):
    assert parse_timestamp("next tuesday") is None
    assert parse_timestamp(None) is None
    assert "next tuesday" in caplog.text


@pytest.mark.parametrize("begin_at,end_at,expected", [
    ("2026-04-01T00:00:00Z", None, "upcoming"),
    ("2026-04-01T00:00:00Z", "2026-04-05T00:00:00Z", "upcoming"),
    ("2026-02-01T00:00:00Z", "2026-02-10T00:00:00Z", "completed"),
    ("2026-02-25T00:00:00Z", "2026-03-05T00:00:00Z", "ongoing"),
    ("2026-02-25T00:00:00Z", None, "ongoing"),
    (None, "2026-02-10T00:00:00Z", "completed"),
    (None, "2026-04-10T00:00:00Z", "completed"),
    (None, None, "completed"),
])
def test_compute_event_status(begin_at, end_at, expected):
    assert compute_event_status(begin_at, end_at, NOW) == expected


def test_compute_event_status_naive_now():
    naive = datetime(2026, 3, 1, 12, 0)
    assert compute_event_status("2026-02-25T00:00:00Z", None, naive) == "ongoing"


def test_malformed_begin_treated_as_missing():
    assert compute_event_status("soon", "2026-04-10T00:00:00Z", NOW) == "completed"


@pytest.mark.parametrize("statuses,expected", [
    (["completed", "ongoing", "completed"], "ongoing"),
    (["completed", "completed", "completed"], "completed"),
    (["upcoming", "completed"], "upcoming"),
    (["upcoming", "ongoing"], "ongoing"),
    ([], "completed"),
])
def test_aggregate_event_status(statuses, expected):
    assert aggregate_event_status(statuses) == expected
