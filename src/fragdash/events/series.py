"""
Tournament annotation and series grouping for the events list.

PandaScore models a competition as league -> series -> tournaments, where
each tournament is one stage (group stage, playoffs, ...). The events list
shows one row per series, so stages sharing a series are folded together:
- Status: ongoing if any stage is ongoing, else upcoming if any stage is
  upcoming, else completed
- Tier: the best tier of any stage (S > A > B > C > D, unknown last)
- Dates: earliest begin and latest end, picked independently
- Region: NA if any stage is NA

Tournaments without a series stay on their own row.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from fragdash.config import settings
from fragdash.events.regions import is_na_tournament
from fragdash.match_statuses import EventStatus, aggregate_event_status, compute_event_status

logger = logging.getLogger(__name__)

TIER_RANK: dict[str, int] = {"s": 0, "a": 1, "b": 2, "c": 3, "d": 4}
UNKNOWN_TIER_RANK = 99


def tier_rank(tier: Optional[str]) -> int:
    """
    Sort rank of a tier letter; lower is better.

    Examples:
        >>> tier_rank("S")
        0
        >>> tier_rank("unranked")
        99
    """
    return TIER_RANK.get((tier or "").lower(), UNKNOWN_TIER_RANK)


def format_tier(tier: Optional[str]) -> str:
    """Upper-cased tier for display, "?" when missing."""
    return tier.upper() if tier else "?"


@dataclass
class AnnotatedTournament:
    """
    A PandaScore tournament with its computed status and region flag.

    Attributes:
        id: PandaScore tournament ID
        name: Stage name ("Playoffs", "Group A", ...)
        tier: Raw tier letter, or None
        begin_at, end_at: ISO-8601 timestamps, or None
        status: Derived event status
        is_na: Whether the tournament looks North American
        serie_id: Parent series ID, or None for standalone tournaments
        serie_name: Series full name (or short name), or None
        league_name, league_image_url, league_url: Parent league info
    """
    id: int
    name: str
    tier: Optional[str]
    begin_at: Optional[str]
    end_at: Optional[str]
    status: EventStatus
    is_na: bool
    serie_id: Optional[int] = None
    serie_name: Optional[str] = None
    league_name: str = ""
    league_image_url: Optional[str] = None
    league_url: Optional[str] = None

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        status: EventStatus,
        is_na: bool,
    ) -> "AnnotatedTournament":
        serie = payload.get("serie") or {}
        league = payload.get("league") or {}
        return cls(
            id=payload.get("id"),
            name=payload.get("name") or "",
            tier=payload.get("tier"),
            begin_at=payload.get("begin_at"),
            end_at=payload.get("end_at"),
            status=status,
            is_na=is_na,
            serie_id=serie.get("id"),
            serie_name=serie.get("full_name") or serie.get("name") or None,
            league_name=league.get("name") or "",
            league_image_url=league.get("image_url"),
            league_url=league.get("url"),
        )


def annotate_tournaments(
    payloads: Iterable[dict[str, Any]],
    status: Optional[EventStatus] = None,
    now: Optional[datetime] = None,
    is_na: Optional[bool] = None,
) -> list[AnnotatedTournament]:
    """
    Attach status and region flags to raw tournament payloads.

    Args:
        payloads: Tournaments from a PandaScore listing endpoint
        status: Status for every tournament (the running/upcoming/past
            listings already imply it). Computed from ``now`` when omitted.
        now: Reference time for computed statuses
        is_na: Region flag for every tournament; detected per tournament
            when omitted

    Raises:
        ValueError: If neither ``status`` nor ``now`` is given
    """
    if status is None and now is None:
        raise ValueError("annotate_tournaments needs either a status or a reference time")

    annotated = []
    for payload in payloads:
        t_status = status or compute_event_status(payload.get("begin_at"), payload.get("end_at"), now)
        t_is_na = is_na_tournament(payload) if is_na is None else is_na
        annotated.append(AnnotatedTournament.from_payload(payload, t_status, t_is_na))
    return annotated


@dataclass
class SeriesGroupEvent:
    """One row of the events list: a series, or a standalone tournament."""
    id: str
    name: str
    tier: str
    league: str
    league_image_url: Optional[str]
    start_date: str
    end_date: Optional[str]
    status: EventStatus
    url: Optional[str]
    is_na: bool
    tournament_count: int = 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _single_event(t: AnnotatedTournament) -> SeriesGroupEvent:
    if t.serie_name:
        name = f"{t.league_name}: {t.serie_name} - {t.name}"
    else:
        name = f"{t.league_name} - {t.name}"

    return SeriesGroupEvent(
        id=f"ps-{t.id}",
        name=name,
        tier=format_tier(t.tier),
        league=t.league_name,
        league_image_url=t.league_image_url,
        start_date=t.begin_at or "",
        end_date=t.end_at,
        status=t.status,
        url=t.league_url,
        is_na=t.is_na,
    )


def _series_event(group: list[AnnotatedTournament]) -> SeriesGroupEvent:
    first = group[0]
    name = f"{first.league_name}: {first.serie_name}" if first.serie_name else first.league_name

    # min() keeps the first stage on ties
    best = min(group, key=lambda t: tier_rank(t.tier))
    begins = sorted(t.begin_at for t in group if t.begin_at)
    ends = sorted(t.end_at for t in group if t.end_at)

    return SeriesGroupEvent(
        id=f"ps-serie-{first.serie_id}",
        name=name,
        tier=format_tier(best.tier),
        league=first.league_name,
        league_image_url=first.league_image_url,
        start_date=begins[0] if begins else "",
        end_date=ends[-1] if ends else None,
        status=aggregate_event_status(t.status for t in group),
        url=first.league_url,
        is_na=any(t.is_na for t in group),
        tournament_count=len(group),
    )


def group_by_series(tournaments: Iterable[AnnotatedTournament]) -> list[SeriesGroupEvent]:
    """
    Fold tournaments sharing a series into one event each.

    Groups keep the order in which their first tournament appears.
    """
    groups: dict[str, list[AnnotatedTournament]] = {}
    for t in tournaments:
        key = f"serie-{t.serie_id}" if t.serie_id else f"tour-{t.id}"
        groups.setdefault(key, []).append(t)

    events = [
        _single_event(group[0]) if len(group) == 1 else _series_event(group)
        for group in groups.values()
    ]
    logger.debug("Grouped tournaments into %d events", len(events))
    return events


@dataclass
class SeriesSummary:
    """A series row for the league/pro-events listing."""
    id: int
    name: str
    league_name: str
    league_image_url: Optional[str]
    league_id: Optional[int]
    begin_at: Optional[str]
    end_at: Optional[str]
    year: Optional[int]
    tier: Optional[str]
    status: EventStatus

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _keep_series(
    series: dict[str, Any],
    min_year: int,
    multi_region_leagues: dict[int, list[str]],
) -> bool:
    if (series.get("year") or 0) < min_year:
        return False

    league_id = series.get("league_id") or (series.get("league") or {}).get("id")
    keywords = multi_region_leagues.get(league_id)
    if keywords:
        name = (series.get("full_name") or series.get("name") or "").lower()
        return any(keyword.lower() in name for keyword in keywords)
    return True


def summarize_series(
    series_payloads: Iterable[dict[str, Any]],
    now: datetime,
    min_year: Optional[int] = None,
    multi_region_leagues: Optional[dict[int, list[str]]] = None,
) -> list[SeriesSummary]:
    """
    Filter and summarize PandaScore series for the events listing.

    Series older than ``min_year`` are dropped, as are series of
    multi-region leagues whose name lacks one of the league's region
    keywords. The rest are sorted by begin date, newest first.

    Args:
        series_payloads: Series from ``/csgo/series``
        now: Reference time for the computed status
        min_year: Defaults to ``settings.series_min_year``
        multi_region_leagues: League ID -> keywords; defaults to
            ``settings.multi_region_leagues``
    """
    if min_year is None:
        min_year = settings.series_min_year
    if multi_region_leagues is None:
        multi_region_leagues = settings.multi_region_leagues
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    kept = [s for s in series_payloads if _keep_series(s, min_year, multi_region_leagues)]
    kept.sort(key=lambda s: s.get("begin_at") or "", reverse=True)

    summaries = []
    for s in kept:
        league = s.get("league") or {}
        year = s.get("year")
        fallback_name = f"{league.get('name') or ''} {year or ''}".strip()
        summaries.append(
            SeriesSummary(
                id=s.get("id"),
                name=s.get("full_name") or s.get("name") or fallback_name,
                league_name=league.get("name") or "",
                league_image_url=league.get("image_url"),
                league_id=league.get("id"),
                begin_at=s.get("begin_at"),
                end_at=s.get("end_at"),
                year=year,
                tier=s.get("tier"),
                status=compute_event_status(s.get("begin_at"), s.get("end_at"), now),
            )
        )
    return summaries
