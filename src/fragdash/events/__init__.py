"""
PandaScore tournament listings: region detection, status annotation and
grouping of tournament stages into series.
"""

from fragdash.events.regions import is_na_tournament
from fragdash.events.series import (
    TIER_RANK,
    AnnotatedTournament,
    SeriesGroupEvent,
    SeriesSummary,
    annotate_tournaments,
    format_tier,
    group_by_series,
    summarize_series,
    tier_rank,
)

__all__ = [
    "is_na_tournament",
    "TIER_RANK",
    "tier_rank",
    "format_tier",
    "AnnotatedTournament",
    "annotate_tournaments",
    "SeriesGroupEvent",
    "group_by_series",
    "SeriesSummary",
    "summarize_series",
]
