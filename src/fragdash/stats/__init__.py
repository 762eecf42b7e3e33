"""
Match stat normalization.

Each upstream provider has its own normalizer class producing the shared
NormalizedMatchStats shape:
- FaceitStatsNormalizer: FACEIT Data API match stats
- GridStatsNormalizer: Grid.gg series state
- PandaScoreStatsNormalizer: PandaScore per-player per-game stats

The aggregate module builds "All Maps" rows and table views on top.
"""

from fragdash.stats.aggregate import (
    PlayerTotals,
    StatsTableView,
    aggregate_player_stats,
    build_stats_view,
    compute_player_totals,
    get_sort_column,
    sort_players,
)
from fragdash.stats.base import BaseStatsNormalizer
from fragdash.stats.columns import STAT_COLUMNS, StatColumn, get_columns
from fragdash.stats.faceit import FaceitStatsNormalizer, normalize_faceit_stats
from fragdash.stats.grid import GridStatsNormalizer, normalize_grid_stats
from fragdash.stats.models import NormalizedMapStats, NormalizedMatchStats, NormalizedPlayerStat
from fragdash.stats.pandascore import PandaScoreStatsNormalizer, normalize_pandascore_stats

__all__ = [
    "BaseStatsNormalizer",
    "FaceitStatsNormalizer",
    "GridStatsNormalizer",
    "PandaScoreStatsNormalizer",
    "normalize_faceit_stats",
    "normalize_grid_stats",
    "normalize_pandascore_stats",
    "NormalizedPlayerStat",
    "NormalizedMapStats",
    "NormalizedMatchStats",
    "STAT_COLUMNS",
    "StatColumn",
    "get_columns",
    "aggregate_player_stats",
    "get_sort_column",
    "sort_players",
    "StatsTableView",
    "build_stats_view",
    "PlayerTotals",
    "compute_player_totals",
]
