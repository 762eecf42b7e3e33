"""
Cross-map aggregation and the stats table view.

The match page shows an "All Maps" tab next to one tab per map. The overall
row for a player is rebuilt from the per-map rows:
- Counts (kills, deaths, assists, MVPs, multi-kills) are summed
- K-D and K/D are recomputed from the summed counts
- HS% is weighted by each map's kills
- K/R, ADR, KAST and rating are averaged over the maps that report them

The averaged metrics are not round-weighted, so a 13-2 map counts as much
as a 16-14 map.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from fragdash.players.aliases import names_match
from fragdash.stats.columns import KILLS, RATING
from fragdash.stats.models import (
    NormalizedMapStats,
    NormalizedMatchStats,
    NormalizedPlayerStat,
    Side,
    TeamKey,
)
from fragdash.stats.parsers import hs_percent, kd_ratio, parse_count, parse_num

logger = logging.getLogger(__name__)

OVERALL = "overall"

SUMMED_FIELDS: tuple[str, ...] = ("mvps", "triple_kills", "quadro_kills", "penta_kills")
AVERAGED_FIELDS: tuple[str, ...] = ("kr_ratio", "adr", "kast", "rating")


def _sum_optional(rows: list[NormalizedPlayerStat], attr: str) -> Optional[int]:
    values = [getattr(row, attr) for row in rows if getattr(row, attr) is not None]
    return sum(values) if values else None


def _mean_optional(rows: list[NormalizedPlayerStat], attr: str) -> Optional[float]:
    values = [getattr(row, attr) for row in rows if getattr(row, attr) is not None]
    return sum(values) / len(values) if values else None


def _weighted_hs_percent(rows: list[NormalizedPlayerStat]) -> Optional[float]:
    reporting = [row for row in rows if row.hs_percent is not None]
    if not reporting:
        return None
    kills = sum(row.kills for row in reporting)
    if kills == 0:
        return 0
    return sum(row.kills * row.hs_percent for row in reporting) / kills


def _merge_rows(rows: list[NormalizedPlayerStat]) -> NormalizedPlayerStat:
    """Combine one player's per-map rows into a single overall row."""
    first = rows[0]
    optional: dict[str, Any] = {
        "faceit_id": first.faceit_id,
        "hs_percent": _weighted_hs_percent(rows),
    }
    for attr in SUMMED_FIELDS:
        optional[attr] = _sum_optional(rows, attr)
    for attr in AVERAGED_FIELDS:
        optional[attr] = _mean_optional(rows, attr)

    return NormalizedPlayerStat.from_counts(
        player_id=first.player_id,
        nickname=first.nickname,
        kills=sum(row.kills for row in rows),
        deaths=sum(row.deaths for row in rows),
        assists=sum(row.assists for row in rows),
        **optional,
    )


def aggregate_player_stats(
    maps: Iterable[NormalizedMapStats],
    team: TeamKey,
    side: Side = "both",
) -> list[NormalizedPlayerStat]:
    """
    Merge one team's player rows across maps into overall rows.

    Players are keyed by ``player_id`` and returned in first-seen order.
    Maps without rows for the requested side are skipped.

    Args:
        maps: Maps to aggregate
        team: "team1" or "team2"
        side: "both", or "ct"/"t" to use the side-split lists
    """
    by_player: dict[str, list[NormalizedPlayerStat]] = {}
    for map_stats in maps:
        for row in map_stats.players_for(team, side) or []:
            by_player.setdefault(row.player_id, []).append(row)

    return [_merge_rows(rows) for rows in by_player.values()]


def get_sort_column(available_columns: Iterable[str]) -> str:
    """Rating when the source provides it, otherwise kills."""
    return RATING if RATING in set(available_columns) else KILLS


def sort_players(players: Iterable[NormalizedPlayerStat], column: str) -> list[NormalizedPlayerStat]:
    """Sort descending by ``column``; missing values count as 0."""
    return sorted(players, key=lambda p: getattr(p, column, None) or 0, reverse=True)


@dataclass
class StatsTableView:
    """
    Rows for one tab of the match stats table.

    Attributes:
        selected_map: "overall" or the 0-based map index
        side: Side actually shown (falls back to "both")
        sort_column: Column the rows are sorted by
        team1_players, team2_players: Sorted rows per team
        team1_maps_won, team2_maps_won: Tally for the "All Maps (x - y)" tab
    """
    selected_map: Union[str, int]
    side: Side
    sort_column: str
    available_columns: list[str]
    team1_players: list[NormalizedPlayerStat] = field(default_factory=list)
    team2_players: list[NormalizedPlayerStat] = field(default_factory=list)
    team1_maps_won: int = 0
    team2_maps_won: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected_map": self.selected_map,
            "side": self.side,
            "sort_column": self.sort_column,
            "available_columns": list(self.available_columns),
            "team1_players": [p.to_dict() for p in self.team1_players],
            "team2_players": [p.to_dict() for p in self.team2_players],
            "team1_maps_won": self.team1_maps_won,
            "team2_maps_won": self.team2_maps_won,
        }


def _map_rows(map_stats: NormalizedMapStats, team: TeamKey, side: Side) -> list[NormalizedPlayerStat]:
    if side != "both":
        rows = map_stats.players_for(team, side)
        if rows is not None:
            return rows
    return map_stats.players_for(team)


def build_stats_view(
    stats: NormalizedMatchStats,
    selected_map: Union[str, int] = OVERALL,
    side: Side = "both",
) -> StatsTableView:
    """
    Select and sort the rows for one tab of the stats table.

    "overall" aggregates every map. Side filtering there is only applied
    when the source has side splits and at least one map carries them.
    An integer selects a single map; an out-of-range index yields empty
    rows.
    """
    sort_column = get_sort_column(stats.available_columns)
    team1_won, team2_won = stats.maps_won

    if selected_map == OVERALL:
        has_sides = stats.has_side_splits and any(m.team1_players_ct is not None for m in stats.maps)
        effective_side: Side = side if has_sides else "both"
        team1 = aggregate_player_stats(stats.maps, "team1", effective_side)
        team2 = aggregate_player_stats(stats.maps, "team2", effective_side)
    elif isinstance(selected_map, int) and 0 <= selected_map < len(stats.maps):
        map_stats = stats.maps[selected_map]
        effective_side = side
        team1 = _map_rows(map_stats, "team1", side)
        team2 = _map_rows(map_stats, "team2", side)
    else:
        logger.debug("No map %r in %s stats for %s vs %s", selected_map, stats.source, stats.team1_name, stats.team2_name)
        effective_side = side
        team1, team2 = [], []

    return StatsTableView(
        selected_map=selected_map,
        side=effective_side,
        sort_column=sort_column,
        available_columns=list(stats.available_columns),
        team1_players=sort_players(team1, sort_column),
        team2_players=sort_players(team2, sort_column),
        team1_maps_won=team1_won,
        team2_maps_won=team2_won,
    )


@dataclass
class PlayerTotals:
    """A player's summed stats over every finished Grid.gg game."""
    player_name: str
    total_kills: int = 0
    total_deaths: int = 0
    total_assists: int = 0
    total_headshots: int = 0
    total_damage: float = 0
    total_rounds: int = 0
    maps_played: int = 0

    @property
    def kd_ratio(self) -> float:
        return kd_ratio(self.total_kills, self.total_deaths)

    @property
    def adr(self) -> float:
        return self.total_damage / self.total_rounds if self.total_rounds > 0 else 0

    @property
    def hs_percent(self) -> float:
        return hs_percent(self.total_headshots, self.total_kills)

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_name": self.player_name,
            "total_kills": self.total_kills,
            "total_deaths": self.total_deaths,
            "total_assists": self.total_assists,
            "total_headshots": self.total_headshots,
            "total_damage": self.total_damage,
            "total_rounds": self.total_rounds,
            "maps_played": self.maps_played,
            "kd_ratio": self.kd_ratio,
            "adr": self.adr,
            "hs_percent": self.hs_percent,
        }


def compute_player_totals(
    series_states: Iterable[Optional[dict[str, Any]]],
    player_name: str,
) -> Optional[PlayerTotals]:
    """
    Sum one player's stats over the finished games of several series.

    The player is found by name in each game's rosters. Rounds are the sum
    of both team scores of each game the player appeared in.

    Returns:
        PlayerTotals, or None if the player played no finished game
    """
    totals = PlayerTotals(player_name=player_name)

    for series_state in series_states:
        for game in (series_state or {}).get("games") or []:
            if not game.get("finished"):
                continue
            teams = game.get("teams") or []
            player = next(
                (
                    p
                    for team in teams
                    for p in team.get("players") or []
                    if names_match(p.get("name"), player_name)
                ),
                None,
            )
            if player is None:
                continue

            totals.total_kills += parse_count(player.get("kills"))
            totals.total_deaths += parse_count(player.get("deaths"))
            totals.total_assists += parse_count(player.get("killAssistsGiven"))
            totals.total_headshots += parse_count(player.get("headshots"))
            totals.total_damage += parse_num(player.get("damageDealt"))
            totals.total_rounds += sum(parse_count(team.get("score")) for team in teams)
            totals.maps_played += 1

    if totals.maps_played == 0:
        logger.debug("No finished games found for player %s", player_name)
        return None
    return totals
