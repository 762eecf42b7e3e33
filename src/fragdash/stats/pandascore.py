"""
PandaScore per-player match stats normalizer.

PandaScore splits a match's stats over two endpoints:
- ``/csgo/matches/{id}/players/stats``: one flat row per player per game
  ({"player_id", "team_id", "game_id", "stats": {"kills", "deaths",
  "assists", "headshots", "adr", "kast", "rating"}})
- ``/csgo/matches/{id}/games``: game order, map names and winners

Rows are joined to games by ``game_id`` and split into teams by
``team_id``. Round scores are not exposed, so a map's score is 1-0 for the
game winner. ADR, KAST and rating depend on the plan tier and are only
declared as columns when some row carries them.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Optional

from fragdash.stats.base import BaseStatsNormalizer
from fragdash.stats.columns import ADR, BASE_COLUMNS, HS_PERCENT, KAST, RATING
from fragdash.stats.models import NormalizedMapStats, NormalizedMatchStats, NormalizedPlayerStat
from fragdash.stats.parsers import format_map_name, hs_percent, parse_count, parse_num, parse_num_opt

logger = logging.getLogger(__name__)

# Optional per-row metrics, in column order
OPTIONAL_METRICS: tuple[str, ...] = (ADR, KAST, RATING)


def _is_played(game: dict[str, Any]) -> bool:
    return bool(game.get("finished")) or game.get("status") == "running"


class PandaScoreStatsNormalizer(BaseStatsNormalizer):
    """Normalizer for PandaScore per-player per-game stats."""

    source = "pandascore"
    columns = (*BASE_COLUMNS, HS_PERCENT)

    def normalize(
        self,
        player_stats: Optional[list[dict[str, Any]]],
        games: Optional[list[dict[str, Any]]],
        team1_name: str,
        team2_name: str,
        team1_id: int,
        team2_id: int,
        team1_image_url: Optional[str] = None,
        team2_image_url: Optional[str] = None,
        player_names: Optional[dict[int, str]] = None,
    ) -> Optional[NormalizedMatchStats]:
        """
        Normalize PandaScore player stats joined against the match's games.

        Args:
            player_stats: Rows from ``/csgo/matches/{id}/players/stats``
            games: Games from ``/csgo/matches/{id}/games``
            team1_name, team2_name: Opponent names from the match
            team1_id, team2_id: PandaScore team IDs, used to split rows by team
            team1_image_url, team2_image_url: Optional logos
            player_names: Player ID -> nickname; rows without one show "Player <id>"
        """
        if not player_stats or not games:
            logger.debug("PandaScore stats missing rows or games for %s vs %s", team1_name, team2_name)
            return None

        names = player_names or {}
        rows_by_game: dict[int, list[dict[str, Any]]] = defaultdict(list)
        for row in player_stats:
            rows_by_game[row.get("game_id")].append(row)

        played = sorted(
            (g for g in games if _is_played(g)),
            key=lambda g: parse_count(g.get("position")),
        )

        maps: list[NormalizedMapStats] = []
        provided: set[str] = set()

        for i, game in enumerate(played):
            rows = rows_by_game.get(game.get("id"), [])
            for row in rows:
                stats = row.get("stats") or {}
                provided.update(metric for metric in OPTIONAL_METRICS if stats.get(metric) is not None)

            winner_id = (game.get("winner") or {}).get("id")
            team1_won = winner_id == team1_id
            team2_won = winner_id == team2_id

            maps.append(
                NormalizedMapStats(
                    map_name=format_map_name((game.get("map") or {}).get("name")),
                    map_number=i + 1,
                    team1_score=1 if team1_won else 0,
                    team2_score=1 if team2_won else 0,
                    team1_won=team1_won,
                    team1_players=[
                        self._normalize_player(row, names)
                        for row in rows if row.get("team_id") == team1_id
                    ],
                    team2_players=[
                        self._normalize_player(row, names)
                        for row in rows if row.get("team_id") == team2_id
                    ],
                )
            )

        available = [*self.columns, *(metric for metric in OPTIONAL_METRICS if metric in provided)]
        return self._build(
            team1_name,
            team2_name,
            maps,
            available_columns=available,
            team1_image_url=team1_image_url,
            team2_image_url=team2_image_url,
        )

    def _normalize_player(self, row: dict[str, Any], names: dict[int, str]) -> NormalizedPlayerStat:
        stats = row.get("stats") or {}
        player_id = row.get("player_id")
        kills = parse_count(stats.get("kills"))

        return NormalizedPlayerStat.from_counts(
            player_id=str(player_id),
            nickname=names.get(player_id) or f"Player {player_id}",
            kills=kills,
            deaths=parse_count(stats.get("deaths")),
            assists=parse_count(stats.get("assists")),
            hs_percent=hs_percent(parse_num(stats.get("headshots")), kills),
            adr=parse_num_opt(stats.get(ADR)),
            kast=parse_num_opt(stats.get(KAST)),
            rating=parse_num_opt(stats.get(RATING)),
        )


def normalize_pandascore_stats(
    player_stats: Optional[list[dict[str, Any]]],
    games: Optional[list[dict[str, Any]]],
    team1_name: str,
    team2_name: str,
    team1_id: int,
    team2_id: int,
    team1_image_url: Optional[str] = None,
    team2_image_url: Optional[str] = None,
    player_names: Optional[dict[int, str]] = None,
) -> Optional[NormalizedMatchStats]:
    """Normalize PandaScore per-player per-game stats for one match."""
    return PandaScoreStatsNormalizer().normalize(
        player_stats,
        games,
        team1_name,
        team2_name,
        team1_id,
        team2_id,
        team1_image_url=team1_image_url,
        team2_image_url=team2_image_url,
        player_names=player_names,
    )
