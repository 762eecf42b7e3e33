"""
Grid.gg series-state normalizer.

Input is the ``seriesState`` object from Grid.gg's live-data-feed GraphQL
API:

    {"id": "...", "finished": true, "format": "best-of-3",
     "games": [
        {"id": "...", "sequenceNumber": 1, "finished": true,
         "map": {"name": "de_nuke"},
         "teams": [
            {"id": "...", "name": "...", "won": true, "score": 13,
             "players": [{"id": "...", "name": "...", "kills": 21,
                          "deaths": 14, "killAssistsGiven": 4,
                          "headshots": 11, "damageDealt": 2480}]},
            ...]},
        ...]}

Grid.gg does not keep team order stable between games, so teams are
matched by name against the first game's order.
"""

from __future__ import annotations

from typing import Any, Optional

from fragdash.players.aliases import find_by_name
from fragdash.stats.base import BaseStatsNormalizer
from fragdash.stats.columns import ADR, BASE_COLUMNS, HS_PERCENT
from fragdash.stats.models import NormalizedMapStats, NormalizedMatchStats, NormalizedPlayerStat
from fragdash.stats.parsers import format_map_name, hs_percent, parse_count, parse_num


def _is_played(game: dict[str, Any]) -> bool:
    """Finished games, plus a live game once a team has scored."""
    if game.get("finished"):
        return True
    return any(parse_count(team.get("score")) > 0 for team in game.get("teams") or [])


class GridStatsNormalizer(BaseStatsNormalizer):
    """Normalizer for Grid.gg series states."""

    source = "grid"
    columns = (*BASE_COLUMNS, HS_PERCENT, ADR)

    def normalize(
        self,
        series_state: Optional[dict[str, Any]],
        team1_image_url: Optional[str] = None,
        team2_image_url: Optional[str] = None,
    ) -> Optional[NormalizedMatchStats]:
        """
        Normalize a Grid.gg series state.

        Args:
            series_state: Raw seriesState object
            team1_image_url: Optional team 1 logo (Grid.gg has none; PandaScore does)
            team2_image_url: Optional team 2 logo
        """
        games = sorted(
            (g for g in (series_state or {}).get("games") or [] if _is_played(g)),
            key=lambda g: parse_count(g.get("sequenceNumber")),
        )
        if not games:
            return None

        first_teams = games[0].get("teams") or []
        if len(first_teams) < 2:
            return None

        team1_name = first_teams[0].get("name") or ""
        team2_name = first_teams[1].get("name") or ""

        maps = [
            self._normalize_map(game, i + 1, team1_name, team2_name)
            for i, game in enumerate(games)
        ]
        return self._build(
            team1_name,
            team2_name,
            maps,
            team1_image_url=team1_image_url,
            team2_image_url=team2_image_url,
        )

    def _normalize_map(
        self,
        game: dict[str, Any],
        map_number: int,
        team1_name: str,
        team2_name: str,
    ) -> NormalizedMapStats:
        teams = game.get("teams") or []
        t1 = find_by_name(teams, team1_name) or (teams[0] if len(teams) > 0 else {})
        t2 = find_by_name(teams, team2_name) or (teams[1] if len(teams) > 1 else {})

        team1_score = parse_count(t1.get("score"))
        team2_score = parse_count(t2.get("score"))
        total_rounds = team1_score + team2_score

        return NormalizedMapStats(
            map_name=format_map_name((game.get("map") or {}).get("name"), fallback=f"Map {map_number}"),
            map_number=map_number,
            team1_score=team1_score,
            team2_score=team2_score,
            team1_won=bool(t1.get("won")),
            team1_players=[self._normalize_player(p, total_rounds) for p in t1.get("players") or []],
            team2_players=[self._normalize_player(p, total_rounds) for p in t2.get("players") or []],
        )

    def _normalize_player(self, player: dict[str, Any], total_rounds: int) -> NormalizedPlayerStat:
        kills = parse_count(player.get("kills"))
        damage = parse_num(player.get("damageDealt"))

        return NormalizedPlayerStat.from_counts(
            player_id=str(player.get("id") or ""),
            nickname=player.get("name") or "",
            kills=kills,
            deaths=parse_count(player.get("deaths")),
            assists=parse_count(player.get("killAssistsGiven")),
            hs_percent=hs_percent(parse_num(player.get("headshots")), kills),
            adr=damage / total_rounds if total_rounds > 0 else 0,
        )


def normalize_grid_stats(
    series_state: Optional[dict[str, Any]],
    team1_image_url: Optional[str] = None,
    team2_image_url: Optional[str] = None,
) -> Optional[NormalizedMatchStats]:
    """Normalize a Grid.gg ``seriesState`` object."""
    return GridStatsNormalizer().normalize(series_state, team1_image_url, team2_image_url)
