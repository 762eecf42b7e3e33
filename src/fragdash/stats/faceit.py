"""
FACEIT match stats normalizer.

Input is the FACEIT Data API ``/matches/{id}/stats`` response:

    {"rounds": [
        {"round_stats": {"Map": "de_mirage", ...},
         "teams": [
            {"team_id": "...", "team_stats": {"Final Score": "13", ...},
             "players": [{"player_id": "...", "nickname": "...",
                          "player_stats": {"Kills": "15", ...}}]},
            ...]},
        ...]}

Each "round" is one map. Stat values are strings (sometimes numbers).
"""

from __future__ import annotations

from typing import Any, Optional

from fragdash.stats.base import BaseStatsNormalizer
from fragdash.stats.columns import BASE_COLUMNS, HS_PERCENT, KR_RATIO, MVPS
from fragdash.stats.models import NormalizedMapStats, NormalizedMatchStats, NormalizedPlayerStat
from fragdash.stats.parsers import (
    hs_percent,
    parse_count,
    parse_count_opt,
    parse_num,
    parse_num_opt,
)


def _team_score(team_stats: dict[str, Any]) -> int:
    # Older matches use "FinalScore"
    value = team_stats.get("Final Score")
    if value is None:
        value = team_stats.get("FinalScore")
    return parse_count(value)


class FaceitStatsNormalizer(BaseStatsNormalizer):
    """Normalizer for FACEIT championship match stats."""

    source = "faceit"
    columns = (*BASE_COLUMNS, HS_PERCENT, KR_RATIO, MVPS)

    def normalize(
        self,
        stats: Optional[dict[str, Any]],
        team1_name: str,
        team2_name: str,
    ) -> Optional[NormalizedMatchStats]:
        """
        Normalize a FACEIT stats response.

        Args:
            stats: Raw ``/matches/{id}/stats`` response
            team1_name: Faction 1 name from the match details
            team2_name: Faction 2 name from the match details
        """
        rounds = (stats or {}).get("rounds") or []
        maps = [self._normalize_map(rnd, i + 1) for i, rnd in enumerate(rounds)]
        return self._build(team1_name, team2_name, maps)

    def _normalize_map(self, rnd: dict[str, Any], map_number: int) -> NormalizedMapStats:
        teams = rnd.get("teams") or []
        t1 = teams[0] if len(teams) > 0 else {}
        t2 = teams[1] if len(teams) > 1 else {}
        t1_stats = t1.get("team_stats") or {}
        t2_stats = t2.get("team_stats") or {}

        team1_score = _team_score(t1_stats)
        team2_score = _team_score(t2_stats)

        return NormalizedMapStats(
            map_name=(rnd.get("round_stats") or {}).get("Map") or f"Map {map_number}",
            map_number=map_number,
            team1_score=team1_score,
            team2_score=team2_score,
            team1_won=team1_score > team2_score,
            team1_first_half=parse_count_opt(t1_stats.get("First Half Score")),
            team1_second_half=parse_count_opt(t1_stats.get("Second Half Score")),
            team2_first_half=parse_count_opt(t2_stats.get("First Half Score")),
            team2_second_half=parse_count_opt(t2_stats.get("Second Half Score")),
            team1_overtime=parse_count_opt(t1_stats.get("Overtime score")),
            team2_overtime=parse_count_opt(t2_stats.get("Overtime score")),
            team1_players=[self._normalize_player(p) for p in t1.get("players") or []],
            team2_players=[self._normalize_player(p) for p in t2.get("players") or []],
        )

    def _normalize_player(self, player: dict[str, Any]) -> NormalizedPlayerStat:
        stats = player.get("player_stats") or {}
        player_id = str(player.get("player_id") or "")
        kills = parse_count(stats.get("Kills"))

        headshot_pct = parse_num_opt(stats.get("Headshots %"))
        if headshot_pct is None and stats.get("Headshots") is not None:
            headshot_pct = hs_percent(parse_num(stats.get("Headshots")), kills)

        return NormalizedPlayerStat.from_counts(
            player_id=player_id,
            nickname=player.get("nickname") or "",
            kills=kills,
            deaths=parse_count(stats.get("Deaths")),
            assists=parse_count(stats.get("Assists")),
            faceit_id=player_id or None,
            hs_percent=headshot_pct,
            kr_ratio=parse_num_opt(stats.get("K/R Ratio")),
            mvps=parse_count_opt(stats.get("MVPs")),
            triple_kills=parse_count_opt(stats.get("Triple Kills")),
            quadro_kills=parse_count_opt(stats.get("Quadro Kills")),
            penta_kills=parse_count_opt(stats.get("Penta Kills")),
        )


def normalize_faceit_stats(
    stats: Optional[dict[str, Any]],
    team1_name: str,
    team2_name: str,
) -> Optional[NormalizedMatchStats]:
    """Normalize a FACEIT ``/matches/{id}/stats`` response."""
    return FaceitStatsNormalizer().normalize(stats, team1_name, team2_name)
