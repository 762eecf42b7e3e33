"""
Normalized match stat records shared by every data source.

FACEIT, Grid.gg and PandaScore each describe a played match differently.
The source normalizers translate all three into these dataclasses so the
stats table only has to understand one shape.

Optional fields are None when a source does not provide them, and
``to_dict()`` leaves them out, so a consumer can tell "not provided" apart
from zero.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Literal, Optional

from fragdash.stats.parsers import kd_ratio

StatSource = Literal["faceit", "hltv", "grid", "pandascore"]
TeamKey = Literal["team1", "team2"]
Side = Literal["both", "ct", "t"]


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class NormalizedPlayerStat:
    """
    One player's line on one map (or across maps, once aggregated).

    Attributes:
        player_id: Source player ID (string for every source)
        nickname: Display name
        kills, deaths, assists: Raw counts
        kd_diff: kills - deaths
        kd_ratio: kills / deaths, or kills when deaths is 0
        faceit_id: FACEIT player ID for profile linking
        hs_percent: Headshot kills as a percentage of kills (0-100)
        kr_ratio: Kills per round
        mvps: Round MVP awards
        adr: Average damage per round
        kast: Kill/Assist/Survive/Trade percentage (0-100)
        rating: HLTV-style rating
        triple_kills, quadro_kills, penta_kills: Multi-kill rounds
    """
    player_id: str
    nickname: str
    kills: int
    deaths: int
    assists: int
    kd_diff: int
    kd_ratio: float
    faceit_id: Optional[str] = None
    hs_percent: Optional[float] = None
    kr_ratio: Optional[float] = None
    mvps: Optional[int] = None
    adr: Optional[float] = None
    kast: Optional[float] = None
    rating: Optional[float] = None
    triple_kills: Optional[int] = None
    quadro_kills: Optional[int] = None
    penta_kills: Optional[int] = None

    @classmethod
    def from_counts(
        cls,
        player_id: str,
        nickname: str,
        kills: int,
        deaths: int,
        assists: int,
        **optional: Any,
    ) -> "NormalizedPlayerStat":
        """Build a record, deriving kd_diff and kd_ratio from the counts."""
        return cls(
            player_id=player_id,
            nickname=nickname,
            kills=kills,
            deaths=deaths,
            assists=assists,
            kd_diff=kills - deaths,
            kd_ratio=kd_ratio(kills, deaths),
            **optional,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NormalizedPlayerStat":
        known = {f.name for f in fields(cls)}
        kills = int(data.get("kills") or 0)
        deaths = int(data.get("deaths") or 0)
        optional = {
            key: value
            for key, value in data.items()
            if key in known and key not in {"player_id", "nickname", "kills", "deaths", "assists", "kd_diff", "kd_ratio"}
        }
        return cls.from_counts(
            player_id=str(data.get("player_id", "")),
            nickname=data.get("nickname") or "",
            kills=kills,
            deaths=deaths,
            assists=int(data.get("assists") or 0),
            **optional,
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(asdict(self))


def _players_from_dicts(rows: Optional[list[dict[str, Any]]]) -> Optional[list[NormalizedPlayerStat]]:
    if rows is None:
        return None
    return [NormalizedPlayerStat.from_dict(row) for row in rows]


@dataclass
class NormalizedMapStats:
    """
    One played map.

    Half and overtime scores are None when the source does not report them.
    The *_ct / *_t player lists are only filled by sources with side splits.
    """
    map_name: str
    map_number: int
    team1_score: int
    team2_score: int
    team1_won: bool
    team1_players: list[NormalizedPlayerStat] = field(default_factory=list)
    team2_players: list[NormalizedPlayerStat] = field(default_factory=list)
    team1_first_half: Optional[int] = None
    team1_second_half: Optional[int] = None
    team2_first_half: Optional[int] = None
    team2_second_half: Optional[int] = None
    team1_overtime: Optional[int] = None
    team2_overtime: Optional[int] = None
    team1_players_ct: Optional[list[NormalizedPlayerStat]] = None
    team1_players_t: Optional[list[NormalizedPlayerStat]] = None
    team2_players_ct: Optional[list[NormalizedPlayerStat]] = None
    team2_players_t: Optional[list[NormalizedPlayerStat]] = None

    def players_for(self, team: TeamKey, side: Side = "both") -> Optional[list[NormalizedPlayerStat]]:
        """Player rows of one team, optionally restricted to a starting side."""
        if side == "both":
            return getattr(self, f"{team}_players")
        return getattr(self, f"{team}_players_{side}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NormalizedMapStats":
        return cls(
            map_name=data.get("map_name") or "",
            map_number=int(data.get("map_number") or 0),
            team1_score=int(data.get("team1_score") or 0),
            team2_score=int(data.get("team2_score") or 0),
            team1_won=bool(data.get("team1_won")),
            team1_players=_players_from_dicts(data.get("team1_players")) or [],
            team2_players=_players_from_dicts(data.get("team2_players")) or [],
            team1_first_half=data.get("team1_first_half"),
            team1_second_half=data.get("team1_second_half"),
            team2_first_half=data.get("team2_first_half"),
            team2_second_half=data.get("team2_second_half"),
            team1_overtime=data.get("team1_overtime"),
            team2_overtime=data.get("team2_overtime"),
            team1_players_ct=_players_from_dicts(data.get("team1_players_ct")),
            team1_players_t=_players_from_dicts(data.get("team1_players_t")),
            team2_players_ct=_players_from_dicts(data.get("team2_players_ct")),
            team2_players_t=_players_from_dicts(data.get("team2_players_t")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, list):
                value = [row.to_dict() for row in value]
            data[f.name] = value
        return data


@dataclass
class NormalizedMatchStats:
    """
    A whole match from one source.

    Attributes:
        source: Which provider the stats came from
        team1_name, team2_name: Team names in display order
        maps: Played maps in order
        available_columns: Stat columns this source actually fills
        has_side_splits: Whether CT/T player splits are present
        team1_image_url, team2_image_url: Optional team logos
    """
    source: StatSource
    team1_name: str
    team2_name: str
    maps: list[NormalizedMapStats]
    available_columns: list[str]
    has_side_splits: bool = False
    team1_image_url: Optional[str] = None
    team2_image_url: Optional[str] = None

    @property
    def maps_won(self) -> tuple[int, int]:
        """(team1, team2) map wins."""
        team1 = sum(1 for m in self.maps if m.team1_won)
        return team1, len(self.maps) - team1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NormalizedMatchStats":
        return cls(
            source=data.get("source") or "faceit",
            team1_name=data.get("team1_name") or "",
            team2_name=data.get("team2_name") or "",
            maps=[NormalizedMapStats.from_dict(m) for m in data.get("maps") or []],
            available_columns=list(data.get("available_columns") or []),
            has_side_splits=bool(data.get("has_side_splits")),
            team1_image_url=data.get("team1_image_url"),
            team2_image_url=data.get("team2_image_url"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "source": self.source,
            "team1_name": self.team1_name,
            "team2_name": self.team2_name,
            "team1_image_url": self.team1_image_url,
            "team2_image_url": self.team2_image_url,
            "maps": [m.to_dict() for m in self.maps],
            "available_columns": list(self.available_columns),
            "has_side_splits": self.has_side_splits,
        })
