"""Stat column keys and their display definitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

KILLS = "kills"
DEATHS = "deaths"
ASSISTS = "assists"
KD_DIFF = "kd_diff"
KD_RATIO = "kd_ratio"
HS_PERCENT = "hs_percent"
KR_RATIO = "kr_ratio"
MVPS = "mvps"
ADR = "adr"
KAST = "kast"
RATING = "rating"

# Columns every source can fill
BASE_COLUMNS: tuple[str, ...] = (KILLS, DEATHS, ASSISTS, KD_DIFF, KD_RATIO)


def _signed(value: Optional[float]) -> str:
    n = value or 0
    return f"+{n}" if n > 0 else str(n)


@dataclass(frozen=True)
class StatColumn:
    key: str
    label: str
    short_label: str
    formatter: Callable[[Optional[float]], str]
    sort_descending: bool = False

    def format(self, value: Optional[float]) -> str:
        return self.formatter(value)


STAT_COLUMNS: dict[str, StatColumn] = {
    KILLS: StatColumn(KILLS, "Kills", "K", lambda v: str(v or 0), sort_descending=True),
    DEATHS: StatColumn(DEATHS, "Deaths", "D", lambda v: str(v or 0)),
    ASSISTS: StatColumn(ASSISTS, "Assists", "A", lambda v: str(v or 0)),
    KD_DIFF: StatColumn(KD_DIFF, "K-D", "+/-", _signed, sort_descending=True),
    KD_RATIO: StatColumn(KD_RATIO, "K/D", "K/D", lambda v: f"{v or 0:.2f}", sort_descending=True),
    HS_PERCENT: StatColumn(HS_PERCENT, "HS%", "HS%", lambda v: f"{v or 0:.1f}%"),
    KR_RATIO: StatColumn(KR_RATIO, "K/R", "K/R", lambda v: f"{v or 0:.2f}", sort_descending=True),
    MVPS: StatColumn(MVPS, "MVPs", "MVP", lambda v: str(v or 0), sort_descending=True),
    ADR: StatColumn(ADR, "ADR", "ADR", lambda v: f"{v or 0:.1f}", sort_descending=True),
    KAST: StatColumn(KAST, "KAST", "KAST", lambda v: f"{v or 0:.1f}%", sort_descending=True),
    RATING: StatColumn(RATING, "Rating", "Rating", lambda v: f"{v or 0:.2f}", sort_descending=True),
}


def get_columns(keys: list[str]) -> list[StatColumn]:
    """Column definitions for the given keys, skipping unknown keys."""
    return [STAT_COLUMNS[key] for key in keys if key in STAT_COLUMNS]
