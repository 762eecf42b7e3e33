"""
Value parsing helpers for upstream stat payloads.

FACEIT sends most numbers as strings ("15", "46.7"), Grid.gg and PandaScore
send numbers but may send null. A single corrupt field should never blank a
player's row, so required values default to 0 and optional values to None.

Strings are read up to the end of their leading number, so "46.7%" is 46.7.
NaN and infinities are treated as missing.
"""

import math
import re
from typing import Optional, Union

RawNumber = Union[str, int, float, None]

_MAP_PREFIX = re.compile(r"^de_", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_num(value: RawNumber) -> float:
    """
    Parse a string-or-number stat value, defaulting to 0.

    Examples:
        >>> parse_num("15")
        15.0
        >>> parse_num(None)
        0
        >>> parse_num("n/a")
        0
    """
    parsed = parse_num_opt(value)
    return 0 if parsed is None else parsed


def parse_num_opt(value: RawNumber) -> Optional[float]:
    """
    Parse an optional stat value; None when missing or not numeric.

    Examples:
        >>> parse_num_opt("46.7%")
        46.7
        >>> parse_num_opt("NaN") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    match = _LEADING_NUMBER.match(str(value).strip())
    if not match:
        return None
    parsed = float(match.group())
    return parsed if math.isfinite(parsed) else None


def parse_count(value: RawNumber) -> int:
    """Parse a counting stat (kills, deaths, ...) to an int, defaulting to 0."""
    return int(parse_num(value))


def parse_count_opt(value: RawNumber) -> Optional[int]:
    parsed = parse_num_opt(value)
    return None if parsed is None else int(parsed)


def kd_ratio(kills: float, deaths: float) -> float:
    """kills / deaths, or kills itself for a player who never died."""
    return kills / deaths if deaths > 0 else kills


def hs_percent(headshots: float, kills: float) -> float:
    """Headshot kills as a percentage of kills (0 when there are no kills)."""
    return headshots / kills * 100 if kills > 0 else 0


def format_map_name(raw: Optional[str], fallback: str = "Unknown") -> str:
    """
    Turn an engine map name into a display name.

    Examples:
        >>> format_map_name("de_mirage")
        'Mirage'
        >>> format_map_name("Nuke")
        'Nuke'
        >>> format_map_name(None)
        'Unknown'
    """
    if not raw:
        return fallback
    stripped = _MAP_PREFIX.sub("", raw)
    return stripped[:1].upper() + stripped[1:]
