"""
Region detection for PandaScore tournaments.

The front page lists every top-tier event plus lower-tier events played in
North America. PandaScore has no region field on tournaments, so the region
is guessed from the tournament, series and league names. South American
events often mention "Americas" too, so a South America match overrides
the NA match.
"""

import re
from typing import Any, Optional

from fragdash.config import settings


def _region_text(tournament: dict[str, Any]) -> str:
    serie = tournament.get("serie") or {}
    league = tournament.get("league") or {}
    parts = [tournament.get("name"), serie.get("full_name"), serie.get("name"), league.get("name")]
    return " ".join(part for part in parts if part)


def is_na_tournament(
    tournament: dict[str, Any],
    na_pattern: Optional[str] = None,
    sa_pattern: Optional[str] = None,
) -> bool:
    """
    Return True if a tournament looks North American.

    Patterns default to ``settings.na_region_pattern`` and
    ``settings.sa_region_pattern``.

    Examples:
        >>> is_na_tournament({"name": "Playoffs", "league": {"name": "ESL Challenger League North America"}})
        True
        >>> is_na_tournament({"name": "Americas Qualifier", "serie": {"name": "South America"}})
        False
    """
    text = _region_text(tournament)
    if re.search(sa_pattern or settings.sa_region_pattern, text, re.IGNORECASE):
        return False
    return re.search(na_pattern or settings.na_region_pattern, text, re.IGNORECASE) is not None
