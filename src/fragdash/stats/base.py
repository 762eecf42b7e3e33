"""
Base class for source-specific stat normalizers.

Each upstream provider gets its own subclass so its parsing quirks stay
isolated:
- FaceitStatsNormalizer: rounds -> teams -> players, string-valued stats
- GridStatsNormalizer: games -> teams -> players, typed numeric fields
- PandaScoreStatsNormalizer: flat per-player-per-game rows joined to games

Every subclass produces NormalizedMatchStats (or None when the payload has
no played maps) and declares exactly the columns it fills.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from fragdash.stats.columns import BASE_COLUMNS
from fragdash.stats.models import NormalizedMapStats, NormalizedMatchStats, StatSource

logger = logging.getLogger(__name__)


class BaseStatsNormalizer(ABC):
    """
    Abstract base class for all match stat normalizers.

    Subclasses set ``source`` and ``columns`` and implement ``normalize``.
    ``columns`` lists the stat keys the source always provides; a subclass
    may extend it per payload (see PandaScoreStatsNormalizer).
    """

    source: StatSource
    columns: tuple[str, ...] = BASE_COLUMNS

    @abstractmethod
    def normalize(self, *args: Any, **kwargs: Any) -> Optional[NormalizedMatchStats]:
        """
        Translate a raw provider payload into NormalizedMatchStats.

        Returns:
            NormalizedMatchStats, or None if the payload has no maps
        """
        pass

    def _build(
        self,
        team1_name: str,
        team2_name: str,
        maps: list[NormalizedMapStats],
        available_columns: Optional[list[str]] = None,
        team1_image_url: Optional[str] = None,
        team2_image_url: Optional[str] = None,
    ) -> Optional[NormalizedMatchStats]:
        """Assemble the result, or None when no maps survived parsing."""
        if not maps:
            logger.debug("No maps in %s payload for %s vs %s", self.source, team1_name, team2_name)
            return None

        return NormalizedMatchStats(
            source=self.source,
            team1_name=team1_name,
            team2_name=team2_name,
            team1_image_url=team1_image_url,
            team2_image_url=team2_image_url,
            maps=maps,
            available_columns=list(available_columns or self.columns),
            has_side_splits=False,
        )
