"""
Name matching for teams and players.

Provider payloads are joined by name in a few places (Grid.gg games that
reorder teams, player totals looked up by nickname). These helpers make
those joins insensitive to case, accents and spacing.
"""

from fragdash.players.aliases import find_by_name, names_match, normalize_name

__all__ = [
    "find_by_name",
    "names_match",
    "normalize_name",
]
