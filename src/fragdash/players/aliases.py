"""
Team and player name normalization.

The same team or player shows up under slightly different spellings across
providers and even across games of one Grid.gg series:
- Case: "NAVI" vs "Navi"
- Accents: "Vitality" vs "Vitalíty" in a hand-edited feed
- Spacing: "Team  Liquid " vs "Team Liquid"

Matching is exact after normalization: a name either normalizes to the same
string or it is a different team.
"""

import unicodedata
from typing import Iterable, Optional, TypeVar

T = TypeVar("T")


def normalize_name(name: Optional[str]) -> str:
    """
    Normalize a team or player name for comparison.

    Normalization steps:
    1. Convert to lowercase
    2. Remove accents (é → e)
    3. Collapse whitespace

    Examples:
        >>> normalize_name("  Team  Liquid ")
        'team liquid'
        >>> normalize_name("Vitalíty")
        'vitality'
        >>> normalize_name(None)
        ''
    """
    if not name:
        return ""

    normalized = name.lower().strip()

    # NFD splits accented characters, then drop the combining marks (Mn)
    normalized = unicodedata.normalize("NFD", normalized)
    normalized = "".join(
        char for char in normalized
        if unicodedata.category(char) != "Mn"
    )

    return " ".join(normalized.split())


def names_match(name1: Optional[str], name2: Optional[str]) -> bool:
    """True if both names are non-empty and normalize to the same string."""
    n1 = normalize_name(name1)
    return bool(n1) and n1 == normalize_name(name2)


def find_by_name(items: Iterable[T], name: Optional[str], attr: str = "name") -> Optional[T]:
    """
    Return the first item whose name matches ``name``.

    Items may be dicts (looked up by key) or objects (looked up by attribute).
    """
    for item in items:
        value = item.get(attr) if isinstance(item, dict) else getattr(item, attr, None)
        if names_match(value, name):
            return item
    return None
