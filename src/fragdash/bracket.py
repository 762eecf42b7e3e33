"""
Bracket reconstruction from PandaScore bracket listings.

PandaScore returns a tournament bracket as a flat, unordered list of
matches. The only structure is on each match's ``previous_matches``:
back-references saying "the winner (or loser) of match X plays here".

    UB SF 1 ─┐ winner
             ├─► UB Final ─┐ winner
    UB SF 2 ─┘             ├─► Grand Final
               LB Final ───┘ winner
    (losers of UB SF 1/2 feed the LB)

From those links alone this module recovers:
- Depth: rounds removed from the first-round matches (longest feeder chain)
- Side: a match fed by a loser, or by a lower-bracket winner, is lower bracket
- The grand final: the deepest match joining an upper and a lower feeder
- Round labels ("UB Semifinal", "LB Round 2", "Final", ...)

The previous-match links must form a DAG. Depth is computed with Kahn's
algorithm, so a cycle is reported as BracketCycleError rather than looping.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from fragdash.match_statuses import get_status_group

logger = logging.getLogger(__name__)

UPPER_PREFIX = "UB "


class BracketCycleError(ValueError):
    """Raised when previous-match links loop back on themselves."""

    def __init__(self, match_ids: list[int]):
        self.match_ids = match_ids
        super().__init__(
            f"Bracket previous_matches form a cycle; unresolved matches: {match_ids}"
        )


@dataclass(frozen=True)
class PreviousMatch:
    """
    A feeder link into a bracket match.

    Attributes:
        type: 'winner' or 'loser' - which participant of the feeder advances
        match_id: ID of the feeder match
    """
    type: str
    match_id: int

    @property
    def is_loser_feed(self) -> bool:
        return self.type == "loser"


@dataclass
class BracketTeam:
    """An opponent slot that has been filled in."""
    id: int
    name: str
    acronym: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.acronym or self.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "acronym": self.acronym,
            "display_name": self.display_name,
            "image_url": self.image_url,
        }


@dataclass
class BracketMatch:
    """
    One match of a bracket listing.

    Opponents are only populated once the feeder matches resolve, so early in
    a tournament most later-round matches have zero or one opponent.

    Attributes:
        id: PandaScore match ID
        previous_matches: Feeder links, in the order PandaScore lists them
        name: Match name (e.g. "Upper bracket final: NAVI vs FaZe")
        status: 'not_started', 'running', 'finished' or 'canceled'
        number_of_games: Best-of count
        scheduled_at: ISO-8601 scheduled start, if known
        forfeit: Whether the match was decided by forfeit
        winner_id: Winning team ID once finished
        opponents: Up to two teams
        results: Team ID -> maps won
    """
    id: int
    previous_matches: list[PreviousMatch] = field(default_factory=list)
    name: str = ""
    status: str = "not_started"
    number_of_games: int = 1
    scheduled_at: Optional[str] = None
    forfeit: bool = False
    winner_id: Optional[int] = None
    opponents: list[BracketTeam] = field(default_factory=list)
    results: dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "BracketMatch":
        """
        Build a match from one item of PandaScore's bracket endpoint.

        Missing or null collections are read as empty. Opponent entries
        without an ``opponent`` object and feeder links without a
        ``match_id`` are skipped.
        """
        previous = [
            PreviousMatch(type=str(prev.get("type") or "").lower(), match_id=int(prev["match_id"]))
            for prev in payload.get("previous_matches") or []
            if prev and prev.get("match_id") is not None
        ]

        opponents = []
        for slot in payload.get("opponents") or []:
            team = (slot or {}).get("opponent")
            if not team or team.get("id") is None:
                continue
            opponents.append(
                BracketTeam(
                    id=int(team["id"]),
                    name=team.get("name") or "",
                    acronym=team.get("acronym"),
                    image_url=team.get("image_url"),
                )
            )

        results = {
            int(result["team_id"]): int(result.get("score") or 0)
            for result in payload.get("results") or []
            if result and result.get("team_id") is not None
        }

        return cls(
            id=int(payload["id"]),
            previous_matches=previous,
            name=payload.get("name") or "",
            status=payload.get("status") or "not_started",
            number_of_games=int(payload.get("number_of_games") or 1),
            scheduled_at=payload.get("scheduled_at"),
            forfeit=bool(payload.get("forfeit")),
            winner_id=payload.get("winner_id"),
            opponents=opponents,
            results=results,
        )

    @property
    def has_loser_feed(self) -> bool:
        """True if any feeder sends its loser here (structurally lower bracket)."""
        return any(prev.is_loser_feed for prev in self.previous_matches)

    @property
    def is_live(self) -> bool:
        return self.status in get_status_group("live")

    @property
    def is_finished(self) -> bool:
        return self.status in get_status_group("terminal")

    @property
    def best_of_label(self) -> str:
        return f"BO{self.number_of_games}"

    def score_for(self, team_id: int) -> int:
        """Maps won by a team in this match, 0 if the team has no result yet."""
        return self.results.get(team_id, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "is_live": self.is_live,
            "is_finished": self.is_finished,
            "number_of_games": self.number_of_games,
            "best_of": self.best_of_label,
            "scheduled_at": self.scheduled_at,
            "forfeit": self.forfeit,
            "winner_id": self.winner_id,
            "opponents": [team.to_dict() for team in self.opponents],
            "results": [
                {"team_id": team_id, "score": score}
                for team_id, score in self.results.items()
            ],
            "previous_matches": [
                {"type": prev.type, "match_id": prev.match_id}
                for prev in self.previous_matches
            ],
        }

    def __repr__(self) -> str:
        return f"<BracketMatch(id={self.id}, status={self.status})>"


@dataclass
class BracketRound:
    """A labeled column of matches sharing one depth on one side of the bracket."""
    label: str
    depth: int
    matches: list[BracketMatch]

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "depth": self.depth,
            "matches": [m.to_dict() for m in self.matches],
        }


@dataclass
class ParsedBracket:
    """
    Reconstructed bracket ready for rendering.

    Every input match is in exactly one of upper_bracket, lower_bracket or
    grand_final.
    """
    upper_bracket: list[BracketRound]
    lower_bracket: list[BracketRound]
    grand_final: Optional[BracketMatch] = None

    @property
    def is_double_elimination(self) -> bool:
        return bool(self.lower_bracket)

    def iter_matches(self) -> Iterator[BracketMatch]:
        """Yield every match: upper rounds, lower rounds, then the grand final."""
        for bracket_round in (*self.upper_bracket, *self.lower_bracket):
            yield from bracket_round.matches
        if self.grand_final is not None:
            yield self.grand_final

    def to_dict(self) -> dict[str, Any]:
        return {
            "upper_bracket": [r.to_dict() for r in self.upper_bracket],
            "lower_bracket": [r.to_dict() for r in self.lower_bracket],
            "grand_final": self.grand_final.to_dict() if self.grand_final else None,
        }


def compute_match_depths(matches: Iterable[BracketMatch]) -> dict[int, int]:
    """
    Compute each match's depth (longest feeder chain back to a first round).

    depth = 0 for a match without feeders, otherwise 1 + the deepest feeder.
    A feeder ID that is not in ``matches`` (partial bracket fetch) counts as
    a depth-0 feeder, so the referencing match sits at depth >= 1.

    Args:
        matches: Bracket matches, any order

    Returns:
        Dict of match ID -> depth

    Raises:
        BracketCycleError: If the feeder links contain a cycle

    Examples:
        >>> a = BracketMatch(id=1)
        >>> b = BracketMatch(id=2)
        >>> final = BracketMatch(id=3, previous_matches=[
        ...     PreviousMatch("winner", 1), PreviousMatch("winner", 2)])
        >>> compute_match_depths([final, a, b])
        {3: 1, 1: 0, 2: 0}
    """
    by_id = {m.id: m for m in matches}

    depths: dict[int, int] = {}
    unresolved_feeders: dict[int, int] = {}
    dependents: dict[int, list[int]] = defaultdict(list)
    ready: deque[int] = deque()

    for match in by_id.values():
        known_feeders = 0
        for prev in match.previous_matches:
            if prev.match_id in by_id:
                known_feeders += 1
                dependents[prev.match_id].append(match.id)
            else:
                logger.warning(
                    "Match %s references unknown match %s; treating it as a first-round feeder",
                    match.id,
                    prev.match_id,
                )

        depths[match.id] = 1 if match.previous_matches else 0
        unresolved_feeders[match.id] = known_feeders
        if known_feeders == 0:
            ready.append(match.id)

    while ready:
        match_id = ready.popleft()
        for dependent_id in dependents[match_id]:
            depths[dependent_id] = max(depths[dependent_id], depths[match_id] + 1)
            unresolved_feeders[dependent_id] -= 1
            if unresolved_feeders[dependent_id] == 0:
                ready.append(dependent_id)

    stuck = sorted(mid for mid, count in unresolved_feeders.items() if count > 0)
    if stuck:
        raise BracketCycleError(stuck)

    return depths


def classify_lower_bracket(
    matches: Iterable[BracketMatch],
    depths: dict[int, int],
) -> set[int]:
    """
    Find the lower-bracket matches.

    A match is lower bracket if it is fed by a loser, or if any of its
    winner-feeders is itself lower bracket. Matches are visited by ascending
    depth, so every feeder is classified before the matches it feeds.

    Returns:
        Set of lower-bracket match IDs
    """
    lower: set[int] = set()
    for match in sorted(matches, key=lambda m: depths.get(m.id, 0)):
        if match.has_loser_feed:
            lower.add(match.id)
            continue
        if any(prev.type == "winner" and prev.match_id in lower for prev in match.previous_matches):
            lower.add(match.id)
    return lower


def find_grand_final(
    matches: list[BracketMatch],
    depths: dict[int, int],
    lower: set[int],
) -> Optional[BracketMatch]:
    """
    Pick the grand final among the deepest matches.

    Preference order:
    1. The first deepest match with 2+ feeders, at least one from the upper
       bracket and at least one from the lower bracket
    2. The only match at the deepest level, provided some other match is in
       the lower bracket. In a pure single-elimination bracket the last match
       stays the upper bracket's "Final" instead.

    Returns:
        The grand final match, or None
    """
    max_depth = max(depths.values())
    deepest = [m for m in matches if depths[m.id] == max_depth]

    for match in deepest:
        if len(match.previous_matches) < 2:
            continue
        has_upper_feeder = any(p.match_id not in lower for p in match.previous_matches)
        has_lower_feeder = any(p.match_id in lower for p in match.previous_matches)
        if has_upper_feeder and has_lower_feeder:
            return match

    if len(deepest) == 1 and lower - {deepest[0].id}:
        return deepest[0]

    return None


def get_round_label(
    index: int,
    total_rounds: int,
    match_count: int,
    is_lower: bool,
) -> str:
    """
    Label a bracket round.

    Args:
        index: 0-indexed position of the round within its side
        total_rounds: Number of rounds on this side
        match_count: Matches in this round
        is_lower: Whether this is the lower bracket

    Returns:
        Round label. Upper-bracket labels carry the "UB " prefix; callers
        strip it when there is no lower bracket.

    Examples:
        >>> get_round_label(2, 3, 1, is_lower=True)
        'LB Final'
        >>> get_round_label(0, 3, 4, is_lower=True)
        'LB Round 1'
        >>> get_round_label(0, 1, 2, is_lower=False)
        'Final'
        >>> get_round_label(1, 4, 4, is_lower=False)
        'UB Quarterfinal'
        >>> get_round_label(1, 4, 3, is_lower=False)
        'UB Round 2'
    """
    if is_lower:
        if index == total_rounds - 1:
            return "LB Final"
        return f"LB Round {index + 1}"

    if total_rounds <= 1:
        return "Final"
    if index == total_rounds - 1:
        return f"{UPPER_PREFIX}Final"
    if index == total_rounds - 2:
        return f"{UPPER_PREFIX}Semifinal"
    # Only trust the quarterfinal name when the round has the expected size
    if index == total_rounds - 3 and match_count == 4:
        return f"{UPPER_PREFIX}Quarterfinal"
    return f"{UPPER_PREFIX}Round {index + 1}"


def _build_rounds(
    matches: list[BracketMatch],
    depths: dict[int, int],
    is_lower: bool,
) -> list[BracketRound]:
    """Group one side's matches by depth and label the resulting rounds."""
    by_depth: dict[int, list[BracketMatch]] = defaultdict(list)
    for match in matches:
        by_depth[depths[match.id]].append(match)

    ordered_depths = sorted(by_depth)
    total_rounds = len(ordered_depths)

    return [
        BracketRound(
            label=get_round_label(idx, total_rounds, len(by_depth[depth]), is_lower),
            depth=depth,
            matches=by_depth[depth],
        )
        for idx, depth in enumerate(ordered_depths)
    ]


def parse_bracket(matches: Iterable[BracketMatch]) -> Optional[ParsedBracket]:
    """
    Reconstruct upper bracket, lower bracket and grand final from a flat list.

    Args:
        matches: All matches of one tournament bracket, any order

    Returns:
        ParsedBracket, or None when there are no matches

    Raises:
        BracketCycleError: If the previous-match links contain a cycle
    """
    unique: dict[int, BracketMatch] = {}
    for match in matches:
        if match.id in unique:
            logger.warning("Duplicate bracket match %s; keeping the last copy", match.id)
        unique[match.id] = match

    if not unique:
        return None

    bracket_matches = list(unique.values())
    depths = compute_match_depths(bracket_matches)
    lower = classify_lower_bracket(bracket_matches, depths)
    grand_final = find_grand_final(bracket_matches, depths, lower)

    upper_matches: list[BracketMatch] = []
    lower_matches: list[BracketMatch] = []
    for match in bracket_matches:
        if grand_final is not None and match.id == grand_final.id:
            continue
        if match.id in lower:
            lower_matches.append(match)
        else:
            upper_matches.append(match)

    upper_bracket = _build_rounds(upper_matches, depths, is_lower=False)
    lower_bracket = _build_rounds(lower_matches, depths, is_lower=True)

    # Single elimination: nothing to disambiguate against
    if not lower_bracket:
        for bracket_round in upper_bracket:
            bracket_round.label = bracket_round.label.replace(UPPER_PREFIX, "", 1)

    logger.debug(
        "Parsed bracket of %d matches: %d upper rounds, %d lower rounds, grand final %s",
        len(bracket_matches),
        len(upper_bracket),
        len(lower_bracket),
        grand_final.id if grand_final else None,
    )

    return ParsedBracket(
        upper_bracket=upper_bracket,
        lower_bracket=lower_bracket,
        grand_final=grand_final,
    )


def parse_bracket_payload(payload: Optional[list[dict[str, Any]]]) -> Optional[ParsedBracket]:
    """Parse a raw PandaScore bracket listing (list of match dicts)."""
    return parse_bracket(BracketMatch.from_payload(item) for item in payload or [])
