#!/usr/bin/env python3
"""
Run a saved upstream payload through the normalizers and print the result.

Handy for checking a PandaScore/FACEIT/Grid.gg response captured from the
API (e.g. with curl) without starting the web app.

Usage:
    # Bracket listing from /tournaments/{id}/brackets
    python scripts/inspect_payload.py bracket brackets.json

    # FACEIT /matches/{id}/stats response
    python scripts/inspect_payload.py faceit stats.json --team1 "NAVI" --team2 "FaZe"

    # Grid.gg seriesState object
    python scripts/inspect_payload.py grid series_state.json --map overall

    # Tournament listing, grouped by series
    python scripts/inspect_payload.py series tournaments.json --now 2026-03-01T00:00:00Z
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fragdash.bracket import BracketCycleError, parse_bracket_payload
from fragdash.config import settings
from fragdash.events.series import annotate_tournaments, group_by_series
from fragdash.match_statuses import parse_timestamp
from fragdash.stats.aggregate import build_stats_view
from fragdash.stats.faceit import normalize_faceit_stats
from fragdash.stats.grid import normalize_grid_stats

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _stats_output(stats, selected_map):
    if stats is None:
        return None
    if selected_map is None:
        return stats.to_dict()
    map_key = int(selected_map) if selected_map.isdigit() else selected_map
    return build_stats_view(stats, map_key).to_dict()


def inspect(kind: str, payload, args):
    if kind == "bracket":
        bracket = parse_bracket_payload(payload)
        return bracket.to_dict() if bracket else None

    if kind == "faceit":
        stats = normalize_faceit_stats(payload, args.team1, args.team2)
        return _stats_output(stats, args.map)

    if kind == "grid":
        return _stats_output(normalize_grid_stats(payload), args.map)

    if kind == "series":
        now = parse_timestamp(args.now) if args.now else datetime.now(timezone.utc)
        tournaments = annotate_tournaments(payload, now=now)
        return [event.to_dict() for event in group_by_series(tournaments)]

    raise ValueError(f"Unknown payload kind: {kind}")


def main():
    parser = argparse.ArgumentParser(description="Normalize a saved upstream payload and print it as JSON")
    parser.add_argument("kind", choices=["bracket", "faceit", "grid", "series"],
                        help="Which normalizer to run")
    parser.add_argument("path", type=Path, help="JSON file with the raw payload")
    parser.add_argument("--team1", default="Team 1", help="FACEIT faction 1 name")
    parser.add_argument("--team2", default="Team 2", help="FACEIT faction 2 name")
    parser.add_argument("--map", default=None,
                        help="Print a table view instead: 'overall' or a 0-based map index")
    parser.add_argument("--now", default=None,
                        help="Reference time for event statuses (ISO-8601, default: now)")
    args = parser.parse_args()

    payload = json.loads(args.path.read_text(encoding="utf-8"))
    logger.info("Inspecting %s payload from %s", args.kind, args.path)

    try:
        result = inspect(args.kind, payload, args)
    except BracketCycleError as e:
        logger.error("%s", e)
        sys.exit(1)

    if result is None:
        logger.warning("Payload produced no output (no matches or maps)")
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
