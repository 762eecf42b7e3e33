"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests. Payload fixtures mirror the upstream
API shapes (PandaScore, FACEIT, Grid.gg) trimmed to the fields we read.
"""

import pytest


def bracket_match(match_id, previous=(), **extra):
    """
    Build a PandaScore bracket match dict.

    ``previous`` is a sequence of (type, match_id) pairs.
    """
    payload = {
        "id": match_id,
        "name": f"Match {match_id}",
        "status": "not_started",
        "number_of_games": 3,
        "opponents": [],
        "results": [],
        "previous_matches": [
            {"type": feed_type, "match_id": feeder_id}
            for feed_type, feeder_id in previous
        ],
    }
    payload.update(extra)
    return payload


@pytest.fixture
def single_elimination_bracket():
    """
    Eight-team single elimination: 4 quarterfinals, 2 semifinals, 1 final.
    """
    return [
        bracket_match(1),
        bracket_match(2),
        bracket_match(3),
        bracket_match(4),
        bracket_match(5, [("winner", 1), ("winner", 2)]),
        bracket_match(6, [("winner", 3), ("winner", 4)]),
        bracket_match(7, [("winner", 5), ("winner", 6)]),
    ]


@pytest.fixture
def double_elimination_bracket():
    """
    Four-team double elimination, listed out of order.

        1, 2: upper semifinals
        3:    upper final (winners of 1 and 2)
        4:    lower round 1 (losers of 1 and 2)
        5:    lower final (loser of 3, winner of 4)
        6:    grand final (winner of 3, winner of 5)
    """
    return [
        bracket_match(6, [("winner", 3), ("winner", 5)]),
        bracket_match(4, [("loser", 1), ("loser", 2)]),
        bracket_match(1),
        bracket_match(5, [("loser", 3), ("winner", 4)]),
        bracket_match(3, [("winner", 1), ("winner", 2)]),
        bracket_match(2),
    ]


def faceit_player(player_id, nickname, **stats):
    return {"player_id": player_id, "nickname": nickname, "player_stats": stats}


@pytest.fixture
def faceit_stats():
    """A best-of-2 FACEIT stats response with string-valued stats."""
    return {
        "rounds": [
            {
                "round_stats": {"Map": "de_mirage", "Rounds": "21"},
                "teams": [
                    {
                        "team_id": "faction1",
                        "team_stats": {
                            "Final Score": "13",
                            "First Half Score": "8",
                            "Second Half Score": "5",
                        },
                        "players": [
                            faceit_player(
                                "f-alpha", "alpha",
                                **{"Kills": "15", "Deaths": "10", "Assists": "4",
                                   "Headshots %": "40", "K/R Ratio": "0.71", "MVPs": "3",
                                   "Triple Kills": "1"},
                            ),
                            faceit_player(
                                "f-bravo", "bravo",
                                **{"Kills": "8", "Deaths": "0", "Assists": "2",
                                   "Headshots %": "25", "K/R Ratio": "0.38", "MVPs": "1"},
                            ),
                        ],
                    },
                    {
                        "team_id": "faction2",
                        "team_stats": {"Final Score": "8"},
                        "players": [
                            faceit_player(
                                "f-charlie", "charlie",
                                **{"Kills": "12", "Deaths": "14", "Assists": "1",
                                   "Headshots %": "50", "K/R Ratio": "0.57", "MVPs": "2"},
                            ),
                        ],
                    },
                ],
            },
            {
                "round_stats": {"Map": "de_nuke"},
                "teams": [
                    {
                        "team_id": "faction1",
                        "team_stats": {"FinalScore": "10"},
                        "players": [
                            faceit_player(
                                "f-alpha", "alpha",
                                **{"Kills": "25", "Deaths": "20", "Assists": "2",
                                   "Headshots %": "60", "K/R Ratio": "1.09", "MVPs": "5",
                                   "Triple Kills": "2"},
                            ),
                            faceit_player(
                                "f-bravo", "bravo",
                                **{"Kills": "5", "Deaths": "15", "Assists": "0",
                                   "Headshots": "2", "K/R Ratio": "0.22", "MVPs": "0"},
                            ),
                        ],
                    },
                    {
                        "team_id": "faction2",
                        "team_stats": {"FinalScore": 13},
                        "players": [
                            faceit_player(
                                "f-charlie", "charlie",
                                **{"Kills": "20", "Deaths": "18", "Assists": "3",
                                   "Headshots %": "45", "K/R Ratio": "0.87", "MVPs": "4"},
                            ),
                        ],
                    },
                ],
            },
        ]
    }


def grid_player(player_id, name, kills, deaths, assists, headshots, damage):
    return {
        "id": player_id,
        "name": name,
        "kills": kills,
        "deaths": deaths,
        "killAssistsGiven": assists,
        "headshots": headshots,
        "damageDealt": damage,
    }


@pytest.fixture
def grid_series_state():
    """
    A Grid.gg series with two finished games and one unplayed game.

    Games are listed out of order and the second game swaps team order.
    """
    return {
        "id": "2701234",
        "finished": True,
        "format": "best-of-3",
        "games": [
            {
                "id": "g3",
                "sequenceNumber": 3,
                "finished": False,
                "map": {"name": "de_inferno"},
                "teams": [
                    {"name": "Apex", "score": 0, "won": False, "players": []},
                    {"name": "Borealis", "score": 0, "won": False, "players": []},
                ],
            },
            {
                "id": "g2",
                "sequenceNumber": 2,
                "finished": True,
                "map": {"name": "de_nuke"},
                "teams": [
                    {
                        "name": "Borealis",
                        "score": 13,
                        "won": True,
                        "players": [grid_player("p2", "omega", 24, 15, 2, 12, 2400)],
                    },
                    {
                        "name": "Apex",
                        "score": 11,
                        "won": False,
                        "players": [grid_player("p1", "zeta", 15, 24, 1, 3, 1200)],
                    },
                ],
            },
            {
                "id": "g1",
                "sequenceNumber": 1,
                "finished": True,
                "map": {"name": "de_ancient"},
                "teams": [
                    {
                        "name": "Apex",
                        "score": 13,
                        "won": True,
                        "players": [grid_player("p1", "zeta", 20, 10, 3, 10, 2000)],
                    },
                    {
                        "name": "Borealis",
                        "score": 7,
                        "won": False,
                        "players": [grid_player("p2", "omega", 10, 20, 1, 0, 1000)],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def pandascore_games():
    """Games of a PandaScore match, out of order, with one unplayed game."""
    return [
        {"id": 101, "position": 2, "status": "finished", "finished": True,
         "map": {"name": "de_inferno"}, "winner": {"id": 2}},
        {"id": 100, "position": 1, "status": "finished", "finished": True,
         "map": {"name": "de_mirage"}, "winner": {"id": 1}},
        {"id": 102, "position": 3, "status": "not_started", "finished": False,
         "map": None, "winner": None},
    ]


@pytest.fixture
def pandascore_player_stats():
    """Per-player per-game rows; only team 1's rows carry ADR/KAST/rating."""
    def row(player_id, team_id, game_id, **stats):
        return {"player_id": player_id, "team_id": team_id, "game_id": game_id, "stats": stats}

    return [
        row(11, 1, 100, kills=20, deaths=15, assists=5, headshots=10, adr=85.5, kast=75.0, rating=1.2),
        row(21, 2, 100, kills=15, deaths=20, assists=3, headshots=3),
        row(11, 1, 101, kills=12, deaths=18, assists=2, headshots=6, adr=60.0, kast=65.0, rating=0.9),
        row(21, 2, 101, kills=18, deaths=12, assists=4, headshots=9),
        row(11, 1, 102, kills=99, deaths=0, assists=0, headshots=0),
    ]


def tournament(tournament_id, name, serie=None, tier="a", begin_at=None, end_at=None,
               league_name="ESL Pro League"):
    """Build a PandaScore tournament dict."""
    return {
        "id": tournament_id,
        "name": name,
        "tier": tier,
        "begin_at": begin_at,
        "end_at": end_at,
        "serie": serie,
        "league": {
            "id": 1,
            "name": league_name,
            "image_url": "https://cdn.example/league.png",
            "url": "https://example.com/league",
        },
    }


@pytest.fixture
def make_bracket_match():
    """Factory fixture for ad-hoc bracket matches."""
    return bracket_match


@pytest.fixture
def make_tournament():
    """Factory fixture for PandaScore tournament dicts."""
    return tournament
