"""
Unit tests for cross-map aggregation, the table view and player totals.
"""

import pytest

from fragdash.stats.aggregate import (
    aggregate_player_stats,
    build_stats_view,
    compute_player_totals,
    get_sort_column,
    sort_players,
)
from fragdash.stats.columns import STAT_COLUMNS, get_columns
from fragdash.stats.faceit import normalize_faceit_stats
from fragdash.stats.models import (
    NormalizedMapStats,
    NormalizedMatchStats,
    NormalizedPlayerStat,
)
from fragdash.stats.pandascore import normalize_pandascore_stats


def _player(player_id="p1", kills=10, deaths=5, **optional):
    return NormalizedPlayerStat.from_counts(
        player_id=player_id,
        nickname=player_id,
        kills=kills,
        deaths=deaths,
        assists=2,
        **optional,
    )


def _map(number, team1_players, team2_players=(), **extra):
    return NormalizedMapStats(
        map_name=f"Map {number}",
        map_number=number,
        team1_score=13,
        team2_score=7,
        team1_won=True,
        team1_players=list(team1_players),
        team2_players=list(team2_players),
        **extra,
    )


class TestNormalizedPlayerStat:
    """K-D invariants on every record."""

    @pytest.mark.parametrize("kills,deaths,expected_ratio", [
        (10, 0, 10),
        (0, 0, 0),
        (12, 8, 1.5),
        (3, 6, 0.5),
    ])
    def test_kd_ratio(self, kills, deaths, expected_ratio):
        player = _player(kills=kills, deaths=deaths)

        assert player.kd_ratio == expected_ratio
        assert player.kd_diff == kills - deaths

    def test_to_dict_omits_missing_values(self):
        data = _player(adr=80.0).to_dict()

        assert data["adr"] == 80.0
        assert "rating" not in data
        assert "kast" not in data


class TestAggregatePlayerStats:
    """Tests for aggregate_player_stats."""

    def test_counts_summed(self, faceit_stats):
        stats = normalize_faceit_stats(faceit_stats, "A", "B")
        alpha, bravo = aggregate_player_stats(stats.maps, "team1")

        assert alpha.nickname == "alpha"
        assert (alpha.kills, alpha.deaths, alpha.assists) == (40, 30, 6)
        assert alpha.mvps == 8
        assert alpha.triple_kills == 3
        assert (bravo.kills, bravo.deaths) == (13, 15)

    def test_kd_recomputed_from_totals(self, faceit_stats):
        stats = normalize_faceit_stats(faceit_stats, "A", "B")
        alpha, bravo = aggregate_player_stats(stats.maps, "team1")

        assert alpha.kd_diff == 10
        assert alpha.kd_ratio == pytest.approx(40 / 30)
        assert bravo.kd_ratio == pytest.approx(13 / 15)

    def test_hs_percent_weighted_by_kills(self, faceit_stats):
        stats = normalize_faceit_stats(faceit_stats, "A", "B")
        alpha, bravo = aggregate_player_stats(stats.maps, "team1")

        # (15 * 40 + 25 * 60) / 40
        assert alpha.hs_percent == pytest.approx(52.5)
        # (8 * 25 + 5 * 40) / 13
        assert bravo.hs_percent == pytest.approx(400 / 13)

    def test_rates_averaged(self, faceit_stats):
        stats = normalize_faceit_stats(faceit_stats, "A", "B")
        alpha, _ = aggregate_player_stats(stats.maps, "team1")

        assert alpha.kr_ratio == pytest.approx(0.9)
        assert alpha.adr is None

    def test_identical_maps(self):
        """N identical maps give N-times counts and unchanged rates."""
        row = dict(kills=18, deaths=12, hs_percent=44.4, adr=82.0, rating=1.1)
        maps = [_map(i, [_player(**row)]) for i in range(1, 4)]

        (player,) = aggregate_player_stats(maps, "team1")

        assert (player.kills, player.deaths, player.assists) == (54, 36, 6)
        assert player.hs_percent == pytest.approx(44.4)
        assert player.adr == pytest.approx(82.0)
        assert player.rating == pytest.approx(1.1)
        assert player.kd_ratio == pytest.approx(1.5)

    def test_rates_skip_maps_without_value(self):
        maps = [
            _map(1, [_player(rating=1.4)]),
            _map(2, [_player()]),
        ]

        (player,) = aggregate_player_stats(maps, "team1")

        assert player.rating == pytest.approx(1.4)
        assert player.kast is None

    def test_player_only_on_some_maps(self):
        maps = [
            _map(1, [_player("p1"), _player("p2")]),
            _map(2, [_player("p1"), _player("p3")]),
        ]

        players = aggregate_player_stats(maps, "team1")

        assert [p.player_id for p in players] == ["p1", "p2", "p3"]
        assert players[0].kills == 20
        assert players[1].kills == 10

    def test_zero_kill_hs(self):
        maps = [_map(1, [_player(kills=0, hs_percent=0)]), _map(2, [_player(kills=0, hs_percent=0)])]

        (player,) = aggregate_player_stats(maps, "team1")

        assert player.hs_percent == 0

    def test_side_split_lists(self):
        maps = [
            _map(1, [_player(kills=20)], team1_players_ct=[_player(kills=12)], team1_players_t=[_player(kills=8)]),
            _map(2, [_player(kills=10)], team1_players_ct=[_player(kills=4)], team1_players_t=[_player(kills=6)]),
        ]

        (ct,) = aggregate_player_stats(maps, "team1", side="ct")
        (t,) = aggregate_player_stats(maps, "team1", side="t")

        assert ct.kills == 16
        assert t.kills == 14

    def test_empty(self):
        assert aggregate_player_stats([], "team1") == []


class TestSortPolicy:
    """Tests for get_sort_column and sort_players."""

    def test_rating_preferred(self):
        assert get_sort_column(["kills", "deaths", "rating"]) == "rating"

    def test_kills_fallback(self):
        assert get_sort_column(["kills", "deaths", "kr_ratio"]) == "kills"

    def test_sorted_descending(self):
        players = [_player("a", kills=5), _player("b", kills=20), _player("c", kills=11)]

        assert [p.player_id for p in sort_players(players, "kills")] == ["b", "c", "a"]

    def test_missing_values_sort_as_zero(self):
        players = [_player("a"), _player("b", rating=0.8), _player("c", rating=1.3)]

        assert [p.player_id for p in sort_players(players, "rating")] == ["c", "b", "a"]


class TestStatColumns:
    """Tests for column display definitions."""

    def test_formatters(self):
        assert STAT_COLUMNS["kd_diff"].format(3) == "+3"
        assert STAT_COLUMNS["kd_diff"].format(-2) == "-2"
        assert STAT_COLUMNS["kd_ratio"].format(1.3333) == "1.33"
        assert STAT_COLUMNS["hs_percent"].format(45) == "45.0%"
        assert STAT_COLUMNS["adr"].format(None) == "0.0"

    def test_get_columns_skips_unknown(self):
        columns = get_columns(["kills", "bogus", "rating"])

        assert [c.key for c in columns] == ["kills", "rating"]


class TestBuildStatsView:
    """Tests for build_stats_view."""

    def test_overall(self, faceit_stats):
        stats = normalize_faceit_stats(faceit_stats, "A", "B")
        view = build_stats_view(stats)

        assert view.selected_map == "overall"
        assert view.sort_column == "kills"
        assert [p.nickname for p in view.team1_players] == ["alpha", "bravo"]
        assert view.team1_players[0].kills == 40
        assert (view.team1_maps_won, view.team2_maps_won) == (1, 1)

    def test_single_map(self, faceit_stats):
        stats = normalize_faceit_stats(faceit_stats, "A", "B")
        view = build_stats_view(stats, 1)

        assert [p.kills for p in view.team1_players] == [25, 5]
        assert [p.kills for p in view.team2_players] == [20]

    def test_invalid_map_index(self, faceit_stats):
        stats = normalize_faceit_stats(faceit_stats, "A", "B")
        view = build_stats_view(stats, 7)

        assert view.team1_players == []
        assert view.team2_players == []

    def test_side_ignored_without_splits(self, faceit_stats):
        stats = normalize_faceit_stats(faceit_stats, "A", "B")
        view = build_stats_view(stats, "overall", side="ct")

        assert view.side == "both"
        assert view.team1_players[0].kills == 40

    def test_side_used_with_splits(self):
        maps = [
            _map(1, [_player(kills=20)], [_player("q", kills=15)],
                 team1_players_ct=[_player(kills=12)], team1_players_t=[_player(kills=8)]),
        ]
        stats = NormalizedMatchStats(
            source="hltv",
            team1_name="A",
            team2_name="B",
            maps=maps,
            available_columns=["kills", "deaths"],
            has_side_splits=True,
        )

        overall = build_stats_view(stats, "overall", side="t")
        single = build_stats_view(stats, 0, side="ct")

        assert overall.side == "t"
        assert overall.team1_players[0].kills == 8
        assert single.team1_players[0].kills == 12
        # No CT split for team 2: falls back to the full list
        assert single.team2_players[0].kills == 15

    def test_sorted_by_rating(self, pandascore_player_stats, pandascore_games):
        pandascore_player_stats.append({
            "player_id": 12, "team_id": 1, "game_id": 100,
            "stats": {"kills": 30, "deaths": 10, "assists": 1, "headshots": 15, "rating": 0.7},
        })
        stats = normalize_pandascore_stats(pandascore_player_stats, pandascore_games, "One", "Two", 1, 2)

        view = build_stats_view(stats, 0)

        assert view.sort_column == "rating"
        assert [p.player_id for p in view.team1_players] == ["11", "12"]

    def test_to_dict(self, faceit_stats):
        data = build_stats_view(normalize_faceit_stats(faceit_stats, "A", "B")).to_dict()

        assert data["team1_players"][0]["nickname"] == "alpha"
        assert data["team1_maps_won"] == 1


class TestComputePlayerTotals:
    """Tests for compute_player_totals over Grid.gg series states."""

    def test_totals(self, grid_series_state):
        totals = compute_player_totals([grid_series_state], "zeta")

        assert totals.total_kills == 35
        assert totals.total_deaths == 34
        assert totals.total_assists == 4
        assert totals.total_headshots == 13
        assert totals.total_damage == 3200
        assert totals.total_rounds == 44
        assert totals.maps_played == 2

    def test_derived_rates(self, grid_series_state):
        totals = compute_player_totals([grid_series_state], "zeta")

        assert totals.kd_ratio == pytest.approx(35 / 34)
        assert totals.adr == pytest.approx(3200 / 44)
        assert totals.hs_percent == pytest.approx(1300 / 35)

    def test_name_matched_case_insensitively(self, grid_series_state):
        totals = compute_player_totals([grid_series_state, None], "ZETA")

        assert totals.maps_played == 2

    def test_unknown_player(self, grid_series_state):
        assert compute_player_totals([grid_series_state], "nobody") is None
        assert compute_player_totals([], "zeta") is None

    def test_unfinished_games_skipped(self, grid_series_state):
        for game in grid_series_state["games"]:
            game["finished"] = False

        assert compute_player_totals([grid_series_state], "zeta") is None
