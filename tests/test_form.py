import pytest

from gameweek.engine.facts import GwScore
from gameweek.engine.form import (
    form_leaderboard,
    form_points,
    gameweek_leaderboard,
    season_leaderboard,
    season_points,
    trailing_form_leaderboard,
)


def scores(table):
    """{gw: {uid: points}} -> {gw: {uid: GwScore}}"""
    return {
        gw: {uid: GwScore(uid, gw, correct_count=pts) for uid, pts in week.items()}
        for gw, week in table.items()
    }


def test_missing_a_week_removes_user_from_form():
    by_gw = scores({3: {1: 5, 2: 4}, 4: {2: 4}, 5: {1: 9, 2: 4}})
    assert form_points(by_gw, 3, 5) == {2: 12}
    ranked = form_leaderboard(by_gw, 3, 5)
    assert [e.subject_id for e in ranked] == [2]


def test_zero_point_weeks_still_count_as_played():
    by_gw = scores({1: {1: 0, 2: 3}, 2: {1: 0, 2: 1}})
    assert form_points(by_gw, 1, 2) == {1: 0, 2: 4}


def test_empty_window():
    by_gw = scores({1: {1: 3}})
    assert form_points(by_gw, 5, 4) == {}
    assert form_points(by_gw, 2, 3) == {}


def test_trailing_form_waits_for_enough_gameweeks():
    by_gw = scores({gw: {1: 1} for gw in range(1, 5)})
    assert trailing_form_leaderboard(by_gw, 4, 5) == []
    ranked = trailing_form_leaderboard(by_gw, 4, 4)
    assert ranked[0].value == 4


def test_trailing_form_rejects_empty_window():
    with pytest.raises(ValueError):
        trailing_form_leaderboard({}, 5, 0)


def test_form_ties_share_rank_and_sort_by_name():
    by_gw = scores({1: {1: 2, 2: 2, 3: 1}})
    names = {1: "Zoe", 2: "adam", 3: "Bea"}
    ranked = form_leaderboard(by_gw, 1, 1, names=names)
    assert [(e.subject_id, e.rank) for e in ranked] == [(2, 1), (1, 1), (3, 3)]


def test_season_points_through_gameweek():
    by_gw = scores({1: {1: 3, 2: 1}, 2: {2: 5}, 3: {1: 2}})
    assert season_points(by_gw) == {1: 5, 2: 6}
    assert season_points(by_gw, through_gw=2) == {1: 3, 2: 6}
    ranked = season_leaderboard(by_gw, through_gw=1)
    assert [(e.subject_id, e.rank) for e in ranked] == [(1, 1), (2, 2)]


def test_gameweek_leaderboard_only_ranks_that_weeks_players():
    by_gw = scores({1: {1: 3, 2: 1}, 2: {2: 5}})
    ranked = gameweek_leaderboard(by_gw, 2)
    assert [(e.subject_id, e.value) for e in ranked] == [(2, 5)]
    assert gameweek_leaderboard(by_gw, 9) == []
