from gameweek.engine.facts import GwScore
from gameweek.engine.streaks import (
    Streak,
    best_streak,
    current_streak,
    participation_streak,
    top_quartile_streak,
)


def test_best_streak_keeps_first_of_equal_runs():
    percentiles = {1: 80, 2: 90, 3: 60, 4: 76, 5: 75}
    streak = top_quartile_streak([1, 2, 3, 4, 5], percentiles)
    assert streak.length == 2
    assert streak.label == "GW1–GW2"


def test_best_streak_replaced_by_strictly_longer_run():
    percentiles = {1: 80, 2: 10, 3: 75, 4: 75, 5: 99}
    streak = top_quartile_streak([1, 2, 3, 4, 5], percentiles)
    assert (streak.length, streak.start_gw, streak.end_gw) == (3, 3, 5)


def test_gameweek_without_score_breaks_best_streak():
    percentiles = {1: 100, 3: 100}
    assert top_quartile_streak([1, 2, 3], percentiles).length == 1


def test_no_qualifying_gameweek():
    streak = best_streak([1, 2], lambda gw: False)
    assert streak == Streak()
    assert streak.label is None


def test_current_streak_stops_at_first_gap_from_latest():
    played = {2, 4, 5}
    streak = current_streak([1, 2, 3, 4, 5], lambda gw: gw in played)
    assert (streak.length, streak.start_gw, streak.end_gw) == (2, 4, 5)
    assert current_streak([1, 2, 3], lambda gw: gw != 3).length == 0


def test_participation_streak():
    by_gw = {
        1: {7: GwScore(7, 1)},
        2: {7: GwScore(7, 2, correct_count=0)},
        3: {8: GwScore(8, 3)},
    }
    assert participation_streak([1, 2, 3], by_gw, 7).length == 0
    assert participation_streak([1, 2], by_gw, 7).length == 2
