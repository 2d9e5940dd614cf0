from gameweek.engine.facts import Pick
from gameweek.engine.scoring import (
    score_gameweek,
    score_global,
    unicorn_fixtures,
    user_points,
)
from tests import factories


def test_correct_counts_and_unicorns():
    picks = (
        factories.picks(1, 1, "HDA")
        + factories.picks(2, 1, "HHA")
        + factories.picks(3, 1, "AHA")
    )
    scores = score_gameweek(1, {0: "H", 1: "D", 2: "A"}, picks, [1, 2, 3])

    assert scores[1].correct_count == 3
    assert scores[1].unicorn_count == 1  # only user 1 called the draw
    assert scores[2].correct_count == 2
    assert scores[2].unicorn_count == 0
    assert scores[3].correct_count == 1


def test_no_unicorns_below_three_members():
    picks = factories.picks(1, 1, "H") + factories.picks(2, 1, "A")
    scores = score_gameweek(1, {0: "H"}, picks, [1, 2])
    assert scores[1].correct_count == 1
    assert scores[1].unicorn_count == 0
    assert unicorn_fixtures(1, {0: "H"}, picks, [1, 2]) == []


def test_undecided_fixtures_are_skipped_and_members_without_picks_score_zero():
    picks = factories.picks(1, 1, "HHH")
    scores = score_gameweek(1, {0: "H"}, picks, [1, 2, 3])
    assert scores[1].correct_count == 1
    assert scores[1].unicorn_count == 1
    assert scores[2].correct_count == 0
    assert set(scores) == {1, 2, 3}


def test_picks_outside_population_or_gameweek_are_ignored():
    picks = [Pick(1, 1, 0, "H"), Pick(9, 1, 0, "H"), Pick(1, 2, 0, "H")]
    scores = score_gameweek(1, {0: "H"}, picks, [1, 2, 3])
    assert scores[1].correct_count == 1
    # user 9 is not in the population, so user 1 is still the only correct member
    assert scores[1].unicorn_count == 1


def test_global_population_is_the_gameweeks_submitters():
    snap = factories.snapshot({1: {1: "HHH", 2: "AAA"}, 2: {1: "HHH"}}, {1: "HAH", 2: "HHH"})
    scores = score_global(snap, {1: {0: "H", 1: "A", 2: "H"}, 2: {0: "H", 1: "H", 2: "H"}})
    assert set(scores[1]) == {1, 2}
    assert set(scores[2]) == {1}
    assert scores[1][1].correct_count == 2
    assert scores[1][2].correct_count == 1


def test_unsubmitted_picks_never_score():
    snap = factories.snapshot({1: {1: "HHH"}}, {1: "HHH"})
    extra = Pick(2, 1, 0, "H")
    snap = type(snap)(
        fixtures=snap.fixtures,
        picks=snap.picks + (extra,),
        submissions=snap.submissions,
        results=snap.results,
        current_gw=snap.current_gw,
        names=snap.names,
    )
    scores = score_global(snap, {1: {0: "H", 1: "H", 2: "H"}})
    assert 2 not in scores[1]


def test_unicorn_fixtures_lists_sole_correct_member():
    picks = (
        factories.picks(1, 1, "HD")
        + factories.picks(2, 1, "HH")
        + factories.picks(3, 1, "AH")
    )
    assert unicorn_fixtures(1, {0: "A", 1: "D"}, picks, [1, 2, 3]) == [
        (0, 3, "A"),
        (1, 1, "D"),
    ]


def test_user_points_only_for_played_gameweeks():
    snap = factories.snapshot({1: {1: "HHH"}, 3: {1: "AAA", 2: "HHH"}}, {1: "HHH", 3: "AAA"})
    scores = score_global(snap, {1: {0: "H", 1: "H", 2: "H"}, 3: {0: "A", 1: "A", 2: "A"}})
    assert user_points(scores, 1) == [(1, 3), (3, 3)]
    assert user_points(scores, 2) == [(3, 0)]
