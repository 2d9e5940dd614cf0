from gameweek.engine.facts import GwScore, League
from gameweek.engine.league_table import (
    build_league_table,
    gameweek_winners,
    league_gameweek_table,
    league_victories,
    relevant_gameweeks,
)
from tests import factories


def test_shared_best_pair_is_a_draw():
    scores = {
        "A": GwScore("A", 1, correct_count=5, unicorn_count=2),
        "B": GwScore("B", 1, correct_count=5, unicorn_count=2),
        "C": GwScore("C", 1, correct_count=3, unicorn_count=1),
    }
    assert sorted(gameweek_winners(scores)) == ["A", "B"]


def test_draw_and_loss_in_table():
    # A and B both get 2 right with no unicorns; C gets 1
    fixtures = factories.fixtures(1)
    picks = (
        factories.picks(1, 1, "HDH")
        + factories.picks(2, 1, "HDH")
        + factories.picks(3, 1, "HAA")
    )
    table = build_league_table(
        10, [1, 2, 3], 1, 2, fixtures, {1: {0: "H", 1: "D", 2: "D"}}, picks,
        names={1: "Ann", 2: "Ben", 3: "Cal"},
    )
    rows = {r.user_id: r for r in table.rows}
    assert (rows[1].mlt_pts, rows[1].draws, rows[1].form) == (1, 1, ["D"])
    assert (rows[2].mlt_pts, rows[2].draws, rows[2].form) == (1, 1, ["D"])
    assert (rows[3].mlt_pts, rows[3].form_string) == (0, "L")
    assert table.latest_gw_winners == (1, 2)
    assert [r.position for r in table.rows] == [1, 2, 3]


def test_unicorn_breaks_equal_correct_count():
    fixtures = factories.fixtures(1)
    picks = (
        factories.picks(1, 1, "HD")
        + factories.picks(2, 1, "HHA")
        + factories.picks(3, 1, "AHA")
    )
    # 1: H and the lone D -> (2, 1); 2: H and A -> (2, 0); 3: A -> (1, 0)
    outcomes = {1: {0: "H", 1: "D", 2: "A"}}
    table = build_league_table(10, [1, 2, 3], 1, 2, fixtures, outcomes, picks)
    rows = {r.user_id: r for r in table.rows}
    assert rows[1].wins == 1 and rows[1].mlt_pts == 3 and rows[1].form == ["W"]
    assert rows[2].form == ["L"]
    assert table.rows[0].user_id == 1


def test_all_zero_gameweek_is_a_draw_for_everyone():
    fixtures = factories.fixtures(1)
    picks = factories.picks(1, 1, "AAA") + factories.picks(2, 1, "AAA")
    table = build_league_table(10, [1, 2], 1, 2, fixtures, {1: {0: "H", 1: "H", 2: "H"}}, picks)
    assert all(r.draws == 1 and r.mlt_pts == 1 for r in table.rows)


def test_relevant_gameweeks_window():
    fixtures = [f for gw in range(1, 6) for f in factories.fixtures(gw, 2)]
    outcomes = {
        1: {0: "H", 1: "H"},
        2: {0: "H", 1: "H"},
        3: {0: "H"},  # undecided
        4: {0: "H", 1: "H"},
        5: {0: "H", 1: "H"},  # current gameweek
    }
    assert relevant_gameweeks(fixtures, outcomes, 2, 5) == [2, 4]


def test_table_ordering_tie_breaks():
    fixtures = factories.fixtures(1) + factories.fixtures(2)
    outcomes = {1: {0: "H", 1: "H", 2: "H"}, 2: {0: "A", 1: "A", 2: "A"}}
    picks = (
        factories.picks(1, 1, "HHH") + factories.picks(1, 2, "HHH")
        + factories.picks(2, 1, "HHA") + factories.picks(2, 2, "AAA")
        + factories.picks(3, 1, "HAA") + factories.picks(3, 2, "HHH")
    )
    names = {1: "Ann", 2: "Ben", 3: "Cal"}
    table = build_league_table(10, [1, 2, 3], 1, 3, fixtures, outcomes, picks, names)
    rows = {r.user_id: r for r in table.rows}
    # Ann wins GW1 with one unicorn, Ben wins GW2 with three
    assert rows[1].mlt_pts == rows[2].mlt_pts == 3
    assert (rows[1].unicorns, rows[2].unicorns) == (1, 3)
    assert [r.user_id for r in table.rows] == [2, 1, 3]


def test_ocp_then_name_break_ties():
    fixtures = factories.fixtures(1) + factories.fixtures(2)
    outcomes = {1: {0: "H", 1: "H", 2: "H"}, 2: {0: "A", 1: "A", 2: "A"}}
    picks = (
        factories.picks(1, 1, "HHH") + factories.picks(1, 2, "HHH")
        + factories.picks(2, 1, "HHA") + factories.picks(2, 2, "AAH")
    )
    table = build_league_table(10, [1, 2], 1, 3, fixtures, outcomes, picks, {1: "Ann", 2: "Ben"})
    # one win each, no unicorns in a two-member league; Ben has 4 OCP to Ann's 3
    assert [r.user_id for r in table.rows] == [2, 1]

    picks = factories.picks(1, 1, "AAA") + factories.picks(2, 1, "AAA")
    table = build_league_table(
        10, [1, 2], 1, 2, fixtures, outcomes, picks, {1: "bob", 2: "Amy"}
    )
    assert [r.user_id for r in table.rows] == [2, 1]


def test_start_gw_excludes_earlier_weeks():
    fixtures = factories.fixtures(1) + factories.fixtures(2)
    outcomes = {1: {0: "H", 1: "H", 2: "H"}, 2: {0: "H", 1: "H", 2: "H"}}
    picks = factories.picks(1, 1, "HHH") + factories.picks(2, 2, "HHH")
    table = build_league_table(10, [1, 2], 2, 3, fixtures, outcomes, picks)
    rows = {r.user_id: r for r in table.rows}
    assert table.relevant_gws == [2]
    assert rows[1].ocp == 0
    assert rows[2].wins == 1


def test_empty_league():
    table = build_league_table(10, [], 1, 5, factories.fixtures(1), {}, [])
    assert table.rows == [] and table.latest_gw_winners == ()


def test_position_of_non_member():
    table = build_league_table(10, [1], 1, 2, factories.fixtures(1), {}, [])
    assert table.position_of(1) == 1
    assert table.position_of(2) is None


def test_league_gameweek_table_order():
    picks = factories.picks(1, 1, "HHH") + factories.picks(2, 1, "AAA") + factories.picks(3, 1, "HAA")
    rows = league_gameweek_table(1, [1, 2, 3], {0: "H", 1: "A"}, picks, {1: "b", 2: "a", 3: "c"})
    assert [r["user_id"] for r in rows] == [3, 2, 1]
    assert rows[0] == {"user_id": 3, "name": "c", "score": 2, "unicorns": 0}


def test_league_victories_solo_winner_only():
    solo = League(1, "Solo")
    shared = League(2, "Shared")
    tiny = League(3, "Tiny")
    picks = (
        factories.picks(1, 1, "HHH")
        + factories.picks(2, 1, "HHA")
        + factories.picks(3, 1, "HHH")
    )
    outcomes = {0: "H", 1: "H", 2: "H"}
    leagues = [(solo, [1, 2]), (shared, [1, 3]), (tiny, [1])]
    won = league_victories(1, 1, leagues, outcomes, picks, {1, 2, 3})
    assert won == [solo]


def test_league_victories_skip_leagues_nobody_played():
    lg = League(1, "Quiet")
    won = league_victories(1, 1, [(lg, [1, 2])], {0: "H"}, factories.picks(1, 1, "H"), set())
    assert won == []


def test_open_bounds_count_every_decided_gameweek():
    fixtures = factories.fixtures(1, 2) + factories.fixtures(2, 2)
    outcomes = {1: {0: "H", 1: "H"}, 2: {0: "H", 1: "H"}}
    assert relevant_gameweeks(fixtures, outcomes, None, None) == [1, 2]
