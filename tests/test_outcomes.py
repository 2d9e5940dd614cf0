from gameweek.engine.facts import LiveScore, Result
from gameweek.engine.outcomes import (
    completed_gameweeks,
    is_gameweek_decided,
    resolve_all_outcomes,
    resolve_outcomes,
    settled_outcomes,
)
from tests import factories


def test_result_overrides_live_score():
    outcomes = resolve_outcomes(
        [Result(1, 0, outcome="A")],
        [LiveScore(1, 0, 3, 0, status="FINISHED"), LiveScore(1, 1, 1, 1, status="IN_PLAY")],
    )
    assert outcomes == {0: "A", 1: "D"}


def test_unstarted_and_missing_fixtures_are_absent():
    outcomes = resolve_outcomes([], [LiveScore(1, 0, 0, 0, status="SCHEDULED")])
    assert outcomes == {}


def test_resolve_all_outcomes_can_ignore_live_scores():
    snap = factories.snapshot(
        {1: {1: "HHH"}},
        {1: "HH"},
        live_scores=[factories.live(1, 2, 0, 1)],
    )
    assert resolve_all_outcomes(snap) == {1: {0: "H", 1: "H", 2: "A"}}
    assert resolve_all_outcomes(snap, include_live=False) == {1: {0: "H", 1: "H"}}


def test_settled_outcomes_key_by_gameweek_and_fixture():
    settled = settled_outcomes([Result(2, 1, home_goals=1, away_goals=0), Result(2, 2)])
    assert settled == {(2, 1): "H"}


def test_gameweek_decided_needs_every_fixture():
    assert is_gameweek_decided({0, 1}, {0: "H", 1: "D"})
    assert not is_gameweek_decided({0, 1}, {0: "H"})
    assert not is_gameweek_decided(set(), {})


def test_completed_gameweeks_ignore_live_scores():
    fixtures = factories.fixtures(1) + factories.fixtures(2)
    results = factories.results(1, "HDA") + factories.results(2, "HD")
    assert completed_gameweeks(fixtures, results) == [1]
