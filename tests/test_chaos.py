from gameweek.engine.chaos import chaos_report, pick_shares, team_affinity
from gameweek.engine.facts import Pick
from tests import factories


def test_chaos_counts_decided_minority_picks():
    picks = [
        Pick(1, 1, 0, "A"), Pick(2, 1, 0, "H"), Pick(3, 1, 0, "H"),
        Pick(4, 1, 0, "H"), Pick(5, 1, 0, "H"),
        Pick(1, 1, 1, "H"), Pick(2, 1, 1, "H"), Pick(3, 1, 1, "D"),
        Pick(4, 1, 1, "D"), Pick(5, 1, 1, "D"),
        Pick(1, 1, 2, "A"), Pick(2, 1, 2, "H"), Pick(3, 1, 2, "H"),
        Pick(4, 1, 2, "H"), Pick(5, 1, 2, "H"),
    ]
    outcomes = {(1, 0): "A", (1, 1): "D"}  # fixture 2 still undecided

    report = chaos_report(1, picks, outcomes)
    assert report.decided_count == 2
    assert report.chaos_count == 1
    assert report.chaos_correct == 1
    assert report.index == 50.0


def test_quarter_share_is_still_chaos():
    picks = [Pick(1, 1, 0, "D")] + [Pick(uid, 1, 0, "H") for uid in (2, 3, 4)]
    assert pick_shares(picks)[(1, 0)] == {"D": 1, "H": 3}
    report = chaos_report(1, picks, {(1, 0): "H"})
    assert report.chaos_count == 1
    assert report.chaos_correct == 0
    assert report.index == 100.0


def test_no_decided_picks_gives_no_index():
    report = chaos_report(1, [Pick(1, 1, 0, "H")], {})
    assert report.index is None
    assert report.to_dict()["chaosIndex"] is None


def test_team_affinity_credits_both_teams_and_needs_three_tallies():
    fixtures = [f for gw in (1, 2, 3) for f in factories.fixtures(gw)]
    picks = []
    outcomes = {}
    # fixture 0 (teams 100 v 101): right, right, wrong
    # fixture 1 (teams 102 v 103): right, wrong, right
    for gw, (o0, o1) in zip((1, 2, 3), (("H", "H"), ("H", "A"), ("A", "H"))):
        picks += [Pick(1, gw, 0, "H"), Pick(1, gw, 1, "H")]
        outcomes[(gw, 0)] = o0
        outcomes[(gw, 1)] = o1
    # fixture 2 (teams 104 v 105) only once: right, but too few tallies
    picks.append(Pick(1, 1, 2, "D"))
    outcomes[(1, 2)] = "D"

    best, worst = team_affinity(1, picks, outcomes, fixtures)
    assert best.team_id == 100
    assert (best.correct, best.total) == (2, 3)
    assert round(best.percentage, 2) == 66.67
    assert worst.team_id == 100
    assert round(worst.percentage, 2) == 33.33
    assert best.name == "Home 0"


def test_team_affinity_without_enough_data():
    fixtures = factories.fixtures(1)
    best, worst = team_affinity(1, [Pick(1, 1, 0, "H")], {(1, 0): "H"}, fixtures)
    assert best is None and worst is None
