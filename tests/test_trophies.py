from gameweek.engine.facts import GwScore
from gameweek.engine.trophies import TrophyCabinet, build_trophy_cabinet, trophies_at


def scores(table):
    return {
        gw: {uid: GwScore(uid, gw, correct_count=pts) for uid, pts in week.items()}
        for gw, week in table.items()
    }


BY_GW = scores({1: {1: 3, 2: 1}, 2: {1: 1, 2: 3}, 3: {1: 2, 2: 2}})


def test_shared_first_place_counts_for_everyone():
    assert build_trophy_cabinet(1, [1, 2, 3], BY_GW) == TrophyCabinet(
        last_gw=2, form5=0, form10=0, overall=3
    )
    assert build_trophy_cabinet(2, [1, 2, 3], BY_GW) == TrophyCabinet(
        last_gw=2, form5=0, form10=0, overall=2
    )


def test_cabinet_is_idempotent():
    first = build_trophy_cabinet(1, [1, 2, 3], BY_GW)
    second = build_trophy_cabinet(1, [1, 2, 3], BY_GW)
    assert first == second
    assert first.to_dict() == {"lastGw": 2, "form5": 0, "form10": 0, "overall": 3}


def test_each_gameweek_is_recomputed_from_scratch():
    # Later gameweeks must not leak into an earlier gameweek's check
    won = trophies_at(2, 1, BY_GW)
    assert not won.gw and not won.overall


def test_form_trophies_need_full_windows():
    by_gw = scores({gw: {1: 3, 2: 1} for gw in range(1, 11)})
    cabinet = build_trophy_cabinet(1, range(1, 11), by_gw)
    assert cabinet.form5 == 6  # gw5 through gw10
    assert cabinet.form10 == 1
    assert cabinet.last_gw == 10
    assert build_trophy_cabinet(2, range(1, 11), by_gw) == TrophyCabinet()


def test_user_without_scores_has_empty_cabinet():
    assert build_trophy_cabinet(99, [1, 2, 3], BY_GW) == TrophyCabinet()
