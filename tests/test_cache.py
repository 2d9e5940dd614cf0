from gameweek.services.stats_service import stats_service
from gameweek.utils.cache_utils import (
    clear_stats_cache,
    get_cache_stats,
    make_snapshot_key,
    memoize_for_snapshot,
)
from tests import factories


class Counter:
    def __init__(self):
        self.calls = 0

    @memoize_for_snapshot("count")
    def compute(self, snapshot, gw):
        self.calls += 1
        return {"gw": gw, "calls": self.calls}


def test_key_includes_scope_args_and_version():
    snap = factories.sample_snapshot()
    key = make_snapshot_key("user_stats", snap, 1)
    assert key == f"stats:user_stats:1::{snap.version}"
    assert make_snapshot_key("user_stats", snap, 2) != key


def test_same_version_is_served_from_cache(app):
    counter = Counter()
    snap = factories.sample_snapshot()

    assert counter.compute(snap, 3) == {"gw": 3, "calls": 1}
    assert counter.compute(factories.sample_snapshot(), 3) == {"gw": 3, "calls": 1}
    assert counter.calls == 1

    counter.compute(snap, 2)
    assert counter.calls == 2


def test_new_fact_forces_recompute(app):
    counter = Counter()
    counter.compute(factories.sample_snapshot(), 3)

    changed = factories.snapshot(
        factories.SAMPLE_WEEKS,
        {**factories.SAMPLE_OUTCOMES, 3: "HAA"},
        current_gw=4,
    )
    counter.compute(changed, 3)
    assert counter.calls == 2


def test_clear_stats_cache(app):
    counter = Counter()
    snap = factories.sample_snapshot()
    counter.compute(snap, 1)
    clear_stats_cache()
    counter.compute(snap, 1)
    assert counter.calls == 2
    assert get_cache_stats()["type"] == "SimpleCache"


def test_service_results_change_with_snapshot(app):
    before = stats_service.user_stats(factories.sample_snapshot(), 1)
    changed = factories.snapshot(
        factories.SAMPLE_WEEKS,
        {**factories.SAMPLE_OUTCOMES, 3: "AAA"},
        current_gw=4,
    )
    after = stats_service.user_stats(changed, 1)
    assert before["bestSingleGw"] == {"gw": 3, "points": 3}
    assert after["bestSingleGw"] != before["bestSingleGw"]
