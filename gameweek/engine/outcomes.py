"""
Outcome resolution: one canonical H/D/A per fixture.

A stored result always wins. Without one, a live score counts once play
has started. Fixtures with neither are left out of the returned mapping,
which every scorer reads as "exclude this fixture".
"""

import logging

logger = logging.getLogger(__name__)


def resolve_outcomes(results, live_scores=()):
    """Merge settled results and live scores for a single gameweek.

    Args:
        results: Result facts for the gameweek
        live_scores: LiveScore facts for the gameweek

    Returns:
        dict mapping fixture_index to "H", "D" or "A"
    """
    outcomes = {}

    for score in live_scores:
        outcome = score.to_outcome()
        if outcome is not None:
            outcomes[score.fixture_index] = outcome

    # Settled results override whatever the live feed says
    for result in results:
        outcome = result.to_outcome()
        if outcome is not None:
            outcomes[result.fixture_index] = outcome

    return outcomes


def resolve_all_outcomes(snapshot, include_live=True):
    """Canonical outcomes for every gameweek in a snapshot.

    Returns:
        dict mapping gw to {fixture_index: outcome}; gameweeks with no
        decided fixture are absent
    """
    results_by_gw = {}
    for result in snapshot.results:
        results_by_gw.setdefault(result.gw, []).append(result)

    live_by_gw = {}
    if include_live:
        for score in snapshot.live_scores:
            live_by_gw.setdefault(score.gw, []).append(score)

    by_gw = {}
    for gw in sorted(set(results_by_gw) | set(live_by_gw)):
        outcomes = resolve_outcomes(results_by_gw.get(gw, []), live_by_gw.get(gw, []))
        if outcomes:
            by_gw[gw] = outcomes

    logger.debug(f"Resolved outcomes for {len(by_gw)} gameweeks")
    return by_gw


def settled_outcomes(results):
    """Outcomes keyed by (gw, fixture_index), stored results only"""
    settled = {}
    for result in results:
        outcome = result.to_outcome()
        if outcome is not None:
            settled[(result.gw, result.fixture_index)] = outcome
    return settled


def is_gameweek_decided(fixture_indexes, outcomes):
    """True when every fixture of the gameweek has an outcome"""
    fixture_indexes = set(fixture_indexes)
    if not fixture_indexes:
        return False
    return fixture_indexes.issubset(outcomes)


def completed_gameweeks(fixtures, results):
    """Gameweeks whose every fixture has a stored result, ascending.

    Live scores never complete a gameweek.
    """
    indexes_by_gw = {}
    for fixture in fixtures:
        indexes_by_gw.setdefault(fixture.gw, set()).add(fixture.fixture_index)

    settled = settled_outcomes(results)
    completed = []
    for gw in sorted(indexes_by_gw):
        if all((gw, idx) in settled for idx in indexes_by_gw[gw]):
            completed.append(gw)
    return completed
