"""
Gameweek scoring for one population.

A population is the set of users being compared: everyone who submitted
a gameweek for global tables, or the members of one mini league. Unicorns
depend on the population, so they are always recomputed per population
and never shared between scopes.
"""

import logging

from gameweek.engine.facts import GwScore

logger = logging.getLogger(__name__)

UNICORN_MIN_POPULATION = 3


def score_gameweek(gw, outcomes, picks, population):
    """Correct picks and unicorns for every member of a population.

    Args:
        gw: Gameweek number
        outcomes: {fixture_index: outcome} for the gameweek; fixtures
            without an outcome are skipped
        picks: submission-gated Pick facts (any gameweek; others ignored)
        population: user ids being scored together

    Returns:
        dict mapping user_id to GwScore, one entry per population member
    """
    members = list(dict.fromkeys(population))
    member_set = set(members)
    correct = {uid: 0 for uid in members}
    unicorns = {uid: 0 for uid in members}
    unicorns_allowed = len(members) >= UNICORN_MIN_POPULATION

    picks_by_fixture = {}
    for pick in picks:
        if pick.gw != gw or pick.user_id not in member_set:
            continue
        picks_by_fixture.setdefault(pick.fixture_index, {})[pick.user_id] = pick.choice

    for fixture_index, outcome in outcomes.items():
        choices = picks_by_fixture.get(fixture_index, {})
        correct_users = [uid for uid, choice in choices.items() if choice == outcome]
        for uid in correct_users:
            correct[uid] += 1
        if unicorns_allowed and len(correct_users) == 1:
            unicorns[correct_users[0]] += 1

    return {
        uid: GwScore(
            user_id=uid,
            gw=gw,
            correct_count=correct[uid],
            unicorn_count=unicorns[uid],
        )
        for uid in members
    }


def score_global(snapshot, outcomes_by_gw, gameweeks=None):
    """GwScores for the global population of each gameweek.

    The population of a gameweek is everyone who submitted it, so a user
    has a GwScore for a gameweek exactly when they took part in it.

    Args:
        snapshot: FactSnapshot
        outcomes_by_gw: {gw: {fixture_index: outcome}}
        gameweeks: optional iterable restricting which gameweeks to score

    Returns:
        {gw: {user_id: GwScore}}
    """
    picks = snapshot.visible_picks
    if gameweeks is None:
        gameweeks = sorted({s.gw for s in snapshot.submissions})

    scores = {}
    for gw in gameweeks:
        population = sorted(snapshot.submitters(gw))
        if not population:
            continue
        scores[gw] = score_gameweek(gw, outcomes_by_gw.get(gw, {}), picks, population)
    return scores


def unicorn_fixtures(gw, outcomes, picks, population):
    """Fixtures that were a unicorn within this population.

    Returns:
        list of (fixture_index, user_id, choice) in fixture order
    """
    members = set(population)
    if len(members) < UNICORN_MIN_POPULATION:
        return []

    found = []
    for fixture_index in sorted(outcomes):
        outcome = outcomes[fixture_index]
        correct = {
            p.user_id
            for p in picks
            if p.gw == gw
            and p.fixture_index == fixture_index
            and p.user_id in members
            and p.choice == outcome
        }
        if len(correct) == 1:
            found.append((fixture_index, next(iter(correct)), outcome))
    return found


def user_points(scores_by_gw, user_id):
    """[(gw, correct_count)] for the gameweeks a user took part in"""
    return [
        (gw, scores[user_id].correct_count)
        for gw, scores in sorted(scores_by_gw.items())
        if user_id in scores
    ]
