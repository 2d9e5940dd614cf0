"""
Ranking primitives shared by every leaderboard.

Ranks use standard competition ranking: entries with the same score share
a rank and the next score's rank counts everyone ahead of it (1, 1, 1, 4).
Tie-break keys only order entries inside a shared rank; they never split it.
"""

import math

from gameweek.engine.facts import RankedEntry

NEUTRAL_PERCENTILE = 50


def rank_scores(scores, sort_key=None):
    """Rank subjects by score, highest first.

    Args:
        scores: mapping of subject_id to score, or iterable of
            (subject_id, score) pairs
        sort_key: optional callable(subject_id) returning the ascending
            tie-break key used to order subjects that share a score

    Returns:
        list of RankedEntry in display order
    """
    if hasattr(scores, "items"):
        scores = scores.items()
    pairs = [(subject_id, value) for subject_id, value in scores]

    if sort_key is None:
        pairs.sort(key=lambda pair: -pair[1])
    else:
        pairs.sort(key=lambda pair: (-pair[1], sort_key(pair[0])))

    share_count = {}
    for _, value in pairs:
        share_count[value] = share_count.get(value, 0) + 1

    ranked = []
    current_rank = 1
    for idx, (subject_id, value) in enumerate(pairs):
        if idx > 0 and pairs[idx - 1][1] != value:
            current_rank = idx + 1
        ranked.append(
            RankedEntry(
                subject_id=subject_id,
                value=value,
                rank=current_rank,
                tied=share_count[value] > 1,
            )
        )
    return ranked


def rank_of(entries, subject_id):
    """Rank of a subject, or None when it is not in the ranking"""
    for entry in entries:
        if entry.subject_id == subject_id:
            return entry.rank
    return None


def entry_for(entries, subject_id):
    return next((e for e in entries if e.subject_id == subject_id), None)


def round2(value):
    """Round half up to two decimal places"""
    return math.floor(value * 100 + 0.5) / 100


def percentile(value, population):
    """Share of the population scoring at or below ``value``, 0-100.

    An empty population has no ordering to report, so it is neutral (50).
    """
    population = list(population)
    if not population:
        return NEUTRAL_PERCENTILE
    at_or_below = sum(1 for other in population if other <= value)
    return round2(at_or_below / len(population) * 100)


def name_key(names):
    """Tie-break on display name, ascending"""

    def key(subject_id):
        name = names.get(subject_id) or "User"
        return (name.casefold(), name, str(subject_id))

    return key
