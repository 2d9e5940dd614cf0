"""
Window aggregation: form, season and single-gameweek leaderboards.

Form only admits users who played every gameweek of the window. Missing
one week removes the user from the table entirely rather than scoring the
gap as zero, so form measures consistency and not volume.
"""

import logging

from gameweek.engine.ranking import name_key, rank_scores

logger = logging.getLogger(__name__)

FORM_WINDOWS = (5, 10)


def form_points(scores_by_gw, start_gw, end_gw, population=None):
    """Summed correct picks over an inclusive window, eligible users only.

    Args:
        scores_by_gw: {gw: {user_id: GwScore}}
        start_gw: first gameweek of the window
        end_gw: last gameweek of the window
        population: optional user ids to restrict to

    Returns:
        {user_id: formPoints}; empty when end_gw < start_gw
    """
    if end_gw < start_gw:
        return {}

    window = range(start_gw, end_gw + 1)
    candidates = set(population) if population is not None else None
    totals = None
    for gw in window:
        week = scores_by_gw.get(gw, {})
        present = set(week) if candidates is None else set(week) & candidates
        if totals is None:
            totals = {uid: 0 for uid in present}
        else:
            totals = {uid: pts for uid, pts in totals.items() if uid in present}
        for uid in totals:
            totals[uid] += week[uid].correct_count
        if not totals:
            break
    return totals or {}


def form_leaderboard(scores_by_gw, start_gw, end_gw, names=None, population=None):
    """Ranked form table (formPoints desc, name asc)"""
    points = form_points(scores_by_gw, start_gw, end_gw, population=population)
    return rank_scores(points, sort_key=name_key(names or {}))


def trailing_form_leaderboard(scores_by_gw, end_gw, weeks, names=None):
    """Form table for the ``weeks`` gameweeks ending at ``end_gw``.

    Returns an empty table until enough gameweeks exist (end_gw < weeks).
    """
    if weeks < 1:
        raise ValueError(f"Form window must cover at least one gameweek, got {weeks}")
    if end_gw < weeks:
        return []
    return form_leaderboard(scores_by_gw, end_gw - weeks + 1, end_gw, names=names)


def season_points(scores_by_gw, through_gw=None):
    """Cumulative correct picks (OCP) per user up to and including through_gw"""
    totals = {}
    for gw, week in scores_by_gw.items():
        if through_gw is not None and gw > through_gw:
            continue
        for uid, score in week.items():
            totals[uid] = totals.get(uid, 0) + score.correct_count
    return totals


def season_leaderboard(scores_by_gw, through_gw=None, names=None):
    """Season table over everyone with a score up to through_gw (ocp desc, name asc)"""
    return rank_scores(
        season_points(scores_by_gw, through_gw=through_gw),
        sort_key=name_key(names or {}),
    )


def gameweek_leaderboard(scores_by_gw, gw, names=None):
    """Single-gameweek table over everyone with a score that gameweek"""
    week = scores_by_gw.get(gw, {})
    points = {uid: score.correct_count for uid, score in week.items()}
    return rank_scores(points, sort_key=name_key(names or {}))
