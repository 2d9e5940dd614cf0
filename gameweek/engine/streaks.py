"""
Streaks over an ordered list of gameweeks and a per-gameweek predicate.
"""

from dataclasses import dataclass

TOP_QUARTILE_PERCENTILE = 75


@dataclass(frozen=True, slots=True)
class Streak:
    length: int = 0
    start_gw: int | None = None
    end_gw: int | None = None

    @property
    def label(self):
        """Display range such as "GW6–GW10", None for an empty streak"""
        if not self.length:
            return None
        return f"GW{self.start_gw}–GW{self.end_gw}"


def current_streak(gameweeks, predicate):
    """Run length ending at the latest gameweek.

    Scans backward from the last gameweek and stops at the first one
    that fails the predicate.
    """
    ordered = sorted(gameweeks)
    length = 0
    start_gw = None
    for gw in reversed(ordered):
        if not predicate(gw):
            break
        length += 1
        start_gw = gw
    if not length:
        return Streak()
    return Streak(length=length, start_gw=start_gw, end_gw=ordered[-1])


def best_streak(gameweeks, predicate):
    """Longest contiguous run, scanning forward.

    On equal lengths the first run found is kept; a later run replaces it
    only when strictly longer.
    """
    best = Streak()
    run_length = 0
    run_start = None
    for gw in sorted(gameweeks):
        if predicate(gw):
            if run_length == 0:
                run_start = gw
            run_length += 1
            if run_length > best.length:
                best = Streak(length=run_length, start_gw=run_start, end_gw=gw)
        else:
            run_length = 0
    return best


def top_quartile_streak(gameweeks, percentiles, threshold=TOP_QUARTILE_PERCENTILE):
    """Best run of gameweeks finishing at or above ``threshold`` percentile.

    Args:
        gameweeks: completed gameweeks
        percentiles: {gw: percentile}; a gameweek missing here breaks the run
    """

    def in_top_quartile(gw):
        value = percentiles.get(gw)
        return value is not None and value >= threshold

    return best_streak(gameweeks, in_top_quartile)


def participation_streak(gameweeks, scores_by_gw, user_id):
    """Consecutive latest gameweeks in which the user has a score"""
    return current_streak(gameweeks, lambda gw: user_id in scores_by_gw.get(gw, {}))
