"""
Trophy cabinet: how often a user finished first.

Every completed gameweek is replayed from scratch as of that gameweek:
the single-gameweek table, the 5- and 10-week form tables and the season
table are rebuilt from the scores up to that point, never carried over
from the previous gameweek. Shared first place counts as a trophy.
"""

import logging
from dataclasses import asdict, dataclass

from gameweek.engine.form import (
    gameweek_leaderboard,
    season_leaderboard,
    trailing_form_leaderboard,
)
from gameweek.engine.ranking import rank_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrophyCabinet:
    last_gw: int = 0
    form5: int = 0
    form10: int = 0
    overall: int = 0

    def to_dict(self):
        return {
            "lastGw": self.last_gw,
            "form5": self.form5,
            "form10": self.form10,
            "overall": self.overall,
        }


@dataclass(frozen=True, slots=True)
class GameweekTrophies:
    gw: bool = False
    form5: bool = False
    form10: bool = False
    overall: bool = False

    def to_dict(self):
        return asdict(self)


def scores_through(scores_by_gw, gw):
    """Scores restricted to gameweeks up to and including gw"""
    return {g: week for g, week in scores_by_gw.items() if g <= gw}


def trophies_at(user_id, gw, scores_by_gw, names=None):
    """Which "finished #1" checks the user passed as of one gameweek"""
    as_of = scores_through(scores_by_gw, gw)
    return GameweekTrophies(
        gw=rank_of(gameweek_leaderboard(as_of, gw, names), user_id) == 1,
        form5=rank_of(trailing_form_leaderboard(as_of, gw, 5, names), user_id) == 1,
        form10=rank_of(trailing_form_leaderboard(as_of, gw, 10, names), user_id) == 1,
        overall=rank_of(season_leaderboard(as_of, gw, names), user_id) == 1,
    )


def build_trophy_cabinet(user_id, completed_gws, scores_by_gw, names=None):
    """Count first-place finishes across every completed gameweek.

    Args:
        user_id: viewing user
        completed_gws: completed gameweeks
        scores_by_gw: {gw: {user_id: GwScore}} for the global population
        names: {user_id: display name}

    Returns:
        TrophyCabinet
    """
    counts = {"last_gw": 0, "form5": 0, "form10": 0, "overall": 0}
    for gw in sorted(set(completed_gws)):
        won = trophies_at(user_id, gw, scores_by_gw, names)
        counts["last_gw"] += int(won.gw)
        counts["form5"] += int(won.form5)
        counts["form10"] += int(won.form10)
        counts["overall"] += int(won.overall)

    cabinet = TrophyCabinet(**counts)
    logger.debug(f"Trophy cabinet for {user_id}: {cabinet}")
    return cabinet
