"""
Pure scoring and ranking engine.

Nothing in this package touches Flask or the database: every function
takes facts (usually one FactSnapshot) and returns derived values.
"""

from .facts import (
    AWAY,
    DRAW,
    HOME,
    FactSnapshot,
    Fixture,
    GwScore,
    League,
    LeagueMembership,
    LiveScore,
    Pick,
    RankedEntry,
    Result,
    Submission,
    eligible_picks,
)
from .form import (
    form_leaderboard,
    form_points,
    gameweek_leaderboard,
    season_leaderboard,
    trailing_form_leaderboard,
)
from .league_start import resolve_league_start_gw
from .league_table import build_league_table, league_victories
from .outcomes import completed_gameweeks, resolve_all_outcomes, resolve_outcomes
from .ranking import percentile, rank_scores
from .scoring import score_gameweek, score_global
from .stats import (
    build_gameweek_summary,
    build_league_gameweek_rows,
    build_league_season_table,
    build_user_stats,
    collect_unicorns,
)
from .trophies import build_trophy_cabinet

__all__ = [
    "HOME",
    "DRAW",
    "AWAY",
    "Fixture",
    "Pick",
    "Submission",
    "Result",
    "LiveScore",
    "League",
    "LeagueMembership",
    "GwScore",
    "RankedEntry",
    "FactSnapshot",
    "eligible_picks",
    "resolve_outcomes",
    "resolve_all_outcomes",
    "completed_gameweeks",
    "score_gameweek",
    "score_global",
    "rank_scores",
    "percentile",
    "form_points",
    "form_leaderboard",
    "trailing_form_leaderboard",
    "season_leaderboard",
    "gameweek_leaderboard",
    "build_league_table",
    "league_victories",
    "resolve_league_start_gw",
    "build_trophy_cabinet",
    "build_user_stats",
    "build_gameweek_summary",
    "build_league_season_table",
    "build_league_gameweek_rows",
    "collect_unicorns",
]
