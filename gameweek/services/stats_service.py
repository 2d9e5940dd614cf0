"""
Stats Service

Runs the engine over a fact snapshot and shapes the output for the API
and CLI. Each computation is memoized per snapshot version, so repeated
requests against unchanged facts are served from the cache while any
new fact forces a recompute.
"""

import logging

from flask import current_app

from gameweek import NotFoundError
from gameweek.engine import form, stats
from gameweek.engine.trophies import build_trophy_cabinet
from gameweek.utils.cache_utils import memoize_for_snapshot
from gameweek.utils.performance import timer

logger = logging.getLogger(__name__)


def leaderboard_rows(entries, names):
    """RankedEntry list to API rows"""
    return [
        {
            "rank": entry.rank,
            "tied": entry.tied,
            "user_id": entry.subject_id,
            "name": names.get(entry.subject_id) or "User",
            "points": entry.value,
        }
        for entry in entries
    ]


class StatsService:
    """Engine results for one season snapshot"""

    def _league_start_settings(self):
        return (
            current_app.config.get("LEAGUE_START_OVERRIDES") or {},
            current_app.config.get("LEAGUE_DEADLINE_BUFFER_MINUTES", 75),
        )

    def _require_user(self, snapshot, user_id):
        if user_id not in snapshot.names:
            raise NotFoundError(f"User {user_id} not found")

    def _require_league(self, snapshot, league_id):
        if snapshot.league(league_id) is None:
            raise NotFoundError(f"League {league_id} not found")

    def _require_gameweek(self, gw):
        if gw < 1:
            raise ValueError(f"Gameweek must be at least 1, got {gw}")

    # Global leaderboards

    @memoize_for_snapshot("gw_leaderboard")
    @timer
    def gameweek_leaderboard(self, snapshot, gw):
        """Single-gameweek table; live scores count for the gameweek in play"""
        self._require_gameweek(gw)
        scores = stats.live_scores_by_gw(snapshot)
        entries = form.gameweek_leaderboard(scores, gw, snapshot.names)
        return {
            "gw": gw,
            "total": len(entries),
            "entries": leaderboard_rows(entries, snapshot.names),
        }

    @memoize_for_snapshot("overall_leaderboard")
    @timer
    def overall_leaderboard(self, snapshot, through_gw=None):
        """Season (OCP) table over completed gameweeks"""
        completed, scores = stats.completed_scores(snapshot)
        if through_gw is None and completed:
            through_gw = completed[-1]
        entries = form.season_leaderboard(scores, through_gw, snapshot.names)
        return {
            "through_gw": through_gw,
            "total": len(entries),
            "entries": leaderboard_rows(entries, snapshot.names),
        }

    @memoize_for_snapshot("form_leaderboard")
    @timer
    def form_leaderboard(self, snapshot, weeks, end_gw=None):
        """Trailing form table over completed gameweeks ending at end_gw"""
        if weeks < 1:
            raise ValueError(f"Form window must cover at least one gameweek, got {weeks}")
        completed, scores = stats.completed_scores(snapshot)
        if end_gw is None:
            end_gw = completed[-1] if completed else 0
        entries = form.trailing_form_leaderboard(scores, end_gw, weeks, snapshot.names)
        return {
            "weeks": weeks,
            "end_gw": end_gw,
            "total": len(entries),
            "entries": leaderboard_rows(entries, snapshot.names),
        }

    # Mini leagues

    def league_table(self, snapshot, league_id, user_id=None):
        self._require_league(snapshot, league_id)
        table = self._league_table(snapshot, league_id)
        if user_id is not None:
            table = dict(table)
            table["user_position"] = next(
                (row["position"] for row in table["rows"] if row["user_id"] == user_id),
                None,
            )
        return table

    @memoize_for_snapshot("league_table")
    @timer
    def _league_table(self, snapshot, league_id):
        overrides, buffer_minutes = self._league_start_settings()
        table = stats.build_league_season_table(
            snapshot, league_id, overrides, buffer_minutes
        )
        data = table.to_dict()
        data["name"] = snapshot.league(league_id).name
        return data

    def league_gameweek(self, snapshot, league_id, gw):
        self._require_league(snapshot, league_id)
        self._require_gameweek(gw)
        return self._league_gameweek(snapshot, league_id, gw)

    @memoize_for_snapshot("league_gameweek")
    def _league_gameweek(self, snapshot, league_id, gw):
        rows = stats.build_league_gameweek_rows(snapshot, league_id, gw)
        return {"league_id": league_id, "gw": gw, "rows": rows}

    # Users

    def user_stats(self, snapshot, user_id):
        self._require_user(snapshot, user_id)
        return self._user_stats(snapshot, user_id)

    @memoize_for_snapshot("user_stats")
    @timer
    def _user_stats(self, snapshot, user_id):
        return stats.build_user_stats(user_id, snapshot).to_dict()

    def gameweek_summary(self, snapshot, user_id, gw):
        self._require_user(snapshot, user_id)
        self._require_gameweek(gw)
        return self._gameweek_summary(snapshot, user_id, gw)

    @memoize_for_snapshot("gw_summary")
    @timer
    def _gameweek_summary(self, snapshot, user_id, gw):
        return stats.build_gameweek_summary(user_id, gw, snapshot)

    def unicorns(self, snapshot, user_id):
        self._require_user(snapshot, user_id)
        return self._unicorns(snapshot, user_id)

    @memoize_for_snapshot("unicorns")
    @timer
    def _unicorns(self, snapshot, user_id):
        overrides, buffer_minutes = self._league_start_settings()
        cards = stats.collect_unicorns(user_id, snapshot, overrides, buffer_minutes)
        return {"user_id": user_id, "count": len(cards), "unicorns": cards}

    def trophies(self, snapshot, user_id):
        self._require_user(snapshot, user_id)
        return self._trophies(snapshot, user_id)

    @memoize_for_snapshot("trophies")
    @timer
    def _trophies(self, snapshot, user_id):
        completed, scores = stats.completed_scores(snapshot)
        cabinet = build_trophy_cabinet(user_id, completed, scores, snapshot.names)
        return {"user_id": user_id, "completed_gws": completed, **cabinet.to_dict()}


stats_service = StatsService()
