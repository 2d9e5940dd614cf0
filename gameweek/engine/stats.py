"""
Snapshot-level compositions of the engine: user profile stats, the
gameweek summary shown after results land, league tables with their
start gameweek resolved, and a user's unicorn collection.

Everything here takes a FactSnapshot and returns plain data; nothing is
fetched or stored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from gameweek.engine.chaos import ChaosReport, chaos_report, team_affinity
from gameweek.engine.form import (
    gameweek_leaderboard,
    season_leaderboard,
    season_points,
    trailing_form_leaderboard,
)
from gameweek.engine.league_start import DEADLINE_BUFFER_MINUTES, resolve_league_start_gw
from gameweek.engine.league_table import (
    build_league_table,
    league_gameweek_table,
    league_victories,
)
from gameweek.engine.outcomes import (
    completed_gameweeks,
    resolve_all_outcomes,
    settled_outcomes,
)
from gameweek.engine.ranking import entry_for, percentile, rank_of, round2
from gameweek.engine.scoring import (
    UNICORN_MIN_POPULATION,
    score_global,
    unicorn_fixtures,
    user_points,
)
from gameweek.engine.streaks import (
    Streak,
    participation_streak,
    top_quartile_streak,
)
from gameweek.engine.trophies import TrophyCabinet, build_trophy_cabinet, trophies_at

logger = logging.getLogger(__name__)


def settled_by_gameweek(results):
    """{gw: {fixture_index: outcome}} from stored results only"""
    by_gw = {}
    for (gw, idx), outcome in settled_outcomes(results).items():
        by_gw.setdefault(gw, {})[idx] = outcome
    return by_gw


def completed_scores(snapshot):
    """(completed gameweeks, global GwScores over them) from settled results"""
    completed = completed_gameweeks(snapshot.fixtures, snapshot.results)
    scores = score_global(snapshot, settled_by_gameweek(snapshot.results), gameweeks=completed)
    return completed, scores


def live_scores_by_gw(snapshot):
    """Global GwScores for every submitted gameweek, live outcomes included"""
    return score_global(snapshot, resolve_all_outcomes(snapshot))


@dataclass
class UserStats:
    user_id: int
    last_completed_gw: int | None = None
    last_completed_gw_percentile: float | None = None
    overall_percentile: float | None = None
    correct_prediction_rate: float | None = None
    best_streak: Streak = field(default_factory=Streak)
    current_streak: Streak = field(default_factory=Streak)
    avg_points_per_week: float | None = None
    best_single_gw: dict | None = None
    lowest_single_gw: dict | None = None
    chaos: ChaosReport = field(default_factory=ChaosReport)
    most_correct_team: object = None
    most_incorrect_team: object = None
    weekly_par: list = field(default_factory=list)
    trophy_cabinet: TrophyCabinet = field(default_factory=TrophyCabinet)

    def to_dict(self):
        data = {
            "user_id": self.user_id,
            "lastCompletedGw": self.last_completed_gw,
            "lastCompletedGwPercentile": self.last_completed_gw_percentile,
            "overallPercentile": self.overall_percentile,
            "correctPredictionRate": self.correct_prediction_rate,
            "bestStreak": self.best_streak.length,
            "bestStreakGwRange": self.best_streak.label,
            "currentStreak": self.current_streak.length,
            "avgPointsPerWeek": self.avg_points_per_week,
            "bestSingleGw": self.best_single_gw,
            "lowestSingleGw": self.lowest_single_gw,
            "mostCorrectTeam": (
                self.most_correct_team.to_dict() if self.most_correct_team else None
            ),
            "mostIncorrectTeam": (
                self.most_incorrect_team.to_dict() if self.most_incorrect_team else None
            ),
            "weeklyParData": self.weekly_par or None,
            "trophyCabinet": self.trophy_cabinet.to_dict(),
        }
        data.update(self.chaos.to_dict())
        return data


def build_user_stats(user_id, snapshot):
    """Profile statistics for one user over the completed gameweeks"""
    stats = UserStats(user_id=user_id)
    completed, scores = completed_scores(snapshot)
    if not completed:
        return stats

    names = snapshot.names
    picks = snapshot.visible_picks
    settled = settled_outcomes(snapshot.results)

    last_gw = completed[-1]
    stats.last_completed_gw = last_gw
    last_week = scores.get(last_gw, {})
    stats.last_completed_gw_percentile = percentile(
        last_week[user_id].correct_count if user_id in last_week else 0,
        [s.correct_count for s in last_week.values()],
    )

    ocp = season_points(scores)
    stats.overall_percentile = percentile(ocp.get(user_id, 0), ocp.values())

    decided = [p for p in picks if p.user_id == user_id and p.key in settled]
    if decided:
        hits = sum(1 for p in decided if p.choice == settled[p.key])
        stats.correct_prediction_rate = hits / len(decided) * 100

    played = user_points(scores, user_id)
    if played:
        stats.avg_points_per_week = sum(pts for _, pts in played) / len(played)
        best = played[0]
        lowest = played[0]
        for gw, pts in played[1:]:
            if pts > best[1]:
                best = (gw, pts)
            if pts < lowest[1]:
                lowest = (gw, pts)
        stats.best_single_gw = {"gw": best[0], "points": best[1]}
        stats.lowest_single_gw = {"gw": lowest[0], "points": lowest[1]}

        for gw, pts in played:
            week = [s.correct_count for s in scores[gw].values()]
            stats.weekly_par.append(
                {
                    "gw": gw,
                    "userPoints": pts,
                    "averagePoints": round2(sum(week) / len(week)),
                }
            )

    gw_percentiles = {}
    for gw in completed:
        week = scores.get(gw, {})
        if user_id in week:
            gw_percentiles[gw] = percentile(
                week[user_id].correct_count, [s.correct_count for s in week.values()]
            )
    stats.best_streak = top_quartile_streak(completed, gw_percentiles)
    stats.current_streak = participation_streak(completed, scores, user_id)

    stats.chaos = chaos_report(user_id, picks, settled)
    stats.most_correct_team, stats.most_incorrect_team = team_affinity(
        user_id, picks, settled, snapshot.fixtures
    )
    stats.trophy_cabinet = build_trophy_cabinet(user_id, completed, scores, names)
    return stats


def _movement(before, after):
    change = None
    if before is not None and after is not None:
        change = before - after
    return {"before": before, "after": after, "change": change}


def build_gameweek_summary(user_id, gw, snapshot):
    """What one gameweek meant for a user.

    Before/after positions are full recomputations as of gw - 1 and gw.
    """
    names = snapshot.names
    scores = {g: week for g, week in live_scores_by_gw(snapshot).items() if g <= gw}
    week = scores.get(gw, {})

    gw_table = gameweek_leaderboard(scores, gw, names)
    mine = entry_for(gw_table, user_id)

    overall_after = rank_of(season_leaderboard(scores, gw, names), user_id)
    overall_before = None
    if gw > 1:
        overall_before = rank_of(season_leaderboard(scores, gw - 1, names), user_id)

    changes = {"overall": _movement(overall_before, overall_after)}
    for weeks, label in ((5, "form5"), (10, "form10")):
        after = rank_of(trailing_form_leaderboard(scores, gw, weeks, names), user_id)
        before = None
        if gw > weeks:
            before = rank_of(trailing_form_leaderboard(scores, gw - 1, weeks, names), user_id)
        changes[label] = _movement(before, after)

    outcomes = resolve_all_outcomes(snapshot).get(gw, {})
    leagues = [
        (league, snapshot.league_members(league.id))
        for league in snapshot.leagues_for_user(user_id)
    ]
    won = league_victories(
        user_id, gw, leagues, outcomes, snapshot.visible_picks, set(week)
    )

    return {
        "user_id": user_id,
        "gw": gw,
        "score": mine.value if mine else 0,
        "totalFixtures": len(snapshot.fixtures_for_gw(gw)),
        "gwRank": mine.rank if mine else None,
        "gwRankTotal": len(gw_table),
        "trophies": trophies_at(user_id, gw, scores, names).to_dict(),
        "mlVictories": len(won),
        "mlVictoryNames": [league.name for league in won],
        "leaderboardChanges": changes,
    }


def league_start_for(snapshot, league, overrides=None, buffer_minutes=DEADLINE_BUFFER_MINUTES):
    return resolve_league_start_gw(
        league,
        snapshot.current_gw,
        fixtures=snapshot.fixtures,
        results=snapshot.results,
        overrides=overrides,
        buffer_minutes=buffer_minutes,
    )


def build_league_season_table(
    snapshot, league_id, overrides=None, buffer_minutes=DEADLINE_BUFFER_MINUTES
):
    """League table with the league's start gameweek resolved; None if unknown"""
    league = snapshot.league(league_id)
    if league is None:
        return None
    start_gw = league_start_for(snapshot, league, overrides, buffer_minutes)
    return build_league_table(
        league.id,
        snapshot.league_members(league.id),
        start_gw,
        snapshot.current_gw,
        snapshot.fixtures,
        resolve_all_outcomes(snapshot),
        snapshot.visible_picks,
        snapshot.names,
    )


def build_league_gameweek_rows(snapshot, league_id, gw):
    """Per-gameweek league rows, counting live scores; None if unknown"""
    league = snapshot.league(league_id)
    if league is None:
        return None
    return league_gameweek_table(
        gw,
        snapshot.league_members(league.id),
        resolve_all_outcomes(snapshot).get(gw, {}),
        snapshot.visible_picks,
        snapshot.names,
    )


def collect_unicorns(
    user_id, snapshot, overrides=None, buffer_minutes=DEADLINE_BUFFER_MINUTES
):
    """Every settled fixture the user alone got right within one of their leagues.

    Leagues below the unicorn population size are skipped, and each league
    only counts from its own start gameweek.

    Returns:
        list of dicts ordered gw desc, fixture asc, each listing every
        league in which the fixture was a unicorn
    """
    settled = settled_by_gameweek(snapshot.results)
    picks = snapshot.visible_picks
    fixtures = {f.key: f for f in snapshot.fixtures}
    cards = {}

    for league in snapshot.leagues_for_user(user_id):
        members = snapshot.league_members(league.id)
        if len(members) < UNICORN_MIN_POPULATION:
            continue
        start_gw = league_start_for(snapshot, league, overrides, buffer_minutes)
        for gw in sorted(settled):
            if start_gw is not None and gw < start_gw:
                continue
            for idx, uid, choice in unicorn_fixtures(gw, settled[gw], picks, members):
                if uid != user_id:
                    continue
                card = cards.get((gw, idx))
                if card is None:
                    fixture = fixtures.get((gw, idx))
                    card = {
                        "gw": gw,
                        "fixture_index": idx,
                        "pick": choice,
                        "home_team": fixture.home_name if fixture else None,
                        "away_team": fixture.away_name if fixture else None,
                        "kickoff_time": (
                            fixture.kickoff_time.isoformat()
                            if fixture and fixture.kickoff_time
                            else None
                        ),
                        "league_names": [],
                    }
                    cards[(gw, idx)] = card
                card["league_names"].append(league.name)

    ordered = sorted(cards.values(), key=lambda c: (-c["gw"], c["fixture_index"]))
    logger.debug(f"Collected {len(ordered)} unicorns for {user_id}")
    return ordered
