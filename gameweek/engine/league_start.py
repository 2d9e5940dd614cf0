"""
League start gameweek resolution.

A league only counts gameweeks it existed for. The start is taken from,
in order: a configured override by league name, the league's explicit
start_gw, the first completed gameweek whose deadline falls after the
league was created, the gameweek after the last completed one, and
finally the current gameweek (the first gameweek when there is none).
"""

from datetime import timedelta, timezone

from gameweek.engine.outcomes import completed_gameweeks

DEADLINE_BUFFER_MINUTES = 75
FIRST_GAMEWEEK = 1


def as_utc(dt):
    """Treat naive datetimes as UTC"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def gameweek_deadlines(fixtures, buffer_minutes=DEADLINE_BUFFER_MINUTES):
    """{gw: deadline} where the deadline is the first kickoff minus the buffer"""
    first_kickoff = {}
    for fixture in fixtures:
        kickoff = as_utc(fixture.kickoff_time)
        if kickoff is None:
            continue
        if fixture.gw not in first_kickoff or kickoff < first_kickoff[fixture.gw]:
            first_kickoff[fixture.gw] = kickoff
    buffer = timedelta(minutes=buffer_minutes)
    return {gw: kickoff - buffer for gw, kickoff in first_kickoff.items()}


def resolve_league_start_gw(
    league,
    current_gw,
    fixtures=(),
    results=(),
    overrides=None,
    buffer_minutes=DEADLINE_BUFFER_MINUTES,
):
    """First gameweek counted in a league's table.

    Args:
        league: League fact, or None
        current_gw: gameweek in progress, or None before the season starts
        fixtures: Fixture facts (kickoff times give the deadlines)
        results: Result facts (which gameweeks are completed)
        overrides: {league name: start gw}
        buffer_minutes: minutes before first kickoff that picks lock

    Returns:
        int start gameweek
    """
    fallback = current_gw or FIRST_GAMEWEEK
    if league is None or not league.id:
        return fallback

    overrides = overrides or {}
    if league.name in overrides:
        return int(overrides[league.name])

    if league.start_gw is not None:
        return league.start_gw

    created_at = as_utc(league.created_at)
    if created_at is None:
        return fallback

    completed = completed_gameweeks(fixtures, results)
    deadlines = gameweek_deadlines(fixtures, buffer_minutes)
    for gw in completed:
        deadline = deadlines.get(gw)
        # Created strictly before the deadline means the league took part
        if deadline is not None and created_at < deadline:
            return gw

    if completed:
        return max(completed) + 1
    return fallback
