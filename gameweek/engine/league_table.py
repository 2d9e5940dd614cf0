"""
Mini-league tables.

Each fully decided gameweek since the league started is a "match" between
all members: the member with the best (correct, unicorns) pair wins it for
3 points; members sharing the best pair draw it for 1 point each. The
season table orders members by points, unicorns, correct picks and name,
and positions are plain row numbers rather than shared ranks.
"""

import logging
from dataclasses import dataclass, field

from gameweek.engine.outcomes import is_gameweek_decided
from gameweek.engine.ranking import name_key
from gameweek.engine.scoring import score_gameweek

logger = logging.getLogger(__name__)

WIN_POINTS = 3
DRAW_POINTS = 1
MIN_MEMBERS_FOR_VICTORY = 2

FORM_WIN = "W"
FORM_DRAW = "D"
FORM_LOSS = "L"


@dataclass(slots=True)
class LeagueRow:
    user_id: int
    name: str
    mlt_pts: int = 0
    wins: int = 0
    draws: int = 0
    ocp: int = 0
    unicorns: int = 0
    form: list = field(default_factory=list)
    position: int | None = None

    @property
    def form_string(self):
        return "".join(self.form)

    def to_dict(self):
        return {
            "position": self.position,
            "user_id": self.user_id,
            "name": self.name,
            "mltPts": self.mlt_pts,
            "wins": self.wins,
            "draws": self.draws,
            "ocp": self.ocp,
            "unicorns": self.unicorns,
            "form": self.form_string,
        }


@dataclass(slots=True)
class LeagueTable:
    league_id: int
    start_gw: int
    relevant_gws: list = field(default_factory=list)
    rows: list = field(default_factory=list)
    gw_winners: dict = field(default_factory=dict)

    @property
    def latest_relevant_gw(self):
        return self.relevant_gws[-1] if self.relevant_gws else None

    @property
    def latest_gw_winners(self):
        latest = self.latest_relevant_gw
        if latest is None:
            return ()
        return self.gw_winners.get(latest, ())

    def position_of(self, user_id):
        for row in self.rows:
            if row.user_id == user_id:
                return row.position
        return None

    def to_dict(self):
        return {
            "league_id": self.league_id,
            "start_gw": self.start_gw,
            "relevant_gws": list(self.relevant_gws),
            "rows": [row.to_dict() for row in self.rows],
            "latest_gw_winners": list(self.latest_gw_winners),
        }


def relevant_gameweeks(fixtures, outcomes_by_gw, start_gw, current_gw):
    """Fully decided gameweeks in [start_gw, current_gw).

    The gameweek in progress is never relevant; a gameweek only counts
    once every one of its fixtures has an outcome. A None bound is open.
    """
    indexes_by_gw = {}
    for fixture in fixtures:
        indexes_by_gw.setdefault(fixture.gw, set()).add(fixture.fixture_index)

    relevant = []
    for gw in sorted(indexes_by_gw):
        if start_gw is not None and gw < start_gw:
            continue
        if current_gw is not None and gw >= current_gw:
            continue
        if is_gameweek_decided(indexes_by_gw[gw], outcomes_by_gw.get(gw, {})):
            relevant.append(gw)
    return relevant


def gameweek_winners(scores):
    """User ids sharing the best (correct, unicorns) pair for one gameweek"""
    if not scores:
        return []
    best = max((s.correct_count, s.unicorn_count) for s in scores.values())
    return [
        uid
        for uid, s in scores.items()
        if (s.correct_count, s.unicorn_count) == best
    ]


def build_league_table(
    league_id, members, start_gw, current_gw, fixtures, outcomes_by_gw, picks, names=None
):
    """Season standings of one mini league.

    Args:
        league_id: League id
        members: member user ids
        start_gw: first gameweek counted for this league
        current_gw: gameweek in progress (excluded), or None for no limit
        fixtures: Fixture facts
        outcomes_by_gw: {gw: {fixture_index: outcome}}
        picks: submission-gated Pick facts
        names: {user_id: display name}

    Returns:
        LeagueTable with rows ordered mltPts, unicorns, ocp desc, name asc
    """
    names = names or {}
    members = list(dict.fromkeys(members))
    relevant = relevant_gameweeks(fixtures, outcomes_by_gw, start_gw, current_gw)
    table = LeagueTable(league_id=league_id, start_gw=start_gw, relevant_gws=relevant)
    if not members:
        return table

    rows = {uid: LeagueRow(user_id=uid, name=names.get(uid) or "User") for uid in members}
    member_picks = [p for p in picks if p.user_id in rows]

    for gw in relevant:
        scores = score_gameweek(gw, outcomes_by_gw.get(gw, {}), member_picks, members)
        for uid, score in scores.items():
            rows[uid].ocp += score.correct_count
            rows[uid].unicorns += score.unicorn_count

        winners = gameweek_winners(scores)
        table.gw_winners[gw] = tuple(winners)
        solo = len(winners) == 1
        for uid, row in rows.items():
            if uid not in winners:
                row.form.append(FORM_LOSS)
            elif solo:
                row.mlt_pts += WIN_POINTS
                row.wins += 1
                row.form.append(FORM_WIN)
            else:
                row.mlt_pts += DRAW_POINTS
                row.draws += 1
                row.form.append(FORM_DRAW)

    by_name = name_key(names)
    ordered = sorted(
        rows.values(),
        key=lambda r: (-r.mlt_pts, -r.unicorns, -r.ocp, by_name(r.user_id)),
    )
    for position, row in enumerate(ordered, start=1):
        row.position = position
    table.rows = ordered

    logger.debug(
        f"League {league_id}: {len(relevant)} relevant gameweeks from GW{start_gw}, "
        f"{len(ordered)} members"
    )
    return table


def league_gameweek_table(gw, members, outcomes, picks, names=None):
    """Rows of one league for one gameweek, live outcomes included.

    Returns:
        list of dicts (user_id, name, score, unicorns) ordered score desc,
        unicorns desc, name asc
    """
    names = names or {}
    scores = score_gameweek(gw, outcomes, picks, members)
    by_name = name_key(names)
    ordered = sorted(
        scores.values(),
        key=lambda s: (-s.correct_count, -s.unicorn_count, by_name(s.user_id)),
    )
    return [
        {
            "user_id": s.user_id,
            "name": names.get(s.user_id) or "User",
            "score": s.correct_count,
            "unicorns": s.unicorn_count,
        }
        for s in ordered
    ]


def league_victories(user_id, gw, leagues, outcomes, picks, participants):
    """Leagues the user won outright in one gameweek.

    Args:
        user_id: viewing user
        gw: gameweek
        leagues: iterable of (League, member ids)
        outcomes: {fixture_index: outcome} for the gameweek
        picks: submission-gated Pick facts
        participants: user ids who submitted the gameweek

    Returns:
        list of League the user won alone; draws are not victories
    """
    won = []
    for league, members in leagues:
        members = list(dict.fromkeys(members))
        if len(members) < MIN_MEMBERS_FOR_VICTORY:
            continue
        if not any(uid in participants for uid in members):
            continue
        scores = score_gameweek(gw, outcomes, picks, members)
        winners = gameweek_winners(scores)
        if winners == [user_id]:
            won.append(league)
    return won
