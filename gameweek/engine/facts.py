"""
Fact types consumed by the scoring engine.

Facts are immutable snapshots of what the database holds at one moment:
fixtures, picks, submissions, settled results, live scores and league
membership. Everything the engine derives (scores, ranks, tables) is
computed from a single FactSnapshot and never stored back.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime

HOME = "H"
DRAW = "D"
AWAY = "A"
CHOICES = (HOME, DRAW, AWAY)

# Live score statuses reported by the scores feed
STATUS_SCHEDULED = "SCHEDULED"
STATUS_TIMED = "TIMED"
STATUS_IN_PLAY = "IN_PLAY"
STATUS_PAUSED = "PAUSED"
STATUS_FINISHED = "FINISHED"
STARTED_STATUSES = frozenset({STATUS_IN_PLAY, STATUS_PAUSED, STATUS_FINISHED})

DEFAULT_NAME = "User"


@dataclass(frozen=True, slots=True)
class Fixture:
    gw: int
    fixture_index: int
    home_id: int
    away_id: int
    kickoff_time: datetime | None = None
    home_name: str | None = None
    away_name: str | None = None

    @property
    def key(self):
        return (self.gw, self.fixture_index)


@dataclass(frozen=True, slots=True)
class Pick:
    user_id: int
    gw: int
    fixture_index: int
    choice: str

    @property
    def key(self):
        return (self.gw, self.fixture_index)


@dataclass(frozen=True, slots=True)
class Submission:
    user_id: int
    gw: int
    submitted_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Result:
    gw: int
    fixture_index: int
    outcome: str | None = None
    home_goals: int | None = None
    away_goals: int | None = None

    def to_outcome(self):
        """Settled outcome, falling back to the recorded goals"""
        if self.outcome in CHOICES:
            return self.outcome
        if self.home_goals is not None and self.away_goals is not None:
            return outcome_from_score(self.home_goals, self.away_goals)
        return None


@dataclass(frozen=True, slots=True)
class LiveScore:
    gw: int
    fixture_index: int
    home_score: int
    away_score: int
    status: str = STATUS_SCHEDULED
    minute: int | None = None

    @property
    def has_started(self):
        return self.status in STARTED_STATUSES

    def to_outcome(self):
        if not self.has_started:
            return None
        return outcome_from_score(self.home_score, self.away_score)


@dataclass(frozen=True, slots=True)
class LeagueMembership:
    league_id: int
    user_id: int


@dataclass(frozen=True, slots=True)
class League:
    id: int
    name: str = "League"
    created_at: datetime | None = None
    start_gw: int | None = None


@dataclass(frozen=True, slots=True)
class GwScore:
    user_id: int
    gw: int
    correct_count: int = 0
    unicorn_count: int = 0


@dataclass(frozen=True, slots=True)
class RankedEntry:
    subject_id: int
    value: float
    rank: int
    tied: bool = False


def outcome_from_score(home, away):
    if home > away:
        return HOME
    if home < away:
        return AWAY
    return DRAW


def eligible_picks(picks, submissions):
    """Drop picks whose (user, gw) has no submission.

    A pick is invisible to every computation until the user has submitted
    the gameweek it belongs to.
    """
    submitted = {(s.user_id, s.gw) for s in submissions}
    return [p for p in picks if (p.user_id, p.gw) in submitted]


@dataclass(frozen=True)
class FactSnapshot:
    """One consistent read of every fact the engine needs.

    ``version`` is a digest of the content, so two snapshots holding the
    same facts share a version and any change to any fact produces a new
    one. Memoized results are keyed by it.
    """

    fixtures: tuple = ()
    picks: tuple = ()
    submissions: tuple = ()
    results: tuple = ()
    live_scores: tuple = ()
    memberships: tuple = ()
    leagues: tuple = ()
    current_gw: int | None = None
    names: dict = field(default_factory=dict)
    version: str = field(init=False, default="")

    def __post_init__(self):
        for name in (
            "fixtures",
            "picks",
            "submissions",
            "results",
            "live_scores",
            "memberships",
            "leagues",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))
        object.__setattr__(self, "names", dict(self.names or {}))
        object.__setattr__(self, "version", self._digest())

    def _digest(self):
        digest = hashlib.sha1()
        parts = [
            ("fixtures", self.fixtures),
            ("picks", self.picks),
            ("submissions", self.submissions),
            ("results", self.results),
            ("live_scores", self.live_scores),
            ("memberships", self.memberships),
            ("leagues", self.leagues),
            ("names", tuple(self.names.items())),
        ]
        for label, items in parts:
            digest.update(label.encode())
            for line in sorted(repr(item) for item in items):
                digest.update(line.encode())
                digest.update(b"\n")
        digest.update(f"current_gw={self.current_gw}".encode())
        return digest.hexdigest()

    def name_of(self, user_id):
        return self.names.get(user_id) or DEFAULT_NAME

    @property
    def visible_picks(self):
        return eligible_picks(self.picks, self.submissions)

    def fixtures_for_gw(self, gw):
        return [f for f in self.fixtures if f.gw == gw]

    def results_for_gw(self, gw):
        return [r for r in self.results if r.gw == gw]

    def live_scores_for_gw(self, gw):
        return [s for s in self.live_scores if s.gw == gw]

    def submitters(self, gw):
        return {s.user_id for s in self.submissions if s.gw == gw}

    def league(self, league_id):
        return next((lg for lg in self.leagues if lg.id == league_id), None)

    def league_members(self, league_id):
        members = []
        for m in self.memberships:
            if m.league_id == league_id and m.user_id not in members:
                members.append(m.user_id)
        return members

    def leagues_for_user(self, user_id):
        league_ids = {m.league_id for m in self.memberships if m.user_id == user_id}
        return [lg for lg in self.leagues if lg.id in league_ids]
