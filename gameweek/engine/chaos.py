"""
Chaos picks and team affinity for one user.
"""

from dataclasses import dataclass

CHAOS_SHARE_PERCENT = 25
TEAM_MIN_TALLIES = 3


@dataclass(frozen=True, slots=True)
class ChaosReport:
    index: float | None = None
    chaos_count: int = 0
    chaos_correct: int = 0
    decided_count: int = 0

    def to_dict(self):
        return {
            "chaosIndex": self.index,
            "chaosTotalCount": self.chaos_count,
            "chaosCorrectCount": self.chaos_correct,
            "decidedCount": self.decided_count,
        }


@dataclass(frozen=True, slots=True)
class TeamAffinity:
    team_id: int
    name: str
    percentage: float
    correct: int
    total: int

    def to_dict(self):
        return {
            "team_id": self.team_id,
            "name": self.name,
            "percentage": self.percentage,
            "correct": self.correct,
            "total": self.total,
        }


def pick_shares(picks):
    """{(gw, fixture_index): {choice: count}} over the whole population"""
    shares = {}
    for pick in picks:
        counts = shares.setdefault(pick.key, {})
        counts[pick.choice] = counts.get(pick.choice, 0) + 1
    return shares


def chaos_report(user_id, picks, outcomes):
    """How often the user sides with a small minority of the population.

    A pick is a chaos pick when no more than 25% of all picks on that
    fixture share its choice. Only fixtures with a decided outcome are
    counted.

    Args:
        user_id: user being analysed
        picks: submission-gated picks of the full population
        outcomes: {(gw, fixture_index): outcome}

    Returns:
        ChaosReport; index is None when the user has no decided pick
    """
    shares = pick_shares(picks)
    decided = 0
    chaos = 0
    chaos_correct = 0

    for pick in picks:
        if pick.user_id != user_id:
            continue
        outcome = outcomes.get(pick.key)
        if outcome is None:
            continue
        decided += 1
        counts = shares.get(pick.key, {})
        total = sum(counts.values())
        share = counts.get(pick.choice, 0) / total * 100 if total else 0
        if share <= CHAOS_SHARE_PERCENT:
            chaos += 1
            if pick.choice == outcome:
                chaos_correct += 1

    if not decided:
        return ChaosReport()
    return ChaosReport(
        index=chaos / decided * 100,
        chaos_count=chaos,
        chaos_correct=chaos_correct,
        decided_count=decided,
    )


def team_tallies(user_id, picks, outcomes, fixtures):
    """Correct/total per team over the user's decided picks.

    Both teams of a fixture are credited with the user's result on it.
    Teams appear in first-seen order (gameweek, fixture, home before away).
    """
    fixture_by_key = {f.key: f for f in fixtures}
    tallies = {}
    user_picks = sorted((p for p in picks if p.user_id == user_id), key=lambda p: p.key)
    for pick in user_picks:
        outcome = outcomes.get(pick.key)
        fixture = fixture_by_key.get(pick.key)
        if outcome is None or fixture is None:
            continue
        got_it = pick.choice == outcome
        teams = (
            (fixture.home_id, fixture.home_name),
            (fixture.away_id, fixture.away_name),
        )
        for team_id, team_name in teams:
            if team_id is None:
                continue
            tally = tallies.setdefault(
                team_id, {"name": team_name or str(team_id), "correct": 0, "total": 0}
            )
            tally["total"] += 1
            if got_it:
                tally["correct"] += 1
    return tallies


def team_affinity(user_id, picks, outcomes, fixtures):
    """Teams the user reads best and worst.

    Only teams with at least three tallies qualify. Ties keep the team seen
    first.

    Returns:
        (most_correct, most_incorrect) TeamAffinity pair; either may be None
    """
    most_correct = None
    most_incorrect = None
    for team_id, tally in team_tallies(user_id, picks, outcomes, fixtures).items():
        total = tally["total"]
        if total < TEAM_MIN_TALLIES:
            continue
        correct = tally["correct"]
        correct_pct = correct / total * 100
        incorrect_pct = (total - correct) / total * 100
        if most_correct is None or correct_pct > most_correct.percentage:
            most_correct = TeamAffinity(team_id, tally["name"], correct_pct, correct, total)
        if most_incorrect is None or incorrect_pct > most_incorrect.percentage:
            most_incorrect = TeamAffinity(team_id, tally["name"], incorrect_pct, correct, total)
    return most_correct, most_incorrect
