from gameweek import db  # noqa: F401 - imported for model imports

from .fixture import Fixture
from .league import League
from .league_member import LeagueMember
from .live_score import LiveScore
from .pick import Pick
from .result import GwResult
from .season import Season
from .submission import Submission
from .team import Team
from .user import User

__all__ = [
    "Season",
    "User",
    "Team",
    "Fixture",
    "Pick",
    "Submission",
    "GwResult",
    "LiveScore",
    "League",
    "LeagueMember",
]
