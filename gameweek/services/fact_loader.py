"""
Fact Loader

Reads every fact the engine needs for one season from the database and
freezes it into a FactSnapshot. All tables are read inside one
transaction so a snapshot never mixes results from before a write with
picks from after it.

Database errors are never caught here: a failed read of results must
surface as an error, not as "no results yet".
"""

import logging

from flask import current_app

from gameweek import NotFoundError, db
from gameweek.engine.facts import FactSnapshot
from gameweek.models import (
    Fixture,
    GwResult,
    League,
    LeagueMember,
    LiveScore,
    Pick,
    Season,
    Submission,
    User,
)
from gameweek.utils.performance import PerformanceMonitor

logger = logging.getLogger(__name__)


class FactLoader:
    """Builds immutable fact snapshots from the database"""

    def resolve_season(self, season_id=None):
        """The requested season, or the active one when no id is given"""
        if season_id is None:
            season = Season.get_current_season()
            if season is None:
                raise NotFoundError("No active season")
            return season

        season = db.session.get(Season, season_id)
        if season is None:
            raise NotFoundError(f"Season {season_id} not found")
        return season

    def load(self, season_id=None):
        """
        Read one consistent snapshot of a season's facts

        Args:
            season_id: Season to load; the active season when None

        Returns:
            FactSnapshot
        """
        isolation_level = current_app.config.get("SNAPSHOT_ISOLATION_LEVEL")

        # Start from a fresh transaction so every query below shares it
        db.session.commit()
        if isolation_level:
            db.session.connection(execution_options={"isolation_level": isolation_level})

        with PerformanceMonitor("fact_snapshot_load"):
            snapshot = self._read(season_id)
        db.session.commit()

        logger.info(
            f"Loaded snapshot {snapshot.version[:12]} for GW{snapshot.current_gw}: "
            f"{len(snapshot.fixtures)} fixtures, {len(snapshot.picks)} picks, "
            f"{len(snapshot.results)} results, {len(snapshot.live_scores)} live scores"
        )
        return snapshot

    def _read(self, season_id):
        season = self.resolve_season(season_id)
        sid = season.id

        fixtures = (
            Fixture.query.filter_by(season_id=sid)
            .order_by(Fixture.gw, Fixture.fixture_index)
            .all()
        )
        picks = Pick.query.filter_by(season_id=sid).order_by(Pick.id).all()
        submissions = Submission.query.filter_by(season_id=sid).all()
        results = GwResult.query.filter_by(season_id=sid).all()
        live_scores = LiveScore.query.filter_by(season_id=sid).all()
        leagues = League.query.filter_by(season_id=sid).order_by(League.id).all()
        memberships = (
            LeagueMember.query.join(League, LeagueMember.league_id == League.id)
            .filter(League.season_id == sid)
            .order_by(LeagueMember.id)
            .all()
        )
        users = User.query.all()

        return FactSnapshot(
            fixtures=[f.to_fact() for f in fixtures],
            picks=[p.to_fact() for p in picks],
            submissions=[s.to_fact() for s in submissions],
            results=[r.to_fact() for r in results],
            live_scores=[s.to_fact() for s in live_scores],
            memberships=[m.to_fact() for m in memberships],
            leagues=[lg.to_fact() for lg in leagues],
            current_gw=season.current_gw,
            names={u.id: u.name for u in users},
        )


fact_loader = FactLoader()
