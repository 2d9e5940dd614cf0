from datetime import datetime, timezone

from gameweek import db
from gameweek.engine import facts


class Fixture(db.Model):
    __tablename__ = "fixtures"

    id = db.Column(db.Integer, primary_key=True)

    # Fixture identification: (season, gw, fixture_index) is what picks refer to
    season_id = db.Column(db.Integer, db.ForeignKey("seasons.id"), nullable=False)
    gw = db.Column(db.Integer, nullable=False)
    fixture_index = db.Column(db.Integer, nullable=False)

    # Teams
    home_team_id = db.Column(db.Integer, db.ForeignKey("teams.id"), nullable=False)
    away_team_id = db.Column(db.Integer, db.ForeignKey("teams.id"), nullable=False)

    kickoff_time = db.Column(db.DateTime(timezone=True))

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint(
            "season_id", "gw", "fixture_index", name="unique_fixture_slot"
        ),
        db.Index("idx_fixture_season_gw", "season_id", "gw"),
        db.CheckConstraint("home_team_id != away_team_id", name="different_teams"),
    )

    def __repr__(self):
        return f"<Fixture GW{self.gw} #{self.fixture_index}>"

    @staticmethod
    def get_for_gameweek(season_id, gw):
        return (
            Fixture.query.filter_by(season_id=season_id, gw=gw)
            .order_by(Fixture.fixture_index)
            .all()
        )

    def to_fact(self):
        return facts.Fixture(
            gw=self.gw,
            fixture_index=self.fixture_index,
            home_id=self.home_team_id,
            away_id=self.away_team_id,
            kickoff_time=self.kickoff_time,
            home_name=self.home_team.name if self.home_team else None,
            away_name=self.away_team.name if self.away_team else None,
        )

    def to_dict(self):
        from gameweek.utils.timezone_utils import format_kickoff

        return {
            "gw": self.gw,
            "fixture_index": self.fixture_index,
            "home_team": self.home_team.to_dict() if self.home_team else None,
            "away_team": self.away_team.to_dict() if self.away_team else None,
            "kickoff_time": self.kickoff_time.isoformat() if self.kickoff_time else None,
            "kickoff_display": format_kickoff(self.kickoff_time),
        }
