from datetime import datetime, timezone

from gameweek import db
from gameweek.engine import facts


class GwResult(db.Model):
    __tablename__ = "gw_results"

    id = db.Column(db.Integer, primary_key=True)
    season_id = db.Column(db.Integer, db.ForeignKey("seasons.id"), nullable=False)
    gw = db.Column(db.Integer, nullable=False)
    fixture_index = db.Column(db.Integer, nullable=False)

    # Outcome may be left empty when only the final score was recorded
    outcome = db.Column(db.String(1))
    home_goals = db.Column(db.Integer)
    away_goals = db.Column(db.Integer)

    recorded_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint("season_id", "gw", "fixture_index", name="unique_fixture_result"),
        db.Index("idx_result_season_gw", "season_id", "gw"),
    )

    def __repr__(self):
        return f"<GwResult GW{self.gw} #{self.fixture_index} {self.outcome}>"

    def to_fact(self):
        return facts.Result(
            gw=self.gw,
            fixture_index=self.fixture_index,
            outcome=self.outcome,
            home_goals=self.home_goals,
            away_goals=self.away_goals,
        )
