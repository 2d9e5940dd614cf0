from datetime import datetime, timezone

from gameweek import db
from gameweek.engine import facts


class LiveScore(db.Model):
    __tablename__ = "live_scores"

    id = db.Column(db.Integer, primary_key=True)
    season_id = db.Column(db.Integer, db.ForeignKey("seasons.id"), nullable=False)
    gw = db.Column(db.Integer, nullable=False)
    fixture_index = db.Column(db.Integer, nullable=False)

    home_score = db.Column(db.Integer, default=0, nullable=False)
    away_score = db.Column(db.Integer, default=0, nullable=False)
    status = db.Column(db.String(20), default=facts.STATUS_SCHEDULED, nullable=False)
    minute = db.Column(db.Integer)

    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.UniqueConstraint("season_id", "gw", "fixture_index", name="unique_live_score"),
    )

    def __repr__(self):
        return (
            f"<LiveScore GW{self.gw} #{self.fixture_index} "
            f"{self.home_score}-{self.away_score} {self.status}>"
        )

    def to_fact(self):
        return facts.LiveScore(
            gw=self.gw,
            fixture_index=self.fixture_index,
            home_score=self.home_score or 0,
            away_score=self.away_score or 0,
            status=self.status,
            minute=self.minute,
        )
