from datetime import datetime, timezone

from gameweek import db
from gameweek.engine import facts


class Pick(db.Model):
    __tablename__ = "picks"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    season_id = db.Column(db.Integer, db.ForeignKey("seasons.id"), nullable=False)
    gw = db.Column(db.Integer, nullable=False)
    fixture_index = db.Column(db.Integer, nullable=False)

    # "H", "D" or "A"
    choice = db.Column(db.String(1), nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "season_id", "gw", "fixture_index", name="unique_user_fixture_pick"
        ),
        db.CheckConstraint("choice IN ('H', 'D', 'A')", name="valid_choice"),
        db.Index("idx_pick_season_gw", "season_id", "gw"),
        db.Index("idx_pick_user_season", "user_id", "season_id"),
    )

    def __repr__(self):
        return f"<Pick user_id={self.user_id} GW{self.gw} #{self.fixture_index} {self.choice}>"

    @staticmethod
    def upsert(user_id, season_id, gw, fixture_index, choice):
        """Create or replace a user's pick for one fixture (caller commits)"""
        if choice not in facts.CHOICES:
            raise ValueError(f"Invalid choice {choice!r}")
        pick = Pick.query.filter_by(
            user_id=user_id, season_id=season_id, gw=gw, fixture_index=fixture_index
        ).first()
        if pick is None:
            pick = Pick(
                user_id=user_id,
                season_id=season_id,
                gw=gw,
                fixture_index=fixture_index,
            )
            db.session.add(pick)
        pick.choice = choice
        return pick

    def to_fact(self):
        return facts.Pick(
            user_id=self.user_id,
            gw=self.gw,
            fixture_index=self.fixture_index,
            choice=self.choice,
        )
