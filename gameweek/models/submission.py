from datetime import datetime, timezone

from gameweek import db
from gameweek.engine import facts


class Submission(db.Model):
    """A user's confirmation that their picks for a gameweek are final.

    Picks stay invisible to scoring until this row exists. Rows are never
    deleted once written.
    """

    __tablename__ = "submissions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    season_id = db.Column(db.Integer, db.ForeignKey("seasons.id"), nullable=False)
    gw = db.Column(db.Integer, nullable=False)
    submitted_at = db.Column(
        db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        db.UniqueConstraint("user_id", "season_id", "gw", name="unique_user_gw_submission"),
        db.Index("idx_submission_season_gw", "season_id", "gw"),
    )

    def __repr__(self):
        return f"<Submission user_id={self.user_id} GW{self.gw}>"

    @staticmethod
    def submit(user_id, season_id, gw):
        """Record a submission; submitting twice keeps the first timestamp"""
        existing = Submission.query.filter_by(
            user_id=user_id, season_id=season_id, gw=gw
        ).first()
        if existing:
            return existing
        submission = Submission(user_id=user_id, season_id=season_id, gw=gw)
        db.session.add(submission)
        return submission

    def to_fact(self):
        return facts.Submission(
            user_id=self.user_id, gw=self.gw, submitted_at=self.submitted_at
        )
