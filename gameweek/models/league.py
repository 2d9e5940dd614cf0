import secrets
from datetime import datetime, timezone

from gameweek import db
from gameweek.engine import facts


class League(db.Model):
    __tablename__ = "leagues"

    id = db.Column(db.Integer, primary_key=True)
    season_id = db.Column(db.Integer, db.ForeignKey("seasons.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)

    # Code for easy joining
    code = db.Column(db.String(8), unique=True, nullable=False, index=True)

    # Explicit first gameweek; when empty it is derived from created_at
    start_gw = db.Column(db.Integer)

    created_at = db.Column(
        db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    members = db.relationship(
        "LeagueMember", backref="league", lazy="dynamic", cascade="all, delete-orphan"
    )

    __table_args__ = (db.Index("idx_league_season", "season_id"),)

    def __repr__(self):
        return f"<League {self.name}>"

    def __init__(self, **kwargs):
        super(League, self).__init__(**kwargs)
        if not self.code:
            self.code = self.generate_code()

    @staticmethod
    def generate_code():
        """Generate a unique 8-character join code"""
        while True:
            code = secrets.token_urlsafe(6)[:8].upper()
            if not League.query.filter_by(code=code).first():
                return code

    def add_member(self, user_id):
        existing = self.members.filter_by(user_id=user_id).first()
        if existing:
            return existing
        from .league_member import LeagueMember

        member = LeagueMember(league_id=self.id, user_id=user_id)
        db.session.add(member)
        return member

    def to_fact(self):
        return facts.League(
            id=self.id,
            name=self.name,
            created_at=self.created_at,
            start_gw=self.start_gw,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "season_id": self.season_id,
            "start_gw": self.start_gw,
            "member_count": self.members.count(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
