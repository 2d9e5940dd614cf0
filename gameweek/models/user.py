from datetime import datetime, timezone

from gameweek import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(100))
    is_active = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    picks = db.relationship(
        "Pick", backref="user", lazy="dynamic", cascade="all, delete-orphan"
    )
    submissions = db.relationship(
        "Submission", backref="user", lazy="dynamic", cascade="all, delete-orphan"
    )
    league_memberships = db.relationship(
        "LeagueMember", backref="user", lazy="dynamic", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<User {self.username}>"

    @property
    def name(self):
        """Name shown in tables; tie-breaks sort on it"""
        return self.display_name or self.username

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
        }
