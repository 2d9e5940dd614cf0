from datetime import datetime, timezone

from gameweek import db


class Season(db.Model):
    __tablename__ = "seasons"

    id = db.Column(db.Integer, primary_key=True)
    year = db.Column(db.Integer, nullable=False, unique=True, index=True)
    name = db.Column(db.String(50), nullable=False)  # e.g., "2025/26 Premier League"
    total_gameweeks = db.Column(db.Integer, default=38)

    # Status
    is_active = db.Column(db.Boolean, default=False)
    current_gw = db.Column(db.Integer, default=1)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    fixtures = db.relationship(
        "Fixture", backref="season", lazy="dynamic", cascade="all, delete-orphan"
    )
    leagues = db.relationship("League", backref="season", lazy="dynamic")

    __table_args__ = (db.Index("idx_season_active", "is_active"),)

    def __repr__(self):
        return f"<Season {self.year}>"

    @staticmethod
    def get_current_season():
        """Get the currently active season"""
        return Season.query.filter_by(is_active=True).first()

    def activate(self):
        """Activate this season (deactivates all others)"""
        Season.query.update({"is_active": False})
        self.is_active = True
        db.session.commit()

    def advance_gameweek(self):
        """Move current_gw on by one, stopping at the last gameweek"""
        if self.current_gw < self.total_gameweeks:
            self.current_gw += 1
        return self.current_gw

    def to_dict(self):
        """Convert season to dictionary for API responses"""
        return {
            "id": self.id,
            "year": self.year,
            "name": self.name,
            "is_active": self.is_active,
            "current_gw": self.current_gw,
            "total_gameweeks": self.total_gameweeks,
        }
