from gameweek import db


class Team(db.Model):
    __tablename__ = "teams"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    short_name = db.Column(db.String(10), nullable=False, index=True)
    crest_url = db.Column(db.String(500))

    # External ID from the scores feed
    external_id = db.Column(db.String(20), unique=True, index=True)

    # Relationships
    home_fixtures = db.relationship(
        "Fixture",
        foreign_keys="Fixture.home_team_id",
        backref=db.backref("home_team", lazy="joined"),
        lazy="dynamic",
    )
    away_fixtures = db.relationship(
        "Fixture",
        foreign_keys="Fixture.away_team_id",
        backref=db.backref("away_team", lazy="joined"),
        lazy="dynamic",
    )

    def __repr__(self):
        return f"<Team {self.short_name}>"

    @staticmethod
    def get_by_short_name(short_name):
        return Team.query.filter_by(short_name=short_name.upper()).first()

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "short_name": self.short_name,
            "crest_url": self.crest_url,
        }
