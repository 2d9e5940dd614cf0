import pytest

from gameweek import create_app, db
from gameweek.models import (
    Fixture,
    GwResult,
    League,
    LeagueMember,
    Pick,
    Season,
    Submission,
    Team,
    User,
)
from tests import factories


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def seed_sample_season():
    """Write the sample season from tests.factories into the database"""
    season = Season(year=2025, name="2025/26", is_active=True, current_gw=4)
    db.session.add(season)

    users = sorted({uid for week in factories.SAMPLE_WEEKS.values() for uid in week})
    for uid in users:
        db.session.add(User(id=uid, username=f"user{uid:02d}", display_name=f"User {uid:02d}"))

    teams = []
    for i in range(3):
        home = Team(name=f"Home {i}", short_name=f"H{i}")
        away = Team(name=f"Away {i}", short_name=f"A{i}")
        db.session.add_all([home, away])
        teams.append((home, away))
    db.session.flush()

    for gw in factories.SAMPLE_OUTCOMES:
        for fixture in factories.fixtures(gw):
            home, away = teams[fixture.fixture_index]
            db.session.add(
                Fixture(
                    season_id=season.id,
                    gw=gw,
                    fixture_index=fixture.fixture_index,
                    home_team_id=home.id,
                    away_team_id=away.id,
                    kickoff_time=fixture.kickoff_time,
                )
            )

    for gw, by_user in factories.SAMPLE_WEEKS.items():
        for uid, choices in by_user.items():
            for idx, choice in enumerate(choices):
                Pick.upsert(uid, season.id, gw, idx, choice)
            Submission.submit(uid, season.id, gw)

    for gw, outcomes in factories.SAMPLE_OUTCOMES.items():
        for idx, outcome in enumerate(outcomes):
            db.session.add(GwResult(season_id=season.id, gw=gw, fixture_index=idx, outcome=outcome))

    for league_id, name, members, start_gw in factories.SAMPLE_LEAGUES:
        db.session.add(League(id=league_id, season_id=season.id, name=name, start_gw=start_gw))
        for uid in members:
            db.session.add(LeagueMember(league_id=league_id, user_id=uid))

    db.session.commit()
    return season


@pytest.fixture
def season(app):
    return seed_sample_season()
