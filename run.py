from gameweek import create_app, db
from gameweek.engine.facts import FactSnapshot
from gameweek.models import (
    Fixture,
    GwResult,
    League,
    LeagueMember,
    LiveScore,
    Pick,
    Season,
    Submission,
    Team,
    User,
)
from gameweek.services.fact_loader import fact_loader
from gameweek.services.stats_service import stats_service

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Season": Season,
        "User": User,
        "Team": Team,
        "Fixture": Fixture,
        "Pick": Pick,
        "Submission": Submission,
        "GwResult": GwResult,
        "LiveScore": LiveScore,
        "League": League,
        "LeagueMember": LeagueMember,
        "FactSnapshot": FactSnapshot,
        "fact_loader": fact_loader,
        "stats_service": stats_service,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
