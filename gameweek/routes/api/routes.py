from functools import wraps

from flask import abort, current_app, jsonify, request

from gameweek import limiter
from gameweek.engine.league_start import gameweek_deadlines
from gameweek.models import Fixture
from gameweek.routes.api import bp
from gameweek.services.fact_loader import fact_loader
from gameweek.services.stats_service import stats_service
from gameweek.utils.timezone_utils import format_kickoff, is_before


def add_cache_headers(f):
    """Responses depend on live facts; clients must not keep them"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        response = f(*args, **kwargs)
        if hasattr(response, "headers"):
            response.headers["Cache-Control"] = (
                "no-store, no-cache, must-revalidate, max-age=0"
            )
        return response

    return decorated_function


def current_snapshot():
    """Snapshot of the season named by ?season_id=, or the active one"""
    return fact_loader.load(request.args.get("season_id", type=int))


def compute(fn, *args):
    """Run a service call, mapping argument errors to 400"""
    try:
        return fn(*args)
    except ValueError as e:
        abort(400, description=str(e))


@bp.route("/season/current")
@add_cache_headers
def current_season():
    """Active season, the gameweek in play and its pick deadline"""
    season = fact_loader.resolve_season(request.args.get("season_id", type=int))
    fixtures = Fixture.get_for_gameweek(season.id, season.current_gw)
    deadline = gameweek_deadlines(
        [f.to_fact() for f in fixtures],
        current_app.config.get("LEAGUE_DEADLINE_BUFFER_MINUTES", 75),
    ).get(season.current_gw)

    data = season.to_dict()
    data["deadline"] = deadline.isoformat() if deadline else None
    data["deadline_display"] = format_kickoff(deadline)
    data["picks_open"] = is_before(deadline)
    data["fixtures"] = [f.to_dict() for f in fixtures]
    return jsonify(data)


@bp.route("/gameweeks/<int:gw>/leaderboard")
@add_cache_headers
def gameweek_leaderboard(gw):
    """Everyone who submitted the gameweek, ranked by correct picks"""
    snapshot = current_snapshot()
    return jsonify(compute(stats_service.gameweek_leaderboard, snapshot, gw))


@bp.route("/leaderboards/overall")
@add_cache_headers
def overall_leaderboard():
    snapshot = current_snapshot()
    through_gw = request.args.get("through_gw", type=int)
    return jsonify(compute(stats_service.overall_leaderboard, snapshot, through_gw))


@bp.route("/leaderboards/form/<int:weeks>")
@add_cache_headers
def form_leaderboard(weeks):
    """Form table; only users who played every week of the window appear"""
    snapshot = current_snapshot()
    end_gw = request.args.get("end_gw", type=int)
    return jsonify(compute(stats_service.form_leaderboard, snapshot, weeks, end_gw))


@bp.route("/leagues/<int:league_id>/table")
@add_cache_headers
def league_table(league_id):
    snapshot = current_snapshot()
    user_id = request.args.get("user_id", type=int)
    return jsonify(stats_service.league_table(snapshot, league_id, user_id))


@bp.route("/leagues/<int:league_id>/gameweeks/<int:gw>")
@add_cache_headers
def league_gameweek(league_id, gw):
    """One league's rows for a gameweek, live scores included"""
    snapshot = current_snapshot()
    return jsonify(compute(stats_service.league_gameweek, snapshot, league_id, gw))


@bp.route("/users/<int:user_id>/stats")
@limiter.limit("120 per minute")
@add_cache_headers
def user_stats(user_id):
    snapshot = current_snapshot()
    return jsonify(stats_service.user_stats(snapshot, user_id))


@bp.route("/users/<int:user_id>/gameweeks/<int:gw>/summary")
@limiter.limit("120 per minute")
@add_cache_headers
def gameweek_summary(user_id, gw):
    snapshot = current_snapshot()
    return jsonify(compute(stats_service.gameweek_summary, snapshot, user_id, gw))


@bp.route("/users/<int:user_id>/unicorns")
@add_cache_headers
def user_unicorns(user_id):
    snapshot = current_snapshot()
    return jsonify(stats_service.unicorns(snapshot, user_id))


@bp.route("/users/<int:user_id>/trophies")
@add_cache_headers
def user_trophies(user_id):
    snapshot = current_snapshot()
    return jsonify(stats_service.trophies(snapshot, user_id))
