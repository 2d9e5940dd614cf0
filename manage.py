#!/usr/bin/env python3
"""
Gameweek Engine Management CLI

Command-line management for the scoring and ranking service: seasons,
database setup and migrations, and engine reports printed from a fresh
fact snapshot.
"""

import json
import logging
import os
import sys

import click
from flask.cli import with_appcontext
from flask_migrate import downgrade, migrate, upgrade
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gameweek import NotFoundError, create_app, db
from gameweek.models import Fixture, GwResult, League, Season, Submission, User
from gameweek.services.fact_loader import fact_loader
from gameweek.services.stats_service import stats_service

app = create_app()


def fail(message, error=None):
    """Report a failed command and exit non-zero"""
    click.echo(f"❌ {message}")
    if error is not None:
        logging.error(f"{message}: {error}")
    sys.exit(1)


@click.group()
def cli():
    """Gameweek Engine Management CLI"""
    pass


# Season Management Commands
@cli.group()
def season():
    """Season management commands"""
    pass


@season.command()
@click.argument("year", type=int)
@click.option("--name", help="Display name (default: '<year>/<year+1> Season')")
@click.option("--gameweeks", default=38, show_default=True, help="Gameweeks in the season")
@click.option("--activate", is_flag=True, help="Activate this season")
@with_appcontext
def create(year, name, gameweeks, activate):
    """Create a new season"""
    if Season.query.filter_by(year=year).first():
        click.echo(f"Season {year} already exists!")
        return

    try:
        new_season = Season(
            year=year,
            name=name or f"{year}/{str(year + 1)[-2:]} Season",
            total_gameweeks=gameweeks,
        )
        db.session.add(new_season)
        db.session.commit()
        if activate:
            new_season.activate()
    except IntegrityError as e:
        db.session.rollback()
        fail(f"Season {year} already exists!", e)
    except SQLAlchemyError as e:
        db.session.rollback()
        fail("Database error creating season", e)

    click.echo(f"✅ Created season {new_season.name}")
    if activate:
        click.echo(f"✅ Activated season {year}")


@season.command()
@click.argument("year", type=int)
@with_appcontext
def activate(year):
    """Activate a season"""
    target = Season.query.filter_by(year=year).first()
    if not target:
        fail(f"Season {year} not found!")

    try:
        target.activate()
    except SQLAlchemyError as e:
        db.session.rollback()
        fail("Database error activating season", e)
    click.echo(f"✅ Activated season {year}")


@season.command()
@click.argument("gw", type=int, required=False)
@with_appcontext
def set_gw(gw):
    """Set the active season's current gameweek (next one when omitted)"""
    current = Season.get_current_season()
    if not current:
        fail("No active season")

    if gw is None:
        current.advance_gameweek()
    elif 1 <= gw <= current.total_gameweeks:
        current.current_gw = gw
    else:
        fail(f"Gameweek must be between 1 and {current.total_gameweeks}")

    db.session.commit()
    click.echo(f"✅ Current gameweek is now GW{current.current_gw}")


@season.command()
@with_appcontext
def list_seasons():
    """List all seasons"""
    seasons = Season.query.order_by(Season.year.desc()).all()

    if not seasons:
        click.echo("No seasons found.")
        return

    click.echo("Seasons:")
    for s in seasons:
        status = "🟢 ACTIVE" if s.is_active else "⚪ Inactive"
        click.echo(f"  {s.year}: {status} - GW{s.current_gw}/{s.total_gameweeks}")


# Engine reports
@cli.group()
def stats():
    """Scoring and ranking reports"""
    pass


def _snapshot(season_id):
    try:
        return fact_loader.load(season_id)
    except NotFoundError as e:
        fail(str(e))


def _print_json(data):
    click.echo(json.dumps(data, indent=2, default=str))


@stats.command()
@click.argument("league_id", type=int)
@click.option("--season-id", type=int, help="Season (default: active season)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@with_appcontext
def league_table(league_id, season_id, as_json):
    """Print a mini-league table"""
    snapshot = _snapshot(season_id)
    try:
        table = stats_service.league_table(snapshot, league_id)
    except NotFoundError as e:
        fail(str(e))

    if as_json:
        _print_json(table)
        return

    click.echo(f"🏆 {table['name']} (from GW{table['start_gw']})")
    click.echo(f"{'Pos':>3}  {'Name':<20} {'Pts':>4} {'W':>3} {'D':>3} {'OCP':>4} {'🦄':>3}  Form")
    for row in table["rows"]:
        click.echo(
            f"{row['position']:>3}  {row['name']:<20} {row['mltPts']:>4} {row['wins']:>3} "
            f"{row['draws']:>3} {row['ocp']:>4} {row['unicorns']:>3}  {row['form'][-5:]}"
        )


@stats.command()
@click.argument("user_id", type=int)
@click.option("--season-id", type=int, help="Season (default: active season)")
@with_appcontext
def trophies(user_id, season_id):
    """Print a user's trophy cabinet"""
    snapshot = _snapshot(season_id)
    try:
        cabinet = stats_service.trophies(snapshot, user_id)
    except NotFoundError as e:
        fail(str(e))

    click.echo(f"🏆 Trophy cabinet for {snapshot.name_of(user_id)}")
    click.echo(f"   Gameweek wins: {cabinet['lastGw']}")
    click.echo(f"   Form (5) wins: {cabinet['form5']}")
    click.echo(f"   Form (10) wins: {cabinet['form10']}")
    click.echo(f"   Overall leads: {cabinet['overall']}")


@stats.command()
@click.option("--gw", type=int, help="Single-gameweek table for this gameweek")
@click.option("--form", "weeks", type=int, help="Form table over this many weeks")
@click.option("--season-id", type=int, help="Season (default: active season)")
@click.option("--limit", default=20, show_default=True)
@with_appcontext
def leaderboard(gw, weeks, season_id, limit):
    """Print the overall, form or gameweek leaderboard"""
    if gw is not None and weeks is not None:
        fail("Use either --gw or --form, not both")

    snapshot = _snapshot(season_id)
    try:
        if gw is not None:
            board = stats_service.gameweek_leaderboard(snapshot, gw)
            title = f"GW{gw}"
        elif weeks is not None:
            board = stats_service.form_leaderboard(snapshot, weeks)
            title = f"Form ({weeks}) to GW{board['end_gw']}"
        else:
            board = stats_service.overall_leaderboard(snapshot)
            title = f"Overall to GW{board['through_gw']}"
    except ValueError as e:
        fail(str(e))

    click.echo(f"📊 {title} - {board['total']} players")
    for row in board["entries"][:limit]:
        marker = "=" if row["tied"] else " "
        click.echo(f"  {marker}{row['rank']:>3}  {row['name']:<20} {row['points']:>4}")


# Database Commands
@cli.group()
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command()
@with_appcontext
def init_db():
    """Initialize database tables"""
    try:
        db.create_all()
    except SQLAlchemyError as e:
        fail("Error initializing database", e)
    click.echo("✅ Database tables created successfully!")


@db_cmd.command()
@with_appcontext
def reset():
    """⚠️  DANGER: Drop and recreate all tables"""
    if not click.confirm("This will DELETE ALL DATA. Are you sure?"):
        click.echo("Cancelled.")
        return

    try:
        db.drop_all()
        db.create_all()
    except SQLAlchemyError as e:
        fail("Error resetting database", e)
    click.echo("✅ Database reset successfully!")


# Database Migration Commands
@cli.group()
def db_migrate():
    """Database migration commands"""
    pass


@db_migrate.command()
@with_appcontext
def init_migrations():
    """Initialize migrations repository"""
    if os.path.exists("migrations"):
        fail("Migrations directory already exists!")

    from flask_migrate import init as flask_migrate_init

    flask_migrate_init()
    click.echo("✅ Migrations repository initialized!")


@db_migrate.command()
@click.option("-m", "--message", required=True, help="Migration message")
@with_appcontext
def create_migration(message):
    """Create a new migration"""
    migrate(message=message)
    click.echo(f"✅ Migration created: {message}")


@db_migrate.command()
@click.option("--revision", default="head", help="Revision to upgrade to")
@with_appcontext
def apply_migrations(revision):
    """Apply migrations to database"""
    upgrade(revision=revision)
    click.echo(f"✅ Migrations applied to {revision}")


@db_migrate.command()
@click.option("--revision", required=True, help="Revision to downgrade to")
@with_appcontext
def rollback_migration(revision):
    """Rollback migrations to specific revision"""
    downgrade(revision=revision)
    click.echo(f"✅ Rolled back to {revision}")


# Info Commands
@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("⚽ Gameweek Engine Status")
    click.echo("=" * 40)

    try:
        db.session.execute(text("SELECT 1"))
        click.echo("✅ Database: Connected")
    except SQLAlchemyError as e:
        fail(f"Database: Error - {e}")

    current_season = Season.get_current_season()
    if not current_season:
        click.echo("⚠️  Current Season: None active")
        return

    click.echo(f"✅ Current Season: {current_season.name} (GW{current_season.current_gw})")

    user_count = User.query.filter_by(is_active=True).count()
    click.echo(f"👥 Active Users: {user_count}")

    league_count = League.query.filter_by(season_id=current_season.id).count()
    click.echo(f"🏆 Leagues: {league_count}")

    fixture_count = Fixture.query.filter_by(season_id=current_season.id).count()
    result_count = GwResult.query.filter_by(season_id=current_season.id).count()
    click.echo(f"⚽ Fixtures: {result_count}/{fixture_count} with results")

    submissions = Submission.query.filter_by(
        season_id=current_season.id, gw=current_season.current_gw
    ).count()
    click.echo(f"📝 GW{current_season.current_gw} submissions: {submissions}")

    click.echo(f"🗄️  Cache: {app.config.get('CACHE_TYPE')}")


if __name__ == "__main__":
    with app.app_context():
        cli()
