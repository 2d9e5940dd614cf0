import logging
import os

from flask import Flask, jsonify, request
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException

from config import config

logger = logging.getLogger(__name__)

db = SQLAlchemy()
cache = Cache()
migrate = Migrate()


class NotFoundError(LookupError):
    """A season, league or user id that the fact store does not know"""


def get_real_ip():
    """
    Get the real client IP address, accounting for reverse proxies.
    Checks X-Forwarded-For, X-Real-IP, and falls back to remote_addr.
    """
    # Leftmost entry is the original client
    if request.headers.get("X-Forwarded-For"):
        return request.headers.get("X-Forwarded-For").split(",")[0].strip()
    if request.headers.get("X-Real-IP"):
        return request.headers.get("X-Real-IP")
    return get_remote_address()


# Storage comes from RATELIMIT_STORAGE_URI so workers can share counters in Redis
limiter = Limiter(key_func=get_real_ip)


def create_app(config_name=None):
    app = Flask(__name__)

    if config_name is None:
        config_name = os.environ.get("FLASK_CONFIG", "default")

    app.config.from_object(config[config_name]())

    # Initialize extensions
    db.init_app(app)
    cache.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    from gameweek.routes.api import bp as api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    register_error_handlers(app)

    from gameweek.utils.logging_config import setup_logging

    setup_logging(app)

    show_config_warnings(app, config_name)

    with app.app_context():
        db.create_all()

    return app


def show_config_warnings(app, config_name):
    """Log configuration status at startup"""
    import warnings

    app.logger.info(f"Gameweek engine starting with '{config_name}' configuration")

    if config_name == "production" and app.config.get("DEBUG"):
        warnings.warn("DEBUG mode is enabled in production!", UserWarning)

    db_url = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if "sqlite" in db_url:
        if "memory" in db_url:
            app.logger.info("Using SQLite database (in-memory)")
        else:
            app.logger.info("Using SQLite database (gameweek.db file)")
    elif "postgresql" in db_url:
        import re

        match = re.search(r"postgresql.*?://.*?@([^:/]+):?(\d+)?/([^?]+)", db_url)
        if match:
            host, port, dbname = match.groups()
            app.logger.info(f"Using PostgreSQL database {dbname} at {host}:{port or '5432'}")
        else:
            app.logger.info("Using PostgreSQL database")
    else:
        scheme = db_url.split("://")[0] if "://" in db_url else "Unknown"
        app.logger.info(f"Using database: {scheme}")

    app.logger.info(
        f"Cache: {app.config.get('CACHE_TYPE')} "
        f"(stats timeout {app.config.get('STATS_CACHE_TIMEOUT')}s)"
    )


def register_error_handlers(app):
    """Register global error handlers; every response is JSON"""
    from gameweek.utils.performance import reset_request_metrics, server_timing_header

    @app.before_request
    def before_request():
        reset_request_metrics()

    @app.after_request
    def after_request(response):
        timing = server_timing_header()
        if timing:
            response.headers["Server-Timing"] = timing
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if not app.config.get("DEBUG"):
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response

    @app.errorhandler(NotFoundError)
    def not_found_lookup(error):
        return jsonify({"error": str(error) or "Resource not found"}), 404

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({"error": "Resource not found"}), 404

    @app.errorhandler(400)
    def bad_request_error(error):
        app.logger.warning(
            f"400 Bad Request: {error} - Path: {request.path} - Method: {request.method}"
        )
        description = getattr(error, "description", None) or "Bad request"
        return jsonify({"error": description}), 400

    @app.errorhandler(429)
    def too_many_requests_error(error):
        return jsonify({"error": "Too many requests"}), 429

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        original = getattr(error, "original_exception", None)
        if original is not None and not isinstance(original, HTTPException):
            app.logger.error(
                f"Unhandled error on {request.method} {request.path}: {original}",
                exc_info=original,
            )
        return jsonify({"error": "Internal server error"}), 500


from gameweek import models  # noqa: F401, E402 - imported for model registration
