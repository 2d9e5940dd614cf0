"""
Logging for the gameweek engine service

Console output always, rotating files when LOG_TO_FILE is on. Engine
modules log at DEBUG only, so their level is set separately through
ENGINE_LOG_LEVEL and can be raised without silencing the service layer.
"""

import logging
import logging.handlers
import os

from flask import has_request_context, request

ENGINE_LOGGER = "gameweek.engine"

# Chatty libraries kept at WARNING whatever LOG_LEVEL says
QUIET_LOGGERS = ("werkzeug", "sqlalchemy.engine", "flask_limiter", "urllib3")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s "
    "[%(method)s %(url)s season=%(season_id)s] [%(remote_addr)s]"
)
ERROR_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s "
    "[%(pathname)s:%(lineno)d] [%(method)s %(url)s season=%(season_id)s]"
)


class RequestContextFilter(logging.Filter):
    """Tag records with the request and the season it reads"""

    def filter(self, record):
        if has_request_context():
            record.url = request.path
            record.method = request.method
            record.remote_addr = request.remote_addr
            record.season_id = request.args.get("season_id", "active")
        else:
            record.url = "-"
            record.method = "-"
            record.remote_addr = "-"
            record.season_id = "-"
        return True


class ColoredFormatter(logging.Formatter):
    """Level names in colour, for the debug console"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        # Colour a copy so file handlers still see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _level(name, default=logging.INFO):
    value = logging.getLevelName(str(name).upper()) if name else None
    return value if isinstance(value, int) else default


def _rotating_handler(path, level, fmt, max_bytes, backups):
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backups
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(RequestContextFilter())
    return handler


def setup_logging(app):
    """
    Configure the root logger for the app

    Args:
        app: Flask application instance
    """
    log_level = _level(app.config.get("LOG_LEVEL"))
    engine_level = _level(app.config.get("ENGINE_LOG_LEVEL"), log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(min(log_level, engine_level))

    # The factory can run more than once per process (tests, CLI)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if app.config.get("LOG_TO_CONSOLE", True):
        console = logging.StreamHandler()
        console.setLevel(min(log_level, engine_level))
        if app.debug:
            console.setFormatter(
                ColoredFormatter(
                    CONSOLE_FORMAT + " [%(filename)s:%(lineno)d]", datefmt="%H:%M:%S"
                )
            )
        else:
            console.setFormatter(
                logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
        console.addFilter(RequestContextFilter())
        root_logger.addHandler(console)

    if app.config.get("LOG_TO_FILE", True):
        log_dir = app.config.get("LOG_DIR", "logs")
        os.makedirs(log_dir, exist_ok=True)
        root_logger.addHandler(
            _rotating_handler(
                os.path.join(log_dir, "gameweek.log"),
                min(log_level, engine_level),
                FILE_FORMAT,
                max_bytes=10 * 1024 * 1024,
                backups=5,
            )
        )
        root_logger.addHandler(
            _rotating_handler(
                os.path.join(log_dir, "errors.log"),
                logging.ERROR,
                ERROR_FORMAT,
                max_bytes=5 * 1024 * 1024,
                backups=3,
            )
        )

    logging.getLogger("gameweek").setLevel(log_level)
    logging.getLogger(ENGINE_LOGGER).setLevel(engine_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app.logger.info(
        f"Logging configured - service {logging.getLevelName(log_level)}, "
        f"engine {logging.getLevelName(engine_level)}"
    )


def get_logger(name):
    """Logger for a service module (usually __name__)"""
    return logging.getLogger(name)
