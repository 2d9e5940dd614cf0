import json
import os
import warnings

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))


def _env_bool(name, default):
    return os.environ.get(name, default).lower() in ["true", "on", "1"]


def _league_start_overrides():
    """LEAGUE_START_OVERRIDES: JSON object of league name -> first gameweek"""
    raw = os.environ.get("LEAGUE_START_OVERRIDES")
    if not raw:
        return {}
    try:
        overrides = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"LEAGUE_START_OVERRIDES is not valid JSON: {e}") from e
    if not isinstance(overrides, dict):
        raise ValueError("LEAGUE_START_OVERRIDES must be a JSON object")
    return {str(name): int(gw) for name, gw in overrides.items()}


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-only-secret"

    # Database configuration - built from environment at initialization
    def __init__(self):
        """Initialize configuration with dynamic database URI"""
        self.SQLALCHEMY_DATABASE_URI = self._build_database_uri()
        self.LEAGUE_START_OVERRIDES = _league_start_overrides()

    def _build_database_uri(self):
        """Build database URI from environment variables"""
        database_url = os.environ.get("DATABASE_URL")

        if database_url:
            return database_url

        db_type = os.environ.get("DB_TYPE", "sqlite")

        if db_type.lower() == "postgresql":
            db_host = os.environ.get("DB_HOST") or "localhost"
            db_port = os.environ.get("DB_PORT") or "5432"
            db_name = os.environ.get("DB_NAME") or "gameweek_db"
            db_user = os.environ.get("DB_USER") or "gameweek_user"
            db_password = os.environ.get("DB_PASSWORD") or "gameweek_password"

            return f"postgresql+psycopg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"
        else:
            # Default to SQLite for development
            return "sqlite:///" + os.path.join(basedir, "gameweek.db")

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Read every table of a snapshot under this isolation level (PostgreSQL:
    # "REPEATABLE READ"); empty uses the database default
    SNAPSHOT_ISOLATION_LEVEL = os.environ.get("SNAPSHOT_ISOLATION_LEVEL") or None

    # League start resolution
    LEAGUE_DEADLINE_BUFFER_MINUTES = int(
        os.environ.get("LEAGUE_DEADLINE_BUFFER_MINUTES", 75)
    )

    # Application settings
    TIMEZONE = os.environ.get("TIMEZONE", "Europe/London")

    # Caching configuration
    CACHE_TYPE = os.environ.get("CACHE_TYPE", "RedisCache")
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get("CACHE_DEFAULT_TIMEOUT", 300))
    CACHE_REDIS_URL = os.environ.get("CACHE_REDIS_URL", "redis://localhost:6379/0")
    CACHE_KEY_PREFIX = "gameweek:"
    STATS_CACHE_TIMEOUT = int(os.environ.get("STATS_CACHE_TIMEOUT", 600))

    # Rate limiting
    RATELIMIT_ENABLED = _env_bool("RATELIMIT_ENABLED", "True")
    RATELIMIT_STORAGE_URI = (
        os.environ.get("RATELIMIT_STORAGE_URI")
        or os.environ.get("REDIS_URL")
        or "memory://"
    )
    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "10000 per day;1000 per hour")

    # Logging configuration
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    # Engine modules only log at DEBUG; empty means same as LOG_LEVEL
    ENGINE_LOG_LEVEL = os.environ.get("ENGINE_LOG_LEVEL")
    LOG_TO_CONSOLE = _env_bool("LOG_TO_CONSOLE", "True")
    LOG_TO_FILE = _env_bool("LOG_TO_FILE", "True")
    LOG_DIR = os.environ.get("LOG_DIR", "logs")
    SLOW_FUNCTION_THRESHOLD = float(os.environ.get("SLOW_FUNCTION_THRESHOLD", "1.0"))

    # Environment detection
    FLASK_ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = FLASK_ENV == "development"
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration with helpful defaults"""

    DEBUG = True
    SQLALCHEMY_ECHO = _env_bool("SQLALCHEMY_ECHO", "False")

    def __init__(self):
        super().__init__()
        if self.CACHE_TYPE != "RedisCache":
            return
        # Fallback to SimpleCache if Redis isn't available in development
        import redis

        try:
            redis_client = redis.Redis.from_url(self.CACHE_REDIS_URL)
            redis_client.ping()
        except redis.exceptions.ConnectionError:
            self.CACHE_TYPE = "SimpleCache"
            warnings.warn(
                "🔶 Redis not available, falling back to SimpleCache for development.",
                UserWarning,
            )


class ProductionConfig(Config):
    """Production configuration"""

    DEBUG = False

    def __init__(self):
        super().__init__()

        if not os.environ.get("SECRET_KEY"):
            warnings.warn(
                "🚨 PRODUCTION WARNING: SECRET_KEY not explicitly set!",
                UserWarning,
            )
        if self.RATELIMIT_STORAGE_URI == "memory://":
            warnings.warn(
                "🚨 PRODUCTION WARNING: rate limits kept in memory are per worker. "
                "Set RATELIMIT_STORAGE_URI or REDIS_URL.",
                UserWarning,
            )


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    CACHE_TYPE = "SimpleCache"
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    LOG_TO_FILE = False
    LOG_LEVEL = "WARNING"
    ENGINE_LOG_LEVEL = None
    SNAPSHOT_ISOLATION_LEVEL = None

    def __init__(self):
        super().__init__()
        self.SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        self.LEAGUE_START_OVERRIDES = {}


# Configuration mapping
config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
