"""
Timezone helpers: facts are stored in UTC, displayed in TIMEZONE
"""

from datetime import datetime, timezone

import pytz
from flask import current_app


def get_app_timezone():
    """Get the application's configured timezone"""
    try:
        return pytz.timezone(current_app.config.get("TIMEZONE", "UTC"))
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def convert_to_app_timezone(dt):
    """Convert a datetime to the application's timezone (naive means UTC)"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(get_app_timezone())


def format_kickoff(dt, format_str="%a %d %b %H:%M"):
    """Format a kickoff or deadline in the application's timezone"""
    if dt is None:
        return "TBD"
    return convert_to_app_timezone(dt).strftime(format_str)


def is_before(dt, now=None):
    """True while ``now`` (default: current UTC time) is earlier than dt"""
    if dt is None:
        return True
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return now < dt
