"""
Snapshot-scoped memoization for computed tables and stats

Entries are keyed by (scope, arguments, snapshot version). A snapshot
with different facts has a different version, so it can never read an
entry computed from older facts; stale entries simply age out.
"""

import functools

from flask import current_app

from gameweek import cache

KEY_PREFIX = "stats"


def make_snapshot_key(scope, snapshot, *args, **kwargs):
    """Cache key for one computation over one fact snapshot"""
    args_str = "_".join(str(arg) for arg in args)
    kwargs_str = "_".join(f"{k}_{v}" for k, v in sorted(kwargs.items()))
    return f"{KEY_PREFIX}:{scope}:{args_str}:{kwargs_str}:{snapshot.version}"


def memoize_for_snapshot(scope, timeout=None):
    """
    Decorator memoizing a service method of the form (self, snapshot, *args)

    Args:
        scope: Name of the computation, part of the cache key
        timeout: Cache timeout in seconds (default STATS_CACHE_TIMEOUT)
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapped(self, snapshot, *args, **kwargs):
            cache_key = make_snapshot_key(scope, snapshot, *args, **kwargs)

            result = cache.get(cache_key)
            if result is not None:
                current_app.logger.debug(f"Cache hit for key: {cache_key}")
                return result

            result = f(self, snapshot, *args, **kwargs)
            ttl = timeout
            if ttl is None:
                ttl = current_app.config.get("STATS_CACHE_TIMEOUT", 300)
            cache.set(cache_key, result, timeout=ttl)
            current_app.logger.debug(f"Cache set for key: {cache_key}")
            return result

        return wrapped

    return decorator


def clear_stats_cache():
    """Drop every cached computation"""
    cache.clear()
    current_app.logger.info("Stats cache cleared")


def get_cache_stats():
    return {
        "type": current_app.config.get("CACHE_TYPE", "Unknown"),
        "timeout": current_app.config.get("STATS_CACHE_TIMEOUT", 300),
    }
