"""
Timing of snapshot loads and engine computations

Slow calls are logged against SLOW_FUNCTION_THRESHOLD. Every timed call
made while serving a request is also collected on ``g`` and reported back
to the client in a Server-Timing header.
"""

import functools
import time

from flask import current_app, g, has_app_context, has_request_context

from gameweek.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 1.0


def _threshold():
    if has_app_context():
        return current_app.config.get("SLOW_FUNCTION_THRESHOLD", DEFAULT_THRESHOLD)
    return DEFAULT_THRESHOLD


def record_metric(operation, duration, success=True):
    """Collect one timing for the current request; no-op outside a request"""
    if not has_request_context():
        return
    g.setdefault("performance_metrics", []).append(
        {"operation": operation, "duration": duration, "success": success}
    )


def reset_request_metrics():
    g.performance_metrics = []


def server_timing_header():
    """Server-Timing value for the current request, or None when nothing was timed"""
    metrics = g.get("performance_metrics") or []
    if not metrics:
        return None
    return ", ".join(
        f"{m['operation']};dur={m['duration'] * 1000:.1f}" for m in metrics
    )


def timer(func):
    """
    Decorator timing a computation

    Args:
        func: Function to time

    Returns:
        Wrapped function with timing
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time = time.perf_counter() - start_time
            record_metric(func.__name__, execution_time, success=False)
            logger.error(
                f"Function {func.__name__} failed after {execution_time:.2f}s: {e}"
            )
            raise

        execution_time = time.perf_counter() - start_time
        record_metric(func.__name__, execution_time)
        threshold = _threshold()
        if execution_time > threshold:
            logger.warning(
                f"Slow function {func.__name__} took {execution_time:.2f}s "
                f"(threshold: {threshold}s)"
            )
        else:
            logger.debug(f"Function {func.__name__} executed in {execution_time:.3f}s")
        return result

    return wrapper


class PerformanceMonitor:
    """Context manager timing a block such as a snapshot load"""

    def __init__(self, operation_name, log_threshold=0.1):
        self.operation_name = operation_name
        self.log_threshold = log_threshold
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        record_metric(self.operation_name, self.duration, success=exc_type is None)

        if self.duration > self.log_threshold:
            if exc_type:
                logger.error(
                    f"Operation '{self.operation_name}' failed after "
                    f"{self.duration:.3f}s: {exc_val}"
                )
            else:
                logger.info(
                    f"Operation '{self.operation_name}' completed in {self.duration:.3f}s"
                )
        return False
