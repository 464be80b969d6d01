"""
Performance monitoring utilities.

Times engine operations (corpus loading, record building, export) and
warns in the log when one of them is slow.
"""

import functools
import logging
import time
from typing import Any, Callable, Dict, List

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SLOW_OPERATION_SECONDS = 1.0


class PerformanceMonitor:
    """Collects durations per operation name."""

    def __init__(self, slow_threshold: float = SLOW_OPERATION_SECONDS):
        self.slow_threshold = slow_threshold
        self.metrics: Dict[str, List[float]] = {}

    def record(self, operation: str, duration: float):
        """
        Record an operation duration, warning if it exceeded the threshold.

        Args:
            operation: Name of the operation
            duration: Duration in seconds
        """
        self.metrics.setdefault(operation, []).append(duration)
        if duration > self.slow_threshold:
            logger.warning(
                "Operation '%s' took %.2fs (threshold: %.1fs)",
                operation, duration, self.slow_threshold
            )

    def get_stats(self, operation: str) -> Dict[str, float]:
        """
        Summary statistics for one operation.

        Returns:
            Dictionary with min, max, avg, total and count (all 0 if never recorded)
        """
        durations = self.metrics.get(operation)
        if not durations:
            return {'min': 0, 'max': 0, 'avg': 0, 'total': 0, 'count': 0}

        return {
            'min': min(durations),
            'max': max(durations),
            'avg': sum(durations) / len(durations),
            'total': sum(durations),
            'count': len(durations)
        }

    def get_all_stats(self) -> Dict[str, Dict[str, float]]:
        return {operation: self.get_stats(operation) for operation in self.metrics}

    def clear(self):
        """Forget all recorded durations."""
        self.metrics.clear()

    def log_stats(self):
        """Log a one-line summary per operation."""
        for operation, stats in self.get_all_stats().items():
            logger.info(
                "%s: count=%d avg=%.4fs total=%.4fs",
                operation, stats['count'], stats['avg'], stats['total']
            )


_global_monitor = PerformanceMonitor()


def get_monitor() -> PerformanceMonitor:
    """Get the process-wide performance monitor."""
    return _global_monitor


def monitor_performance(operation_name: str = None):
    """
    Decorator recording how long each call takes.

    Args:
        operation_name: Name for the operation (defaults to function name)

    Example:
        @monitor_performance("load_corpus")
        def load_corpus(path):
            ...
    """
    def decorator(func: Callable) -> Callable:
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                _global_monitor.record(op_name, time.perf_counter() - start_time)

        return wrapper
    return decorator


class measure_time:
    """
    Context manager recording the duration of a block.

    Example:
        with measure_time("render_conversation"):
            html = render_conversation_html(state)
    """

    def __init__(self, operation_name: str):
        self.name = operation_name
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _global_monitor.record(self.name, time.perf_counter() - self.start_time)
