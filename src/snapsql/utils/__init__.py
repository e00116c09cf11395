"""
Utility helpers shared across snapsql packages.
"""

from .logging import configure_logging, get_logger, time_call
from .performance import resolve_slow_query_ms

__all__ = ["configure_logging", "get_logger", "resolve_slow_query_ms", "time_call"]
