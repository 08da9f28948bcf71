"""
Utilities package for the MongoDB performance inspector.

Exports shared helpers for logging and profiling.
Keep this package lightweight and free of domain-specific logic.
"""

from mongo_perf_inspect.utils.logging import configure_logging, get_logger
from mongo_perf_inspect.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
