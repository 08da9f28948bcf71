"""
Infrastructure package for the MongoDB performance inspector.

Centralizes store connectivity concerns. Keep this layer focused on I/O and
resource management, decoupled from worker/dispatcher logic.
"""

from mongo_perf_inspect.infrastructure.store import MongoStore, StoreClient

__all__ = [
    "MongoStore",
    "StoreClient",
]
