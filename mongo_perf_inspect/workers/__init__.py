"""
Workers package for the MongoDB performance inspector.

Re-exports the worker, the dispatcher and their result contracts so
downstream code can import from ``mongo_perf_inspect.workers`` directly.
"""

from mongo_perf_inspect.workers.dispatcher import Dispatcher
from mongo_perf_inspect.workers.results import DispatchResult, WorkerResult, WorkerState
from mongo_perf_inspect.workers.worker import Worker

__all__ = [
    "Dispatcher",
    "DispatchResult",
    "Worker",
    "WorkerResult",
    "WorkerState",
]
