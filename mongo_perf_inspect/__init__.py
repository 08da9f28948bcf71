"""
MongoDB performance inspector - synthetic insert load generator.

Manufactures documents of a configurable shape and inserts them into a
MongoDB collection from a fixed-size pool of worker threads until a
wall-clock deadline elapses, then reports per-worker and total throughput.

The package is split into:

- ``domain``: namespace/shape models and the document synthesizer
- ``infrastructure``: the pymongo-backed store client
- ``workers``: the insert worker and the dispatcher that fans them out
- ``orchestrator``: the single "run a load" entry point
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from mongo_perf_inspect.config import LoadConfig, Settings, get_settings, resolve_config
from mongo_perf_inspect.domain import DocumentSynthesizer, Namespace, ShapeDescriptor, synthesize
from mongo_perf_inspect.errors import (
    ConfigurationError,
    EntropyError,
    InsertError,
    LoadGeneratorError,
    StoreConnectionError,
)
from mongo_perf_inspect.orchestrator import run_load
from mongo_perf_inspect.utils.logging import configure_logging, get_logger
from mongo_perf_inspect.workers import Dispatcher, DispatchResult, Worker, WorkerResult

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "LoadConfig",
    "Settings",
    "get_settings",
    "resolve_config",
    # Domain
    "DocumentSynthesizer",
    "Namespace",
    "ShapeDescriptor",
    "synthesize",
    # Errors
    "ConfigurationError",
    "EntropyError",
    "InsertError",
    "LoadGeneratorError",
    "StoreConnectionError",
    # Load
    "Dispatcher",
    "DispatchResult",
    "Worker",
    "WorkerResult",
    "run_load",
    # Logging
    "configure_logging",
    "get_logger",
]
