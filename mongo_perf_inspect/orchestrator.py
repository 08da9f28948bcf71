"""
Orchestrator for running a load, profiling execution, and persisting results.

Usage (example from CLI):
    from mongo_perf_inspect.config import resolve_config
    from mongo_perf_inspect.orchestrator import run_load

    result = run_load(resolve_config(workers=4, duration_seconds=30))
    print(result["total_inserts"])

When ``persist`` is set, outputs are saved to ``results/``:
- ``results/latest.json`` (last run)
- ``results/run-<timestamp>.json`` (timestamped archive)

A run either completes or raises. Nothing is persisted for a failed run.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from mongo_perf_inspect.config import LoadConfig
from mongo_perf_inspect.infrastructure.store import MongoStore, StoreClient
from mongo_perf_inspect.utils.logging import get_logger
from mongo_perf_inspect.utils.profiler import ProfileStats, profile_block
from mongo_perf_inspect.workers.dispatcher import Dispatcher
from mongo_perf_inspect.workers.results import DispatchResult

log = get_logger(__name__)

StoreFactory = Callable[[LoadConfig], StoreClient]


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def connect_store(config: LoadConfig) -> MongoStore:
    """Default store factory: connect to the configured MongoDB deployment."""
    return MongoStore.connect(
        config.mongodb_uri,
        server_selection_timeout_ms=config.server_selection_timeout_ms,
    )


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    with latest_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    with archive_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _build_payload(config: LoadConfig, dispatched: DispatchResult, stats: ProfileStats) -> dict:
    """Merge dispatcher counts with profiler stats, rounding floats for readability."""
    duration = stats.duration_seconds
    total = dispatched.total_inserts
    payload = dispatched.to_dict()
    payload.update(
        {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "namespace": str(config.namespace),
            "worker_count": config.workers,
            "requested_duration_seconds": config.duration_seconds,
            "shape": config.shape.model_dump(),
            "duration_seconds": _round_float(duration),
            "throughput_inserts_per_sec": _round_float(total / duration) if duration else 0.0,
            "peak_rss_bytes": stats.peak_rss_bytes,
            "cpu_percent": _round_float(stats.cpu_percent, 1) if stats.cpu_percent else None,
        }
    )
    return payload


def run_load(
    config: LoadConfig,
    store_factory: Optional[StoreFactory] = None,
    results_dir: Path | str = "results",
    persist: bool = False,
    logger: Optional[logging.Logger] = None,
    clock: Callable[[], float] = time.monotonic,
) -> dict:
    """
    Run one insert load and return its result payload.

    Parameters
    ----------
    config : LoadConfig
        Validated run configuration.
    store_factory : callable | None
        Builds the store client from the config. Defaults to ``connect_store``.
    results_dir : Path | str
        Directory to store JSON artifacts.
    persist : bool
        Whether to write results to disk.
    logger : logging.Logger | None
        Logger capability handed to the dispatcher and its workers.
    clock : callable
        Time source for the deadline.

    Returns
    -------
    dict
        Per-worker inserts, totals, duration, throughput and profiler stats.

    Raises
    ------
    StoreConnectionError
        If the store cannot be opened; no worker is started.
    InsertError, EntropyError
        If any worker fails; the run is aborted.
    """
    factory = store_factory or connect_store
    run_log = logger or log

    if config.shape.nesting_depth:
        run_log.warning(
            "Nesting depth is accepted but not applied to generated documents",
            extra={"depth": config.shape.nesting_depth},
        )

    dispatcher = Dispatcher(
        config.workers,
        logger=run_log,
        worker_id_start=config.worker_id_start,
        embed_worker_id=config.embed_worker_id,
        clock=clock,
    )

    store = factory(config)
    try:
        if config.empty_collection:
            store.empty(config.namespace)

        deadline = clock() + config.duration_seconds
        run_log.info(
            f"[LOAD START] {config.namespace} for {config.duration_seconds}s",
            extra={
                "namespace": str(config.namespace),
                "workers": config.workers,
                "duration_seconds": config.duration_seconds,
                "num_fields": config.shape.field_count,
            },
        )
        with profile_block("load") as stats:
            dispatched = dispatcher.execute(config.shape, store, config.namespace, deadline)
    finally:
        store.close()

    payload = _build_payload(config, dispatched, stats)
    run_log.info(
        "[LOAD COMPLETE]",
        extra={
            "total_inserts": payload["total_inserts"],
            "duration": payload["duration_seconds"],
            "throughput_ips": payload["throughput_inserts_per_sec"],
        },
    )

    if persist:
        _persist_results(payload, Path(results_dir))

    return payload


__all__ = ["connect_store", "run_load"]
