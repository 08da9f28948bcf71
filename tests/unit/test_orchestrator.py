from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from mongo_perf_inspect import orchestrator
from mongo_perf_inspect.config import LoadConfig
from mongo_perf_inspect.domain.models import Namespace, ShapeDescriptor
from mongo_perf_inspect.errors import InsertError, StoreConnectionError
from mongo_perf_inspect.orchestrator import run_load
from mongo_perf_inspect.utils.profiler import ProfileStats
from mongo_perf_inspect.workers.results import DispatchResult, WorkerResult

WORKER_COUNT = 4
EXPECTED_THROUGHPUT = 50.0
EXPECTED_TOTAL = 100


def _config(**overrides) -> LoadConfig:
    values = dict(
        mongodb_uri="mongodb://test",
        namespace=Namespace(database="perf_test", collection="docs"),
        workers=WORKER_COUNT,
        duration_seconds=0,
        shape=ShapeDescriptor(field_count=3),
    )
    values.update(overrides)
    return LoadConfig(**values)


def test_run_load_zero_duration_closes_store(fake_store) -> None:
    result = run_load(_config(), store_factory=lambda config: fake_store)

    assert result["total_inserts"] == 0
    assert result["worker_count"] == WORKER_COUNT
    assert [w["worker_id"] for w in result["workers"]] == [
        f"worker-{i}" for i in range(WORKER_COUNT)
    ]
    assert result["namespace"] == "perf_test.docs"
    assert fake_store.close_calls == 1
    assert fake_store.emptied == []


def test_run_load_empties_collection_when_requested(fake_store) -> None:
    config = _config(empty_collection=True)

    run_load(config, store_factory=lambda c: fake_store)

    assert fake_store.emptied == [config.namespace]


def test_run_load_uses_worker_id_offset(fake_store) -> None:
    result = run_load(_config(worker_id_start=7), store_factory=lambda c: fake_store)

    assert result["workers"][0]["worker_id"] == "worker-7"
    assert result["workers"][-1]["worker_id"] == "worker-10"


def test_run_load_persists_results(fake_store, tmp_path: Path) -> None:
    run_load(_config(), store_factory=lambda c: fake_store, results_dir=tmp_path, persist=True)

    latest = tmp_path / "latest.json"
    assert latest.exists()
    payload = json.loads(latest.read_text(encoding="utf-8"))
    assert payload["total_inserts"] == 0
    assert len(list(tmp_path.glob("run-*.json"))) == 1


def test_run_load_failure_closes_store_and_persists_nothing(
    failing_store, tmp_path: Path
) -> None:
    config = _config(duration_seconds=30)

    with pytest.raises(InsertError):
        run_load(config, store_factory=lambda c: failing_store, results_dir=tmp_path, persist=True)

    assert failing_store.close_calls == 1
    assert list(tmp_path.iterdir()) == []


def test_run_load_connection_error_starts_no_workers(tmp_path: Path) -> None:
    def refuse(config: LoadConfig):
        raise StoreConnectionError("connection refused")

    with pytest.raises(StoreConnectionError):
        run_load(_config(), store_factory=refuse, results_dir=tmp_path, persist=True)

    assert list(tmp_path.iterdir()) == []


def test_run_load_warns_that_depth_is_ignored(caplog, fake_store) -> None:
    config = _config(shape=ShapeDescriptor(field_count=2, nesting_depth=3))

    with caplog.at_level(logging.WARNING):
        run_load(config, store_factory=lambda c: fake_store)

    assert any("Nesting depth" in r.getMessage() for r in caplog.records)


def test_build_payload_uses_profiler_duration_for_throughput() -> None:
    dispatched = DispatchResult(
        workers=[
            WorkerResult("worker-0", inserts=60, started_at=0.0, finished_at=2.0),
            WorkerResult("worker-1", inserts=40, started_at=0.0, finished_at=2.0),
        ]
    )
    stats = ProfileStats(label="load", duration_seconds=2.0, peak_rss_bytes=123, cpu_percent=12.34)

    payload = orchestrator._build_payload(_config(workers=2), dispatched, stats)

    assert payload["total_inserts"] == EXPECTED_TOTAL
    assert payload["throughput_inserts_per_sec"] == EXPECTED_THROUGHPUT
    assert payload["peak_rss_bytes"] == 123
    assert payload["cpu_percent"] == 12.3
    assert payload["workers"][0]["throughput_inserts_per_sec"] == 30.0
    assert payload["shape"]["field_count"] == 3
