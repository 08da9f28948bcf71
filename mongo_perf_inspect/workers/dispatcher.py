"""
Worker-pool dispatcher for the MongoDB performance inspector.

Fans out exactly one pool thread per worker identity, then waits on every
future until each worker reaches DONE. No work queue is needed: each worker
drives itself until the shared deadline.

If a worker fails, the shared abort event stops its siblings. The dispatcher
still waits for all of them and then re-raises the earliest failure, in
completion order. It never returns while a worker thread is alive.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional

from mongo_perf_inspect.domain.models import Namespace, ShapeDescriptor
from mongo_perf_inspect.domain.synthesizer import DocumentSynthesizer
from mongo_perf_inspect.errors import ConfigurationError
from mongo_perf_inspect.infrastructure.store import StoreClient
from mongo_perf_inspect.utils.logging import get_logger
from mongo_perf_inspect.workers.results import DispatchResult, WorkerResult
from mongo_perf_inspect.workers.worker import Worker

WORKER_ID_PREFIX = "worker-"


def _run_named(worker: Worker) -> WorkerResult:
    """Run a worker on a pool thread renamed after its identity."""
    threading.current_thread().name = worker.worker_id
    return worker.run()


class Dispatcher:
    """
    Run ``workers`` concurrent insert loops against a shared store.

    Parameters
    ----------
    workers : int
        Number of workers (and threads) to start. Must be >= 1.
    logger : logging.Logger, optional
        Logger capability handed to every worker.
    worker_id_start : int
        Offset of the first identity (``worker-<start>``).
    embed_worker_id : bool
        Whether each worker writes its identity into its documents.
    clock : callable
        Time source shared by the deadline and the workers.
    synthesizer_factory : callable
        Builds one DocumentSynthesizer per worker.
    """

    def __init__(
        self,
        workers: int,
        *,
        logger: Optional[logging.Logger] = None,
        worker_id_start: int = 0,
        embed_worker_id: bool = True,
        clock: Callable[[], float] = time.monotonic,
        synthesizer_factory: Callable[[], DocumentSynthesizer] = DocumentSynthesizer,
    ) -> None:
        if workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {workers}")
        if worker_id_start < 0:
            raise ConfigurationError(f"worker id start must be >= 0, got {worker_id_start}")
        self.workers = workers
        self.worker_id_start = worker_id_start
        self.embed_worker_id = embed_worker_id
        self._log = logger or get_logger(__name__)
        self._clock = clock
        self._synthesizer_factory = synthesizer_factory

    def worker_ids(self) -> List[str]:
        """Distinct identities, one per worker, in start order."""
        start = self.worker_id_start
        return [f"{WORKER_ID_PREFIX}{i}" for i in range(start, start + self.workers)]

    def _build_workers(
        self,
        shape: ShapeDescriptor,
        store: StoreClient,
        namespace: Namespace,
        deadline: float,
        abort: threading.Event,
    ) -> List[Worker]:
        return [
            Worker(
                worker_id,
                shape,
                store,
                namespace,
                deadline,
                logger=self._log,
                abort=abort,
                synthesizer=self._synthesizer_factory(),
                embed_worker_id=self.embed_worker_id,
                clock=self._clock,
            )
            for worker_id in self.worker_ids()
        ]

    def execute(
        self,
        shape: ShapeDescriptor,
        store: StoreClient,
        namespace: Namespace,
        deadline: float,
    ) -> DispatchResult:
        """
        Start every worker and block until all of them are DONE.

        Returns
        -------
        DispatchResult
            Per-worker insert counts in identity order.

        Raises
        ------
        InsertError, EntropyError
            The earliest failure to complete, after all workers have stopped.
        """
        abort = threading.Event()
        workers = self._build_workers(shape, store, namespace, deadline, abort)

        self._log.info(
            f"[DISPATCH START] {self.workers} worker(s)",
            extra={"workers": self.workers, "namespace": str(namespace)},
        )
        failures: List[BaseException] = []
        # Leaving the pool joins every thread, including on the error path.
        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix=WORKER_ID_PREFIX
        ) as pool:
            try:
                futures = [pool.submit(_run_named, worker) for worker in workers]
                for future in as_completed(futures):
                    error = future.exception()
                    if error is not None:
                        failures.append(error)
            except BaseException:
                # Submit failure or Ctrl-C: stop the running workers.
                abort.set()
                raise

        if failures:
            self._log.error(
                f"[DISPATCH FAILED] {len(failures)} worker(s) failed",
                extra={"failed_workers": len(failures)},
            )
            raise failures[0]

        result = DispatchResult(workers=[future.result() for future in futures])
        self._log.info(
            "[DISPATCH COMPLETE]",
            extra={"workers": self.workers, "total_inserts": result.total_inserts},
        )
        return result


__all__ = ["Dispatcher", "WORKER_ID_PREFIX"]
