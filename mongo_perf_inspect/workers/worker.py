"""
Insert worker for the MongoDB performance inspector.

A worker repeatedly synthesizes a document and inserts it until the shared
deadline passes. The deadline only stops *new* iterations: an insert already
in flight when the deadline passes is allowed to finish.

Any insert failure is fatal. The worker sets the shared abort event so its
siblings stop at their next check, then raises InsertError.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from mongo_perf_inspect.domain.models import Namespace, ShapeDescriptor
from mongo_perf_inspect.domain.synthesizer import DocumentSynthesizer
from mongo_perf_inspect.errors import InsertError
from mongo_perf_inspect.infrastructure.store import StoreClient
from mongo_perf_inspect.utils.logging import get_logger
from mongo_perf_inspect.workers.results import WorkerResult, WorkerState


class Worker:
    """
    Self-driving insert loop bound to one worker identity.

    Parameters
    ----------
    worker_id : str
        Identity label, e.g. ``worker-3``.
    shape : ShapeDescriptor
        Shape of every document this worker writes.
    store : StoreClient
        Shared store capability.
    namespace : Namespace
        Insert target.
    deadline : float
        Absolute time, on ``clock``, after which no new iteration starts.
    logger : logging.Logger, optional
        Logger capability; defaults to this module's logger.
    abort : threading.Event, optional
        Shared run-wide abort flag, set by whichever worker fails first.
    embed_worker_id : bool
        Whether the identity is written into each document.
    """

    def __init__(
        self,
        worker_id: str,
        shape: ShapeDescriptor,
        store: StoreClient,
        namespace: Namespace,
        deadline: float,
        *,
        logger: Optional[logging.Logger] = None,
        abort: Optional[threading.Event] = None,
        synthesizer: Optional[DocumentSynthesizer] = None,
        embed_worker_id: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.worker_id = worker_id
        self.shape = shape
        self.namespace = namespace
        self.deadline = deadline
        self.state: Optional[WorkerState] = None
        self.inserts = 0
        self._store = store
        self._log = logger or get_logger(__name__)
        self._abort = abort or threading.Event()
        self._synthesizer = synthesizer or DocumentSynthesizer()
        self._identity = worker_id if embed_worker_id else None
        self._clock = clock

    def _expired(self) -> bool:
        return self._clock() >= self.deadline or self._abort.is_set()

    def _insert(self, document: dict) -> None:
        try:
            self._store.insert_one(self.namespace, document)
        except InsertError as exc:
            if exc.worker_id is None:
                exc.worker_id = self.worker_id
            raise
        except Exception as exc:
            raise InsertError(
                f"Insert into {self.namespace} failed: {exc}", worker_id=self.worker_id
            ) from exc

    def run(self) -> WorkerResult:
        """
        Run the insert loop until the deadline passes or the run is aborted.

        Raises
        ------
        InsertError
            If any insert fails.
        EntropyError
            If random bytes for the binary field are unavailable.
        """
        started_at = self._clock()
        self.state = WorkerState.RUNNING
        self._log.info(f"[WORKER START] {self.worker_id}", extra={"worker_id": self.worker_id})
        try:
            while not self._expired():
                document = self._synthesizer.synthesize(self.shape, self._identity)
                if self._log.isEnabledFor(logging.DEBUG):
                    self._log.debug("Synthesized document", extra={"document": document})
                self._insert(document)
                self.inserts += 1
        except Exception:
            self._abort.set()
            self._log.exception(
                f"[WORKER FAILED] {self.worker_id}",
                extra={"worker_id": self.worker_id, "inserts": self.inserts},
            )
            raise
        finally:
            self.state = WorkerState.DONE

        finished_at = self._clock()
        self._log.info(
            f"[WORKER DONE] {self.worker_id}",
            extra={"worker_id": self.worker_id, "inserts": self.inserts},
        )
        return WorkerResult(
            worker_id=self.worker_id,
            inserts=self.inserts,
            started_at=started_at,
            finished_at=finished_at,
        )


__all__ = ["Worker"]
