"""
Worker state and result contracts for the MongoDB performance inspector.

Workers return a WorkerResult; the Dispatcher collects them into a
DispatchResult to standardize downstream orchestration and reporting.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


class WorkerState(str, enum.Enum):
    """Lifecycle of a started worker. The only transition is RUNNING -> DONE."""

    RUNNING = "running"
    DONE = "done"


@dataclass(frozen=True)
class WorkerResult:
    """
    Outcome of one worker's insert loop.

    ``started_at`` and ``finished_at`` come from the worker's clock
    (monotonic seconds by default).
    """

    worker_id: str
    inserts: int
    started_at: float
    finished_at: float

    @property
    def duration_seconds(self) -> float:
        return max(self.finished_at - self.started_at, 0.0)

    @property
    def throughput_inserts_per_sec(self) -> float:
        duration = self.duration_seconds
        return self.inserts / duration if duration > 0 else 0.0


@dataclass(frozen=True)
class DispatchResult:
    """Per-worker results in identity order."""

    workers: List[WorkerResult] = field(default_factory=list)

    @property
    def total_inserts(self) -> int:
        return sum(result.inserts for result in self.workers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_inserts": self.total_inserts,
            "workers": [
                dict(
                    asdict(result),
                    duration_seconds=round(result.duration_seconds, 3),
                    throughput_inserts_per_sec=round(result.throughput_inserts_per_sec, 2),
                )
                for result in self.workers
            ],
        }


__all__ = ["DispatchResult", "WorkerResult", "WorkerState"]
