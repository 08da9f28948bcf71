"""
Document synthesizer for the MongoDB performance inspector.

Maps a positional field index to a value-generation rule and builds one
document per call. The value *kind* at each index is fixed; the content is
random.

Usage:
    from mongo_perf_inspect.domain import ShapeDescriptor, synthesize

    doc = synthesize(ShapeDescriptor(field_count=6), worker_identity="worker-0")
"""

from __future__ import annotations

import os
import random
import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from bson import ObjectId
from faker import Faker

from mongo_perf_inspect.domain.models import ShapeDescriptor
from mongo_perf_inspect.errors import EntropyError

# Length of the generated binary blob. The configured blob size only toggles
# the field on or off.
BINARY_BLOB_LENGTH = 32

RANDOM_INT_UPPER = 1000

# Bounds for the random calendar timestamp at i1 (the signed 32-bit epoch range).
TIMESTAMP_MIN = datetime(1970, 1, 1, tzinfo=timezone.utc)
TIMESTAMP_MAX = datetime(2038, 1, 19, tzinfo=timezone.utc)


def random_bytes(size: int) -> bytes:
    """
    Read ``size`` bytes from the OS entropy source.

    Raises
    ------
    EntropyError
        If the OS cannot supply random bytes.
    """
    try:
        return os.urandom(size)
    except (OSError, NotImplementedError) as exc:
        raise EntropyError(f"Unable to read {size} random bytes: {exc}") from exc


class DocumentSynthesizer:
    """
    Build synthetic documents from a ShapeDescriptor.

    Each instance owns its Faker and ``random.Random`` sources, so workers can
    hold one apiece without sharing generator state. Pass ``seed`` to make the
    non-binary content reproducible.
    """

    def __init__(self, seed: Optional[int] = None, locale: str = "en_US") -> None:
        self._rng = random.Random(seed)
        self._faker = Faker(locale)
        if seed is not None:
            self._faker.seed_instance(seed)

    def value_for(self, index: int) -> Any:
        """Return a fresh value of the kind assigned to positional ``index``."""
        if index == 0:
            return time.time_ns()
        if index == 1:
            return self._faker.date_time_between(
                start_date=TIMESTAMP_MIN, end_date=TIMESTAMP_MAX, tzinfo=timezone.utc
            )
        if index == 2:
            return self._rng.randrange(RANDOM_INT_UPPER)
        if index == 3:
            return self._rng.random()
        if index == 4:
            return self._faker.name()
        if index == 5:
            return self._faker.email()
        return self._faker.word()

    def synthesize(
        self, shape: ShapeDescriptor, worker_identity: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Produce one document for ``shape``.

        The document holds ``_id``, the ``i0..i(N-1)`` generated fields, the
        binary blob at ``i(N+1)`` when enabled and the worker identity at
        ``i(N+2)`` when supplied.
        """
        doc: Dict[str, Any] = {"_id": ObjectId()}
        for i in range(shape.field_count):
            doc[f"i{i}"] = self.value_for(i)

        if shape.binary_enabled:
            doc[shape.binary_key] = random_bytes(BINARY_BLOB_LENGTH)
        if worker_identity is not None:
            doc[shape.identity_key] = worker_identity
        return doc


@lru_cache(maxsize=1)
def _default_synthesizer() -> DocumentSynthesizer:
    return DocumentSynthesizer()


def synthesize(shape: ShapeDescriptor, worker_identity: Optional[str] = None) -> Dict[str, Any]:
    """Synthesize a document using the process-wide default synthesizer."""
    return _default_synthesizer().synthesize(shape, worker_identity)


__all__ = [
    "BINARY_BLOB_LENGTH",
    "DocumentSynthesizer",
    "random_bytes",
    "synthesize",
]
