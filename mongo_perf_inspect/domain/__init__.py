"""
Domain package for the MongoDB performance inspector.

Exports the namespace and shape models plus the document synthesizer.
Keep this package focused on data definitions and document shaping.
"""

from mongo_perf_inspect.domain.models import Namespace, ShapeDescriptor
from mongo_perf_inspect.domain.synthesizer import (
    BINARY_BLOB_LENGTH,
    DocumentSynthesizer,
    synthesize,
)

__all__ = [
    "BINARY_BLOB_LENGTH",
    "DocumentSynthesizer",
    "Namespace",
    "ShapeDescriptor",
    "synthesize",
]
