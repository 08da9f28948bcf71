"""
Domain models for the MongoDB performance inspector.

Defines the namespace targeted by a load run and the shape descriptor that
drives document synthesis. Both are immutable for the lifetime of a run.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from mongo_perf_inspect.errors import ConfigurationError


class Namespace(BaseModel):
    """
    A database name and collection name pair identifying the insert target.
    """

    database: str = Field(..., min_length=1, description="Database name.")
    collection: str = Field(..., min_length=1, description="Collection name.")

    model_config = {
        "frozen": True,
    }

    @classmethod
    def parse(cls, value: str) -> "Namespace":
        """
        Split a ``database.collection`` string into a Namespace.

        Raises
        ------
        ConfigurationError
            If the value does not hold exactly two non-empty dot-separated parts.
        """
        parts = value.split(".")
        if len(parts) != 2 or not all(parts):
            raise ConfigurationError(
                f"Invalid namespace '{value}'. Use database.collection, e.g. myDatabase.myCollection"
            )
        return cls(database=parts[0], collection=parts[1])

    def __str__(self) -> str:
        return f"{self.database}.{self.collection}"


class ShapeDescriptor(BaseModel):
    """
    Describes how many fields a synthetic document has and which extras it carries.
    """

    field_count: int = Field(10, ge=0, description="Number of positional i<N> fields.")
    nesting_depth: int = Field(
        0, ge=0, description="Accepted for compatibility; not applied to document structure."
    )
    binary_blob_size: int = Field(
        0, ge=0, description="Non-zero enables the binary blob field (fixed length)."
    )

    model_config = {
        "frozen": True,
    }

    @property
    def binary_enabled(self) -> bool:
        return self.binary_blob_size != 0

    @property
    def binary_key(self) -> str:
        return f"i{self.field_count + 1}"

    @property
    def identity_key(self) -> str:
        return f"i{self.field_count + 2}"


__all__ = ["Namespace", "ShapeDescriptor"]
