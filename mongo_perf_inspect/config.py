"""
Configuration settings for the MongoDB performance inspector.

Uses Pydantic Settings to load environment variables for the MongoDB
connection, logging, and load defaults. ``resolve_config`` layers CLI
overrides on top and validates the result into an immutable LoadConfig.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from mongo_perf_inspect.domain.models import Namespace, ShapeDescriptor
from mongo_perf_inspect.errors import ConfigurationError


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = Field("mongodb://localhost:27017", alias="MONGODB_URI")
    namespace: str = Field("sample_mflix.movies", alias="NAMESPACE")
    server_selection_timeout_ms: int = Field(5000, alias="SERVER_SELECTION_TIMEOUT_MS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Load defaults
    workers: int = Field(1, alias="WORKERS")
    duration_seconds: int = Field(180, alias="DURATION")
    num_fields: int = Field(10, alias="NUM_FIELDS")
    depth: int = Field(0, alias="DEPTH")
    binary: int = Field(0, alias="BINARY")
    worker_id_start: int = Field(0, alias="WORKER_ID_START")
    embed_worker_id: bool = Field(True, alias="EMBED_WORKER_ID")
    empty_collection: bool = Field(False, alias="EMPTY_COLLECTION")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


@dataclass(frozen=True)
class LoadConfig:
    """Validated, immutable configuration for a single load run."""

    mongodb_uri: str
    namespace: Namespace
    workers: int
    duration_seconds: float
    shape: ShapeDescriptor
    worker_id_start: int = 0
    embed_worker_id: bool = True
    empty_collection: bool = False
    server_selection_timeout_ms: int = 5000


def resolve_config(settings: Settings | None = None, **overrides: Any) -> LoadConfig:
    """
    Merge CLI overrides into settings and validate the result.

    Overrides whose value is None are ignored so optional CLI flags fall back
    to the environment.

    Raises
    ------
    ConfigurationError
        If the namespace is malformed or any count is out of range.
    """
    settings = settings or get_settings()
    unknown = set(overrides) - set(Settings.model_fields)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    values = settings.model_dump()
    values.update({key: value for key, value in overrides.items() if value is not None})

    if values["workers"] < 1:
        raise ConfigurationError(f"workers must be >= 1, got {values['workers']}")
    if values["duration_seconds"] < 0:
        raise ConfigurationError(f"duration must be >= 0, got {values['duration_seconds']}")
    if values["worker_id_start"] < 0:
        raise ConfigurationError(
            f"worker id start must be >= 0, got {values['worker_id_start']}"
        )

    namespace = Namespace.parse(values["namespace"])
    try:
        shape = ShapeDescriptor(
            field_count=values["num_fields"],
            nesting_depth=values["depth"],
            binary_blob_size=values["binary"],
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid document shape: {exc}") from exc

    return LoadConfig(
        mongodb_uri=values["mongodb_uri"],
        namespace=namespace,
        workers=values["workers"],
        duration_seconds=values["duration_seconds"],
        shape=shape,
        worker_id_start=values["worker_id_start"],
        embed_worker_id=values["embed_worker_id"],
        empty_collection=values["empty_collection"],
        server_selection_timeout_ms=values["server_selection_timeout_ms"],
    )


__all__ = ["LoadConfig", "Settings", "get_settings", "resolve_config"]
