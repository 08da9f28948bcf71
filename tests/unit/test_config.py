from __future__ import annotations

import pytest

from mongo_perf_inspect.config import LoadConfig, Settings, get_settings, resolve_config
from mongo_perf_inspect.domain.models import Namespace, ShapeDescriptor
from mongo_perf_inspect.errors import ConfigurationError

DEFAULT_WORKERS = 1
DEFAULT_DURATION = 180
DEFAULT_FIELDS = 10
OVERRIDE_WORKERS = 8
OVERRIDE_FIELDS = 3
ENV_WORKERS = 6


def test_get_settings_defaults(clean_settings) -> None:
    settings = get_settings()

    assert settings.mongodb_uri == "mongodb://localhost:27017"
    assert settings.namespace == "sample_mflix.movies"
    assert settings.workers == DEFAULT_WORKERS
    assert settings.duration_seconds == DEFAULT_DURATION
    assert settings.num_fields == DEFAULT_FIELDS
    assert settings.depth == 0
    assert settings.binary == 0
    assert settings.embed_worker_id is True
    assert settings.empty_collection is False


def test_settings_read_environment(clean_settings, monkeypatch) -> None:
    monkeypatch.setenv("WORKERS", str(ENV_WORKERS))
    monkeypatch.setenv("NAMESPACE", "bench.events")
    monkeypatch.setenv("EMBED_WORKER_ID", "false")

    config = resolve_config(Settings())

    assert config.workers == ENV_WORKERS
    assert config.namespace == Namespace(database="bench", collection="events")
    assert config.embed_worker_id is False


def test_namespace_parse_splits_database_and_collection() -> None:
    namespace = Namespace.parse("myDatabase.myCollection")

    assert namespace.database == "myDatabase"
    assert namespace.collection == "myCollection"
    assert str(namespace) == "myDatabase.myCollection"


@pytest.mark.parametrize("value", ["nodot", "a.b.c", ".coll", "db.", ""])
def test_namespace_parse_rejects_malformed_values(value: str) -> None:
    with pytest.raises(ConfigurationError, match="Invalid namespace"):
        Namespace.parse(value)


def test_shape_descriptor_reserved_keys() -> None:
    shape = ShapeDescriptor(field_count=6, binary_blob_size=16)

    assert shape.binary_enabled is True
    assert shape.binary_key == "i7"
    assert shape.identity_key == "i8"


def test_resolve_config_applies_overrides_and_ignores_none(clean_settings) -> None:
    config = resolve_config(
        Settings(),
        workers=OVERRIDE_WORKERS,
        num_fields=OVERRIDE_FIELDS,
        namespace=None,
        binary=None,
    )

    assert isinstance(config, LoadConfig)
    assert config.workers == OVERRIDE_WORKERS
    assert config.shape == ShapeDescriptor(field_count=OVERRIDE_FIELDS)
    assert config.namespace == Namespace(database="sample_mflix", collection="movies")


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"workers": 0}, "workers"),
        ({"duration_seconds": -1}, "duration"),
        ({"worker_id_start": -2}, "worker id start"),
        ({"num_fields": -1}, "shape"),
        ({"binary": -5}, "shape"),
        ({"depth": -1}, "shape"),
        ({"namespace": "broken"}, "namespace"),
        ({"threads": 4}, "Unknown configuration keys"),
    ],
)
def test_resolve_config_rejects_invalid_values(clean_settings, overrides, message) -> None:
    with pytest.raises(ConfigurationError, match=message):
        resolve_config(Settings(), **overrides)
