"""
Pytest configuration for the MongoDB performance inspector.

Provides fixtures for:
- In-memory store clients for unit tests
- Settings isolation (no .env, cleared cache)
- MongoDB connection management for integration tests
"""

from __future__ import annotations

import os
import threading
from typing import Any, Callable, Generator, List, Mapping, Optional, Tuple

import pytest
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from mongo_perf_inspect.config import Settings, get_settings
from mongo_perf_inspect.domain.models import Namespace
from mongo_perf_inspect.errors import InsertError

SETTINGS_ENV_VARS = (
    "MONGODB_URI",
    "NAMESPACE",
    "SERVER_SELECTION_TIMEOUT_MS",
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "WORKERS",
    "DURATION",
    "NUM_FIELDS",
    "DEPTH",
    "BINARY",
    "WORKER_ID_START",
    "EMBED_WORKER_ID",
    "EMPTY_COLLECTION",
)


class FakeStore:
    """
    Thread-safe in-memory store client.

    ``on_insert`` runs after each document is recorded, outside the lock, and
    may raise to simulate a failing insert.
    """

    def __init__(self, on_insert: Optional[Callable[[Mapping[str, Any]], None]] = None) -> None:
        self.documents: List[Tuple[Namespace, dict]] = []
        self.insert_threads: set[str] = set()
        self.emptied: List[Namespace] = []
        self.close_calls = 0
        self._on_insert = on_insert
        self._lock = threading.Lock()

    def insert_one(self, namespace: Namespace, document: Mapping[str, Any]) -> Any:
        if self._on_insert is not None:
            self._on_insert(document)
        with self._lock:
            self.documents.append((namespace, dict(document)))
            self.insert_threads.add(threading.current_thread().name)
        return document["_id"]

    def empty(self, namespace: Namespace) -> None:
        self.emptied.append(namespace)

    def close(self) -> None:
        self.close_calls += 1


class FailingStore(FakeStore):
    """Store whose every insert fails."""

    def insert_one(self, namespace: Namespace, document: Mapping[str, Any]) -> Any:
        raise InsertError("simulated write failure")


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def make_store() -> Callable[..., FakeStore]:
    """Factory for stores with a custom per-insert hook."""
    return FakeStore


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def namespace() -> Namespace:
    return Namespace(database="perf_test", collection="docs")


@pytest.fixture
def clean_settings(monkeypatch) -> Generator[None, None, None]:
    """
    Remove settings env vars, ignore any .env file and clear the settings cache.
    """
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setitem(Settings.model_config, "env_file", None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def test_mongodb_uri() -> str:
    return os.getenv("MONGODB_URI", "mongodb://localhost:27017")


@pytest.fixture(scope="session")
def mongo_available(test_mongodb_uri: str) -> bool:
    """
    Check if MongoDB is reachable.

    Used to conditionally skip integration tests when MongoDB is not available.
    """
    client: MongoClient = MongoClient(test_mongodb_uri, serverSelectionTimeoutMS=2000)
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
    finally:
        client.close()


@pytest.fixture(scope="session")
def mongo_client(
    test_mongodb_uri: str, mongo_available: bool
) -> Generator[MongoClient, None, None]:
    """
    Provide a session-scoped client for integration tests.

    Skips tests if MongoDB is not available.
    """
    if not mongo_available:
        pytest.skip("MongoDB not available for integration tests")

    client: MongoClient = MongoClient(test_mongodb_uri)
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def smoke_namespace(mongo_client: MongoClient) -> Generator[Namespace, None, None]:
    """
    Namespace dropped before and after each integration test.
    """
    namespace = Namespace(database="mongo_perf_inspect_test", collection="smoke")
    mongo_client[namespace.database].drop_collection(namespace.collection)
    yield namespace
    mongo_client[namespace.database].drop_collection(namespace.collection)
