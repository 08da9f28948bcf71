"""
Store client utilities for the MongoDB performance inspector.

Wraps a ``pymongo.MongoClient`` behind the small surface the load core needs:
connect, insert one document, empty a collection, close. The client is shared
across all workers; pymongo's own connection pool handles concurrent use.

Connection establishment includes retry logic for transient failures using
tenacity. Inserts are never retried: any insert failure is surfaced as an
InsertError so the run can abort.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError
from tenacity import RetryError, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from mongo_perf_inspect.domain.models import Namespace
from mongo_perf_inspect.errors import InsertError, StoreConnectionError
from mongo_perf_inspect.utils.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class StoreClient(Protocol):
    """
    Minimal store capability consumed by workers and the orchestrator.
    """

    def insert_one(self, namespace: Namespace, document: Mapping[str, Any]) -> Any:
        """Insert one document, raising InsertError on failure."""
        ...

    def empty(self, namespace: Namespace) -> None:
        """Remove every document from the target collection."""
        ...

    def close(self) -> None:
        """Release the underlying connection resources."""
        ...


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(ConnectionFailure),
)
def _ping(client: MongoClient) -> None:
    client.admin.command("ping")


class MongoStore:
    """
    Store client backed by pymongo.

    Use ``MongoStore.connect(uri)`` to build a client and verify the server is
    reachable before any load starts.
    """

    def __init__(self, client: MongoClient) -> None:
        self._client: Optional[MongoClient] = client
        self._lock = threading.Lock()

    @classmethod
    def connect(cls, uri: str, server_selection_timeout_ms: int = 5000) -> "MongoStore":
        """
        Connect to MongoDB and ping the server.

        Retries up to 3 times with exponential backoff for transient connection errors.

        Raises
        ------
        StoreConnectionError
            If the URI is invalid or the server cannot be reached after all attempts.
        """
        try:
            client: MongoClient = MongoClient(
                uri, serverSelectionTimeoutMS=server_selection_timeout_ms
            )
        except PyMongoError as exc:
            raise StoreConnectionError(f"Invalid MongoDB URI: {exc}") from exc

        try:
            _ping(client)
        except RetryError as exc:
            client.close()
            cause = exc.last_attempt.exception()
            raise StoreConnectionError(f"Unable to reach MongoDB: {cause}") from cause
        except PyMongoError as exc:
            client.close()
            raise StoreConnectionError(f"Unable to reach MongoDB: {exc}") from exc

        log.info(
            "Connected to MongoDB",
            extra={"server_selection_timeout_ms": server_selection_timeout_ms},
        )
        return cls(client)

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            raise StoreConnectionError("Store client is closed")
        return self._client

    def insert_one(self, namespace: Namespace, document: Mapping[str, Any]) -> Any:
        collection = self.client[namespace.database][namespace.collection]
        try:
            return collection.insert_one(document).inserted_id
        except PyMongoError as exc:
            raise InsertError(f"Insert into {namespace} failed: {exc}") from exc

    def empty(self, namespace: Namespace) -> None:
        """Drop the target collection so the run starts from an empty one."""
        log.info("Emptying collection", extra={"namespace": str(namespace)})
        try:
            self.client[namespace.database].drop_collection(namespace.collection)
        except PyMongoError as exc:
            raise StoreConnectionError(f"Unable to empty {namespace}: {exc}") from exc

    def close(self) -> None:
        """
        Close the client. Safe to call more than once.
        """
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> "MongoStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["MongoStore", "StoreClient"]
