"""Exception hierarchy for the MongoDB performance inspector."""

from __future__ import annotations


class LoadGeneratorError(RuntimeError):
    """Base error for load generation failures."""


class ConfigurationError(LoadGeneratorError):
    """Raised when the run configuration is malformed or out of range."""


class StoreConnectionError(LoadGeneratorError):
    """Raised when the store cannot be reached."""


class InsertError(LoadGeneratorError):
    """Raised when a document insert fails during the load."""

    def __init__(self, message: str, worker_id: str | None = None) -> None:
        super().__init__(message)
        self.worker_id = worker_id


class EntropyError(LoadGeneratorError):
    """Raised when random bytes cannot be obtained from the OS."""


__all__ = [
    "LoadGeneratorError",
    "ConfigurationError",
    "StoreConnectionError",
    "InsertError",
    "EntropyError",
]
