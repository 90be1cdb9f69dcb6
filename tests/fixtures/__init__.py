"""Shared test doubles."""

from .storage import InMemoryBackend, StoredObject, failing_backend

__all__ = ["InMemoryBackend", "StoredObject", "failing_backend"]
