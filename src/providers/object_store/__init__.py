"""Object store provider implementations.

LocalObjectStore maps buckets to directories under a root path, which is
enough for local runs and tests.  Remote stores implement IObjectStore.
"""

from src.providers.object_store.local_object_store import LocalObjectStore

__all__ = ["LocalObjectStore"]
