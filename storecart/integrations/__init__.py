"""Storage backends and the persistent store adapter."""

from .storage import MemoryBackend, PersistentStore, StorageBackend

__all__ = ["MemoryBackend", "PersistentStore", "StorageBackend"]
