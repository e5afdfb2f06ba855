"""
Cache implementations.

- ExerciseCache: in-memory TTL cache keyed by record id, name and query
- FileSnapshotStore: JSON file holding a durable copy of the cache
"""

from infrastructure.cache.exercise_cache import CacheEntry, ExerciseCache
from infrastructure.cache.snapshot_store import FileSnapshotStore

__all__ = [
    "CacheEntry",
    "ExerciseCache",
    "FileSnapshotStore",
]
