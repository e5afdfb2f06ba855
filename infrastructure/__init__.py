"""
Infrastructure Layer for the exercise media resolver.

This package contains concrete implementations of the application ports:
- cache/: TTL exercise cache and durable JSON snapshot store
- catalogs/: HTTP gateway over the remote exercise catalogs
"""

from infrastructure.cache import ExerciseCache, FileSnapshotStore
from infrastructure.catalogs import RemoteCatalogGateway

__all__ = [
    "ExerciseCache",
    "FileSnapshotStore",
    "RemoteCatalogGateway",
]
