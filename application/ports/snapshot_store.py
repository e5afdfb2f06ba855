"""
Snapshot Store Interface (Port).

Key-value persistence used to save and restore the exercise cache across
process restarts.
"""
from typing import Optional, Protocol

from domain.models import CacheSnapshot


class SnapshotStore(Protocol):
    """Abstract interface for durable cache snapshots."""

    def load(self) -> Optional[CacheSnapshot]:
        """
        Load the last saved snapshot.

        Returns:
            The snapshot or None if nothing was saved (or it is unreadable)
        """
        ...

    def save(self, snapshot: CacheSnapshot) -> None:
        """Replace the saved snapshot."""
        ...

    def clear(self) -> None:
        """Delete the saved snapshot."""
        ...
