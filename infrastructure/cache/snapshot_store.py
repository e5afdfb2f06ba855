"""
Durable cache snapshot stored as a JSON file.

The snapshot holds the cached records and the time they were last
refreshed, so a restarted process can skip the warmup while the data is
still within the TTL.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from domain.models import CacheSnapshot

logger = logging.getLogger(__name__)


class FileSnapshotStore:
    """SnapshotStore backed by a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[CacheSnapshot]:
        """Read the snapshot; a missing or unreadable file counts as no snapshot."""
        if not self._path.exists():
            return None
        try:
            return CacheSnapshot.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable cache snapshot {self._path}: {e}")
            return None

    def save(self, snapshot: CacheSnapshot) -> None:
        """Write atomically: a crash mid-write leaves the previous snapshot intact."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.model_dump_json())
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Saved cache snapshot with {len(snapshot.records)} records to {self._path}")

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
