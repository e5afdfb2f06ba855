"""
In-memory exercise cache with TTL support.

Records are stored under several keys at once: the record id, the
lower-cased record name, and optionally the query that resolved to it.
Expiry is lazy: ``get`` checks the entry age and drops stale entries, no
background sweep is needed. Snapshots carry each record's insertion time,
so saving and restoring never makes a record younger.

The cache is a plain process-local dict. Concurrent writers always store the
same record for the same key, so last-writer-wins is acceptable and no lock
is taken.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from backend.core.local_mapping import LocalMappingTable
from backend.core.normalize import normalize
from backend.core.similarity import word_overlap_score
from domain.models import CacheSnapshot, ExerciseRecord

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Cache entry with TTL support."""

    key: str
    record: ExerciseRecord
    inserted_at: float


class ExerciseCache:
    """
    TTL cache of canonical exercise records.

    Construct one per resolver (or per tenant) and inject it; nothing in the
    resolver relies on a process-wide instance.
    """

    DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60  # 7 days

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Age after which an entry is no longer served
            clock: Returns the current unix time (injectable for tests)
        """
        self._entries: Dict[str, CacheEntry] = {}
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[ExerciseRecord]:
        """
        Get a record by id, name or previously resolved query.

        The key is tried as given (ids are case-sensitive) and then
        lower-cased. Expired entries are removed and reported as absent.
        """
        if not key:
            return None
        for candidate in dict.fromkeys((key, key.strip().lower())):
            entry = self._entries.get(candidate)
            if entry is None:
                continue
            if self._is_expired(entry):
                del self._entries[candidate]
                logger.debug(f"Cache entry '{candidate}' expired")
                continue
            return entry.record
        return None

    def put(
        self,
        key: Optional[str],
        record: ExerciseRecord,
        inserted_at: Optional[float] = None,
    ) -> None:
        """
        Insert ``record`` under ``key`` (lower-cased), its id and its lower-cased name.

        Existing entries for those keys are replaced wholesale.
        """
        timestamp = self._clock() if inserted_at is None else inserted_at
        keys = [record.id, record.name.strip().lower()]
        if key and key.strip():
            keys.append(key.strip().lower())
        for k in dict.fromkeys(keys):
            if k:
                self._entries[k] = CacheEntry(key=k, record=record, inserted_at=timestamp)

    def put_many(self, records: Iterable[ExerciseRecord], inserted_at: Optional[float] = None) -> int:
        count = 0
        for record in records:
            self.put(None, record, inserted_at=inserted_at)
            count += 1
        return count

    def seed_local_mappings(self, table: LocalMappingTable) -> int:
        """Load local mappings under their table key, id and name (placeholders excluded)."""
        count = 0
        for key, record in table.items():
            if not record.has_media:
                continue
            self.put(key, record)
            count += 1
        logger.info(f"Seeded cache with {count} local exercise mappings")
        return count

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def records(self) -> List[ExerciseRecord]:
        """Unexpired records, one per record id, in insertion order."""
        unique: Dict[str, ExerciseRecord] = {}
        for entry in list(self._entries.values()):
            if self._is_expired(entry):
                continue
            unique.setdefault(entry.record.id, entry.record)
        return list(unique.values())

    def find_partial_match(self, query: str, threshold: float = 0.3) -> Optional[Tuple[ExerciseRecord, float]]:
        """
        Best cached record by shared-word overlap with ``query``.

        Only records with media are considered. Returns (record, score) when
        the normalized overlap score exceeds ``threshold``.
        """
        normalized_query = normalize(query)
        best: Optional[ExerciseRecord] = None
        best_score = 0.0
        for record in self.records():
            if not record.has_media:
                continue
            score = word_overlap_score(normalized_query, normalize(record.name))
            if score > best_score and score > threshold:
                best, best_score = record, score
        if best is None:
            return None
        return best, best_score

    def stats(self) -> Dict[str, int]:
        """Number of keys and number of distinct records."""
        return {"size": len(self._entries), "exercises": len(self.records())}

    def to_snapshot(self) -> CacheSnapshot:
        """Unexpired records together with the time each one was cached."""
        now = self._clock()
        records = self.records()
        inserted_at = {}
        for record in records:
            entry = self._entries.get(record.id)
            inserted_at[record.id] = entry.inserted_at if entry is not None else now
        return CacheSnapshot(records=records, refreshed_at=now, inserted_at=inserted_at)

    def restore(
        self,
        snapshot: CacheSnapshot,
        transform: Optional[Callable[[ExerciseRecord], ExerciseRecord]] = None,
    ) -> bool:
        """
        Seed from a durable snapshot, keeping each record's original insertion time.

        Records already past the TTL are skipped, as are records the cache
        holds a fresher copy of. Returns False when nothing was restored.
        """
        age = self._clock() - snapshot.refreshed_at
        if age > self._ttl:
            logger.info(f"Cache snapshot is {age / 3600:.1f}h old, beyond TTL; not restoring")
            return False
        restored = 0
        for record in snapshot.records:
            timestamp = snapshot.inserted_at.get(record.id, snapshot.refreshed_at)
            if self._clock() - timestamp > self._ttl:
                continue
            existing = self._entries.get(record.id)
            if existing is not None and existing.inserted_at >= timestamp:
                continue
            if transform is not None:
                record = transform(record)
            self.put(None, record, inserted_at=timestamp)
            restored += 1
        if not restored:
            logger.info("Cache snapshot holds no unexpired exercises; not restoring")
            return False
        logger.info(f"Loaded {restored} exercises from cache snapshot")
        return True

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.inserted_at > self._ttl
