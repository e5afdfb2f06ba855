"""
Exercise resolver: the single entry point for name -> media resolution.

Tiers, in order; the first hit whose record has media wins:
1. Local mapping table
2. Cache (exact key: query, id or name)
3. Advanced matcher (optional, opaque; errors skip the tier)
4. Remote catalogs (first result with media; similarity > 0.8 is a fuzzy
   match, anything else partial)
5. Cache partial scan (word overlap > 0.3)
6. Name resolution engine, which synthesizes a record when nothing matches

``find_exercise`` never returns None. Found records (everything except the
cache tier itself and synthesized records) are written back to the cache
under the query, the record id and the record name.
"""
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from application.ports import AdvancedMatcher, CatalogGateway, SnapshotStore
from backend.core.local_mapping import LocalMappingTable
from backend.core.media import MediaUrlFixer
from backend.core.name_resolution import NameResolutionEngine
from backend.core.normalize import clean
from backend.core.similarity import calculate_similarity
from backend.core.synthesis import emergency_record
from domain.models import ExerciseRecord, MatchResult, MatchSource, MatchType
from infrastructure.cache import ExerciseCache

logger = logging.getLogger(__name__)


@dataclass
class ResolutionStats:
    """Per-resolver counters: requests, tier that answered, degraded results."""

    total: int = 0
    local_mapping: int = 0
    cache: int = 0
    advanced: int = 0
    remote: int = 0
    cache_partial: int = 0
    engine: int = 0
    emergency: int = 0
    degraded: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class ExerciseResolver:
    """
    Tiered cascade over mapping table, cache, catalogs and the engine.

    All collaborators are injected; nothing here is process-global, so a
    process may run several resolvers with independent caches.
    """

    REMOTE_SEARCH_LIMIT = 5
    REMOTE_FUZZY_THRESHOLD = 0.8
    REMOTE_MAX_CONFIDENCE = 0.9
    PARTIAL_THRESHOLD = 0.3
    PARTIAL_MAX_CONFIDENCE = 0.8
    EMERGENCY_CONFIDENCE = 0.5

    def __init__(
        self,
        cache: ExerciseCache,
        local_mappings: LocalMappingTable,
        gateway: CatalogGateway,
        engine: NameResolutionEngine,
        advanced_matcher: Optional[AdvancedMatcher] = None,
        media_fixer: Optional[MediaUrlFixer] = None,
        snapshot_store: Optional[SnapshotStore] = None,
        popular_pages: int = 30,
        popular_page_size: int = 10,
    ):
        """
        Initialize the resolver and seed the cache from the local mappings.

        Args:
            cache: TTL cache shared by all tiers of this resolver
            local_mappings: Hand-curated records for very common exercises
            gateway: Remote catalogs
            engine: Offline name resolution engine (last tier)
            advanced_matcher: Optional external resolver consulted before catalogs
            media_fixer: Rewrites broken media hosts (default host pair if None)
            snapshot_store: Durable cache snapshot (persistence disabled if None)
            popular_pages: Pages fetched by warm_up when no usable snapshot exists
            popular_page_size: Records per warmup page
        """
        self._cache = cache
        self._local = local_mappings
        self._gateway = gateway
        self._engine = engine
        self._advanced = advanced_matcher
        self._media_fixer = media_fixer or MediaUrlFixer()
        self._snapshot_store = snapshot_store
        self._popular_pages = popular_pages
        self._popular_page_size = popular_page_size
        self._stats = ResolutionStats()

        self._cache.seed_local_mappings(self._local)

    @property
    def cache(self) -> ExerciseCache:
        return self._cache

    @property
    def engine(self) -> NameResolutionEngine:
        return self._engine

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    async def find_exercise(self, name: str) -> MatchResult:
        """
        Resolve a free-form exercise name to a record with media.

        Args:
            name: Exercise name in any formatting

        Returns:
            MatchResult; never None. Check ``is_degraded`` to tell a found
            demonstration from a synthesized one.
        """
        self._stats.total += 1
        query = (name or "").strip()

        if query:
            tiers: List[Tuple[str, Callable[[str], Awaitable[Optional[MatchResult]]]]] = [
                ("local_mapping", self._try_local_mapping),
                ("cache", self._try_cache),
                ("advanced", self._try_advanced),
                ("remote", self._try_remote),
                ("cache_partial", self._try_cache_partial),
            ]
            for tier, attempt in tiers:
                result = await attempt(query)
                if result is not None and result.record.has_media:
                    return self._accept(tier, query, result)

        tier, result = self._resolve_with_engine(query)
        return self._accept(tier, query, result)

    async def _try_local_mapping(self, query: str) -> Optional[MatchResult]:
        return self._local.match(query)

    async def _try_cache(self, query: str) -> Optional[MatchResult]:
        record = self._cache.get(query)
        if record is None:
            return None
        return MatchResult(
            record=self._media_fixer.fix_record(record),
            confidence=1.0,
            match_type=MatchType.EXACT,
            source=MatchSource.CACHE,
        )

    async def _try_advanced(self, query: str) -> Optional[MatchResult]:
        if self._advanced is None:
            return None
        try:
            result = await self._advanced.resolve(query)
        except Exception as e:
            logger.warning(f"Advanced matcher failed for '{query}', skipping: {e}")
            return None
        if result is None:
            return None
        return result.model_copy(update={"record": self._media_fixer.fix_record(result.record)})

    async def _try_remote(self, query: str) -> Optional[MatchResult]:
        records = await self._gateway.search(query, limit=self.REMOTE_SEARCH_LIMIT)
        records = [self._media_fixer.fix_record(r) for r in records if r.has_media]
        if not records:
            return None

        self._cache.put_many(records)
        self._engine.index_records(records, source=MatchSource.REMOTE)

        record = records[0]
        similarity = calculate_similarity(clean(query), clean(record.name))
        match_type = MatchType.FUZZY if similarity > self.REMOTE_FUZZY_THRESHOLD else MatchType.PARTIAL
        return MatchResult(
            record=record,
            confidence=min(similarity, self.REMOTE_MAX_CONFIDENCE),
            match_type=match_type,
            source=MatchSource.REMOTE,
        )

    async def _try_cache_partial(self, query: str) -> Optional[MatchResult]:
        hit = self._cache.find_partial_match(query, threshold=self.PARTIAL_THRESHOLD)
        if hit is None:
            return None
        record, score = hit
        return MatchResult(
            record=self._media_fixer.fix_record(record),
            confidence=min(score, self.PARTIAL_MAX_CONFIDENCE),
            match_type=MatchType.PARTIAL,
            source=MatchSource.CACHE,
        )

    def _resolve_with_engine(self, query: str) -> Tuple[str, MatchResult]:
        try:
            result = self._engine.resolve(query)
        except Exception:
            logger.exception(f"Name resolution engine failed for '{query}'")
            result = None
        if result is not None and result.record.has_media:
            return "engine", result

        # Unreachable while the engine keeps its never-empty guarantee
        logger.error(f"All resolution tiers failed for '{query}', using emergency record")
        return "emergency", MatchResult(
            record=emergency_record(query),
            confidence=self.EMERGENCY_CONFIDENCE,
            match_type=MatchType.FALLBACK,
            source=MatchSource.GENERATED,
        )

    def _accept(self, tier: str, query: str, result: MatchResult) -> MatchResult:
        setattr(self._stats, tier, getattr(self._stats, tier) + 1)

        if result.is_degraded:
            self._stats.degraded += 1
            logger.warning(
                f"Degraded resolution for '{query}': using {result.source.value} record "
                f"'{result.record.name}' (confidence {result.confidence:.2f})"
            )
            return result

        if tier != "cache":
            self._cache.put(query, result.record)
        logger.info(
            f"Resolved '{query}' via {tier}: '{result.record.name}' "
            f"({result.match_type.value}, {result.confidence:.2f})"
        )
        return result

    # -------------------------------------------------------------------------
    # Lookup and browse
    # -------------------------------------------------------------------------

    async def get_exercise(self, exercise_id: str) -> Optional[ExerciseRecord]:
        """Record by id from the cache, else from the catalogs (then cached)."""
        record = self._cache.get(exercise_id)
        if record is not None:
            return self._media_fixer.fix_record(record)
        record = await self._gateway.get_by_id(exercise_id)
        if record is None:
            return None
        record = self._media_fixer.fix_record(record)
        self._cache.put(None, record)
        return record

    async def exercises_by_body_part(self, body_part: str) -> List[ExerciseRecord]:
        return self._cache_all(await self._gateway.list_by_body_part(body_part))

    async def exercises_by_equipment(self, equipment: str) -> List[ExerciseRecord]:
        return self._cache_all(await self._gateway.list_by_equipment(equipment))

    async def list_body_parts(self) -> List[str]:
        return await self._gateway.list_body_parts()

    async def list_equipments(self) -> List[str]:
        return await self._gateway.list_equipments()

    def _cache_all(self, records: List[ExerciseRecord]) -> List[ExerciseRecord]:
        records = [self._media_fixer.fix_record(r) for r in records]
        self._cache.put_many(r for r in records if r.has_media)
        return records

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> bool:
        """
        Restore the cache from the durable snapshot, or warm it up.

        A missing or stale snapshot triggers a fetch of popular records from
        the catalogs, after which a fresh snapshot is saved.

        Returns:
            True if the cache was restored from the snapshot
        """
        if self._snapshot_store is not None:
            snapshot = self._snapshot_store.load()
            if snapshot is not None and self._cache.restore(snapshot, transform=self._media_fixer.fix_record):
                self._engine.index_records(self._cache.records(), source=MatchSource.CACHE)
                return True

        loaded = await self.warm_up()
        if loaded:
            self.persist()
        return False

    async def warm_up(self, pages: Optional[int] = None, page_size: Optional[int] = None) -> int:
        """
        Cache popular records page by page until a page fails or the listing ends.

        Returns:
            Number of records cached
        """
        pages = self._popular_pages if pages is None else pages
        page_size = self._popular_page_size if page_size is None else page_size
        started = time.monotonic()
        loaded = 0
        for page in range(1, pages + 1):
            result = await self._gateway.fetch_page(page, page_size)
            if not result.success:
                logger.warning(f"Warmup stopped at page {page}: {result.errors}")
                break
            records = [self._media_fixer.fix_record(r) for r in result.records if r.has_media]
            self._cache.put_many(records)
            self._engine.index_records(records, source=MatchSource.REMOTE)
            loaded += len(records)
            if not result.has_next:
                break
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(f"Warmup cached {loaded} exercises in {elapsed_ms:.0f}ms")
        return loaded

    def persist(self) -> bool:
        """Save the current cache contents; False when persistence is disabled."""
        if self._snapshot_store is None:
            return False
        self._snapshot_store.save(self._cache.to_snapshot())
        return True

    def clear_cache(self) -> None:
        """Drop cached and persisted records, then re-seed the local mappings."""
        self._cache.clear()
        if self._snapshot_store is not None:
            self._snapshot_store.clear()
        self._cache.seed_local_mappings(self._local)
        logger.info("Exercise cache cleared")

    # -------------------------------------------------------------------------
    # Observability
    # -------------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        return {**self._stats.to_dict(), "cache_size": self._cache.stats()}
