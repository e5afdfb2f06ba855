"""
HTTP gateway over the remote exercise catalogs.

Catalogs are tried in a fixed priority order:
1. primary (ExerciseDB v1 style API)
2. API Ninjas (skipped when no API key is configured)
3. free-exercise-db (static JSON dump, downloaded once per gateway; a
   search downloads it under the interactive timeout)

Each catalog's response is validated against its own schema and mapped onto
ExerciseRecord; broken media CDN hosts are rewritten before any record
leaves the gateway.

All public methods are non-fatal. Network, HTTP and parse failures are
collected per catalog, logged, and reported as an empty list, None or an
unsuccessful PageResult. Nothing is retried; a failed catalog falls through
to the next one.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from backend.core.media import MediaUrlFixer
from backend.core.normalize import clean
from backend.core.similarity import calculate_similarity
from backend.settings import Settings
from domain.models import ExerciseRecord, PageResult
from infrastructure.catalogs.schemas import (
    FreeExercise,
    NinjasExercise,
    PrimaryItemResponse,
    PrimaryListResponse,
    PrimaryNamesResponse,
)

logger = logging.getLogger(__name__)

PRIMARY = "primary"
NINJAS = "api-ninjas"
FREE = "free-exercise-db"

ModelT = TypeVar("ModelT", bound=BaseModel)

_NINJAS_LIST = TypeAdapter(List[NinjasExercise])
_FREE_LIST = TypeAdapter(List[FreeExercise])


class CatalogError(Exception):
    """Base exception for catalog gateway errors."""

    pass


class CatalogUnavailable(CatalogError):
    """Raised when a catalog cannot be reached or times out."""

    pass


class CatalogAPIError(CatalogError):
    """Raised when a catalog returns an error response."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class CatalogParseError(CatalogError):
    """Raised when a catalog response does not match its schema."""

    pass


class RemoteCatalogGateway:
    """
    Searches, pages and looks up exercises across the remote catalogs.

    Implements the CatalogGateway port.
    """

    def __init__(
        self,
        primary_url: str,
        ninjas_url: str,
        free_catalog_url: str,
        free_media_base: str,
        ninjas_api_key: Optional[str] = None,
        search_timeout: float = 3.0,
        background_timeout: float = 15.0,
        media_fixer: Optional[MediaUrlFixer] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the gateway.

        Args:
            primary_url: Base URL of the primary catalog API
            ninjas_url: API Ninjas exercises endpoint
            free_catalog_url: URL of the free-exercise-db JSON dump
            free_media_base: Prefix for free-exercise-db relative image paths
            ninjas_api_key: API Ninjas key (catalog skipped when None)
            search_timeout: Timeout for interactive searches in seconds
            background_timeout: Timeout for paging, id lookups and listings
            media_fixer: Rewrites broken media hosts (default host pair if None)
            transport: Optional httpx transport (used by tests to mock catalogs)
        """
        self._primary_url = primary_url.rstrip("/")
        self._ninjas_url = ninjas_url
        self._free_catalog_url = free_catalog_url
        self._free_media_base = free_media_base
        self._ninjas_api_key = ninjas_api_key
        self._search_timeout = search_timeout
        self._background_timeout = background_timeout
        self._media_fixer = media_fixer or MediaUrlFixer()
        self._transport = transport
        self._free_catalog: Optional[List[FreeExercise]] = None
        self._free_catalog_lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RemoteCatalogGateway":
        return cls(
            primary_url=settings.primary_catalog_url,
            ninjas_url=settings.ninjas_catalog_url,
            free_catalog_url=settings.free_catalog_url,
            free_media_base=settings.free_catalog_media_base,
            ninjas_api_key=settings.ninjas_api_key,
            search_timeout=settings.search_timeout_seconds,
            background_timeout=settings.background_timeout_seconds,
            media_fixer=MediaUrlFixer(settings.broken_media_host, settings.media_host_replacement),
            transport=transport,
        )

    # -------------------------------------------------------------------------
    # Public API (never raises for catalog failures)
    # -------------------------------------------------------------------------

    async def search(self, query: str, limit: int = 5) -> List[ExerciseRecord]:
        """
        Search catalogs by name with the interactive timeout.

        A catalog that fails or has no match falls through to the next one.

        Args:
            query: Free-form exercise name
            limit: Maximum records to return

        Returns:
            Up to ``limit`` records from the first catalog with a match
        """
        query = (query or "").strip()
        if not query or limit < 1:
            return []

        attempts: List[Tuple[str, Callable[[], Awaitable[List[ExerciseRecord]]]]] = [
            (PRIMARY, lambda: self._search_primary(query, limit)),
            (NINJAS, lambda: self._search_ninjas(query)),
            (FREE, lambda: self._search_free(query, limit)),
        ]
        errors: List[str] = []
        for catalog, attempt in attempts:
            try:
                records = await attempt()
            except CatalogError as e:
                errors.append(f"{catalog}: {e}")
                logger.warning(f"Catalog search failed ({catalog}) for '{query}': {e}")
                continue
            if records:
                logger.info(f"Catalog {catalog} returned {len(records)} result(s) for '{query}'")
                return self._finish(records[:limit])

        if errors:
            logger.warning(f"No catalog results for '{query}'; errors: {errors}")
        else:
            logger.info(f"No catalog results for '{query}'")
        return []

    async def fetch_page(self, page: int = 1, page_size: int = 10) -> PageResult:
        """
        Fetch one page of the catalog listing.

        Falls through to the next catalog only on failure; an empty page from
        a reachable catalog is a valid end of listing.

        Args:
            page: 1-based page number
            page_size: Records per page

        Returns:
            PageResult; success=False with one error per catalog when all fail
        """
        page = max(page, 1)
        page_size = max(page_size, 1)
        attempts = [
            (PRIMARY, self._page_primary),
            (NINJAS, self._page_ninjas),
            (FREE, self._page_free),
        ]
        errors: List[str] = []
        for catalog, attempt in attempts:
            try:
                result = await attempt(page, page_size)
            except CatalogError as e:
                errors.append(f"{catalog}: {e}")
                logger.warning(f"Catalog page {page} failed ({catalog}): {e}")
                continue
            if result is None:
                continue
            result.records = self._finish(result.records)
            result.errors = errors
            return result

        logger.error(f"All catalogs failed for page {page}: {errors}")
        return PageResult(success=False, page=page, page_size=page_size, errors=errors)

    async def get_by_id(self, exercise_id: str) -> Optional[ExerciseRecord]:
        """
        Look up a record by id: primary catalog first, then free-exercise-db.

        Returns:
            The record, or None if no catalog knows the id
        """
        if not exercise_id:
            return None
        try:
            url = f"{self._primary_url}/exercises/{quote(exercise_id, safe='')}"
            data = await self._get_json(url, timeout=self._background_timeout)
            item = self._parse(PrimaryItemResponse, data, PRIMARY)
            if item.success and item.data is not None:
                return self._finish([item.data.to_record()])[0]
        except CatalogError as e:
            logger.warning(f"Primary catalog lookup failed for id '{exercise_id}': {e}")

        try:
            for exercise in await self._load_free_catalog():
                if exercise.id == exercise_id:
                    return self._finish([exercise.to_record(self._free_media_base)])[0]
        except CatalogError as e:
            logger.warning(f"free-exercise-db lookup failed for id '{exercise_id}': {e}")

        logger.info(f"Exercise id '{exercise_id}' not found in any catalog")
        return None

    async def list_by_body_part(self, body_part: str) -> List[ExerciseRecord]:
        """Primary catalog only; empty on failure."""
        return await self._list_primary(f"/bodyparts/{quote(body_part, safe='')}/exercises")

    async def list_by_equipment(self, equipment: str) -> List[ExerciseRecord]:
        """Primary catalog only; empty on failure."""
        return await self._list_primary(f"/equipments/{quote(equipment, safe='')}/exercises")

    async def list_body_parts(self) -> List[str]:
        return await self._list_names("/bodyparts")

    async def list_equipments(self) -> List[str]:
        return await self._list_names("/equipments")

    # -------------------------------------------------------------------------
    # Primary catalog
    # -------------------------------------------------------------------------

    async def _search_primary(self, query: str, limit: int) -> List[ExerciseRecord]:
        data = await self._get_json(
            f"{self._primary_url}/exercises/search",
            params={"q": query, "limit": limit},
            headers={"Accept": "application/json"},
            timeout=self._search_timeout,
        )
        response = self._parse(PrimaryListResponse, data, PRIMARY)
        if not response.success:
            raise CatalogAPIError("Primary catalog reported success=false", 200)
        return [exercise.to_record() for exercise in response.data]

    async def _page_primary(self, page: int, page_size: int) -> Optional[PageResult]:
        data = await self._get_json(
            f"{self._primary_url}/exercises",
            params={"offset": (page - 1) * page_size, "limit": page_size},
            timeout=self._background_timeout,
        )
        response = self._parse(PrimaryListResponse, data, PRIMARY)
        if not response.success:
            raise CatalogAPIError("Primary catalog reported success=false", 200)
        meta = response.metadata
        records = [exercise.to_record() for exercise in response.data]
        return PageResult(
            success=True,
            records=records,
            page=page,
            page_size=page_size,
            total_pages=meta.total_pages if meta else 0,
            total_records=meta.total_exercises if meta else len(records),
            has_next=bool(meta and meta.next_page),
            source_catalog=PRIMARY,
        )

    async def _list_primary(self, path: str) -> List[ExerciseRecord]:
        try:
            data = await self._get_json(f"{self._primary_url}{path}", timeout=self._background_timeout)
            response = self._parse(PrimaryListResponse, data, PRIMARY)
        except CatalogError as e:
            logger.warning(f"Primary catalog listing {path} failed: {e}")
            return []
        return self._finish([exercise.to_record() for exercise in response.data])

    async def _list_names(self, path: str) -> List[str]:
        try:
            data = await self._get_json(f"{self._primary_url}{path}", timeout=self._background_timeout)
            response = self._parse(PrimaryNamesResponse, data, PRIMARY)
        except CatalogError as e:
            logger.warning(f"Primary catalog listing {path} failed: {e}")
            return []
        return response.data

    # -------------------------------------------------------------------------
    # API Ninjas
    # -------------------------------------------------------------------------

    async def _search_ninjas(self, query: str) -> List[ExerciseRecord]:
        if not self._ninjas_api_key:
            logger.debug("API Ninjas key not configured, skipping catalog")
            return []
        data = await self._get_json(
            self._ninjas_url,
            params={"name": query},
            headers={"X-Api-Key": self._ninjas_api_key},
            timeout=self._search_timeout,
        )
        return [exercise.to_record() for exercise in self._parse_list(_NINJAS_LIST, data, NINJAS)]

    async def _page_ninjas(self, page: int, page_size: int) -> Optional[PageResult]:
        if not self._ninjas_api_key:
            return None
        data = await self._get_json(
            self._ninjas_url,
            params={"offset": (page - 1) * page_size},
            headers={"X-Api-Key": self._ninjas_api_key},
            timeout=self._background_timeout,
        )
        exercises = self._parse_list(_NINJAS_LIST, data, NINJAS)[:page_size]
        # API Ninjas does not report totals
        return PageResult(
            success=True,
            records=[exercise.to_record() for exercise in exercises],
            page=page,
            page_size=page_size,
            has_next=bool(exercises),
            source_catalog=NINJAS,
        )

    # -------------------------------------------------------------------------
    # free-exercise-db
    # -------------------------------------------------------------------------

    async def _load_free_catalog(self, timeout: Optional[float] = None) -> List[FreeExercise]:
        """
        Download the free-exercise-db dump once per gateway.

        Concurrent callers wait on the same download. ``timeout`` defaults to
        the background timeout; a failed download is retried by the next caller.
        """
        if self._free_catalog is not None:
            return self._free_catalog
        async with self._free_catalog_lock:
            if self._free_catalog is None:
                data = await self._get_json(
                    self._free_catalog_url,
                    timeout=self._background_timeout if timeout is None else timeout,
                )
                self._free_catalog = self._parse_list(_FREE_LIST, data, FREE)
                logger.info(f"Loaded {len(self._free_catalog)} exercises from {FREE}")
        return self._free_catalog

    async def _search_free(self, query: str, limit: int) -> List[ExerciseRecord]:
        words = clean(query).split()
        if not words:
            return []
        if self._free_catalog is None and self._free_catalog_lock.locked():
            logger.debug(f"{FREE} download in progress, skipping catalog for '{query}'")
            return []
        matches = []
        for exercise in await self._load_free_catalog(timeout=self._search_timeout):
            name = clean(exercise.name)
            if all(word in name for word in words):
                matches.append((calculate_similarity(clean(query), name), exercise))
        matches.sort(key=lambda m: m[0], reverse=True)
        return [exercise.to_record(self._free_media_base) for _, exercise in matches[:limit]]

    async def _page_free(self, page: int, page_size: int) -> Optional[PageResult]:
        catalog = await self._load_free_catalog()
        start = (page - 1) * page_size
        end = start + page_size
        total = len(catalog)
        return PageResult(
            success=True,
            records=[exercise.to_record(self._free_media_base) for exercise in catalog[start:end]],
            page=page,
            page_size=page_size,
            total_pages=-(-total // page_size),
            total_records=total,
            has_next=end < total,
            source_catalog=FREE,
        )

    # -------------------------------------------------------------------------
    # HTTP and parsing helpers
    # -------------------------------------------------------------------------

    async def _get_json(
        self,
        url: str,
        timeout: float,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        GET ``url`` and decode the JSON body.

        Raises:
            CatalogUnavailable: If the catalog is unreachable or times out
            CatalogAPIError: If the catalog answers with a non-200 status
            CatalogParseError: If the body is not JSON
        """
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise CatalogUnavailable(f"Request to {url} timed out after {timeout}s") from e
        except httpx.TransportError as e:
            raise CatalogUnavailable(f"Catalog at {url} is not available: {e}") from e

        if response.status_code != 200:
            raise CatalogAPIError(
                f"{url} returned HTTP {response.status_code}",
                response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise CatalogParseError(f"{url} returned a non-JSON body") from e

    @staticmethod
    def _parse(model: Type[ModelT], data: Any, catalog: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise CatalogParseError(f"Unexpected {catalog} response: {e.error_count()} error(s)") from e

    @staticmethod
    def _parse_list(adapter: TypeAdapter, data: Any, catalog: str) -> list:
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise CatalogParseError(f"Unexpected {catalog} response: {e.error_count()} error(s)") from e

    def _finish(self, records: List[ExerciseRecord]) -> List[ExerciseRecord]:
        return [self._media_fixer.fix_record(record) for record in records]
