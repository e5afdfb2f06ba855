"""
Catalog Gateway Interface (Port).

This module defines the abstract interface over the remote exercise
catalogs. The resolver only ever sees ExerciseRecord; which catalog answered
and what shape its response had is the gateway's concern.
"""
from typing import List, Optional, Protocol

from domain.models import ExerciseRecord, PageResult


class CatalogGateway(Protocol):
    """
    Abstract interface for searching and paging remote exercise catalogs.

    Every method is non-fatal: network and parse failures are reported as
    an empty list, None, or an unsuccessful PageResult, never raised.
    """

    async def search(self, query: str, limit: int = 5) -> List[ExerciseRecord]:
        """
        Search catalogs by exercise name.

        Args:
            query: Free-form exercise name
            limit: Maximum records to return

        Returns:
            Matching records, best first (empty on failure or no match)
        """
        ...

    async def fetch_page(self, page: int = 1, page_size: int = 10) -> PageResult:
        """
        Fetch one page of the catalog listing.

        Args:
            page: 1-based page number
            page_size: Records per page

        Returns:
            PageResult with success=False and the error list on failure
        """
        ...

    async def get_by_id(self, exercise_id: str) -> Optional[ExerciseRecord]:
        """
        Get a record by catalog id.

        Args:
            exercise_id: Identifier as issued by the catalog

        Returns:
            The record or None if not found or unavailable
        """
        ...

    async def list_by_body_part(self, body_part: str) -> List[ExerciseRecord]:
        """Records for a body part (primary catalog only)."""
        ...

    async def list_by_equipment(self, equipment: str) -> List[ExerciseRecord]:
        """Records using a piece of equipment (primary catalog only)."""
        ...

    async def list_body_parts(self) -> List[str]:
        """Body part names known to the primary catalog."""
        ...

    async def list_equipments(self) -> List[str]:
        """Equipment names known to the primary catalog."""
        ...
