"""Remote exercise catalogs behind a single gateway."""

from infrastructure.catalogs.gateway import (
    CatalogAPIError,
    CatalogError,
    CatalogParseError,
    CatalogUnavailable,
    RemoteCatalogGateway,
)

__all__ = [
    "CatalogAPIError",
    "CatalogError",
    "CatalogParseError",
    "CatalogUnavailable",
    "RemoteCatalogGateway",
]
