"""
Interfaces (Ports) for the exercise media resolver.

This package defines abstract interfaces that decouple resolution logic from
infrastructure (HTTP catalogs, snapshot storage, external matchers).
Implementations are provided in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the resolver needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import CatalogGateway, SnapshotStore

    class ExerciseResolver:
        def __init__(self, gateway: CatalogGateway, snapshot_store: SnapshotStore):
            ...
"""

# Remote exercise catalogs
from application.ports.catalog_gateway import CatalogGateway

# Durable cache snapshot
from application.ports.snapshot_store import SnapshotStore

# Optional upstream matcher
from application.ports.advanced_matcher import AdvancedMatcher

__all__ = [
    "AdvancedMatcher",
    "CatalogGateway",
    "SnapshotStore",
]
