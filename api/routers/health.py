"""
Health check router.

Liveness only: the resolver answers every query from local data when the
remote catalogs are down, so catalog reachability is not part of health.
Cache and tier counters live under /exercises/stats.
"""

from fastapi import APIRouter

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """Report that the process is up and serving requests."""
    return {"status": "ok"}
