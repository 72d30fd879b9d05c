"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from trippacks.app.api.v1.endpoints import records, trip_packs

router = APIRouter()

# Trip packs first: "/trip-packs" would otherwise match "/{collection}"
router.include_router(trip_packs.router)

# Generic record access by target path
router.include_router(records.router)
