"""
Trip Pack API Endpoints.

Creates a trip together with its stops in one request.
"""

from fastapi import APIRouter, Depends, status

from trippacks.app.core.dependencies import get_repository
from trippacks.app.core.exceptions import WriteRejectedError
from trippacks.app.domain.validation import MessageCollector
from trippacks.app.schemas.trip import TripPackCreate, TripPackResponse
from trippacks.app.services.record_repository import RecordRepository
from trippacks.app.services.trip_builder import TripPackBuilder

router = APIRouter(tags=["Trip Packs"])


@router.post("/trip-packs", status_code=status.HTTP_201_CREATED, response_model=TripPackResponse)
async def create_trip_pack(
    payload: TripPackCreate,
    repository: RecordRepository = Depends(get_repository)
):
    """
    Create the next trip with one stop per location.

    The trip number is the current highest plus one and the from/to
    summary is built from the locations.

    The writes are not transactional: on a 422 the rows written before the
    failure stay in the store.
    """
    display = MessageCollector()
    pack = await TripPackBuilder(repository).create(
        locations=payload.locations,
        received_date=payload.received_date,
        submitted_date=payload.submitted_date,
        hub_start=payload.hub_start,
        hub_end=payload.hub_end,
        date_completed=payload.date_completed,
        display=display,
    )
    if not pack.complete:
        raise WriteRejectedError("/trip-packs", display.messages)

    return TripPackResponse(
        trip_number=pack.trip_number,
        from_to=pack.from_to,
        trip_uri=pack.trip_uri,
        stop_uris=pack.stop_uris,
    )
