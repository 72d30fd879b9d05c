"""
Trip pack creation: a trip together with its ordered stops.

Every row is validated before the first write, so a rejected field leaves
the store untouched. The writes themselves are separate (read the next
trip number, insert each stop, insert the trip): a store failure part-way
leaves the earlier rows in place, and two builders running at once can
pick the same trip number.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from trippacks.app.domain.field_rules import REQUIRED_ON_INSERT, validate_fields
from trippacks.app.domain.summary import summarize_stops
from trippacks.app.domain.targets import PATH_STOPS, PATH_TRIPS
from trippacks.app.domain.validation import Display
from trippacks.app.models.trip_enums import TripState
from trippacks.app.services.record_repository import RecordRepository

logger = logging.getLogger("trippacks.trip_builder")


@dataclass
class TripPack:
    trip_number: int
    from_to: str
    trip_uri: Optional[str] = None
    stop_uris: List[Optional[str]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.trip_uri is not None and all(self.stop_uris)


class TripPackBuilder:

    def __init__(self, repository: RecordRepository):
        self.repository = repository

    async def create(
        self,
        locations: Sequence[str],
        received_date: str,
        submitted_date: Optional[str] = None,
        hub_start: int = 0,
        hub_end: int = 0,
        date_completed: Optional[str] = None,
        display: Optional[Display] = None,
    ) -> TripPack:
        """
        Create a trip numbered after the current highest one, plus one stop
        per location in the given order.

        Returns:
            TripPack with the URIs of every row written. A URI is None when
            that write was rejected; when validation fails nothing is written.
        """
        trip_number = await self.repository.next_trip_number()
        pack = TripPack(trip_number=trip_number, from_to=summarize_stops(locations))

        stop_rows = [
            {
                "trip_number": trip_number,
                "location": location,
                "stop_index": index,
                "arrival_hub": 0,
                "date_completed": date_completed,
            }
            for index, location in enumerate(locations, start=1)
        ]
        trip_row = {
            "trip_number": trip_number,
            "from_to": pack.from_to,
            "state": int(TripState.ASSIGNED),
            "received_date": received_date,
            "submitted_date": submitted_date,
            "hub_start": hub_start,
            "hub_end": hub_end,
        }

        if not self._validate(trip_row, stop_rows, display):
            logger.warning("Trip %d rejected, nothing written", trip_number)
            return pack

        for row in stop_rows:
            pack.stop_uris.append(await self.repository.insert(f"/{PATH_STOPS}", row, display=display))
        pack.trip_uri = await self.repository.insert(f"/{PATH_TRIPS}", trip_row, display=display)

        if pack.complete:
            logger.info("Trip %d added with %d stops", trip_number, len(locations))
        else:
            logger.warning("Trip %d only partly written", trip_number)
        return pack

    @staticmethod
    def _validate(trip_row: Dict[str, Any], stop_rows: List[Dict[str, Any]],
                  display: Optional[Display]) -> bool:
        valid = validate_fields(PATH_TRIPS, trip_row, display, required=REQUIRED_ON_INSERT[PATH_TRIPS])
        for row in stop_rows:
            valid = validate_fields(PATH_STOPS, row, display, required=REQUIRED_ON_INSERT[PATH_STOPS]) and valid
        return valid
