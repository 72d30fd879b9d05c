"""
Trip pack schemas.

Request and response bodies for creating a trip with its stops.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from trippacks.app.domain.validation import is_valid_date


class TripPackCreate(BaseModel):
    """Schema for creating a trip pack. Locations are in stop order."""
    locations: List[str] = Field(..., min_length=1)
    received_date: str
    submitted_date: Optional[str] = None
    hub_start: int = 0
    hub_end: int = 0
    date_completed: Optional[str] = None

    @field_validator("received_date", "submitted_date", "date_completed")
    @classmethod
    def check_date(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_date(value):
            raise ValueError("must be a yyyy-MM-dd calendar date")
        return value


class TripPackResponse(BaseModel):
    """Schema for the created trip pack."""
    trip_number: int
    from_to: str
    trip_uri: str
    stop_uris: List[str]
