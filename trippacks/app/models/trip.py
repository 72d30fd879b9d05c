"""
Trip database model.

A trip is one delivery run, identified to people by its trip number.
"""

from sqlalchemy import Column, Integer, String
from trippacks.app.db.session import Base
from trippacks.app.models.trip_enums import TripState


class Trip(Base):
    """
    Trip model.

    `trip_number` is integer-as-text; sorting and MAX() must cast it.
    `from_to` caches the stop summary at creation time and is not
    refreshed when stops change afterwards.
    """
    __tablename__ = "trips"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)

    trip_number = Column(String, nullable=False)
    from_to = Column(String, nullable=False, server_default="")

    # Dates are kept as yyyy-MM-dd text
    received_date = Column(String, nullable=False)
    submitted_date = Column(String, nullable=True)

    state = Column(Integer, nullable=False, server_default=str(int(TripState.ASSIGNED)))

    # Hub (odometer) readings
    hub_start = Column(Integer, nullable=False, server_default="0")
    hub_end = Column(Integer, nullable=False, server_default="0")

    def __repr__(self):
        return f"<Trip(id={self.id}, trip_number='{self.trip_number}', state={self.state})>"
