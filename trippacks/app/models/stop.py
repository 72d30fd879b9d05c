"""
Stop database model.

Stops are the ordered waypoints of a trip.
"""

from sqlalchemy import Column, Integer, String
from trippacks.app.db.session import Base


class Stop(Base):
    """
    Stop model.

    Linked to its trip by `trip_number` only. There is no foreign key,
    so deleting a trip leaves its stops in place.
    """
    __tablename__ = "stops"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)

    trip_number = Column(String, nullable=False)
    location = Column(String, nullable=False)

    # Order of the stop within its trip (1, 2, 3, ...)
    stop_index = Column(Integer, nullable=False)

    arrival_hub = Column(Integer, nullable=False, server_default="0")
    date_completed = Column(String, nullable=True)

    def __repr__(self):
        return f"<Stop(id={self.id}, trip_number='{self.trip_number}', seq={self.stop_index})>"
