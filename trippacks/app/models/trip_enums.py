"""
Trip-related enumerations.
"""

import enum


class TripState(enum.IntEnum):
    """Trip state. Stored as the raw integer code."""
    ASSIGNED = 100  # Handed to the driver
    OPEN = 101  # Being worked
    CLOSED = 102  # All stops done
    SUBMITTED = 103  # Paperwork turned in
