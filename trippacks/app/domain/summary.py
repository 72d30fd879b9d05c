"""
Trip summary text built from its stops.
"""

from typing import Sequence


def summarize_stops(locations: Sequence[str]) -> str:
    """
    Build the "from/to" summary for stops given in stop order.

    >>> summarize_stops(["A", "B", "C"])
    'A to C (3 stops)'
    >>> summarize_stops(["A"])
    'A (1 stops)'
    """
    if not locations:
        return ""

    summary = locations[0]
    if len(locations) > 1:
        summary = f"{summary} to {locations[-1]}"
    return f"{summary} ({len(locations)} stops)"
