"""
Addressable targets and path dispatch.

Four targets exist, a collection and an item path for each table:

    /trips    /trips/{id}
    /stops    /stops/{id}

The dispatch table below is a constant; paths are matched against it and
nothing registers into it at runtime.
"""

import enum
import re
from dataclasses import dataclass
from typing import Optional

from trippacks.app.core.exceptions import UnresolvableTypeError, UnsupportedTargetError

CONTENT_AUTHORITY = "trippacks"

PATH_TRIPS = "trips"
PATH_STOPS = "stops"

DIR_BASE_TYPE = "vnd.trippacks.cursor.dir"
ITEM_BASE_TYPE = "vnd.trippacks.cursor.item"


class TargetKind(enum.Enum):
    """The four targets, as (table, is_item)."""
    TRIP_COLLECTION = (PATH_TRIPS, False)
    TRIP_ITEM = (PATH_TRIPS, True)
    STOP_COLLECTION = (PATH_STOPS, False)
    STOP_ITEM = (PATH_STOPS, True)

    def __init__(self, table: str, is_item: bool):
        self.table = table
        self.is_item = is_item

    @property
    def content_type(self) -> str:
        base = ITEM_BASE_TYPE if self.is_item else DIR_BASE_TYPE
        return f"{base}/{CONTENT_AUTHORITY}/{self.table}"


@dataclass(frozen=True)
class Target:
    kind: TargetKind
    path: str
    item_id: Optional[int] = None

    @property
    def table(self) -> str:
        return self.kind.table

    @property
    def is_item(self) -> bool:
        return self.kind.is_item

    @property
    def collection_path(self) -> str:
        return f"/{self.kind.table}"


_DISPATCH = (
    (re.compile(rf"/?{PATH_TRIPS}/?"), TargetKind.TRIP_COLLECTION),
    (re.compile(rf"/?{PATH_TRIPS}/([0-9]+)/?"), TargetKind.TRIP_ITEM),
    (re.compile(rf"/?{PATH_STOPS}/?"), TargetKind.STOP_COLLECTION),
    (re.compile(rf"/?{PATH_STOPS}/([0-9]+)/?"), TargetKind.STOP_ITEM),
)


def match_target(path: str) -> Optional[Target]:
    """Return the target for ``path``, or None when nothing matches."""
    for pattern, kind in _DISPATCH:
        match = pattern.fullmatch(path or "")
        if match is None:
            continue
        item_id = int(match.group(1)) if kind.is_item else None
        return Target(kind=kind, path=path, item_id=item_id)
    return None


def resolve_target(path: str, operation: str = "Query") -> Target:
    """Like ``match_target`` but raises UnsupportedTargetError on no match."""
    target = match_target(path)
    if target is None:
        raise UnsupportedTargetError(operation, path)
    return target


def resolve_type(path: str) -> str:
    """Return the type tag for ``path``. An unknown path is a fatal error."""
    target = match_target(path)
    if target is None:
        raise UnresolvableTypeError(path)
    return target.kind.content_type


def item_path(collection_path: str, item_id: int) -> str:
    return f"{collection_path.rstrip('/')}/{item_id}"
