"""
Record repository for trips and stops.

Translates a target path plus an operation into a statement on the right
table. Writes are validated first; a rejected or failed write leaves the
store untouched and is reported through the return value (None or 0),
never as an exception. Only malformed requests raise: an unsupported
target, an unknown type, or an unknown column in a projection, selection
or sort order.

Every call opens its own session. Nothing spans calls, so a read of the
next trip number followed by an insert can race with another writer.
"""

import logging
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence

from sqlalchemy import Float, Integer, Table, cast, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from trippacks.app.core.exceptions import UnknownColumnError, UnsupportedTargetError
from trippacks.app.domain.field_rules import REQUIRED_ON_INSERT, validate_fields
from trippacks.app.domain.summary import summarize_stops
from trippacks.app.domain.targets import (
    PATH_STOPS, PATH_TRIPS, Target, item_path, resolve_target, resolve_type,
)
from trippacks.app.domain.validation import Display
from trippacks.app.models.stop import Stop
from trippacks.app.models.trip import Trip
from trippacks.app.services.change_notifier import ChangeNotifier

logger = logging.getLogger("trippacks.repository")

TABLES: Dict[str, Table] = {
    PATH_TRIPS: Trip.__table__,
    PATH_STOPS: Stop.__table__,
}

# Integer-as-text columns, compared numerically when sorting
NUMERIC_TEXT_COLUMNS = {"trip_number"}

DEFAULT_SORT_ORDER = {
    PATH_TRIPS: "trip_number DESC",
    PATH_STOPS: "trip_number, stop_index",
}

READ_ONLY_COLUMNS = {"id"}


class DeleteAllResult(NamedTuple):
    trips: int
    stops: int


class RecordRepository:
    """
    CRUD over the trip and stop tables, addressed by target path.

    Args:
        session_factory: Factory producing AsyncSession objects.
        notifier: Receives the changed path after a write that touched rows.
    """

    def __init__(self, session_factory: async_sessionmaker, notifier: Optional[ChangeNotifier] = None):
        self._session_factory = session_factory
        self._notifier = notifier

    # Reads

    async def query(
        self,
        path: str,
        projection: Optional[Sequence[str]] = None,
        selection: Optional[Mapping[str, Any]] = None,
        sort_order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List rows under ``path``.

        Trips default to the highest trip number first, stops to trip
        number then stop index. Each call returns a fresh list; a store
        failure is logged and yields an empty one.
        """
        target = resolve_target(path, "Query")
        table = TABLES[target.table]

        columns = [self._column(table, name) for name in projection] if projection else [table]
        stmt = (
            select(*columns)
            .where(*self._where(table, self._selection_for(target, selection)))
            .order_by(*self._order_by(table, sort_order or DEFAULT_SORT_ORDER[target.table]))
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                return [dict(row) for row in result.mappings().all()]
            except SQLAlchemyError:
                logger.exception("Query failed for %s", path)
                return []

    async def get_maximum(self, path: str, column: str, numeric: bool = False) -> Any:
        """MAX(column) under ``path``; ``numeric`` casts text to integer first."""
        return await self._aggregate(func.max, path, column, numeric)

    async def get_minimum(self, path: str, column: str, numeric: bool = False) -> Any:
        """MIN(column) under ``path``; ``numeric`` casts text to integer first."""
        return await self._aggregate(func.min, path, column, numeric)

    async def next_trip_number(self) -> int:
        """Highest numeric trip number plus one, 1 for an empty table."""
        maximum = await self.get_maximum(f"/{PATH_TRIPS}", "trip_number", numeric=True)
        return int(maximum or 0) + 1

    def get_type(self, path: str) -> str:
        return resolve_type(path)

    # Writes

    async def insert(self, path: str, values: Mapping[str, Any],
                     display: Optional[Display] = None) -> Optional[str]:
        """
        Insert one row into the collection at ``path``.

        For trips, a missing ``trip_number`` gets the next trip number and a
        missing ``from_to`` the summary of the stops already stored for it.

        Returns:
            The new item path (e.g. "/trips/7"), or None when the values
            were empty, invalid, or the store refused them.
        """
        target = resolve_target(path, "Insertion")
        if target.is_item:
            raise UnsupportedTargetError("Insertion", path)

        values = self._normalize(values)
        if not values:
            logger.error("Failed to insert row for %s: no values", path)
            return None

        if target.table == PATH_TRIPS:
            values = await self._fill_trip_values(values)

        table = TABLES[target.table]
        if not validate_fields(target.table, values, display, required=REQUIRED_ON_INSERT[target.table]):
            logger.error("Failed to insert row for %s: validation failed", path)
            return None
        if not self._writable(table, values, path):
            return None

        async with self._session_factory() as session:
            try:
                result = await session.execute(insert(table).values(**values))
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Failed to insert row for %s", path)
                return None

        new_id = result.inserted_primary_key[0]
        self._notify(target.collection_path)
        return item_path(target.collection_path, new_id)

    async def update(self, path: str, values: Mapping[str, Any],
                     selection: Optional[Mapping[str, Any]] = None,
                     display: Optional[Display] = None) -> int:
        """
        Update rows under ``path``. An item path ignores ``selection`` and
        targets its own id.

        Returns:
            Number of rows updated; 0 for empty or invalid values.
        """
        target = resolve_target(path, "Update")
        table = TABLES[target.table]
        where = self._where(table, self._selection_for(target, selection))

        values = self._normalize(values)
        if not values or not validate_fields(target.table, values, display):
            return 0
        if not self._writable(table, values, path):
            return 0

        async with self._session_factory() as session:
            try:
                result = await session.execute(update(table).where(*where).values(**values))
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Failed to update rows for %s", path)
                return 0

        return self._changed(path, result.rowcount)

    async def delete(self, path: str, selection: Optional[Mapping[str, Any]] = None) -> int:
        """
        Delete rows under ``path``. A collection path without a selection
        deletes every row of its table.

        Returns:
            Number of rows deleted.
        """
        target = resolve_target(path, "Deletion")
        table = TABLES[target.table]
        where = self._where(table, self._selection_for(target, selection))

        async with self._session_factory() as session:
            try:
                result = await session.execute(delete(table).where(*where))
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Failed to delete rows for %s", path)
                return 0

        return self._changed(path, result.rowcount)

    async def delete_all(self) -> DeleteAllResult:
        """Empty both tables. Stops are not tied to trips, so each is cleared."""
        trips = await self.delete(f"/{PATH_TRIPS}")
        stops = await self.delete(f"/{PATH_STOPS}")
        logger.info("%d trips deleted, %d stops deleted", trips, stops)
        return DeleteAllResult(trips=trips, stops=stops)

    # Helpers

    async def _aggregate(self, aggregate, path: str, column: str, numeric: bool) -> Any:
        target = resolve_target(path, "Query")
        table = TABLES[target.table]
        expr = self._column(table, column)
        if numeric:
            expr = cast(expr, Integer)
        stmt = select(aggregate(expr)).where(*self._where(table, self._selection_for(target, None)))

        async with self._session_factory() as session:
            try:
                return (await session.execute(stmt)).scalar()
            except SQLAlchemyError:
                logger.exception("Aggregate of %s failed for %s", column, path)
                return None

    async def _fill_trip_values(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if "trip_number" not in values:
            values["trip_number"] = str(await self.next_trip_number())

        trip_number = values["trip_number"]
        if "from_to" not in values and trip_number is not None:
            stops = await self.query(
                f"/{PATH_STOPS}",
                projection=["location"],
                selection={"trip_number": trip_number},
                sort_order="stop_index",
            )
            values["from_to"] = summarize_stops([stop["location"] for stop in stops])
        return values

    @staticmethod
    def _normalize(values: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        normalized = dict(values or {})
        for name in NUMERIC_TEXT_COLUMNS:
            value = normalized.get(name)
            if isinstance(value, int) and not isinstance(value, bool):
                normalized[name] = str(value)
        return normalized

    @staticmethod
    def _column(table: Table, name: str):
        if name not in table.c:
            raise UnknownColumnError(table.name, name)
        return table.c[name]

    @staticmethod
    def _writable(table: Table, values: Mapping[str, Any], path: str) -> bool:
        rejected = [name for name in values if name not in table.c or name in READ_ONLY_COLUMNS]
        if rejected:
            logger.error("Cannot write column(s) %s for %s", ", ".join(rejected), path)
            return False
        return True

    @staticmethod
    def _selection_for(target: Target, selection: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        if target.is_item:
            return {"id": target.item_id}
        return RecordRepository._normalize(selection)

    def _where(self, table: Table, selection: Mapping[str, Any]) -> list:
        return [self._column(table, name) == value for name, value in selection.items()]

    def _order_by(self, table: Table, sort_order: str) -> list:
        clauses = []
        for term in sort_order.split(","):
            parts = term.split()
            if not parts:
                continue
            name = parts[0]
            descending = name.startswith("-")
            name = name.lstrip("-")
            if len(parts) > 2 or (len(parts) == 2 and parts[1].upper() not in ("ASC", "DESC")):
                raise UnknownColumnError(table.name, term.strip())
            if len(parts) == 2:
                descending = parts[1].upper() == "DESC"

            expr = self._column(table, name)
            if name in NUMERIC_TEXT_COLUMNS:
                expr = cast(expr, Float)
            clauses.append(expr.desc() if descending else expr.asc())
        return clauses

    def _changed(self, path: str, row_count: int) -> int:
        if row_count > 0:
            self._notify(path)
        return row_count

    def _notify(self, path: str) -> None:
        if self._notifier is not None:
            self._notifier.notify(path)
