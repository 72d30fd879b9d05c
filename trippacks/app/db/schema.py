"""
Schema creation and versioning for the local store.

The schema version lives in SQLite's ``PRAGMA user_version``. A fresh file
(version 0) gets both tables created. Any other version that differs from
SCHEMA_VERSION is upgraded destructively: both tables are dropped and
recreated, losing all rows.

Table creation is best effort. A failing CREATE TABLE is logged and the
remaining tables are still attempted; initialization itself never raises
for it. A missing table then surfaces later as store-level failures.
"""

import logging
from typing import List

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from trippacks.app.models.trip import Trip
from trippacks.app.models.stop import Stop

logger = logging.getLogger("trippacks.schema")

# Increment with each schema change. Bumping it wipes existing data.
SCHEMA_VERSION = 1

TABLES = (Trip.__table__, Stop.__table__)


def get_schema_version(conn: Connection) -> int:
    return conn.exec_driver_sql("PRAGMA user_version").scalar() or 0


def set_schema_version(conn: Connection, version: int) -> None:
    # PRAGMA does not accept bound parameters
    conn.exec_driver_sql(f"PRAGMA user_version = {int(version)}")


def create_tables(conn: Connection) -> List[str]:
    """Create every table, logging and skipping the ones that fail."""
    created = []
    for table in TABLES:
        try:
            table.create(conn, checkfirst=False)
        except SQLAlchemyError as exc:
            logger.error("SQL ERROR creating table %s: %s", table.name, exc)
            continue
        created.append(table.name)
    return created


def drop_tables(conn: Connection) -> None:
    for table in TABLES:
        table.drop(conn, checkfirst=True)


def initialize_schema(conn: Connection) -> None:
    """
    Bring the store to SCHEMA_VERSION.

    Meant for ``AsyncConnection.run_sync`` at startup.
    """
    version = get_schema_version(conn)
    if version == SCHEMA_VERSION:
        return

    if version == 0:
        logger.info("Creating schema version %d", SCHEMA_VERSION)
    else:
        logger.warning(
            "Schema version %d does not match %d, dropping all tables", version, SCHEMA_VERSION
        )
        drop_tables(conn)

    created = create_tables(conn)
    logger.info("Created tables: %s", ", ".join(created) or "none")
    set_schema_version(conn, SCHEMA_VERSION)
