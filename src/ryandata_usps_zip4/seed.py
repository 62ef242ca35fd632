"""Loading ZIP+4 and City/State detail records into SQLite.

Two tables are written, ``zip4_data`` and ``city_state``, with one TEXT
column per record field. Each table is loaded inside a single transaction:
rows are inserted in batches with ``executemany`` but only committed once
the whole archive has been read, so a truncated or undecryptable archive
leaves the table as it was.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Sequence
from contextlib import closing
from itertools import islice
from typing import Any

from ryandata_usps_zip4.archive.extractor import Password
from ryandata_usps_zip4.archive.walker import (
    PathLike,
    read_city_state_from_tar,
    read_zip4_from_tar,
)
from ryandata_usps_zip4.models.records import CityStateDetail, Zip4Detail

logger = logging.getLogger(__name__)

DEFAULT_SEED_BATCH_SIZE = 500_000

ZIP4_TABLE = "zip4_data"
CITY_STATE_TABLE = "city_state"

# (column, record attribute); ZipCode is the only NOT NULL column
ZIP4_COLUMNS: tuple[tuple[str, str], ...] = (
    ("ZipCode", "zip_code"),
    ("RecordTypeCode", "record_type_code"),
    ("StateAbbreviation", "state_abbreviation"),
    ("CountyNumber", "county_number"),
    ("Plus4LowNumber", "plus4_low_number"),
    ("Plus4HighNumber", "plus4_high_number"),
)

CITY_STATE_COLUMNS: tuple[tuple[str, str], ...] = (
    ("CopyrightDetailCode", "copyright_detail_code"),
    ("ZipCode", "zip_code"),
    ("CityStateKey", "city_state_key"),
    ("ZipClassificationCode", "zip_classification_code"),
    ("CityStateName", "city_state_name"),
    ("CityStateNameAbbreviation", "city_state_name_abbreviation"),
    ("CityStateNameFacilityCode", "city_state_name_facility_code"),
    ("CityStateMailingNameIndicator", "city_state_mailing_name_indicator"),
    ("PreferredLastLineCityStateKey", "preferred_last_line_city_state_key"),
    ("PreferredLastLineCityStateName", "preferred_last_line_city_state_name"),
    ("CityDeliveryIndicator", "city_delivery_indicator"),
    ("CarrierRouteRateSortation", "carrier_route_rate_sortation"),
    ("UniqueZipNameIndicator", "unique_zip_name_indicator"),
    ("FinanceNumber", "finance_number"),
    ("StateAbbreviation", "state_abbreviation"),
    ("CountyNumber", "county_number"),
    ("CountyName", "county_name"),
)


def _create_table_sql(table: str, columns: Sequence[tuple[str, str]]) -> str:
    definitions = ", ".join(
        f"{column} TEXT NOT NULL" if column == "ZipCode" else f"{column} TEXT"
        for column, _ in columns
    )
    return f"CREATE TABLE IF NOT EXISTS {table} ({definitions})"


def _insert_sql(table: str, columns: Sequence[tuple[str, str]]) -> str:
    names = ", ".join(column for column, _ in columns)
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {table} ({names}) VALUES ({placeholders})"


def _seed_table(
    conn: sqlite3.Connection,
    table: str,
    columns: Sequence[tuple[str, str]],
    records: Iterable[Any],
    batch_size: int,
) -> int:
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    conn.execute(_create_table_sql(table, columns))
    insert = _insert_sql(table, columns)
    rows = (tuple(str(getattr(record, attr)) for _, attr in columns) for record in records)

    total = 0
    with conn:
        while True:
            batch = list(islice(rows, batch_size))
            if not batch:
                break
            conn.executemany(insert, batch)
            total += len(batch)
            logger.debug("Inserted %d rows into %s (%d so far)", len(batch), table, total)
    logger.info("Seeded %d rows into %s", total, table)
    return total


def seed_zip4_data(
    conn: sqlite3.Connection,
    details: Iterable[Zip4Detail],
    batch_size: int = DEFAULT_SEED_BATCH_SIZE,
) -> int:
    """Insert ZIP+4 detail records into ``zip4_data``, creating it if needed.

    Args:
        conn: Open SQLite connection.
        details: Records to insert, consumed lazily.
        batch_size: Rows per ``executemany`` call.

    Returns:
        Number of rows inserted.

    Raises:
        Zip4ExtractionError: Propagated from ``details``; nothing is committed.
    """
    return _seed_table(conn, ZIP4_TABLE, ZIP4_COLUMNS, details, batch_size)


def seed_city_state_data(
    conn: sqlite3.Connection,
    details: Iterable[CityStateDetail],
    batch_size: int = DEFAULT_SEED_BATCH_SIZE,
) -> int:
    """Insert City/State detail records into ``city_state``, creating it if needed."""
    return _seed_table(conn, CITY_STATE_TABLE, CITY_STATE_COLUMNS, details, batch_size)


def seed_database(
    db_path: PathLike,
    tar_path: PathLike,
    zip4_password: Password,
    city_state_password: Password,
    batch_size: int = DEFAULT_SEED_BATCH_SIZE,
) -> dict[str, int]:
    """Load both record types from an epf-zip4natl tar into a SQLite file.

    ZIP+4 records are committed before City/State records are read, so a
    City/State failure keeps the ``zip4_data`` rows.

    Args:
        db_path: SQLite database file; created when absent.
        tar_path: Path to the top-level tar container.
        zip4_password: Password protecting the ZIP+4 partitions.
        city_state_password: Password protecting ctystate.zip members.
        batch_size: Rows per ``executemany`` call.

    Returns:
        Row counts keyed by table name.
    """
    with closing(sqlite3.connect(db_path)) as conn:
        zip4_rows = seed_zip4_data(conn, read_zip4_from_tar(tar_path, zip4_password), batch_size)
        city_state_rows = seed_city_state_data(
            conn, read_city_state_from_tar(tar_path, city_state_password), batch_size
        )
    return {ZIP4_TABLE: zip4_rows, CITY_STATE_TABLE: city_state_rows}
