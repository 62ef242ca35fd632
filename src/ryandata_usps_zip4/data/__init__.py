"""Constants describing the USPS ZIP+4 product layout."""

from __future__ import annotations

from ryandata_usps_zip4.data.constants import (
    CITY_STATE_ARCHIVE_PATH,
    CITY_STATE_MEMBER_COUNT,
    CITY_STATE_TEXT_NAME,
    CONTAINER_PREFIX,
    ZIP4_ARCHIVE_PATH,
    ZIP4_PARTITION_MEMBER_COUNT,
    ZIP4_PARTITION_PATTERN,
    ZIP4_TEXT_PATTERN,
)

__all__ = [
    "CONTAINER_PREFIX",
    "ZIP4_ARCHIVE_PATH",
    "CITY_STATE_ARCHIVE_PATH",
    "ZIP4_PARTITION_PATTERN",
    "ZIP4_TEXT_PATTERN",
    "ZIP4_PARTITION_MEMBER_COUNT",
    "CITY_STATE_TEXT_NAME",
    "CITY_STATE_MEMBER_COUNT",
]
