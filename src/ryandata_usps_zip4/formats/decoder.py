from __future__ import annotations

from typing import TypeVar

from ryandata_usps_zip4.formats.layouts import (
    CITY_STATE_LAYOUT,
    RECORD_ENCODING,
    ZIP4_LAYOUT,
    RecordLayout,
)
from ryandata_usps_zip4.models.errors import MalformedRecord
from ryandata_usps_zip4.models.records import CityStateDetail, Zip4Detail

T = TypeVar("T")


def slice_fields(buf: bytes, layout: RecordLayout[T]) -> dict[str, str]:
    """Slice a raw record into its named fields.

    Fields flagged ``trim`` (the name fields) have surrounding whitespace
    removed; every other field is returned exactly as stored.

    Args:
        buf: One raw record, exactly ``layout.record_length`` bytes.
        layout: Layout describing the record.

    Returns:
        Dict mapping field name to string value, in layout order.

    Raises:
        MalformedRecord: If the buffer length does not match the layout.
    """
    if len(buf) != layout.record_length:
        raise MalformedRecord.create(
            "{schema} record must be {record_length} bytes, got {length}",
            {"schema": layout.name, "record_length": layout.record_length, "length": len(buf)},
        )

    text = buf.decode(RECORD_ENCODING)
    values: dict[str, str] = {}
    for spec in layout.fields:
        value = text[spec.start : spec.end]
        values[spec.name] = value.strip() if spec.trim else value
    return values


def decode_record(buf: bytes, layout: RecordLayout[T]) -> T:
    """Decode one raw record into the layout's record type."""
    return layout.factory(slice_fields(buf, layout))


def decode_zip4_detail(buf: bytes) -> Zip4Detail:
    return decode_record(buf, ZIP4_LAYOUT)


def decode_city_state_detail(buf: bytes) -> CityStateDetail:
    return decode_record(buf, CITY_STATE_LAYOUT)
