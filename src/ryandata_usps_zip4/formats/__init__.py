"""Fixed-width record layouts, decoding and streaming."""

from __future__ import annotations

from ryandata_usps_zip4.formats.decoder import (
    decode_city_state_detail,
    decode_record,
    decode_zip4_detail,
    slice_fields,
)
from ryandata_usps_zip4.formats.layouts import (
    CITY_STATE_LAYOUT,
    ZIP4_LAYOUT,
    FieldSpec,
    RecordLayout,
)
from ryandata_usps_zip4.formats.reader import (
    RecordStreamReader,
    read_city_state_file,
    read_zip4_file,
)

__all__ = [
    "FieldSpec",
    "RecordLayout",
    "ZIP4_LAYOUT",
    "CITY_STATE_LAYOUT",
    "slice_fields",
    "decode_record",
    "decode_zip4_detail",
    "decode_city_state_detail",
    "RecordStreamReader",
    "read_zip4_file",
    "read_city_state_file",
]
