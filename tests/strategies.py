"""Shared record builders and Hypothesis strategies for USPS record testing.

This module provides helpers that lay out raw fixed-width ZIP+4 and
City/State records, plus reusable Hypothesis strategies for the values
stored in them.
"""

from __future__ import annotations

import hypothesis.strategies as st

from ryandata_usps_zip4.formats.layouts import CITY_STATE_LAYOUT, ZIP4_LAYOUT, RecordLayout

# =============================================================================
# Record Builders
# =============================================================================


def _layout_record(layout: RecordLayout, code: str, values: dict[str, str]) -> bytes:
    buf = bytearray(b" " * layout.record_length)
    buf[0:1] = code.encode("ascii")
    for name, value in values.items():
        spec = layout.field(name)
        encoded = value.encode("latin-1")[: spec.width].ljust(spec.width, b" ")
        buf[spec.start : spec.end] = encoded
    return bytes(buf)


def zip4_record(
    zip_code: str = "12345",
    county_number: str = "001",
    *,
    code: str = "D",
    record_type_code: str = "S",
    plus4_low: str = "0001",
    plus4_high: str = "0099",
    state: str = "NY",
) -> bytes:
    """Build one raw 182-byte ZIP+4 record."""
    return _layout_record(
        ZIP4_LAYOUT,
        code,
        {
            "zip_code": zip_code,
            "record_type_code": record_type_code,
            "plus4_low_number": plus4_low,
            "plus4_high_number": plus4_high,
            "state_abbreviation": state,
            "county_number": county_number,
        },
    )


def zip4_header() -> bytes:
    """Build a copyright row that precedes the detail rows of a ZIP+4 file."""
    return _layout_record(ZIP4_LAYOUT, "C", {"zip_code": "00000"})


def city_state_record(
    zip_code: str = "12345",
    city: str = "SCHENECTADY",
    county_name: str = "SCHENECTADY",
    *,
    code: str = "D",
    state: str = "NY",
    county_number: str = "093",
    city_state_key: str = "X12345",
) -> bytes:
    """Build one raw 129-byte City/State record."""
    return _layout_record(
        CITY_STATE_LAYOUT,
        code,
        {
            "zip_code": zip_code,
            "city_state_key": city_state_key,
            "zip_classification_code": " ",
            "city_state_name": city,
            "city_state_name_abbreviation": city[:13],
            "city_state_name_facility_code": "P",
            "city_state_mailing_name_indicator": "Y",
            "preferred_last_line_city_state_key": city_state_key,
            "preferred_last_line_city_state_name": city,
            "city_delivery_indicator": "Y",
            "carrier_route_rate_sortation": "D",
            "unique_zip_name_indicator": "N",
            "finance_number": "351234",
            "state_abbreviation": state,
            "county_number": county_number,
            "county_name": county_name,
        },
    )


def city_state_header() -> bytes:
    return _layout_record(CITY_STATE_LAYOUT, "C", {"zip_code": "00000"})


# =============================================================================
# Hypothesis Strategies
# =============================================================================

STATE_ABBREVIATIONS = ["NY", "NJ", "PA", "TX", "CA", "WA", "VA", "DC", "PR", "GU"]

zip_codes = st.text(alphabet="0123456789", min_size=5, max_size=5)
county_numbers = st.text(alphabet="0123456789", min_size=3, max_size=3)
plus4_numbers = st.one_of(
    st.text(alphabet="0123456789", min_size=4, max_size=4),
    st.text(alphabet="0123456789", min_size=2, max_size=2).map(lambda s: s + "ND"),
)
state_abbreviations = st.sampled_from(STATE_ABBREVIATIONS)

# Upper-case names with inner spaces, as USPS stores them
place_names = st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ ", min_size=1, max_size=25).map(
    str.strip
).filter(bool)


@st.composite
def zip4_records(draw) -> tuple[bytes, dict[str, str]]:
    """Generate a raw ZIP+4 detail record together with the values laid into it."""
    values = {
        "zip_code": draw(zip_codes),
        "county_number": draw(county_numbers),
        "plus4_low": draw(plus4_numbers),
        "plus4_high": draw(plus4_numbers),
        "state": draw(state_abbreviations),
    }
    return zip4_record(**values), values


@st.composite
def zip_county_pairs(draw, max_size: int = 30) -> list[tuple[str, str]]:
    """Generate (zip_code, county_number) pairs drawn from a small pool so ZIPs repeat."""
    pool = draw(st.lists(zip_codes, min_size=1, max_size=5, unique=True))
    return draw(
        st.lists(st.tuples(st.sampled_from(pool), county_numbers), min_size=0, max_size=max_size)
    )
