"""Decoded USPS record types.

Records are built transiently, one per input line, so they are plain frozen
dataclasses rather than validating models. Every field is kept as the
string found in the file; numeric-looking values keep their leading zeros.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from ryandata_usps_zip4.models.enums import NON_DELIVERABLE_SEGMENT


class Zip4Number(str):
    """Four character ZIP+4 add-on, split into a 2-char sector and 2-char segment."""

    __slots__ = ()

    @property
    def sector(self) -> str:
        return self[0:2]

    @property
    def segment(self) -> str:
        return self[2:4]

    @property
    def is_deliverable(self) -> bool:
        """False when the segment is "ND" (non-deliverable range)."""
        return self.segment != NON_DELIVERABLE_SEGMENT


@dataclass(frozen=True)
class Zip4Detail:
    """A ZIP+4 detail record (182-byte layout)."""

    zip_code: str
    record_type_code: str
    state_abbreviation: str
    county_number: str
    plus4_low_number: Zip4Number
    plus4_high_number: Zip4Number

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> Zip4Detail:
        return cls(
            zip_code=fields["zip_code"],
            record_type_code=fields["record_type_code"],
            state_abbreviation=fields["state_abbreviation"],
            county_number=fields["county_number"],
            plus4_low_number=Zip4Number(fields["plus4_low_number"]),
            plus4_high_number=Zip4Number(fields["plus4_high_number"]),
        )


@dataclass(frozen=True)
class CityStateDetail:
    """A City/State detail record (129-byte layout)."""

    copyright_detail_code: str
    zip_code: str
    city_state_key: str
    zip_classification_code: str
    city_state_name: str
    city_state_name_abbreviation: str
    city_state_name_facility_code: str
    city_state_mailing_name_indicator: str
    preferred_last_line_city_state_key: str
    preferred_last_line_city_state_name: str
    city_delivery_indicator: str
    carrier_route_rate_sortation: str
    unique_zip_name_indicator: str
    finance_number: str
    state_abbreviation: str
    county_number: str
    county_name: str

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> CityStateDetail:
        return cls(**fields)
