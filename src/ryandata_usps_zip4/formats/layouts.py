"""Fixed-width record layouts of the USPS ZIP+4 and City/State files.

Offsets are ``[start, end)`` byte ranges as published in the USPS AIS
technical guide. Layouts are immutable module-level constants; nothing in
the package changes them at runtime.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from ryandata_usps_zip4.models.enums import CopyrightDetailCode
from ryandata_usps_zip4.models.records import CityStateDetail, Zip4Detail

T = TypeVar("T")

# Records are plain ASCII; latin-1 keeps one character per byte so string
# offsets match byte offsets for any input.
RECORD_ENCODING = "latin-1"


@dataclass(frozen=True)
class FieldSpec:
    """One named slice of a fixed-width record."""

    name: str
    start: int
    end: int
    trim: bool = False

    @property
    def width(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class RecordLayout(Generic[T]):
    """Description of one fixed-width record schema.

    Attributes:
        name: Short schema name used in logs and error context.
        record_length: Exact size of every record in bytes.
        fields: Field table in file order.
        factory: Builds the record object from the sliced field values.
        detail_code: First byte that marks a data-bearing row.
    """

    name: str
    record_length: int
    fields: tuple[FieldSpec, ...]
    factory: Callable[[Mapping[str, str]], T]
    detail_code: bytes = CopyrightDetailCode.DETAIL.value.encode("ascii")

    def is_detail(self, buf: bytes) -> bool:
        """Check whether a raw record is a detail row (not a copyright/header row)."""
        return buf[:1] == self.detail_code

    def field(self, name: str) -> FieldSpec:
        """Look up a field by name.

        Raises:
            KeyError: If the layout has no such field.
        """
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)


ZIP4_LAYOUT: RecordLayout[Zip4Detail] = RecordLayout(
    name="zip4",
    record_length=182,
    fields=(
        FieldSpec("zip_code", 1, 6),
        FieldSpec("record_type_code", 17, 18),
        FieldSpec("plus4_low_number", 140, 144),
        FieldSpec("plus4_high_number", 144, 148),
        FieldSpec("state_abbreviation", 157, 159),
        FieldSpec("county_number", 159, 162),
    ),
    factory=Zip4Detail.from_fields,
)

CITY_STATE_LAYOUT: RecordLayout[CityStateDetail] = RecordLayout(
    name="ctystate",
    record_length=129,
    fields=(
        FieldSpec("copyright_detail_code", 0, 1),
        FieldSpec("zip_code", 1, 6),
        FieldSpec("city_state_key", 6, 12),
        FieldSpec("zip_classification_code", 12, 13),
        FieldSpec("city_state_name", 13, 41, trim=True),
        FieldSpec("city_state_name_abbreviation", 41, 54),
        FieldSpec("city_state_name_facility_code", 54, 55),
        FieldSpec("city_state_mailing_name_indicator", 55, 56),
        FieldSpec("preferred_last_line_city_state_key", 56, 62),
        FieldSpec("preferred_last_line_city_state_name", 62, 90, trim=True),
        FieldSpec("city_delivery_indicator", 90, 91),
        FieldSpec("carrier_route_rate_sortation", 91, 92),
        FieldSpec("unique_zip_name_indicator", 92, 93),
        FieldSpec("finance_number", 93, 99),
        FieldSpec("state_abbreviation", 99, 101),
        FieldSpec("county_number", 101, 104),
        FieldSpec("county_name", 104, 129, trim=True),
    ),
    factory=CityStateDetail.from_fields,
)
