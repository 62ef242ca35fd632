"""Tests for fixed-width record layouts and decoding."""

from __future__ import annotations

import pytest
from hypothesis import given

from ryandata_usps_zip4.formats.decoder import (
    decode_city_state_detail,
    decode_zip4_detail,
    slice_fields,
)
from ryandata_usps_zip4.formats.layouts import CITY_STATE_LAYOUT, ZIP4_LAYOUT
from ryandata_usps_zip4.models.errors import MalformedRecord
from ryandata_usps_zip4.models.records import Zip4Number
from tests.strategies import city_state_record, place_names, zip4_record, zip4_records


class TestLayouts:
    def test_record_lengths(self) -> None:
        assert ZIP4_LAYOUT.record_length == 182
        assert CITY_STATE_LAYOUT.record_length == 129

    def test_fields_fit_inside_record(self) -> None:
        for layout in (ZIP4_LAYOUT, CITY_STATE_LAYOUT):
            for spec in layout.fields:
                assert 0 <= spec.start < spec.end <= layout.record_length

    def test_city_state_fields_cover_record(self) -> None:
        fields = CITY_STATE_LAYOUT.fields
        assert len(fields) == 17
        assert fields[0].start == 0
        assert fields[-1].end == CITY_STATE_LAYOUT.record_length
        for prev, cur in zip(fields, fields[1:]):
            assert prev.end == cur.start

    def test_only_name_fields_trim(self) -> None:
        trimmed = {spec.name for spec in CITY_STATE_LAYOUT.fields if spec.trim}
        assert trimmed == {
            "city_state_name",
            "preferred_last_line_city_state_name",
            "county_name",
        }

    def test_field_lookup(self) -> None:
        spec = ZIP4_LAYOUT.field("county_number")
        assert (spec.start, spec.end, spec.width) == (159, 162, 3)

        with pytest.raises(KeyError):
            ZIP4_LAYOUT.field("street_name")

    def test_is_detail(self) -> None:
        assert ZIP4_LAYOUT.is_detail(zip4_record())
        assert not ZIP4_LAYOUT.is_detail(zip4_record(code="C"))
        assert not ZIP4_LAYOUT.is_detail(b"")


class TestZip4Decoding:
    def test_decodes_fields_at_offsets(self) -> None:
        detail = decode_zip4_detail(
            zip4_record("02134", "025", plus4_low="1000", plus4_high="1099", state="MA")
        )

        assert detail.zip_code == "02134"
        assert detail.county_number == "025"
        assert detail.state_abbreviation == "MA"
        assert detail.record_type_code == "S"
        assert detail.plus4_low_number == "1000"
        assert detail.plus4_high_number == "1099"

    def test_plus4_numbers_split_sector_and_segment(self) -> None:
        detail = decode_zip4_detail(zip4_record(plus4_low="12ND", plus4_high="1234"))

        assert isinstance(detail.plus4_low_number, Zip4Number)
        assert detail.plus4_low_number.sector == "12"
        assert detail.plus4_low_number.segment == "ND"
        assert not detail.plus4_low_number.is_deliverable
        assert detail.plus4_high_number.is_deliverable

    def test_leading_zeros_and_blanks_preserved(self) -> None:
        detail = decode_zip4_detail(zip4_record("00601", "000", state="  "))

        assert detail.zip_code == "00601"
        assert detail.county_number == "000"
        assert detail.state_abbreviation == "  "

    @pytest.mark.parametrize("length", [0, 181, 183, 129])
    def test_wrong_length_is_malformed(self, length: int) -> None:
        with pytest.raises(MalformedRecord) as exc_info:
            decode_zip4_detail(b"D" * length)

        assert exc_info.value.type == "malformed_record"
        assert exc_info.value.context["length"] == length
        assert exc_info.value.context["schema"] == "zip4"

    @given(zip4_records())
    def test_decoded_values_match_laid_out_values(self, case) -> None:
        buf, values = case
        detail = decode_zip4_detail(buf)

        assert detail.zip_code == values["zip_code"]
        assert detail.county_number == values["county_number"]
        assert detail.plus4_low_number == values["plus4_low"]
        assert detail.plus4_high_number == values["plus4_high"]
        assert detail.state_abbreviation == values["state"]


class TestCityStateDecoding:
    def test_name_fields_are_trimmed(self) -> None:
        detail = decode_city_state_detail(
            city_state_record("20500", "WASHINGTON", "DISTRICT OF COLUMBIA", state="DC")
        )

        assert detail.city_state_name == "WASHINGTON"
        assert detail.preferred_last_line_city_state_name == "WASHINGTON"
        assert detail.county_name == "DISTRICT OF COLUMBIA"

    def test_other_fields_are_untouched(self) -> None:
        detail = decode_city_state_detail(city_state_record(city="SAN JUAN"))

        assert detail.copyright_detail_code == "D"
        assert detail.zip_code == "12345"
        assert detail.city_state_key == "X12345"
        assert detail.zip_classification_code == " "
        assert detail.city_state_name_abbreviation == "SAN JUAN     "
        assert detail.finance_number == "351234"
        assert detail.state_abbreviation == "NY"
        assert detail.county_number == "093"

    def test_slice_fields_in_layout_order(self) -> None:
        fields = slice_fields(city_state_record(), CITY_STATE_LAYOUT)

        assert list(fields) == [spec.name for spec in CITY_STATE_LAYOUT.fields]

    def test_zip4_record_is_malformed_as_city_state(self) -> None:
        with pytest.raises(MalformedRecord):
            decode_city_state_detail(zip4_record())

    @given(place_names, place_names)
    def test_trimmed_names_have_no_surrounding_whitespace(self, city, county) -> None:
        detail = decode_city_state_detail(city_state_record(city=" " + city, county_name=county))

        for value in (detail.city_state_name, detail.county_name):
            assert value == value.strip()
        assert detail.city_state_name == city
        assert detail.county_name == county
