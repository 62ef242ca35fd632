"""Tests for comparing the USPS index with Smarty results."""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ryandata_usps_zip4.comparison import (
    count_mismatches,
    generate_diff,
    iter_diff_report,
)
from ryandata_usps_zip4.models.errors import RemoteLookupError
from ryandata_usps_zip4.models.smarty import SmartyResponse
from ryandata_usps_zip4.protocols import ZipLookupClientProtocol
from tests.strategies import county_numbers


def smarty_response(*fips: str, alternates: Sequence[str] = (), status: str = "", reason: str = "") -> SmartyResponse:
    zipcodes = []
    if fips:
        zipcodes = [
            {
                "zipcode": "12345",
                "county_fips": fips[0],
                "alternate_counties": [{"county_fips": code} for code in (*fips[1:], *alternates)],
            }
        ]
    return SmartyResponse.model_validate(
        {"status": status, "reason": reason, "zipcodes": zipcodes}
    )


class FakeClient:
    """Lookup client returning canned responses and recording every batch."""

    def __init__(self, responses: dict[str, SmartyResponse], fail_batches: Sequence[int] = ()) -> None:
        self.responses = responses
        self.fail_batches = set(fail_batches)
        self.batches: list[list[str]] = []

    def query_batch(self, zip_codes: Sequence[str]) -> list[SmartyResponse]:
        self.batches.append(list(zip_codes))
        if len(self.batches) - 1 in self.fail_batches:
            raise RemoteLookupError.from_response("remote_http_error", "boom", {"status": 500})
        return [self.responses.get(z, SmartyResponse()) for z in zip_codes]


class TestCountMismatches:
    @pytest.mark.parametrize(
        ("usps", "smarty", "expected"),
        [
            ([], [], 0),
            (["001"], ["001"], 0),
            (["001", "002"], ["002", "001"], 0),
            (["001"], [], 1),
            ([], ["001", "002"], 2),
            (["001", "003"], ["002", "003"], 2),
            (["001", "001"], ["001"], 1),
        ],
    )
    def test_counts(self, usps, smarty, expected) -> None:
        assert count_mismatches(usps, smarty) == expected

    def test_inputs_are_not_reordered(self) -> None:
        usps = ["003", "001"]
        smarty = ["002", "001"]

        count_mismatches(usps, smarty)

        assert usps == ["003", "001"]
        assert smarty == ["002", "001"]

    @given(st.lists(county_numbers), st.lists(county_numbers))
    def test_symmetric_and_zero_only_for_equal_multisets(self, usps, smarty) -> None:
        mismatches = count_mismatches(usps, smarty)

        assert mismatches == count_mismatches(smarty, usps)
        assert (mismatches == 0) == (sorted(usps) == sorted(smarty))


class TestGenerateDiff:
    def test_matching_counties(self) -> None:
        index = {"12345": ["001", "002"]}

        diff = generate_diff("12345", smarty_response("36001", alternates=["36002"]), index)

        assert diff.usps_fips == ["001", "002"]
        assert diff.smarty_fips == ["001", "002"]
        assert diff.mismatch_count == 0
        assert diff.error_message == ""
        assert diff.is_consistent
        assert diff.validation.errors == []

    def test_mismatching_counties(self) -> None:
        index = {"12345": ["001"]}

        diff = generate_diff("12345", smarty_response("36002"), index)

        assert diff.mismatch_count == 2
        assert diff.error_message == "Mismatches found: 2"
        assert not diff.is_consistent
        assert sorted(e.field for e in diff.validation.errors) == ["smarty_fips", "usps_fips"]

    def test_status_without_mismatch(self) -> None:
        diff = generate_diff(
            "00000",
            smarty_response(status="invalid_zipcode", reason="Invalid ZIP Code."),
            {},
        )

        assert diff.mismatch_count == 0
        assert diff.error_message == (
            "ZIP code input: 00000, Status response: invalid_zipcode, Reason: Invalid ZIP Code."
        )
        assert not diff.is_consistent
        assert [e.field for e in diff.validation.errors] == ["status"]

    def test_mismatch_message_wins_over_status(self) -> None:
        diff = generate_diff(
            "12345",
            smarty_response(status="blank", reason="Blank input."),
            {"12345": ["001"]},
        )

        assert diff.error_message == "Mismatches found: 1"

    def test_short_fips_counts_as_empty_code(self) -> None:
        diff = generate_diff("12345", smarty_response("1"), {"12345": ["001"]})

        assert diff.smarty_fips == [""]
        assert diff.mismatch_count == 2


class TestIterDiffReport:
    def test_client_satisfies_protocol(self) -> None:
        assert isinstance(FakeClient({}), ZipLookupClientProtocol)

    def test_batches_in_sorted_order_with_pauses(self) -> None:
        index = {f"{n:05d}": ["001"] for n in (5, 3, 1, 4, 2)}
        client = FakeClient({z: smarty_response("36001") for z in index})
        sleeps: list[float] = []

        diffs = list(iter_diff_report(index, client, batch_size=2, pause=1.5, sleep=sleeps.append))

        assert client.batches == [["00001", "00002"], ["00003", "00004"], ["00005"]]
        assert [d.zipcode for d in diffs] == ["00001", "00002", "00003", "00004", "00005"]
        assert all(d.mismatch_count == 0 for d in diffs)
        assert sleeps == [1.5, 1.5]

    def test_failed_batch_is_skipped(self) -> None:
        index = {"11111": ["001"], "22222": ["002"], "33333": ["003"]}
        client = FakeClient({}, fail_batches=[0])

        diffs = list(iter_diff_report(index, client, batch_size=2, pause=0))

        assert [d.zipcode for d in diffs] == ["33333"]
        assert len(client.batches) == 2

    def test_response_count_mismatch_skips_batch(self) -> None:
        class ShortClient(FakeClient):
            def query_batch(self, zip_codes):
                return super().query_batch(zip_codes)[:-1]

        diffs = list(iter_diff_report({"11111": ["001"], "22222": ["002"]}, ShortClient({}), pause=0))

        assert diffs == []

    def test_empty_index(self) -> None:
        client = FakeClient({})

        assert list(iter_diff_report({}, client, pause=0)) == []
        assert client.batches == []
