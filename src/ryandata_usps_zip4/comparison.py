"""Cross-checking the USPS ZIP to county index against Smarty.

USPS reports a three digit county number per ZIP+4 range; Smarty reports
five digit county FIPS codes, whose last three digits are the same county
number. A ZIP code is consistent when both sides name the same counties.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from abstract_validation_base import ValidationResult

from ryandata_usps_zip4.models.errors import RemoteLookupError
from ryandata_usps_zip4.models.smarty import SmartyResponse
from ryandata_usps_zip4.protocols import ZipLookupClientProtocol
from ryandata_usps_zip4.remote.client import extract_county_fips

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
DEFAULT_RATE_LIMIT_PAUSE = 2.0


@dataclass
class ZipCountyDiff:
    """Comparison of USPS and Smarty counties for one ZIP code."""

    zipcode: str
    usps_fips: list[str]
    smarty_fips: list[str]
    mismatch_count: int
    error_message: str = ""
    validation: ValidationResult = field(default_factory=lambda: ValidationResult(is_valid=True))

    @property
    def is_consistent(self) -> bool:
        return self.validation.is_valid


def count_mismatches(usps_fips: Sequence[str], smarty_fips: Sequence[str]) -> int:
    """Count county codes present on one side but not matched on the other.

    Works on sorted copies with a merge walk, so duplicates count
    individually and the inputs are left untouched.
    """
    left = sorted(usps_fips)
    right = sorted(smarty_fips)
    i = j = mismatches = 0

    while i < len(left) and j < len(right):
        if left[i] == right[j]:
            i += 1
            j += 1
        elif left[i] < right[j]:
            mismatches += 1
            i += 1
        else:
            mismatches += 1
            j += 1

    return mismatches + (len(left) - i) + (len(right) - j)


def generate_diff(
    zip_code: str, response: SmartyResponse, index: Mapping[str, Sequence[str]]
) -> ZipCountyDiff:
    """Compare one Smarty response with the USPS counties for the same ZIP code.

    Args:
        zip_code: ZIP code that was queried.
        response: Smarty result for that ZIP code.
        index: USPS ZIP code -> county numbers index.

    Returns:
        ZipCountyDiff whose validation holds one error per mismatching code,
        plus one for a Smarty status, if any.
    """
    usps_fips = list(index.get(zip_code, []))
    smarty_fips = extract_county_fips(response.zipcodes)
    mismatches = count_mismatches(usps_fips, smarty_fips)

    error_message = ""
    if response.status:
        error_message = (
            f"ZIP code input: {zip_code}, Status response: {response.status}, "
            f"Reason: {response.reason}"
        )
    if mismatches > 0:
        error_message = f"Mismatches found: {mismatches}"

    validation = ValidationResult(is_valid=mismatches == 0 and not response.status)
    if response.status:
        validation.add_error("status", f"{response.status}: {response.reason}", zip_code)

    usps_counts = Counter(usps_fips)
    smarty_counts = Counter(smarty_fips)
    for code in sorted((usps_counts - smarty_counts).elements()):
        validation.add_error("usps_fips", f"county {code} not reported by Smarty", code)
    for code in sorted((smarty_counts - usps_counts).elements()):
        validation.add_error("smarty_fips", f"county {code} not reported by USPS", code)

    return ZipCountyDiff(
        zipcode=zip_code,
        usps_fips=usps_fips,
        smarty_fips=smarty_fips,
        mismatch_count=mismatches,
        error_message=error_message,
        validation=validation,
    )


def iter_diff_report(
    index: Mapping[str, Sequence[str]],
    client: ZipLookupClientProtocol,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    pause: float = DEFAULT_RATE_LIMIT_PAUSE,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[ZipCountyDiff]:
    """Compare every ZIP code of the index against the lookup client, in batches.

    ZIP codes are queried in sorted order. A batch that fails remotely, or
    returns a different number of results than it was sent, is logged and
    skipped; the rest of the report continues.

    Args:
        index: USPS ZIP code -> county numbers index.
        client: Lookup client to compare against.
        batch_size: ZIP codes per request.
        pause: Seconds to wait between requests.
        sleep: Sleep function (injectable for testing).

    Yields:
        One ZipCountyDiff per ZIP code of every successful batch.
    """
    zip_codes = sorted(index)
    total = len(zip_codes)

    for start in range(0, total, batch_size):
        batch = zip_codes[start : start + batch_size]
        try:
            responses = client.query_batch(batch)
        except RemoteLookupError as exc:
            logger.warning("Error querying ZIP code API: %s", exc)
            responses = None

        if responses is not None and len(responses) != len(batch):
            logger.warning(
                "Mismatched response count: received %d responses for %d queried ZIPs",
                len(responses),
                len(batch),
            )
            responses = None

        if responses is not None:
            for zip_code, response in zip(batch, responses):
                yield generate_diff(zip_code, response, index)

        processed = min(start + batch_size, total)
        logger.info("%d of %d zips processed", processed, total)
        if processed < total and pause > 0:
            sleep(pause)
