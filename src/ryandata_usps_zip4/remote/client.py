from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from ryandata_usps_zip4.config import DEFAULT_SMARTY_URL
from ryandata_usps_zip4.models.errors import RemoteLookupError
from ryandata_usps_zip4.models.smarty import SmartyResponse, SmartyZipcode

logger = logging.getLogger(__name__)

_RESPONSES = TypeAdapter(list[SmartyResponse])


class SmartyClient:
    """Batch client for the Smarty US ZIP Code API."""

    def __init__(
        self,
        auth_id: str,
        auth_token: str,
        *,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url or DEFAULT_SMARTY_URL
        self._auth_params = {"auth-id": auth_id, "auth-token": auth_token}
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> SmartyClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def query_batch(self, zip_codes: Sequence[str]) -> list[SmartyResponse]:
        """Look up a batch of ZIP codes.

        Args:
            zip_codes: ZIP codes to look up (Smarty accepts up to 100 per call).

        Returns:
            One SmartyResponse per input, in the order Smarty returned them.

        Raises:
            RemoteLookupError: On transport failure, rate limiting, a non-200
                status, or a payload that is not a list of results.
        """
        payload = [{"zipcode": zip_code} for zip_code in zip_codes]
        try:
            response = self._client.post(
                self.base_url,
                params=self._auth_params,
                json=payload,
                headers={"Content-Type": "application/json; charset=utf-8"},
            )
        except httpx.HTTPError as exc:
            raise RemoteLookupError.from_response(
                "remote_request", "failed to query Smarty API: {reason}", {"reason": str(exc)}
            ) from exc

        if response.status_code == 429:
            raise RemoteLookupError.from_response(
                "remote_rate_limited",
                "rate limit exceeded: {body}",
                {"status": response.status_code, "body": response.text},
            )
        if response.status_code != 200:
            raise RemoteLookupError.from_response(
                "remote_http_error",
                "API request failed with status {status}: {body}",
                {"status": response.status_code, "body": response.text},
            )

        try:
            results = _RESPONSES.validate_python(response.json())
        except (ValueError, ValidationError) as exc:
            raise RemoteLookupError.from_response(
                "remote_parse", "failed to parse Smarty response: {reason}", {"reason": str(exc)}
            ) from exc

        logger.debug("Smarty returned %d results for %d ZIP codes", len(results), len(zip_codes))
        return results


def extract_county_fips(zipcodes: Sequence[SmartyZipcode]) -> list[str]:
    """Collect county codes (last three FIPS digits) of primary and alternate counties.

    Args:
        zipcodes: ZIP code entries from a SmartyResponse.

    Returns:
        County codes in response order; "" for any FIPS shorter than three characters.
    """
    county_codes: list[str] = []
    for zipcode in zipcodes:
        county_codes.append(_county_code(zipcode.county_fips))
        for alternate in zipcode.alternate_counties:
            county_codes.append(_county_code(alternate.county_fips))
    return county_codes


def _county_code(fips: str) -> str:
    return fips[-3:] if len(fips) >= 3 else ""
