from __future__ import annotations

from ryandata_usps_zip4.remote.client import SmartyClient, extract_county_fips

__all__ = [
    "SmartyClient",
    "extract_county_fips",
]
