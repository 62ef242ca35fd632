"""Record, response and error models.

Re-exports every public model so callers can import from
``ryandata_usps_zip4.models`` directly.
"""

from __future__ import annotations

from ryandata_usps_zip4.models.enums import NON_DELIVERABLE_SEGMENT, CopyrightDetailCode
from ryandata_usps_zip4.models.errors import (
    PACKAGE_NAME,
    ArchiveCorrupt,
    ConfigurationError,
    DecryptionFailed,
    IndexFormatError,
    MalformedRecord,
    MemberNotFound,
    RemoteLookupError,
    TruncatedStream,
    UnexpectedMember,
    UnexpectedMemberCount,
    Zip4ExtractionError,
)
from ryandata_usps_zip4.models.records import CityStateDetail, Zip4Detail, Zip4Number
from ryandata_usps_zip4.models.smarty import (
    SmartyAlternateCounty,
    SmartyResponse,
    SmartyZipcode,
)

__all__ = [
    # Errors
    "PACKAGE_NAME",
    "Zip4ExtractionError",
    "ArchiveCorrupt",
    "MemberNotFound",
    "UnexpectedMember",
    "UnexpectedMemberCount",
    "DecryptionFailed",
    "TruncatedStream",
    "MalformedRecord",
    "RemoteLookupError",
    "ConfigurationError",
    "IndexFormatError",
    # Enums and constants
    "CopyrightDetailCode",
    "NON_DELIVERABLE_SEGMENT",
    # Records
    "Zip4Detail",
    "Zip4Number",
    "CityStateDetail",
    # Smarty API
    "SmartyAlternateCounty",
    "SmartyZipcode",
    "SmartyResponse",
]
