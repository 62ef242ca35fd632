"""ryandata-usps-zip4: county data from the USPS ZIP+4 national product.

This package reads the nested, password-protected USPS ZIP+4 distribution:
- Streaming traversal of the tar -> zip -> encrypted zip -> text nesting
- Fixed-width decoding of ZIP+4 (182-byte) and City/State (129-byte) records
- ZIP code -> county number index
- Cross-checking the index against the Smarty ZIP Code API
- Pandas/CSV export and loading into SQLite

Quick Start:
    >>> from ryandata_usps_zip4 import collect_zip4_counties
    >>> index = collect_zip4_counties("epf-zip4natl.tar", password="secret")
    >>> index["12345"]
    ['001', '002']

    # Stream records without building an index
    >>> from ryandata_usps_zip4 import read_zip4_from_tar
    >>> for detail in read_zip4_from_tar("epf-zip4natl.tar", "secret"):
    ...     print(detail.zip_code, detail.plus4_low_number, detail.county_number)

    # Export as CSV
    >>> from ryandata_usps_zip4 import export_index_csv
    >>> export_index_csv(index, "zip_counties.csv")
"""

from __future__ import annotations

from ryandata_usps_zip4.archive import (
    NestedArchiveWalker,
    extract_member,
    iter_members,
    read_city_state_from_tar,
    read_zip4_from_tar,
)
from ryandata_usps_zip4.comparison import (
    ZipCountyDiff,
    count_mismatches,
    generate_diff,
    iter_diff_report,
)
from ryandata_usps_zip4.config import Zip4Settings
from ryandata_usps_zip4.export import (
    city_state_to_dataframe,
    diff_report_dataframe,
    export_index_csv,
    index_to_dataframe,
    lookup_counties,
    read_index_csv,
)
from ryandata_usps_zip4.formats import (
    CITY_STATE_LAYOUT,
    ZIP4_LAYOUT,
    RecordStreamReader,
    decode_city_state_detail,
    decode_zip4_detail,
    read_city_state_file,
    read_zip4_file,
)
from ryandata_usps_zip4.index import (
    ZipCountyIndex,
    ZipCountyIndexBuilder,
    build_zip_county_index,
    collect_zip4_counties,
)
from ryandata_usps_zip4.models import (
    ArchiveCorrupt,
    CityStateDetail,
    ConfigurationError,
    DecryptionFailed,
    IndexFormatError,
    MalformedRecord,
    MemberNotFound,
    RemoteLookupError,
    SmartyResponse,
    TruncatedStream,
    UnexpectedMember,
    UnexpectedMemberCount,
    Zip4Detail,
    Zip4ExtractionError,
    Zip4Number,
)
from ryandata_usps_zip4.protocols import ZipLookupClientProtocol
from ryandata_usps_zip4.remote import SmartyClient, extract_county_fips
from ryandata_usps_zip4.seed import seed_city_state_data, seed_database, seed_zip4_data

__version__ = "0.1.0"
__package_name__ = "ryandata-usps-zip4"

__all__ = [
    # Version info
    "__version__",
    "__package_name__",
    # Archive traversal
    "NestedArchiveWalker",
    "read_zip4_from_tar",
    "read_city_state_from_tar",
    "extract_member",
    "iter_members",
    # Record formats
    "ZIP4_LAYOUT",
    "CITY_STATE_LAYOUT",
    "RecordStreamReader",
    "decode_zip4_detail",
    "decode_city_state_detail",
    "read_zip4_file",
    "read_city_state_file",
    # Index
    "ZipCountyIndex",
    "ZipCountyIndexBuilder",
    "build_zip_county_index",
    "collect_zip4_counties",
    # Models
    "Zip4Detail",
    "Zip4Number",
    "CityStateDetail",
    "SmartyResponse",
    # Errors
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
    # Comparison
    "ZipLookupClientProtocol",
    "SmartyClient",
    "extract_county_fips",
    "ZipCountyDiff",
    "count_mismatches",
    "generate_diff",
    "iter_diff_report",
    # Configuration and export
    "Zip4Settings",
    "lookup_counties",
    "index_to_dataframe",
    "export_index_csv",
    "read_index_csv",
    "city_state_to_dataframe",
    "diff_report_dataframe",
    # SQLite
    "seed_database",
    "seed_zip4_data",
    "seed_city_state_data",
]
