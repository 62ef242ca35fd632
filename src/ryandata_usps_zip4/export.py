"""Tabular export of extraction results with pandas.

All columns are kept as strings so ZIP codes and county numbers keep their
leading zeros through CSV round trips.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, fields
from pathlib import Path
from typing import IO, TYPE_CHECKING, Optional, Union

from ryandata_usps_zip4.models.errors import IndexFormatError
from ryandata_usps_zip4.models.records import CityStateDetail

if TYPE_CHECKING:
    import pandas as pd

    from ryandata_usps_zip4.comparison import ZipCountyDiff
    from ryandata_usps_zip4.index import ZipCountyIndex

INDEX_COLUMNS: list[str] = ["ZIP Code", "County Numbers"]
DIFF_COLUMNS: list[str] = ["Zipcode", "USPS Fips", "Smarty Fips", "Mismatch Count", "Error"]
CITY_STATE_COLUMNS: list[str] = [f.name for f in fields(CityStateDetail)]

CsvTarget = Union[str, Path, IO[str]]


def lookup_counties(index: Mapping[str, Sequence[str]], zip_code: str) -> Optional[list[str]]:
    """Get the county numbers for one ZIP code.

    Returns:
        County numbers in first-seen order, or None if the ZIP code is absent.
    """
    counties = index.get(zip_code)
    return list(counties) if counties else None


def index_to_dataframe(index: Mapping[str, Sequence[str]]) -> pd.DataFrame:
    """Convert a ZIP code -> county numbers index to a two-column DataFrame.

    County numbers are joined with "," in their first-seen order.
    """
    import pandas as pd

    rows = [(zip_code, ",".join(counties)) for zip_code, counties in index.items()]
    return pd.DataFrame(rows, columns=INDEX_COLUMNS, dtype="object")


def export_index_csv(index: Mapping[str, Sequence[str]], target: CsvTarget) -> None:
    """Write the index as CSV with a "ZIP Code,County Numbers" header."""
    index_to_dataframe(index).to_csv(target, index=False)


def read_index_csv(source: CsvTarget) -> ZipCountyIndex:
    """Load an index previously written by ``export_index_csv``.

    Args:
        source: CSV path or open text stream.

    Returns:
        ZIP code -> county numbers, in file order.

    Raises:
        IndexFormatError: If the file is empty or its header is not
            "ZIP Code,County Numbers".
    """
    import pandas as pd

    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as exc:
        raise IndexFormatError.create(
            "unexpected header format: {reason}", {"reason": str(exc)}
        ) from exc

    if list(df.columns) != INDEX_COLUMNS:
        raise IndexFormatError.create(
            "unexpected header format: {header}", {"header": ",".join(map(str, df.columns))}
        )

    index: ZipCountyIndex = {}
    for zip_code, counties in df.itertuples(index=False, name=None):
        index[zip_code] = [county.strip() for county in counties.split(",") if county.strip()]
    return index


def city_state_to_dataframe(records: Iterable[CityStateDetail]) -> pd.DataFrame:
    """Convert City/State detail records to a DataFrame, one column per field."""
    import pandas as pd

    return pd.DataFrame([asdict(r) for r in records], columns=CITY_STATE_COLUMNS, dtype="object")


def diff_report_dataframe(diffs: Iterable[ZipCountyDiff]) -> pd.DataFrame:
    """Convert comparison results to the USPS/Smarty diff report layout."""
    import pandas as pd

    rows = [
        (
            diff.zipcode,
            ",".join(diff.usps_fips),
            ",".join(diff.smarty_fips),
            diff.mismatch_count,
            diff.error_message,
        )
        for diff in diffs
    ]
    return pd.DataFrame(rows, columns=DIFF_COLUMNS)
