"""ZIP code to county index built from ZIP+4 detail records."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ryandata_usps_zip4.archive.extractor import Password
from ryandata_usps_zip4.archive.walker import PathLike, read_zip4_from_tar
from ryandata_usps_zip4.models.records import Zip4Detail

logger = logging.getLogger(__name__)

ZipCountyIndex = dict[str, list[str]]


class ZipCountyIndexBuilder:
    """Folds ZIP+4 detail records into a ZIP code -> county numbers mapping.

    Each ZIP code keeps the distinct county numbers seen for it, in order of
    first appearance. ZIP codes never seen are absent from the result.

    Example:
        >>> builder = ZipCountyIndexBuilder()
        >>> builder.add_all(read_zip4_from_tar("epf-zip4natl.tar", "secret"))
        >>> builder.build()["20500"]
        ['001']
    """

    def __init__(self) -> None:
        self._index: ZipCountyIndex = {}
        self._record_count = 0

    def add(self, detail: Zip4Detail) -> None:
        """Record one detail's county number under its ZIP code."""
        self._record_count += 1
        counties = self._index.setdefault(detail.zip_code, [])
        # Linear scan: a ZIP code spans only a handful of counties
        if detail.county_number not in counties:
            counties.append(detail.county_number)

    def add_all(self, details: Iterable[Zip4Detail]) -> ZipCountyIndexBuilder:
        """Record every detail from an iterable, consuming it lazily."""
        for detail in details:
            self.add(detail)
        return self

    def build(self) -> ZipCountyIndex:
        """Return a copy of the accumulated index."""
        return {zip_code: list(counties) for zip_code, counties in self._index.items()}

    @property
    def stats(self) -> dict[str, int]:
        """Get builder statistics.

        Returns:
            Dict with record_count and zip_count.
        """
        return {
            "record_count": self._record_count,
            "zip_count": len(self._index),
        }


def build_zip_county_index(details: Iterable[Zip4Detail]) -> ZipCountyIndex:
    """Build a ZIP code -> county numbers index from detail records."""
    return ZipCountyIndexBuilder().add_all(details).build()


def collect_zip4_counties(tar_path: PathLike, password: Password) -> ZipCountyIndex:
    """Read an epf-zip4natl tar and build its ZIP code -> county numbers index.

    Args:
        tar_path: Path to the top-level tar container.
        password: Password protecting the encrypted zip members.

    Returns:
        Completed index.

    Raises:
        Zip4ExtractionError: If any level of the archive does not have the
            expected shape, or a record stream is truncated.
    """
    builder = ZipCountyIndexBuilder()
    builder.add_all(read_zip4_from_tar(tar_path, password))
    stats = builder.stats
    logger.info(
        "Built ZIP to county index: %d ZIP codes from %d detail records",
        stats["zip_count"],
        stats["record_count"],
    )
    return builder.build()
