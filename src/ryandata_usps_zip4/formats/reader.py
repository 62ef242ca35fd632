from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import BinaryIO, Generic, TypeVar

from ryandata_usps_zip4.formats.decoder import decode_record
from ryandata_usps_zip4.formats.layouts import CITY_STATE_LAYOUT, ZIP4_LAYOUT, RecordLayout
from ryandata_usps_zip4.models.errors import TruncatedStream
from ryandata_usps_zip4.models.records import CityStateDetail, Zip4Detail

logger = logging.getLogger(__name__)

T = TypeVar("T")


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, looping over short reads until EOF.

    Returns fewer than ``size`` bytes only when the stream is exhausted.
    """
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


class RecordStreamReader(Generic[T]):
    """Reads fixed-width records of one layout from a byte stream.

    Only detail rows are decoded and yielded; copyright/header rows are
    skipped. The stream must hold a whole number of records.

    Example:
        >>> reader = RecordStreamReader(ZIP4_LAYOUT)
        >>> with open("zip4mst01.txt", "rb") as f:
        ...     for detail in reader.iter_records(f):
        ...         print(detail.zip_code, detail.county_number)
    """

    def __init__(self, layout: RecordLayout[T]) -> None:
        """Initialize the reader.

        Args:
            layout: Record layout to read.
        """
        self.layout = layout
        self._record_count = 0
        self._detail_count = 0

    def iter_records(self, stream: BinaryIO) -> Iterator[T]:
        """Lazily decode detail records from a stream.

        Args:
            stream: Binary stream positioned at the first record.

        Yields:
            Decoded records, in file order.

        Raises:
            TruncatedStream: If the stream ends partway through a record.
            MalformedRecord: If a record cannot be decoded.
        """
        record_length = self.layout.record_length
        offset = 0
        records = 0
        details = 0

        while True:
            buf = read_exact(stream, record_length)
            if not buf:
                break
            if len(buf) != record_length:
                raise TruncatedStream.create(
                    "{schema} stream ended mid-record at offset {offset}: "
                    "got {length} of {record_length} bytes",
                    {
                        "schema": self.layout.name,
                        "offset": offset,
                        "length": len(buf),
                        "record_length": record_length,
                    },
                )

            records += 1
            self._record_count += 1
            if self.layout.is_detail(buf):
                details += 1
                self._detail_count += 1
                yield decode_record(buf, self.layout)
            offset += record_length

        logger.debug("Read %d %s records (%d detail)", records, self.layout.name, details)

    @property
    def stats(self) -> dict[str, int]:
        """Get reading statistics across all streams read by this instance.

        Returns:
            Dict with record_count and detail_count.
        """
        return {
            "record_count": self._record_count,
            "detail_count": self._detail_count,
        }

    def reset_stats(self) -> None:
        """Reset reading statistics."""
        self._record_count = 0
        self._detail_count = 0


def read_zip4_file(stream: BinaryIO) -> Iterator[Zip4Detail]:
    """Yield ZIP+4 detail records from an open zip4mst*.txt stream."""
    return RecordStreamReader(ZIP4_LAYOUT).iter_records(stream)


def read_city_state_file(stream: BinaryIO) -> Iterator[CityStateDetail]:
    """Yield City/State detail records from an open ctystate.txt stream."""
    return RecordStreamReader(CITY_STATE_LAYOUT).iter_records(stream)
