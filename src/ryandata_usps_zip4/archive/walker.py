"""Traversal of the nested USPS ZIP+4 product archive.

The product is a plain tar holding zip archives::

    epf-zip4natl.tar
    ├── epf-zip4natl/zip4/zip4.zip
    │   ├── zip4mst01.zip        (encrypted)
    │   │   ├── zip4mst01.txt    182-byte ZIP+4 records
    │   │   └── <second member>
    │   └── zip4mst02.zip ...
    └── epf-zip4natl/ctystate/ctystate.zip
        ├── ctystate.txt         (encrypted) 129-byte City/State records
        └── <second member>

Every level is checked against the expected member names and counts before
anything below it is read. Records are produced lazily; only the current
partition archive is held in memory.
"""

from __future__ import annotations

import logging
import tarfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Union

import pyzipper

from ryandata_usps_zip4.archive.extractor import (
    Password,
    list_members,
    member_errors,
    open_archive,
    open_member,
    read_member,
)
from ryandata_usps_zip4.data.constants import (
    CITY_STATE_ARCHIVE_PATH,
    CITY_STATE_MEMBER_COUNT,
    CITY_STATE_TEXT_NAME,
    LEVEL_CITY_STATE_ARCHIVE,
    LEVEL_CONTAINER,
    LEVEL_PARTITION_ARCHIVE,
    LEVEL_ZIP4_ARCHIVE,
    ZIP4_ARCHIVE_PATH,
    ZIP4_PARTITION_MEMBER_COUNT,
    ZIP4_PARTITION_PATTERN,
    ZIP4_TEXT_PATTERN,
)
from ryandata_usps_zip4.formats.layouts import CITY_STATE_LAYOUT, ZIP4_LAYOUT
from ryandata_usps_zip4.formats.reader import RecordStreamReader
from ryandata_usps_zip4.models.errors import (
    ArchiveCorrupt,
    MemberNotFound,
    UnexpectedMember,
    UnexpectedMemberCount,
    Zip4ExtractionError,
)
from ryandata_usps_zip4.models.records import CityStateDetail, Zip4Detail

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@contextmanager
def _level(level: str, member: str) -> Iterator[None]:
    """Annotate package errors raised in the block with the nesting level."""
    try:
        yield
    except Zip4ExtractionError as exc:
        wrapped = exc.wrap(level, member)
        if wrapped is exc:
            raise
        raise wrapped from exc


def _truncated_tar(entry_name: str, exc: tarfile.TarError) -> ArchiveCorrupt:
    return ArchiveCorrupt.create(
        "tar ended while reading {member_name}: {reason}",
        {"member_name": entry_name, "reason": str(exc)},
    )


class NestedArchiveWalker:
    """Walks an epf-zip4natl tar and streams the records it contains.

    Each ``iter_*`` call opens the tar afresh and closes every file it
    opened when the iterator is exhausted, fails, or is closed early.

    Example:
        >>> walker = NestedArchiveWalker("epf-zip4natl.tar", password="secret")
        >>> for detail in walker.iter_zip4_details():
        ...     print(detail.zip_code, detail.county_number)
    """

    def __init__(self, tar_path: PathLike, password: Password) -> None:
        """Initialize the walker.

        Args:
            tar_path: Path to the top-level tar container.
            password: Password protecting the encrypted zip members.
        """
        self.tar_path = Path(tar_path)
        self.password = password
        self._zip4_reader = RecordStreamReader(ZIP4_LAYOUT)
        self._city_state_reader = RecordStreamReader(CITY_STATE_LAYOUT)

    @contextmanager
    def _open_entry(self, entry_name: str) -> Iterator[IO[bytes]]:
        """Open a tar entry as a seekable stream without extracting it."""
        with _level(LEVEL_CONTAINER, str(self.tar_path)):
            try:
                tar = tarfile.open(self.tar_path, mode="r:")
            except tarfile.TarError as exc:
                raise ArchiveCorrupt.create(
                    "not a readable tar archive: {reason}", {"reason": str(exc)}
                ) from exc

            with tar:
                try:
                    info = tar.getmember(entry_name)
                except KeyError as exc:
                    raise MemberNotFound.create(
                        "entry {member_name} not found", {"member_name": entry_name}
                    ) from exc
                except tarfile.TarError as exc:
                    raise _truncated_tar(entry_name, exc) from exc

                stream = tar.extractfile(info)
                if stream is None:
                    raise ArchiveCorrupt.create(
                        "entry {member_name} is not a regular file", {"member_name": entry_name}
                    )
                logger.debug("Found %s (%d bytes) in %s", entry_name, info.size, self.tar_path)
                with stream:
                    try:
                        yield stream
                    except tarfile.TarError as exc:
                        raise _truncated_tar(entry_name, exc) from exc

    def iter_zip4_details(self) -> Iterator[Zip4Detail]:
        """Yield every ZIP+4 detail record across all partitions, in archive order.

        Raises:
            ArchiveCorrupt, MemberNotFound, UnexpectedMember,
            UnexpectedMemberCount, DecryptionFailed, TruncatedStream,
            MalformedRecord: On the first structural problem found. Records
            from earlier partitions may already have been yielded.
        """
        with self._open_entry(ZIP4_ARCHIVE_PATH) as entry, _level(
            LEVEL_ZIP4_ARCHIVE, ZIP4_ARCHIVE_PATH
        ), open_archive(entry, name=ZIP4_ARCHIVE_PATH) as outer:
            for info in self._check_partitions(outer):
                partition_bytes = read_member(
                    outer, info, self.password, archive_name=ZIP4_ARCHIVE_PATH
                )
                yield from self._iter_partition(info.filename, partition_bytes)

    def _check_partitions(self, outer: pyzipper.AESZipFile) -> list[pyzipper.ZipInfo]:
        """Validate every member name of zip4.zip before any partition is read."""
        members = list_members(outer)
        for info in members:
            if not ZIP4_PARTITION_PATTERN.fullmatch(info.filename):
                raise UnexpectedMember.create(
                    "unexpected entry {member_name}", {"member_name": info.filename}
                )
        logger.debug("%s holds %d partition archives", ZIP4_ARCHIVE_PATH, len(members))
        return members

    def _iter_partition(self, partition_name: str, partition_bytes: bytes) -> Iterator[Zip4Detail]:
        with _level(LEVEL_PARTITION_ARCHIVE, partition_name), open_archive(
            partition_bytes, name=partition_name
        ) as partition:
            members = list_members(partition)
            if len(members) != ZIP4_PARTITION_MEMBER_COUNT:
                raise UnexpectedMemberCount.create(
                    "expected {expected} entries, found {found}",
                    {"expected": ZIP4_PARTITION_MEMBER_COUNT, "found": len(members)},
                )

            text_info = members[0]
            if not ZIP4_TEXT_PATTERN.fullmatch(text_info.filename):
                raise UnexpectedMember.create(
                    "unexpected entry {member_name}", {"member_name": text_info.filename}
                )

            with open_member(
                partition, text_info, self.password, archive_name=partition_name
            ) as stream, member_errors(text_info, archive_name=partition_name):
                yield from self._zip4_reader.iter_records(stream)

    def iter_city_state_details(self) -> Iterator[CityStateDetail]:
        """Yield every City/State detail record from ctystate.txt.

        Raises:
            ArchiveCorrupt, MemberNotFound, UnexpectedMember,
            UnexpectedMemberCount, DecryptionFailed, TruncatedStream,
            MalformedRecord: On the first structural problem found.
        """
        with self._open_entry(CITY_STATE_ARCHIVE_PATH) as entry, _level(
            LEVEL_CITY_STATE_ARCHIVE, CITY_STATE_ARCHIVE_PATH
        ), open_archive(entry, name=CITY_STATE_ARCHIVE_PATH) as archive:
            members = list_members(archive)
            if len(members) != CITY_STATE_MEMBER_COUNT:
                raise UnexpectedMemberCount.create(
                    "expected {expected} entries, found {found}",
                    {"expected": CITY_STATE_MEMBER_COUNT, "found": len(members)},
                )

            text_info = members[0]
            if text_info.filename != CITY_STATE_TEXT_NAME:
                raise UnexpectedMember.create(
                    "unexpected entry {member_name}", {"member_name": text_info.filename}
                )

            with open_member(
                archive, text_info, self.password, archive_name=CITY_STATE_ARCHIVE_PATH
            ) as stream, member_errors(text_info, archive_name=CITY_STATE_ARCHIVE_PATH):
                yield from self._city_state_reader.iter_records(stream)

    @property
    def stats(self) -> dict[str, dict[str, int]]:
        """Record counts read so far, per layout."""
        return {
            ZIP4_LAYOUT.name: self._zip4_reader.stats,
            CITY_STATE_LAYOUT.name: self._city_state_reader.stats,
        }


def read_zip4_from_tar(tar_path: PathLike, password: Password) -> Iterator[Zip4Detail]:
    """Yield ZIP+4 detail records from an epf-zip4natl tar."""
    return NestedArchiveWalker(tar_path, password).iter_zip4_details()


def read_city_state_from_tar(tar_path: PathLike, password: Password) -> Iterator[CityStateDetail]:
    """Yield City/State detail records from an epf-zip4natl tar."""
    return NestedArchiveWalker(tar_path, password).iter_city_state_details()
