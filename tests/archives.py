"""Builders for nested USPS product archives used by the tests.

Archives are built in memory with pyzipper (WinZip AES for the protected
members) and written into a plain tar laid out like epf-zip4natl.
"""

from __future__ import annotations

import io
import tarfile
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

import pyzipper

from ryandata_usps_zip4.data.constants import CITY_STATE_ARCHIVE_PATH, ZIP4_ARCHIVE_PATH

PASSWORD = "s3cret-zip4"


def make_zip(members: Sequence[tuple[str, bytes]], password: Optional[str] = None) -> bytes:
    """Build a zip archive; every member is AES encrypted when a password is given."""
    buf = io.BytesIO()
    if password is None:
        with pyzipper.AESZipFile(buf, "w", compression=pyzipper.ZIP_DEFLATED) as zf:
            for name, data in members:
                zf.writestr(name, data)
    else:
        with pyzipper.AESZipFile(
            buf, "w", compression=pyzipper.ZIP_DEFLATED, encryption=pyzipper.WZ_AES
        ) as zf:
            zf.setpassword(password.encode("utf-8"))
            for name, data in members:
                zf.writestr(name, data)
    return buf.getvalue()


def make_tar(path: Path, entries: Sequence[tuple[str, bytes]]) -> Path:
    """Write an uncompressed tar holding the given entries."""
    with tarfile.open(path, "w") as tar:
        for name, data in entries:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


def make_partition(number: int, records: bytes, password: Optional[str] = PASSWORD) -> tuple[str, bytes]:
    """Build one zip4mstNN.zip partition: the record file plus a checksum member."""
    stem = f"zip4mst{number:02d}"
    members = [(f"{stem}.txt", records), (f"{stem}.md5", b"d41d8cd98f00b204e9800998ecf8427e\n")]
    return f"{stem}.zip", make_zip(members, password)


def make_product_tar(
    path: Path,
    partitions: Sequence[tuple[str, bytes]] = (),
    city_state: Optional[bytes] = None,
    password: Optional[str] = PASSWORD,
) -> Path:
    """Write an epf-zip4natl tar.

    Args:
        path: Target file.
        partitions: (name, archive bytes) pairs stored in zip4.zip, in order.
        city_state: ctystate.txt content; ctystate.zip is omitted when None.
        password: Password protecting ctystate.zip members.
    """
    entries = [(ZIP4_ARCHIVE_PATH, make_zip(partitions))]
    if city_state is not None:
        entries.append(
            (
                CITY_STATE_ARCHIVE_PATH,
                make_zip([("ctystate.txt", city_state), ("ctystate.md5", b"0\n")], password),
            )
        )
    return make_tar(path, entries)
