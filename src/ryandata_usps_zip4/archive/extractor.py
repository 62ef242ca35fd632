"""Opening zip archives and reading (optionally encrypted) members.

USPS ships its ZIP+4 partitions as password-protected zip members. pyzipper
reads both the traditional PKWARE scheme and WinZip AES, and otherwise
behaves like the standard library ``zipfile`` module. Every low-level
failure is translated into the package error taxonomy here so callers
never see pyzipper or zlib exceptions.
"""

from __future__ import annotations

import io
import logging
import tarfile
import zlib
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, BinaryIO, Union

import pyzipper

from ryandata_usps_zip4.models.errors import (
    ArchiveCorrupt,
    DecryptionFailed,
    MemberNotFound,
)

logger = logging.getLogger(__name__)

ArchiveSource = Union[bytes, bytearray, BinaryIO]
Password = Union[str, bytes, None]

# General purpose bit 0: member data is encrypted
ENCRYPTED_FLAG = 0x1


def _encode_password(password: Password) -> bytes | None:
    if password is None or isinstance(password, bytes):
        return password
    return password.encode("utf-8")


def is_encrypted(info: pyzipper.ZipInfo) -> bool:
    """Check whether a member is password protected."""
    return bool(info.flag_bits & ENCRYPTED_FLAG)


@contextmanager
def open_archive(source: ArchiveSource, *, name: str = "<archive>") -> Iterator[pyzipper.AESZipFile]:
    """Open a zip archive from bytes or a seekable binary file object.

    Args:
        source: Archive bytes, or a seekable file object positioned anywhere.
        name: Archive name used in error messages.

    Yields:
        Open archive; closed when the context exits.

    Raises:
        ArchiveCorrupt: If the source cannot be parsed as a zip archive.
    """
    fileobj = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
    try:
        archive = pyzipper.AESZipFile(fileobj)
    except (pyzipper.BadZipFile, tarfile.TarError, EOFError, OSError) as exc:
        raise ArchiveCorrupt.create(
            "{archive} is not a readable zip archive: {reason}",
            {"archive": name, "reason": str(exc)},
        ) from exc

    try:
        yield archive
    finally:
        archive.close()


def list_members(archive: pyzipper.AESZipFile) -> list[pyzipper.ZipInfo]:
    """List archive members in central directory order."""
    return archive.infolist()


def get_member(
    archive: pyzipper.AESZipFile, member_name: str, *, archive_name: str = "<archive>"
) -> pyzipper.ZipInfo:
    """Look up a member by name.

    Raises:
        MemberNotFound: If the archive has no member with that name.
    """
    try:
        return archive.getinfo(member_name)
    except KeyError as exc:
        raise MemberNotFound.create(
            "{member_name} not found in {archive}",
            {"archive": archive_name, "member_name": member_name},
        ) from exc


@contextmanager
def member_errors(info: pyzipper.ZipInfo, *, archive_name: str = "<archive>") -> Iterator[None]:
    """Translate pyzipper/zlib failures raised while reading a member.

    Integrity failures on an encrypted member are reported as
    ``DecryptionFailed``: a wrong password can slip past the password check
    and only show up as a CRC or HMAC mismatch.
    """
    context = {"archive": archive_name, "member_name": info.filename}
    encrypted = is_encrypted(info)
    try:
        yield
    except tarfile.TarError as exc:
        # The enclosing tar ended before this member did
        raise ArchiveCorrupt.create(
            "{member_name} in {archive} is cut short: {reason}",
            {**context, "reason": str(exc)},
        ) from exc
    except RuntimeError as exc:
        # pyzipper signals missing and wrong passwords with RuntimeError
        if not encrypted:
            raise
        raise DecryptionFailed.create(
            "cannot decrypt {member_name} in {archive}: {reason}",
            {**context, "reason": str(exc)},
        ) from exc
    except NotImplementedError as exc:
        error_cls = DecryptionFailed if encrypted else ArchiveCorrupt
        raise error_cls.create(
            "unsupported protection or compression for {member_name} in {archive}: {reason}",
            {**context, "reason": str(exc)},
        ) from exc
    except (pyzipper.BadZipFile, zlib.error, EOFError) as exc:
        error_cls = DecryptionFailed if encrypted else ArchiveCorrupt
        raise error_cls.create(
            "{member_name} in {archive} failed to decompress: {reason}",
            {**context, "reason": str(exc)},
        ) from exc


def _resolve(
    archive: pyzipper.AESZipFile, member: str | pyzipper.ZipInfo, archive_name: str
) -> pyzipper.ZipInfo:
    if isinstance(member, str):
        return get_member(archive, member, archive_name=archive_name)
    return member


@contextmanager
def open_member(
    archive: pyzipper.AESZipFile,
    member: str | pyzipper.ZipInfo,
    password: Password = None,
    *,
    archive_name: str = "<archive>",
) -> Iterator[IO[bytes]]:
    """Open a member as a decompressing, decrypting byte stream.

    Only errors raised while opening are translated; wrap reads in
    ``member_errors`` to translate failures found while streaming.

    Args:
        archive: Open archive.
        member: Member name or ZipInfo.
        password: Password for encrypted members; ignored for plain members.
        archive_name: Archive name used in error messages.

    Yields:
        Readable binary stream; closed when the context exits.
    """
    info = _resolve(archive, member, archive_name)
    with member_errors(info, archive_name=archive_name):
        stream = archive.open(info, pwd=_encode_password(password))
    logger.debug("Opened %s in %s (encrypted=%s)", info.filename, archive_name, is_encrypted(info))
    try:
        yield stream
    finally:
        stream.close()


def read_member(
    archive: pyzipper.AESZipFile,
    member: str | pyzipper.ZipInfo,
    password: Password = None,
    *,
    archive_name: str = "<archive>",
) -> bytes:
    """Read a member's full decompressed content."""
    info = _resolve(archive, member, archive_name)
    with member_errors(info, archive_name=archive_name):
        data = archive.read(info, pwd=_encode_password(password))
    logger.debug("Read %d bytes from %s in %s", len(data), info.filename, archive_name)
    return data


def extract_member(
    source: ArchiveSource,
    member_name: str,
    password: Password = None,
    *,
    archive_name: str = "<archive>",
) -> bytes:
    """Open an archive and return one named member's decompressed bytes.

    Raises:
        ArchiveCorrupt: If the archive cannot be parsed.
        MemberNotFound: If the member is absent.
        DecryptionFailed: If the password is wrong or the scheme unsupported.
    """
    with open_archive(source, name=archive_name) as archive:
        return read_member(archive, member_name, password, archive_name=archive_name)


def iter_members(
    source: ArchiveSource,
    password: Password = None,
    *,
    archive_name: str = "<archive>",
) -> Iterator[tuple[str, bytes]]:
    """Yield ``(name, content)`` for every member, one at a time, in archive order."""
    with open_archive(source, name=archive_name) as archive:
        for info in list_members(archive):
            yield info.filename, read_member(archive, info, password, archive_name=archive_name)
