"""Archive access: encrypted zip members and the nested product tar."""

from __future__ import annotations

from ryandata_usps_zip4.archive.extractor import (
    extract_member,
    get_member,
    is_encrypted,
    iter_members,
    list_members,
    member_errors,
    open_archive,
    open_member,
    read_member,
)
from ryandata_usps_zip4.archive.walker import (
    NestedArchiveWalker,
    read_city_state_from_tar,
    read_zip4_from_tar,
)

__all__ = [
    "open_archive",
    "list_members",
    "get_member",
    "is_encrypted",
    "member_errors",
    "open_member",
    "read_member",
    "extract_member",
    "iter_members",
    "NestedArchiveWalker",
    "read_zip4_from_tar",
    "read_city_state_from_tar",
]
