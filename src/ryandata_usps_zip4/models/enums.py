"""Classification codes found in the first byte of USPS fixed-width records."""

from __future__ import annotations

from enum import Enum


class CopyrightDetailCode(str, Enum):
    """Copyright/detail code that opens every City/State and ZIP+4 record."""

    ALIAS = "A"
    COPYRIGHT = "C"
    DETAIL = "D"
    SEASONAL = "N"
    PO_BOX_ONLY = "P"
    SPLIT = "Z"


# Plus-4 segment value marking a non-deliverable add-on range
NON_DELIVERABLE_SEGMENT = "ND"
