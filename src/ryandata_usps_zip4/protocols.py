from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ryandata_usps_zip4.models import SmartyResponse


@runtime_checkable
class ZipLookupClientProtocol(Protocol):
    """Protocol for third-party ZIP code lookup clients.

    Implementations resolve a batch of ZIP codes to the counties the
    provider associates with them, for comparison against USPS data.
    """

    def query_batch(self, zip_codes: Sequence[str]) -> list[SmartyResponse]:
        """Look up a batch of ZIP codes.

        Args:
            zip_codes: ZIP codes to look up.

        Returns:
            One response per input ZIP code, in input order.
        """
        ...
