"""Error classes for ZIP+4 extraction.

Every structural problem found while walking the USPS container, reading
fixed-width records, or talking to a remote collaborator is raised as a
subclass of ``Zip4ExtractionError``. The classes wrap Pydantic's custom
error type so they carry an ``error_type``, a message template and a
context dict, the same way the rest of the RyanData packages report errors.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic_core import PydanticCustomError

# Package identifier for error context
PACKAGE_NAME = "ryandata_usps_zip4"


class Zip4ExtractionError(PydanticCustomError):
    """Base error for everything raised by ryandata_usps_zip4.

    Subclasses set ``_error_type`` and are built through ``create()`` so the
    package identifier always lands in the context.
    """

    _error_type: ClassVar[str] = "zip4_extraction"

    @classmethod
    def create(
        cls, message_template: str, context: dict[str, Any] | None = None
    ) -> Zip4ExtractionError:
        """Build an error of this class.

        Args:
            message_template: Error message (can include {placeholders}).
            context: Values substituted into the template and kept on the error.

        Returns:
            Instance of the calling class.
        """
        ctx = {"package": PACKAGE_NAME, **(context or {})}
        return cls(cls._error_type, message_template, ctx)

    def wrap(self, level: str, member: str) -> Zip4ExtractionError:
        """Return a copy of this error annotated with the archive level it came from.

        Errors that already name a level are returned unchanged, so the
        innermost level that failed is the one reported.

        Args:
            level: Nesting level being processed (e.g. "partition_archive").
            member: Archive member being processed at that level.

        Returns:
            Error of the same class with ``level`` and ``member`` in its context.
        """
        context = dict(self.context or {})
        if "level" in context:
            return self
        context.update({"level": level, "member": member})
        return type(self)(self.type, "[{level}] {member}: " + self.message_template, context)


class ArchiveCorrupt(Zip4ExtractionError):
    """A container or member cannot be parsed as the expected archive format."""

    _error_type = "archive_corrupt"


class MemberNotFound(Zip4ExtractionError):
    """A required archive member is missing."""

    _error_type = "member_not_found"


class UnexpectedMember(Zip4ExtractionError):
    """An archive member does not have the expected name."""

    _error_type = "unexpected_member"


class UnexpectedMemberCount(Zip4ExtractionError):
    """An archive does not hold the expected number of members."""

    _error_type = "unexpected_member_count"


class DecryptionFailed(Zip4ExtractionError):
    """Wrong password, missing password, or an unsupported protection scheme."""

    _error_type = "decryption_failed"


class TruncatedStream(Zip4ExtractionError):
    """A record stream ended partway through a fixed-length record."""

    _error_type = "truncated_stream"


class MalformedRecord(Zip4ExtractionError):
    """A buffer handed to the decoder does not match the layout's record length."""

    _error_type = "malformed_record"


class RemoteLookupError(Zip4ExtractionError):
    """The ZIP code API could not be queried or returned an unusable payload."""

    _error_type = "remote_lookup"

    @classmethod
    def from_response(
        cls, error_type: str, message_template: str, context: dict[str, Any] | None = None
    ) -> RemoteLookupError:
        """Build a remote error with a specific ``error_type``.

        Args:
            error_type: One of remote_request, remote_http_error,
                remote_rate_limited or remote_parse.
            message_template: Error message (can include {placeholders}).
            context: Additional context merged into the error context.

        Returns:
            RemoteLookupError instance.
        """
        ctx = {"package": PACKAGE_NAME, **(context or {})}
        return cls(error_type, message_template, ctx)


class ConfigurationError(Zip4ExtractionError):
    """A required setting is missing from the environment."""

    _error_type = "configuration"


class IndexFormatError(Zip4ExtractionError):
    """A saved ZIP code -> county index file does not have the expected layout."""

    _error_type = "index_format"
