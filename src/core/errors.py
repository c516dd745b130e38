"""blobstamp exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class BlobStampError(Exception):
    """Base exception for all blobstamp failures."""


class BlobStampConfigError(BlobStampError):
    """Raised for invalid runtime configuration."""


class BlobStampCodecError(BlobStampError):
    """Raised when metadata bytes cannot be encoded or decoded."""


class TruncatedFieldError(BlobStampCodecError):
    """Raised when a field declares more bytes than remain."""


class TruncatedRecordError(BlobStampCodecError):
    """Raised when a metadata record cannot be fully read."""


class FooterCorruptError(BlobStampError):
    """Raised when footer framing is inconsistent with the buffer size."""


class BlobBufferError(BlobStampError):
    """Raised when a blob buffer cannot be opened or read."""
