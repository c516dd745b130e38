"""Public SDK surface for blobstamp.

This module provides a stable import path for blob writers and loaders.
It re-exports the footer service, buffer adapters, and outcome types.
"""

from __future__ import annotations

from codec.records import (
    MetadataRecord,
    MetadataRecordV1_0,
    MetadataRecordV2_0,
    MetadataRecordV2_1,
)
from codec.registry import CURRENT_FORMAT_TAG, supported_format_tags
from core.config import BlobStampConfig, current_build_identity
from core.constants import MAGIC_MARKER
from core.errors import BlobStampError
from core.types import CorruptFooter, FooterAbsent, FooterRange, FormatTag, UnknownVersion
from footer.buffers import (
    BlobBuffer,
    BytesBlobBuffer,
    MappedBlobBuffer,
    StreamBlobBuffer,
)
from footer.locator import locate_footer
from footer.service import BlobFooterService, ReadOutcome


def write_footer(payload_length: int, build_identity: str) -> bytes:
    """Build a current-format footer for ``payload_length`` payload bytes."""
    return BlobFooterService().build_footer(payload_length, build_identity)


def read_metadata(buffer: BlobBuffer | bytes | bytearray | memoryview) -> ReadOutcome:
    """Decode footer metadata from a blob buffer."""
    return BlobFooterService().read_metadata(buffer)


def is_compatible(
    buffer: BlobBuffer | bytes | bytearray | memoryview,
    running_build_identity: str,
) -> bool:
    """Return True when the blob was produced by ``running_build_identity``."""
    return BlobFooterService().is_blob_compatible(buffer, running_build_identity)


__all__ = [
    "BlobBuffer",
    "BlobFooterService",
    "BlobStampConfig",
    "BlobStampError",
    "BytesBlobBuffer",
    "CURRENT_FORMAT_TAG",
    "CorruptFooter",
    "FooterAbsent",
    "FooterRange",
    "FormatTag",
    "MAGIC_MARKER",
    "MappedBlobBuffer",
    "MetadataRecord",
    "MetadataRecordV1_0",
    "MetadataRecordV2_0",
    "MetadataRecordV2_1",
    "ReadOutcome",
    "StreamBlobBuffer",
    "UnknownVersion",
    "current_build_identity",
    "is_compatible",
    "locate_footer",
    "read_metadata",
    "supported_format_tags",
    "write_footer",
]
