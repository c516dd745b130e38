"""Blob footer facade.

This module stamps compiled blobs with a versioned metadata footer and
reads that footer back to decide whether a blob matches the running
build. Missing, unknown, and corrupt footers are returned as outcome
values rather than raised, so loaders can choose their own policy.
"""

from __future__ import annotations

from typing import Union

from codec.byte_reader import ByteReader
from codec.records import MetadataRecord
from codec.registry import CURRENT_FORMAT_TAG, create_record, read_record
from core.config import BlobStampConfig
from core.constants import FOOTER_FRAMING_SIZE, MAX_U64
from core.errors import (
    BlobStampCodecError,
    FooterCorruptError,
    TruncatedFieldError,
    TruncatedRecordError,
)
from core.logging_config import get_logger
from core.types import CorruptFooter, CorruptReason, FooterAbsent, FormatTag, UnknownVersion
from footer.buffers import BlobBuffer, as_blob_buffer
from footer.locator import encode_framing, locate_footer

_LOGGER = get_logger(__name__)

ReadOutcome = Union[MetadataRecord, FooterAbsent, UnknownVersion, CorruptFooter]


class BlobFooterService:
    """Write and read versioned blob footers."""

    def __init__(self, config: BlobStampConfig | None = None) -> None:
        self._config = config or BlobStampConfig.from_env()

    @property
    def config(self) -> BlobStampConfig:
        return self._config

    def build_footer(
        self,
        payload_length: int,
        build_identity: str | None = None,
        format_tag: FormatTag | None = None,
        **fields: int,
    ) -> bytes:
        """Build the footer to append after ``payload_length`` payload bytes.

        Args:
            payload_length: Byte length of the payload preceding the footer.
            build_identity: Identity to record; defaults to the running build.
            format_tag: Layout to write; defaults to the current layout.
            **fields: Extra fixed-size fields for layouts that define them.

        Returns:
            Serialized record, payload length, and magic marker.

        Raises:
            BlobStampCodecError: If the length, tag, or fields are invalid.
        """
        if not 0 <= payload_length <= MAX_U64:
            raise BlobStampCodecError(
                f"Invalid payload length {payload_length}: expected an unsigned 64-bit value."
            )
        identity = self._config.build_identity if build_identity is None else build_identity
        tag = CURRENT_FORMAT_TAG if format_tag is None else format_tag
        record = create_record(identity, tag, **fields)
        footer = record.serialize() + encode_framing(payload_length)
        _LOGGER.debug(
            "blob_footer_built",
            format_tag=str(tag),
            payload_length=payload_length,
            footer_size=len(footer),
        )
        return footer

    def stamp_blob(
        self,
        payload: bytes,
        build_identity: str | None = None,
        format_tag: FormatTag | None = None,
        **fields: int,
    ) -> bytes:
        """Return ``payload`` followed by a freshly built footer."""
        payload_bytes = bytes(payload)
        footer = self.build_footer(len(payload_bytes), build_identity, format_tag, **fields)
        return payload_bytes + footer

    def read_metadata(self, source: BlobBuffer | bytes | bytearray | memoryview) -> ReadOutcome:
        """Decode the footer metadata of a blob.

        Args:
            source: Blob buffer or raw blob bytes.

        Returns:
            Decoded record, or FooterAbsent, UnknownVersion, or CorruptFooter.
        """
        buffer = as_blob_buffer(source)
        try:
            footer_range = locate_footer(buffer)
        except FooterCorruptError as error:
            return _corrupt("payload_length_out_of_range", str(error), buffer.length)
        if footer_range is None:
            reason = "too_small" if buffer.length < FOOTER_FRAMING_SIZE else "magic_mismatch"
            _LOGGER.info("blob_footer_absent", reason=reason, blob_length=buffer.length)
            return FooterAbsent(reason=reason)
        reader = ByteReader(buffer.read_at(footer_range.metadata_start, footer_range.metadata_size))
        try:
            decoded = read_record(reader)
        except (TruncatedFieldError, TruncatedRecordError) as error:
            return _corrupt("truncated_record", str(error), buffer.length)
        if isinstance(decoded, UnknownVersion):
            _LOGGER.warning(
                "blob_footer_unknown_version",
                blob_format_tag=str(decoded.format_tag),
                current_format_tag=str(CURRENT_FORMAT_TAG),
            )
            return decoded
        if reader.remaining:
            return _corrupt(
                "trailing_bytes",
                f"{reader.remaining} unread bytes follow the {decoded.format_tag} record.",
                buffer.length,
            )
        return decoded

    def is_blob_compatible(
        self,
        source: BlobBuffer | bytes | bytearray | memoryview,
        running_build_identity: str | None = None,
    ) -> bool:
        """Return True when the blob footer matches the running build.

        Blobs without a decodable footer are never compatible. In developer
        builds, the version-check override accepts a mismatched identity.

        Raises:
            BlobStampConfigError: If a developer build reads an invalid
                override flag after an identity mismatch.
        """
        outcome = self.read_metadata(source)
        if not isinstance(outcome, MetadataRecord):
            return False
        running = (
            self._config.build_identity
            if running_build_identity is None
            else running_build_identity
        )
        if outcome.is_compatible(running):
            return True
        _LOGGER.warning(
            "blob_build_identity_mismatch",
            blob_build_identity=outcome.build_identity,
            running_build_identity=running,
        )
        if self._config.version_check_overridden:
            _LOGGER.warning("blob_version_check_overridden", format_tag=str(outcome.format_tag))
            return True
        return False

    def payload_length(self, source: BlobBuffer | bytes | bytearray | memoryview) -> int:
        """Return where the payload ends.

        The full blob length is returned when no footer is present.

        Raises:
            FooterCorruptError: If the footer payload length is out of range.
        """
        buffer = as_blob_buffer(source)
        footer_range = locate_footer(buffer)
        if footer_range is None:
            return buffer.length
        return footer_range.payload_length


def _corrupt(reason: CorruptReason, detail: str, blob_length: int) -> CorruptFooter:
    _LOGGER.warning("blob_footer_corrupt", reason=reason, detail=detail, blob_length=blob_length)
    return CorruptFooter(reason=reason, detail=detail)
