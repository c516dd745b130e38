"""Shared typed models.

This module defines immutable data models used by the codec, locator,
and facade layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.constants import FOOTER_FRAMING_SIZE, MAX_U32
from core.errors import BlobStampCodecError

AbsentReason = Literal["too_small", "magic_mismatch"]
CorruptReason = Literal["payload_length_out_of_range", "truncated_record", "trailing_bytes"]


@dataclass(frozen=True, order=True)
class FormatTag:
    """Footer encoding identifier ordered by (major, minor).

    Attributes:
        major: Major format version; layouts differ across majors.
        minor: Minor format version; minors only append fields.
    """

    major: int
    minor: int

    def __post_init__(self) -> None:
        for part_name, part in (("major", self.major), ("minor", self.minor)):
            if not 0 <= part <= MAX_U32:
                raise BlobStampCodecError(
                    f"Invalid format tag {part_name}={part}: expected an unsigned 32-bit value."
                )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class FooterRange:
    """Byte boundaries recovered from footer framing.

    Attributes:
        payload_length: Absolute offset where payload ends and metadata begins.
        metadata_end: Offset one past the last metadata record byte.
        buffer_length: Total length of the inspected buffer.
    """

    payload_length: int
    metadata_end: int
    buffer_length: int

    @property
    def metadata_start(self) -> int:
        """Offset of the first metadata record byte."""
        return self.payload_length

    @property
    def metadata_size(self) -> int:
        """Number of metadata record bytes."""
        return self.metadata_end - self.payload_length

    @property
    def footer_size(self) -> int:
        """Number of bytes following the payload."""
        return self.metadata_size + FOOTER_FRAMING_SIZE


@dataclass(frozen=True)
class FooterAbsent:
    """No footer present; the blob is legacy or unversioned."""

    reason: AbsentReason


@dataclass(frozen=True)
class UnknownVersion:
    """Footer present but written with an unregistered format tag."""

    format_tag: FormatTag


@dataclass(frozen=True)
class CorruptFooter:
    """Footer present but structurally inconsistent."""

    reason: CorruptReason
    detail: str
