"""Version-agnostic footer location.

The footer is found from the tail of the buffer: a fixed magic marker,
preceded by the u64 payload length, preceded by the metadata record.
Presence is decided before any format tag is read, because the tag lives
inside the metadata record.
"""

from __future__ import annotations

import struct

from core.constants import FOOTER_FRAMING_SIZE, MAGIC_MARKER, PAYLOAD_LENGTH_SIZE, U64_FORMAT
from core.errors import FooterCorruptError
from core.types import FooterRange
from footer.buffers import BlobBuffer


def has_footer(buffer: BlobBuffer) -> bool:
    """Return True when the buffer ends with the footer magic marker."""
    if buffer.length < FOOTER_FRAMING_SIZE:
        return False
    marker_offset = buffer.length - len(MAGIC_MARKER)
    return buffer.read_at(marker_offset, len(MAGIC_MARKER)) == MAGIC_MARKER


def locate_footer(buffer: BlobBuffer) -> FooterRange | None:
    """Locate the metadata record range at the tail of a blob.

    Args:
        buffer: Blob view with a known total length.

    Returns:
        Recovered byte boundaries, or None when the buffer carries no footer.

    Raises:
        FooterCorruptError: If the payload length points past the metadata end.
    """
    if not has_footer(buffer):
        return None
    metadata_end = buffer.length - FOOTER_FRAMING_SIZE
    raw_length = buffer.read_at(metadata_end, PAYLOAD_LENGTH_SIZE)
    payload_length = struct.unpack(U64_FORMAT, raw_length)[0]
    if payload_length > metadata_end:
        raise FooterCorruptError(
            f"Footer payload length {payload_length} exceeds the {metadata_end} bytes "
            f"available before the footer framing in a {buffer.length}-byte blob."
        )
    return FooterRange(
        payload_length=payload_length,
        metadata_end=metadata_end,
        buffer_length=buffer.length,
    )


def encode_framing(payload_length: int) -> bytes:
    """Encode the payload length and magic marker closing a footer."""
    return struct.pack(U64_FORMAT, payload_length) + MAGIC_MARKER
