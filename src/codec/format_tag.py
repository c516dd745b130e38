"""Wire encoding of footer format tags.

The tag is two u32 values (major, minor) in fixed order. It is the one
part of the record layout that never evolves, since it must be readable
before any variant-specific decoding runs.
"""

from __future__ import annotations

import struct

from codec.byte_reader import ByteReader
from core.constants import U32_FORMAT
from core.types import FormatTag

FORMAT_TAG_SIZE = 8


def read_format_tag(reader: ByteReader) -> FormatTag:
    """Read a (major, minor) tag from the reader."""
    major = reader.read_u32()
    minor = reader.read_u32()
    return FormatTag(major=major, minor=minor)


def write_format_tag(tag: FormatTag) -> bytes:
    """Encode a tag as two little-endian u32 values."""
    return struct.pack(U32_FORMAT, tag.major) + struct.pack(U32_FORMAT, tag.minor)
