"""Length-prefixed text field used for build identities.

Field bytes are opaque: text is mapped to bytes with surrogate escapes so
any stored byte sequence decodes and re-encodes to the same bytes.
"""

from __future__ import annotations

import struct

from codec.byte_reader import ByteReader
from core.constants import MAX_U32, STRING_FIELD_ENCODING, U32_FORMAT
from core.errors import BlobStampCodecError, TruncatedFieldError

_ERRORS = "surrogateescape"


def encode_string_field(text: str) -> bytes:
    """Encode text as a u32 byte length followed by the raw bytes.

    Args:
        text: Field value.

    Returns:
        Encoded field bytes.

    Raises:
        BlobStampCodecError: If the encoded text does not fit a u32 length
            or contains unencodable characters.
    """
    try:
        raw = text.encode(STRING_FIELD_ENCODING, _ERRORS)
    except UnicodeEncodeError as error:
        raise BlobStampCodecError(
            f"String field is not encodable as {STRING_FIELD_ENCODING}: {error.reason}."
        ) from error
    if len(raw) > MAX_U32:
        raise BlobStampCodecError(
            f"String field too long: {len(raw)} bytes exceeds the u32 length prefix."
        )
    return struct.pack(U32_FORMAT, len(raw)) + raw


def decode_string_field(reader: ByteReader) -> str:
    """Decode a length-prefixed text field.

    Args:
        reader: Reader positioned at the length prefix.

    Returns:
        Decoded text.

    Raises:
        TruncatedFieldError: If the declared length exceeds remaining bytes.
    """
    declared_length = reader.read_u32()
    if declared_length > reader.remaining:
        raise TruncatedFieldError(
            f"String field declares {declared_length} bytes but only "
            f"{reader.remaining} remain."
        )
    return reader.read_bytes(declared_length).decode(STRING_FIELD_ENCODING, _ERRORS)
