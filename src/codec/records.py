"""Versioned metadata record layouts.

Each record class is bound to exactly one format tag. Records serialize
their tag first, then their fields in a fixed order. Within a major
version a newer minor only appends fields after the existing ones, so
its reader consumes the older layout first and then the additions.

Layouts after the tag:

- 1.0: build_identity (string field)
- 2.0: reserved (u64), build_identity (string field)
- 2.1: 2.0 fields, batch_size (u64, 0 when unspecified)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
import struct
from typing import Any, ClassVar

from codec.byte_reader import ByteReader
from codec.format_tag import write_format_tag
from codec.string_field import decode_string_field, encode_string_field
from core.constants import MAX_U64, U64_FORMAT
from core.errors import BlobStampCodecError, TruncatedFieldError, TruncatedRecordError
from core.types import FormatTag


class MetadataRecord(ABC):
    """Behaviour shared by every record layout."""

    FORMAT_TAG: ClassVar[FormatTag]
    build_identity: str

    @property
    def format_tag(self) -> FormatTag:
        """Tag this record is written under."""
        return self.FORMAT_TAG

    def serialize(self) -> bytes:
        """Encode the tag followed by the record fields."""
        return write_format_tag(self.FORMAT_TAG) + self._serialize_fields()

    @classmethod
    def deserialize(cls, reader: ByteReader) -> MetadataRecord:
        """Decode record fields following an already consumed tag.

        Args:
            reader: Reader positioned right after the format tag.

        Returns:
            Decoded record instance.

        Raises:
            TruncatedRecordError: If any field cannot be fully read.
        """
        try:
            fields = cls._read_fields(reader)
        except TruncatedFieldError as error:
            raise TruncatedRecordError(
                f"Metadata record {cls.FORMAT_TAG} is truncated: {error}"
            ) from error
        return cls(**fields)

    def is_compatible(self, running_build_identity: str) -> bool:
        """Return True when the stored build identity matches exactly."""
        return self.build_identity == running_build_identity

    def to_dict(self) -> dict[str, object]:
        """Return record fields with the format tag for display."""
        return {"format_tag": str(self.FORMAT_TAG), **asdict(self)}

    @abstractmethod
    def _serialize_fields(self) -> bytes:
        """Encode the fields that follow the tag."""

    @classmethod
    @abstractmethod
    def _read_fields(cls, reader: ByteReader) -> dict[str, Any]:
        """Read the fields that follow the tag into constructor kwargs."""


@dataclass(frozen=True)
class MetadataRecordV1_0(MetadataRecord):
    """First layout, holding only the build identity."""

    FORMAT_TAG: ClassVar[FormatTag] = FormatTag(1, 0)

    build_identity: str

    def _serialize_fields(self) -> bytes:
        return encode_string_field(self.build_identity)

    @classmethod
    def _read_fields(cls, reader: ByteReader) -> dict[str, Any]:
        return {"build_identity": decode_string_field(reader)}


@dataclass(frozen=True)
class MetadataRecordV2_0(MetadataRecord):
    """Second major layout with a reserved word ahead of the identity."""

    FORMAT_TAG: ClassVar[FormatTag] = FormatTag(2, 0)

    build_identity: str
    reserved: int = 0

    def __post_init__(self) -> None:
        _check_u64("reserved", self.reserved)

    def _serialize_fields(self) -> bytes:
        return struct.pack(U64_FORMAT, self.reserved) + encode_string_field(self.build_identity)

    @classmethod
    def _read_fields(cls, reader: ByteReader) -> dict[str, Any]:
        reserved = reader.read_u64()
        return {"reserved": reserved, "build_identity": decode_string_field(reader)}


@dataclass(frozen=True)
class MetadataRecordV2_1(MetadataRecordV2_0):
    """Layout 2.0 with the compiled batch size appended."""

    FORMAT_TAG: ClassVar[FormatTag] = FormatTag(2, 1)

    batch_size: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_u64("batch_size", self.batch_size)

    def _serialize_fields(self) -> bytes:
        return super()._serialize_fields() + struct.pack(U64_FORMAT, self.batch_size)

    @classmethod
    def _read_fields(cls, reader: ByteReader) -> dict[str, Any]:
        fields = super()._read_fields(reader)
        fields["batch_size"] = reader.read_u64()
        return fields


def _check_u64(field_name: str, value: int) -> None:
    if not 0 <= value <= MAX_U64:
        raise BlobStampCodecError(
            f"Invalid {field_name}={value}: expected an unsigned 64-bit value."
        )
