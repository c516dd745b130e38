"""Format-tag dispatch for metadata records.

The set of supported tags is fixed when this module is imported. Every
tag either maps to a record class or decodes to ``UnknownVersion``.
"""

from __future__ import annotations

from typing import Mapping, Union

from codec.byte_reader import ByteReader
from codec.format_tag import read_format_tag
from codec.records import (
    MetadataRecord,
    MetadataRecordV1_0,
    MetadataRecordV2_0,
    MetadataRecordV2_1,
)
from core.errors import BlobStampCodecError
from core.types import FormatTag, UnknownVersion

DecodedRecord = Union[MetadataRecord, UnknownVersion]

CURRENT_FORMAT_TAG = MetadataRecordV1_0.FORMAT_TAG


def _build_registry(
    record_types: tuple[type[MetadataRecord], ...],
) -> Mapping[FormatTag, type[MetadataRecord]]:
    """Index record classes by tag, rejecting duplicate registrations."""
    registry: dict[FormatTag, type[MetadataRecord]] = {}
    for record_type in record_types:
        tag = record_type.FORMAT_TAG
        if tag in registry:
            raise BlobStampCodecError(
                f"Duplicate metadata record registration for format tag {tag}: "
                f"{registry[tag].__name__} and {record_type.__name__}."
            )
        registry[tag] = record_type
    return registry


_RECORD_TYPES = _build_registry(
    (MetadataRecordV1_0, MetadataRecordV2_0, MetadataRecordV2_1),
)


def supported_format_tags() -> tuple[FormatTag, ...]:
    """Return registered tags in ascending order."""
    return tuple(sorted(_RECORD_TYPES))


def record_type_for(tag: FormatTag) -> type[MetadataRecord] | None:
    """Return the record class registered for ``tag``, if any."""
    return _RECORD_TYPES.get(tag)


def decode_record(tag: FormatTag, reader: ByteReader) -> DecodedRecord:
    """Decode the record body for an already read tag.

    Args:
        tag: Format tag read from the start of the record.
        reader: Reader positioned right after the tag.

    Returns:
        Decoded record, or UnknownVersion when no layout is registered.
        Nothing past the tag is read for unknown tags.

    Raises:
        TruncatedRecordError: If a registered layout cannot be fully read.
    """
    record_type = record_type_for(tag)
    if record_type is None:
        return UnknownVersion(format_tag=tag)
    return record_type.deserialize(reader)


def read_record(reader: ByteReader) -> DecodedRecord:
    """Read a tag and decode the record that follows it."""
    return decode_record(read_format_tag(reader), reader)


def create_record(
    build_identity: str,
    tag: FormatTag = CURRENT_FORMAT_TAG,
    **fields: int,
) -> MetadataRecord:
    """Construct a fresh record for writing.

    Args:
        build_identity: Identity of the build producing the blob.
        tag: Layout to construct; defaults to the current layout.
        **fields: Extra fixed-size fields accepted by the layout.

    Returns:
        New immutable record.

    Raises:
        BlobStampCodecError: If the tag is unregistered or a field is invalid.
    """
    record_type = record_type_for(tag)
    if record_type is None:
        supported = ", ".join(str(item) for item in supported_format_tags())
        raise BlobStampCodecError(
            f"Cannot write metadata format {tag}: supported formats are {supported}."
        )
    try:
        return record_type(build_identity=build_identity, **fields)
    except TypeError as error:
        raise BlobStampCodecError(
            f"Invalid fields for metadata format {tag}: {error}."
        ) from error
