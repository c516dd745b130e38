"""Unit tests for the blob footer service."""

from __future__ import annotations

import io
import struct

import pytest

from codec.records import MetadataRecordV1_0, MetadataRecordV2_0, MetadataRecordV2_1
from codec.string_field import encode_string_field
from core.config import BlobStampConfig
from core.constants import FOOTER_FRAMING_SIZE, MAGIC_MARKER
from core.errors import BlobStampCodecError, BlobStampConfigError, FooterCorruptError
from core.types import CorruptFooter, FooterAbsent, FormatTag, UnknownVersion
from footer.buffers import StreamBlobBuffer
from footer.locator import encode_framing
from footer.service import BlobFooterService


def _service(
    build_identity: str = "build-A",
    developer_build: bool = False,
    disable_version_check: bool = False,
) -> BlobFooterService:
    return BlobFooterService(
        BlobStampConfig(
            build_identity=build_identity,
            developer_build=developer_build,
            disable_version_check=disable_version_check,
        )
    )


def test_concrete_scenario_with_zero_payload() -> None:
    """A 100-byte payload should round-trip a 1.0 record and gate compatibility."""
    service = _service()
    payload = bytes(100)

    footer = service.build_footer(100, "1.0.0-test")
    blob = payload + footer
    record = service.read_metadata(blob)

    assert len(blob) == 100 + len(footer)
    assert record == MetadataRecordV1_0(build_identity="1.0.0-test")
    assert service.is_blob_compatible(blob, "1.0.0-test") is True
    assert service.is_blob_compatible(blob, "2.0.0-test") is False


@pytest.mark.parametrize("identity", ["", "build-A", "2024.3.0-15500-ab12cd", "ü-build"])
@pytest.mark.parametrize("payload_size", [0, 1, 4096])
def test_round_trip_preserves_identity(identity: str, payload_size: int) -> None:
    """Any identity and payload length should decode back unchanged."""
    service = _service()

    blob = bytes(payload_size) + service.build_footer(payload_size, identity)
    record = service.read_metadata(blob)

    assert isinstance(record, MetadataRecordV1_0)
    assert record.build_identity == identity and record.is_compatible(identity)


def test_read_metadata_is_idempotent() -> None:
    """Reading the same buffer twice should give equal records."""
    service = _service()
    blob = service.stamp_blob(b"payload")

    assert service.read_metadata(blob) == service.read_metadata(blob)


def test_footer_is_record_then_length_then_magic() -> None:
    """The footer should close with the payload length and the magic marker."""
    footer = _service().build_footer(7, "build-A")

    assert footer.endswith(MAGIC_MARKER)
    assert footer[-FOOTER_FRAMING_SIZE:-len(MAGIC_MARKER)] == struct.pack("<Q", 7)
    assert footer[:-FOOTER_FRAMING_SIZE] == MetadataRecordV1_0("build-A").serialize()


def test_build_footer_defaults_to_configured_identity() -> None:
    """Writers should stamp the running build when no identity is given."""
    service = _service(build_identity="running-build")

    record = service.read_metadata(service.stamp_blob(b"xyz"))

    assert isinstance(record, MetadataRecordV1_0) and record.build_identity == "running-build"


def test_build_footer_writes_requested_layout() -> None:
    """Explicit layouts and their fields should round-trip."""
    service = _service()

    blob = service.stamp_blob(b"xyz", "build-A", FormatTag(2, 1), batch_size=4)

    assert service.read_metadata(blob) == MetadataRecordV2_1(
        build_identity="build-A", reserved=0, batch_size=4
    )


def test_build_footer_rejects_negative_payload_length() -> None:
    """Payload lengths must fit the u64 framing field."""
    with pytest.raises(BlobStampCodecError):
        _service().build_footer(-1, "build-A")


@pytest.mark.parametrize(
    "blob,reason",
    [
        (b"", "too_small"),
        (MAGIC_MARKER, "too_small"),
        (b"\x00" * 64, "magic_mismatch"),
    ],
)
def test_missing_footer_is_absent(blob: bytes, reason: str) -> None:
    """Legacy blobs should be reported as absent, not as errors."""
    outcome = _service().read_metadata(blob)

    assert outcome == FooterAbsent(reason=reason)


def test_unknown_version_is_reported_without_reading_body() -> None:
    """A 999.0 tag should yield UnknownVersion rather than a misread 1.0 record."""
    payload = bytes(10)
    record_bytes = struct.pack("<II", 999, 0) + encode_string_field("build-A")
    blob = payload + record_bytes + encode_framing(len(payload))

    outcome = _service().read_metadata(blob)

    assert outcome == UnknownVersion(format_tag=FormatTag(999, 0))


def test_payload_length_beyond_buffer_is_corrupt() -> None:
    """An oversized payload length should be reported as corrupt."""
    service = _service()
    blob = bytearray(service.stamp_blob(bytes(32)))
    length_offset = len(blob) - FOOTER_FRAMING_SIZE
    blob[length_offset : length_offset + 8] = struct.pack("<Q", len(blob))

    outcome = service.read_metadata(bytes(blob))

    assert isinstance(outcome, CorruptFooter)
    assert outcome.reason == "payload_length_out_of_range"


def test_truncated_record_is_corrupt() -> None:
    """A record cut short inside the metadata range should be reported as corrupt."""
    payload = bytes(8)
    record_bytes = MetadataRecordV1_0("build-A").serialize()[:-2]
    blob = payload + record_bytes + encode_framing(len(payload))

    outcome = _service().read_metadata(blob)

    assert isinstance(outcome, CorruptFooter) and outcome.reason == "truncated_record"


def test_empty_metadata_range_is_corrupt() -> None:
    """Framing without any record bytes cannot hold a format tag."""
    outcome = _service().read_metadata(b"abc" + encode_framing(3))

    assert isinstance(outcome, CorruptFooter) and outcome.reason == "truncated_record"


def test_bytes_after_record_are_corrupt() -> None:
    """The record must end exactly where the framing begins."""
    payload = bytes(8)
    record_bytes = MetadataRecordV1_0("build-A").serialize() + b"\x00\x00"
    blob = payload + record_bytes + encode_framing(len(payload))

    outcome = _service().read_metadata(blob)

    assert isinstance(outcome, CorruptFooter) and outcome.reason == "trailing_bytes"


def test_misplaced_payload_boundary_is_not_silently_accepted() -> None:
    """A payload length one byte short should not decode as a valid record."""
    payload = bytes(8)
    blob = payload + MetadataRecordV1_0("build-A").serialize() + encode_framing(len(payload) - 1)

    outcome = _service().read_metadata(blob)

    assert isinstance(outcome, (CorruptFooter, UnknownVersion))


def test_mismatched_identity_is_incompatible() -> None:
    """Blobs from another build should be rejected."""
    service = _service()
    blob = service.stamp_blob(b"payload", "build-A")

    assert service.is_blob_compatible(blob, "build-B") is False


def test_compatibility_defaults_to_configured_identity() -> None:
    """The running identity should come from config when omitted."""
    writer = _service(build_identity="build-A")
    blob = writer.stamp_blob(b"payload")

    assert _service(build_identity="build-A").is_blob_compatible(blob) is True
    assert _service(build_identity="build-B").is_blob_compatible(blob) is False


def test_override_accepts_mismatch_in_developer_builds() -> None:
    """The developer override should accept a mismatched identity."""
    service = _service(developer_build=True, disable_version_check=True)
    blob = service.stamp_blob(b"payload", "build-A")

    assert service.is_blob_compatible(blob, "build-B") is True


def test_override_is_ignored_in_release_builds() -> None:
    """The override flag should have no effect outside developer builds."""
    service = _service(developer_build=False, disable_version_check=True)
    blob = service.stamp_blob(b"payload", "build-A")

    assert service.is_blob_compatible(blob, "build-B") is False


def test_override_never_accepts_missing_unknown_or_corrupt_footers() -> None:
    """The override should only bypass identity mismatches."""
    service = _service(developer_build=True, disable_version_check=True)
    unknown = bytes(4) + struct.pack("<II", 999, 0) + encode_framing(4)
    corrupt = bytes(4) + MetadataRecordV1_0("x").serialize() + encode_framing(10_000)

    assert service.is_blob_compatible(b"legacy-blob-without-footer", "x") is False
    assert service.is_blob_compatible(unknown, "x") is False
    assert service.is_blob_compatible(corrupt, "x") is False


def test_older_major_layout_is_still_readable() -> None:
    """Blobs written with 2.0 should decode with their own layout."""
    service = _service()
    blob = service.stamp_blob(b"payload", "build-A", FormatTag(2, 0), reserved=9)

    assert service.read_metadata(blob) == MetadataRecordV2_0(build_identity="build-A", reserved=9)


def test_payload_length_splits_payload_from_footer() -> None:
    """The payload boundary should match the original payload size."""
    service = _service()
    blob = service.stamp_blob(b"payload-bytes")

    assert service.payload_length(blob) == len(b"payload-bytes")
    assert service.payload_length(b"legacy") == len(b"legacy")


def test_payload_length_raises_for_corrupt_footer() -> None:
    """Corrupt framing should not produce a payload boundary."""
    blob = bytes(4) + struct.pack("<Q", 100) + MAGIC_MARKER

    with pytest.raises(FooterCorruptError):
        _service().payload_length(blob)


def test_reads_blob_embedded_in_stream_after_header() -> None:
    """Payload length should count from the blob start, not the stream start."""
    service = _service()
    blob = service.stamp_blob(bytes(50), "build-A")
    stream = io.BytesIO(b"OUTER-HEADER" + blob)
    stream.seek(len(b"OUTER-HEADER"))

    outcome = service.read_metadata(StreamBlobBuffer(stream))

    assert outcome == MetadataRecordV1_0(build_identity="build-A")
    assert stream.tell() == len(b"OUTER-HEADER")


def test_stamp_blob_counts_payload_bytes_of_wide_views() -> None:
    """Payload length should be the byte size, not the item count of a view."""
    service = _service()
    payload = memoryview(bytes(range(16))).cast("I")

    blob = service.stamp_blob(payload, "build-A")

    assert len(payload) == 4
    assert service.payload_length(blob) == 16
    assert blob[:16] == bytes(range(16))


def test_override_flag_is_read_only_on_developer_mismatch(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An invalid override flag should matter only where the override is consulted."""
    monkeypatch.setenv("BLOBSTAMP_DISABLE_VERSION_CHECK", "maybe")
    release = BlobFooterService(BlobStampConfig(build_identity="build-A", developer_build=False))
    developer = BlobFooterService(BlobStampConfig(build_identity="build-A", developer_build=True))
    blob = release.stamp_blob(b"payload")

    assert release.is_blob_compatible(blob, "build-B") is False
    assert developer.is_blob_compatible(blob, "build-A") is True
    with pytest.raises(BlobStampConfigError, match="BLOBSTAMP_DISABLE_VERSION_CHECK"):
        developer.is_blob_compatible(blob, "build-B")


def test_developer_build_reads_override_flag_from_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A developer build without an explicit flag should honour the environment."""
    monkeypatch.setenv("BLOBSTAMP_DISABLE_VERSION_CHECK", "yes")
    service = BlobFooterService(BlobStampConfig(build_identity="build-A", developer_build=True))
    blob = service.stamp_blob(b"payload")

    assert service.is_blob_compatible(blob, "build-B") is True
