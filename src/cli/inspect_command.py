"""Inspect command wiring for blobstamp CLI."""

from __future__ import annotations

import argparse
from typing import Any

from codec.records import MetadataRecord
from core.errors import BlobStampError
from core.types import CorruptFooter, FooterAbsent, UnknownVersion
from footer.buffers import MappedBlobBuffer
from footer.service import BlobFooterService


def add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser("inspect", help="Print the metadata footer of a blob file")
    parser.add_argument("path", help="Blob file path")


def run_inspect_command(service: BlobFooterService, args: argparse.Namespace) -> int:
    """Print footer fields as key=value rows."""
    try:
        with MappedBlobBuffer(args.path) as buffer:
            outcome = service.read_metadata(buffer)
            rows = _outcome_rows(outcome)
            if isinstance(outcome, MetadataRecord):
                rows["payload_length"] = service.payload_length(buffer)
    except BlobStampError as error:
        print(f"inspect_error={error}")
        return 1
    for key in sorted(rows.keys()):
        print(f"{key}={rows[key]}")
    return 0


def _outcome_rows(outcome: object) -> dict[str, object]:
    """Flatten a read outcome into printable fields."""
    if isinstance(outcome, MetadataRecord):
        return {"status": "decoded", **outcome.to_dict()}
    if isinstance(outcome, FooterAbsent):
        return {"status": "absent", "reason": outcome.reason}
    if isinstance(outcome, UnknownVersion):
        return {"status": "unknown_version", "format_tag": str(outcome.format_tag)}
    if isinstance(outcome, CorruptFooter):
        return {"status": "corrupt", "reason": outcome.reason, "detail": outcome.detail}
    raise TypeError(f"Unexpected footer outcome: {outcome!r}")
