"""Compatibility check command wiring for blobstamp CLI."""

from __future__ import annotations

import argparse
from typing import Any

from core.errors import BlobStampError
from footer.buffers import MappedBlobBuffer
from footer.service import BlobFooterService


def add_check_command(subparsers: Any) -> None:
    """Register check subcommand."""
    parser = subparsers.add_parser(
        "check",
        help="Exit 0 when a blob file was produced by the running build",
    )
    parser.add_argument("path", help="Blob file path")
    # SUPPRESS keeps a value given before the subcommand.
    parser.add_argument(
        "--build-identity",
        default=argparse.SUPPRESS,
        help="Override BLOBSTAMP_BUILD_IDENTITY for this check",
    )


def run_check_command(service: BlobFooterService, args: argparse.Namespace) -> int:
    """Print compatibility and map it onto the exit code."""
    try:
        with MappedBlobBuffer(args.path) as buffer:
            compatible = service.is_blob_compatible(buffer)
    except BlobStampError as error:
        print(f"check_error={error}")
        return 1
    print(f"compatible={'true' if compatible else 'false'}")
    return 0 if compatible else 1
