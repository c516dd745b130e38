"""blobstamp CLI entry points.

This module exposes commands for inspecting blob metadata footers.
It maps argparse commands onto footer service calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Sequence

from cli.check_command import add_check_command, run_check_command
from cli.inspect_command import add_inspect_command, run_inspect_command
from core.config import BlobStampConfig
from footer.service import BlobFooterService


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="blobstamp", description="Blob metadata footer CLI")
    parser.add_argument(
        "--build-identity",
        help="Override BLOBSTAMP_BUILD_IDENTITY for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_inspect_command(subparsers)
    add_check_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the blobstamp CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    service = _build_service(args.build_identity)
    if args.command == "inspect":
        return run_inspect_command(service, args)
    if args.command == "check":
        return run_check_command(service, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_service(build_identity: str | None) -> BlobFooterService:
    """Build footer service with optional build-identity override.

    Args:
        build_identity: Optional override identity.

    Returns:
        Configured footer service.
    """
    config = BlobStampConfig.from_env()
    if build_identity:
        config = replace(config, build_identity=build_identity)
    return BlobFooterService(config)
