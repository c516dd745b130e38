"""Core constants used across blobstamp modules.

This module centralizes footer framing values and environment names.
Keeping values here avoids magic literals in codec and locator logic.
"""

from __future__ import annotations

PACKAGE_NAME = "blobstamp"
MAGIC_MARKER = b"BLOBMETA"
PAYLOAD_LENGTH_SIZE = 8
FOOTER_FRAMING_SIZE = len(MAGIC_MARKER) + PAYLOAD_LENGTH_SIZE
U32_FORMAT = "<I"
U64_FORMAT = "<Q"
U32_SIZE = 4
U64_SIZE = 8
MAX_U32 = 0xFFFFFFFF
MAX_U64 = 0xFFFFFFFFFFFFFFFF
STRING_FIELD_ENCODING = "utf-8"
DEVELOPER_BUILD = False
DEFAULT_BUILD_IDENTITY = "blobstamp-dev"
BUILD_IDENTITY_ENV = "BLOBSTAMP_BUILD_IDENTITY"
DISABLE_VERSION_CHECK_ENV = "BLOBSTAMP_DISABLE_VERSION_CHECK"
TRUE_FLAG_VALUES = ("1", "true", "yes", "y", "on")
FALSE_FLAG_VALUES = ("0", "false", "no", "n", "off", "")
