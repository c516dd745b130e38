"""Runtime configuration model for blobstamp.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
import os

from core.constants import (
    BUILD_IDENTITY_ENV,
    DEFAULT_BUILD_IDENTITY,
    DEVELOPER_BUILD,
    DISABLE_VERSION_CHECK_ENV,
    FALSE_FLAG_VALUES,
    PACKAGE_NAME,
    TRUE_FLAG_VALUES,
)
from core.errors import BlobStampConfigError


@dataclass(frozen=True)
class BlobStampConfig:
    """Validated runtime configuration.

    Attributes:
        build_identity: Identity string of the running build.
        developer_build: Whether this is a non-production build.
        disable_version_check: Developer request to skip identity matching.
            None defers to BLOBSTAMP_DISABLE_VERSION_CHECK, which is read
            only when a developer build evaluates the override.
    """

    build_identity: str
    developer_build: bool = DEVELOPER_BUILD
    disable_version_check: bool | None = None

    @property
    def version_check_overridden(self) -> bool:
        """Return True when the identity check may be bypassed.

        Raises:
            BlobStampConfigError: If a developer build reads an invalid flag.
        """
        if not self.developer_build:
            return False
        if self.disable_version_check is None:
            return version_check_disable_requested()
        return self.disable_version_check

    @classmethod
    def from_env(cls) -> "BlobStampConfig":
        """Build config from process environment variables.

        The version-check flag is left unread until the override is needed.

        Returns:
            A validated config object.
        """
        build_identity = os.getenv(BUILD_IDENTITY_ENV) or current_build_identity()
        return cls(build_identity=build_identity, developer_build=DEVELOPER_BUILD)


def current_build_identity() -> str:
    """Return the identity string of the installed blobstamp build."""
    try:
        return f"{PACKAGE_NAME}-{version(PACKAGE_NAME)}"
    except PackageNotFoundError:
        return DEFAULT_BUILD_IDENTITY


def version_check_disable_requested() -> bool:
    """Parse BLOBSTAMP_DISABLE_VERSION_CHECK from the environment.

    Raises:
        BlobStampConfigError: If the value is not a recognized boolean.
    """
    raw_value = os.getenv(DISABLE_VERSION_CHECK_ENV, "")
    return _parse_bool_flag(DISABLE_VERSION_CHECK_ENV, raw_value)


def _parse_bool_flag(name: str, raw_value: str) -> bool:
    """Parse a boolean environment flag.

    Args:
        name: Environment variable name, used in error messages.
        raw_value: Raw string from environment.

    Returns:
        Parsed flag value.

    Raises:
        BlobStampConfigError: If value is not a recognized boolean.
    """
    normalized = raw_value.strip().lower()
    if normalized in TRUE_FLAG_VALUES:
        return True
    if normalized in FALSE_FLAG_VALUES:
        return False
    raise BlobStampConfigError(
        f"Invalid {name} value: expected a boolean, got '{raw_value}'. "
        f"Set {name} to one of: {', '.join(TRUE_FLAG_VALUES + FALSE_FLAG_VALUES[:-1])}."
    )
