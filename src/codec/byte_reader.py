"""Bounded little-endian reader over metadata bytes."""

from __future__ import annotations

import struct

from core.constants import U32_FORMAT, U32_SIZE, U64_FORMAT, U64_SIZE
from core.errors import TruncatedFieldError


class ByteReader:
    """Sequential cursor that never reads past the end of its data."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = memoryview(data)
        self._position = 0

    @property
    def position(self) -> int:
        """Offset of the next unread byte."""
        return self._position

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._data) - self._position

    def read_u32(self) -> int:
        """Read one little-endian unsigned 32-bit integer."""
        return struct.unpack(U32_FORMAT, self.read_bytes(U32_SIZE))[0]

    def read_u64(self) -> int:
        """Read one little-endian unsigned 64-bit integer."""
        return struct.unpack(U64_FORMAT, self.read_bytes(U64_SIZE))[0]

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes.

        Args:
            size: Number of bytes to consume.

        Returns:
            The consumed bytes.

        Raises:
            TruncatedFieldError: If fewer than ``size`` bytes remain.
        """
        if size < 0 or size > self.remaining:
            raise TruncatedFieldError(
                f"Cannot read {size} bytes at offset {self._position}: "
                f"only {self.remaining} bytes remain."
            )
        start = self._position
        self._position += size
        return bytes(self._data[start : self._position])
