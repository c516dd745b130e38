"""Read-only blob buffer views.

The footer core only needs a known total length and bounded reads at an
offset. These adapters provide that over owned bytes, a memory-mapped
file, or a seekable binary stream.
"""

from __future__ import annotations

import io
import mmap
from pathlib import Path
from typing import Any, BinaryIO, Protocol, runtime_checkable

from core.errors import BlobBufferError


@runtime_checkable
class BlobBuffer(Protocol):
    """Byte-addressable read interface over a blob."""

    @property
    def length(self) -> int:
        """Total number of bytes in the view."""
        ...

    def read_at(self, offset: int, size: int) -> bytes:
        """Read exactly ``size`` bytes starting at ``offset``."""
        ...


class BytesBlobBuffer:
    """Buffer over bytes already held in memory."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._view = memoryview(data).cast("B").toreadonly()

    @property
    def length(self) -> int:
        return len(self._view)

    def read_at(self, offset: int, size: int) -> bytes:
        _check_bounds(offset, size, self.length)
        return bytes(self._view[offset : offset + size])


class MappedBlobBuffer:
    """Buffer over a read-only memory map of a blob file.

    Use as a context manager so the mapping and file handle are released
    once metadata has been read.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser().resolve()
        try:
            self._file = self._path.open("rb")
        except OSError as error:
            raise BlobBufferError(
                f"Failed to open blob at {self._path}: {error}. "
                "Verify the file exists and is readable."
            ) from error
        self._map: mmap.mmap | None = None
        size = self._path.stat().st_size
        if size > 0:
            try:
                self._map = mmap.mmap(self._file.fileno(), 0, access=mmap.ACCESS_READ)
            except (OSError, ValueError) as error:
                self._file.close()
                raise BlobBufferError(
                    f"Failed to memory-map blob at {self._path}: {error}."
                ) from error

    @property
    def path(self) -> Path:
        return self._path

    @property
    def length(self) -> int:
        return 0 if self._map is None else len(self._map)

    def read_at(self, offset: int, size: int) -> bytes:
        _check_bounds(offset, size, self.length)
        if self._map is None:
            return b""
        return self._map[offset : offset + size]

    def close(self) -> None:
        """Release the mapping and the underlying file handle."""
        if self._map is not None:
            self._map.close()
            self._map = None
        self._file.close()

    def __enter__(self) -> "MappedBlobBuffer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class StreamBlobBuffer:
    """Buffer over a seekable binary stream.

    The stream position at construction marks offset zero, so a blob that
    follows a header inside a larger stream is addressed from its own start.
    The stream position is restored after each read.
    """

    def __init__(self, stream: BinaryIO) -> None:
        if not stream.seekable():
            raise BlobBufferError("Blob stream must be seekable to locate its footer.")
        self._stream = stream
        self._start = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(self._start, io.SEEK_SET)
        if end < self._start:
            raise BlobBufferError(
                f"Invalid stream size: end ({end}) is before start ({self._start})."
            )
        self._length = end - self._start

    @property
    def start_offset(self) -> int:
        """Absolute stream offset of the view's first byte."""
        return self._start

    @property
    def length(self) -> int:
        return self._length

    def read_at(self, offset: int, size: int) -> bytes:
        _check_bounds(offset, size, self._length)
        restore_position = self._stream.tell()
        try:
            self._stream.seek(self._start + offset, io.SEEK_SET)
            data = self._stream.read(size)
        finally:
            self._stream.seek(restore_position, io.SEEK_SET)
        if len(data) != size:
            raise BlobBufferError(
                f"Short read from blob stream: expected {size} bytes at offset "
                f"{offset}, got {len(data)}."
            )
        return data


def as_blob_buffer(source: Any) -> BlobBuffer:
    """Adapt raw bytes-like objects to the buffer interface.

    Args:
        source: A BlobBuffer, or bytes, bytearray, or memoryview.

    Returns:
        Buffer view over ``source``.

    Raises:
        BlobBufferError: If ``source`` cannot be adapted.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return BytesBlobBuffer(source)
    if isinstance(source, BlobBuffer):
        return source
    raise BlobBufferError(
        f"Unsupported blob source type {type(source).__name__}: "
        "expected bytes-like data or an object with length and read_at."
    )


def _check_bounds(offset: int, size: int, length: int) -> None:
    if offset < 0 or size < 0 or offset + size > length:
        raise BlobBufferError(
            f"Read of {size} bytes at offset {offset} is outside a {length}-byte blob."
        )
