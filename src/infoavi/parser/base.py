"""Byte source, error types and RIFF/AVI format constants."""

from __future__ import annotations

import io
import os
from typing import BinaryIO

# Fixed structure sizes
RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8
AVIMAINHEADER_SIZE = 56
AVISTREAMHEADER_SIZE = 56
BITMAPINFOHEADER_SIZE = 40
WAVEFORMATEX_SIZE = 18
WAVEFORMAT_SIZE = 14
AVIOLDINDEX_SIZE = 16

# Longest ISFT text read, excluding the terminator
SOFTWARE_TEXT_MAX = 127

# Item limit value that disables truncation
UNLIMITED = 0xFFFFFFFF
DEFAULT_ITEM_LIMIT = 20
DEFAULT_MAX_DEPTH = 32


class AviError(Exception):
    """Base error for AVI parsing."""

    pass


class AviStructureError(AviError):
    """The file content violates the RIFF/AVI structure."""

    pass


class AviReadError(AviError):
    """The underlying stream could not be read."""

    pass


def decode_fourcc(raw: bytes) -> str:
    """Decode a four-character code, keeping exactly one char per byte."""
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError:
        return raw.decode("latin-1", errors="replace")


class ByteSource:
    """Seekable binary stream read by absolute offset.

    Args:
        stream: Opened binary stream supporting seek/read
        size: Total length in bytes (measured from the stream if omitted)
    """

    def __init__(self, stream: BinaryIO, size: int | None = None):
        self._stream = stream
        self._size = size

    @classmethod
    def from_bytes(cls, data: bytes) -> ByteSource:
        """Wrap an in-memory buffer."""
        return cls(io.BytesIO(data), len(data))

    @property
    def size(self) -> int:
        """Total length of the stream in bytes."""
        if self._size is None:
            try:
                self._size = self._stream.seek(0, os.SEEK_END)
            except OSError as e:
                raise AviReadError(f"cannot determine stream length: {e}") from e
        return self._size

    def read_at(self, offset: int, count: int) -> bytes:
        """Read exactly ``count`` bytes starting at ``offset``.

        Raises:
            AviReadError: On seek/read failure or if fewer bytes are available
        """
        try:
            self._stream.seek(offset)
            data = self._stream.read(count)
        except OSError as e:
            raise AviReadError(f"read of {count} bytes at 0x{offset:08X} failed: {e}") from e
        if len(data) != count:
            raise AviReadError(
                f"short read at 0x{offset:08X}: wanted {count} bytes, got {len(data)}"
            )
        return data
