"""Positioned reads over an open disc image handle."""

import os
from typing import BinaryIO

import structlog

from .errors import DiscIOError, HeaderFault, InvalidHeaderError

log = structlog.stdlib.get_logger()

_CSTRING_CHUNK = 64


class ByteReader:
    """Seek-and-read-exact access to a random-access binary source.

    The reader does no caching; every call seeks before reading, so calls
    may be freely interleaved by the single owner of the handle.
    """

    def __init__(self, handle: BinaryIO, path: str | None = None) -> None:
        self._handle = handle
        self._path = path

    def size(self) -> int:
        """Return the total length of the source in bytes."""
        try:
            return self._handle.seek(0, os.SEEK_END)
        except (OSError, ValueError) as e:
            raise DiscIOError("Unable to determine image size", original_error=e, path=self._path) from e

    def read_exact_at(self, offset: int, length: int) -> bytes:
        """Read exactly ``length`` bytes starting at ``offset``.

        Raises:
            DiscIOError: If the seek or read fails or the source ends early
        """
        try:
            self._handle.seek(offset)
            data = self._handle.read(length)
        except (OSError, ValueError) as e:
            log.error("Read failed", path=self._path, offset=offset, length=length, error=str(e))
            raise DiscIOError(
                "Failed to read from image",
                original_error=e,
                path=self._path,
                offset=offset,
                length=length,
            ) from e

        if len(data) != length:
            log.error("Short read", path=self._path, offset=offset, length=length, got=len(data))
            raise DiscIOError(
                f"Unexpected end of image: wanted {length} bytes, got {len(data)}",
                path=self._path,
                offset=offset,
                length=length,
            )
        return data

    def read_cstring_at(self, offset: int, max_length: int | None = None) -> bytes:
        """Read a NUL-terminated byte string starting at ``offset``.

        Reading stops at the first zero byte or at the end of the source. The
        terminator is not included in the result.

        Args:
            offset: Absolute position of the first character
            max_length: Give up after this many bytes without a terminator
                (``None`` scans without limit)

        Raises:
            DiscIOError: If the seek or read fails
            InvalidHeaderError: If ``max_length`` is exceeded
        """
        buf = bytearray()
        try:
            self._handle.seek(offset)
            while True:
                chunk = self._handle.read(_CSTRING_CHUNK)
                if not chunk:
                    break
                nul = chunk.find(b"\x00")
                if nul >= 0:
                    buf += chunk[:nul]
                    break
                buf += chunk
                if max_length is not None and len(buf) > max_length:
                    break
        except (OSError, ValueError) as e:
            raise DiscIOError(
                "Failed to read string from image",
                original_error=e,
                path=self._path,
                offset=offset,
            ) from e

        if max_length is not None and len(buf) > max_length:
            log.warning("String scan limit exceeded", offset=offset, max_length=max_length)
            raise InvalidHeaderError(
                HeaderFault.FILENAME_TOO_LONG,
                detail=f"Offset: {offset:#x}\nLimit: {max_length}",
            )
        return bytes(buf)
