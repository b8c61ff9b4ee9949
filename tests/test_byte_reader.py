"""Tests for positioned reads."""

import io
from unittest.mock import MagicMock

import pytest

from gcdisc.services.byte_reader import ByteReader
from gcdisc.services.errors import DiscIOError, ErrorCategory, HeaderFault, InvalidHeaderError


def test_read_exact_at() -> None:
    reader = ByteReader(io.BytesIO(b"0123456789"))
    assert reader.read_exact_at(3, 4) == b"3456"
    assert reader.read_exact_at(0, 2) == b"01"


def test_short_read_raises() -> None:
    reader = ByteReader(io.BytesIO(b"0123"))
    with pytest.raises(DiscIOError) as exc_info:
        reader.read_exact_at(2, 4)
    assert exc_info.value.offset == 2
    assert exc_info.value.length == 4
    assert exc_info.value.category is ErrorCategory.IO


def test_os_error_is_wrapped() -> None:
    handle = MagicMock()
    handle.seek.side_effect = OSError("device gone")
    reader = ByteReader(handle, path="/dev/sr0")
    with pytest.raises(DiscIOError) as exc_info:
        reader.read_exact_at(0, 4)
    assert isinstance(exc_info.value.original_error, OSError)
    assert exc_info.value.path == "/dev/sr0"


def test_closed_handle_raises_io_error() -> None:
    handle = io.BytesIO(b"abcd")
    handle.close()
    with pytest.raises(DiscIOError):
        ByteReader(handle).read_exact_at(0, 1)


def test_size() -> None:
    assert ByteReader(io.BytesIO(b"x" * 123)).size() == 123


class TestReadCString:
    def test_stops_at_nul(self) -> None:
        reader = ByteReader(io.BytesIO(b"xxhello\x00world\x00"))
        assert reader.read_cstring_at(2) == b"hello"
        assert reader.read_cstring_at(8) == b"world"

    def test_stops_at_end_of_source(self) -> None:
        reader = ByteReader(io.BytesIO(b"abc"))
        assert reader.read_cstring_at(0) == b"abc"

    def test_empty_string(self) -> None:
        assert ByteReader(io.BytesIO(b"\x00abc")).read_cstring_at(0) == b""

    def test_string_spanning_chunks(self) -> None:
        name = b"n" * 200
        assert ByteReader(io.BytesIO(name + b"\x00")).read_cstring_at(0) == name

    def test_unbounded_when_limit_is_none(self) -> None:
        name = b"n" * 5000
        assert ByteReader(io.BytesIO(name)).read_cstring_at(0, None) == name

    def test_limit_exceeded(self) -> None:
        reader = ByteReader(io.BytesIO(b"a" * 300))
        with pytest.raises(InvalidHeaderError) as exc_info:
            reader.read_cstring_at(0, max_length=100)
        assert exc_info.value.reason is HeaderFault.FILENAME_TOO_LONG

    def test_limit_is_inclusive(self) -> None:
        reader = ByteReader(io.BytesIO(b"a" * 100 + b"\x00"))
        assert reader.read_cstring_at(0, max_length=100) == b"a" * 100
