"""Shared fixtures: synthetic GameCube disc images.

A real image is ~1.4 GB, so tests use either ``SparseImage`` (an in-memory
handle that only stores the written regions) or a sparse temporary file
created with ``truncate``.
"""

import logging
import os
import struct
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gcdisc.models import DVD_IMAGE_SIZE

DVD_MAGIC = 0xC2339F3D
BANNER_SIZE = 6496
FST_OFFSET = 0x10000
DOL_OFFSET = 0x8000
BANNER_OFFSET = 0x20000

FILE = 0
DIRECTORY = 1

# (field, offset, width)
BANNER_TEXT_LAYOUT = (
    ("game_name", 0x1820, 0x20),
    ("developer", 0x1840, 0x20),
    ("full_game_title", 0x1860, 0x40),
    ("full_developer_name", 0x18A0, 0x40),
    ("description", 0x18E0, 0x80),
)


class SparseImage:
    """Seekable read-only handle over a mostly-zero image of any size."""

    def __init__(self, size: int) -> None:
        self.size = size
        self.segments: dict[int, bytes] = {}
        self.closed = False
        self._pos = 0

    def write_at(self, offset: int, data: bytes) -> None:
        self.segments[offset] = data

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed file")
        if whence == os.SEEK_SET:
            self._pos = offset
        elif whence == os.SEEK_CUR:
            self._pos += offset
        else:
            self._pos = self.size + offset
        return self._pos

    def tell(self) -> int:
        return self._pos

    def read(self, n: int = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed file")
        start = self._pos
        end = self.size if n < 0 else min(self.size, start + n)
        if end <= start:
            return b""
        buf = bytearray(end - start)
        for seg_start, data in self.segments.items():
            seg_end = seg_start + len(data)
            lo, hi = max(start, seg_start), min(end, seg_end)
            if lo < hi:
                buf[lo - start:hi - start] = data[lo - seg_start:hi - seg_start]
        self._pos = end
        return bytes(buf)

    def close(self) -> None:
        self.closed = True


def make_header(
    game_code: bytes = b"GTSE",
    maker_code: bytes = b"01",
    disk_id: int = 0,
    version: int = 1,
    audio_streaming: int = 1,
    stream_buf_sz: int = 0,
    magic: int = DVD_MAGIC,
    game_name: bytes = b"Test Game",
    dol_ofst: int = DOL_OFFSET,
    fst_ofst: int = FST_OFFSET,
    fst_sz: int = 0x100,
    max_fst_sz: int = 0x100,
) -> bytes:
    data = bytearray(0x440)
    data[0x00:0x04] = game_code
    data[0x04:0x06] = maker_code
    data[0x06] = disk_id
    data[0x07] = version
    data[0x08] = audio_streaming
    data[0x09] = stream_buf_sz
    struct.pack_into(">I", data, 0x1C, magic)
    data[0x20:0x20 + len(game_name)] = game_name
    struct.pack_into(">IIII", data, 0x420, dol_ofst, fst_ofst, fst_sz, max_fst_sz)
    return bytes(data)


def make_fst(entries: list[tuple[int, str, int, int]], root_flag: int = DIRECTORY) -> bytes:
    """Build records (root first) plus the string table.

    ``entries`` excludes the root; each is ``(flag, name, field1, field2)``.
    The root's name offset points at an empty string.
    """
    num_entries = len(entries) + 1
    strings = bytearray(b"\x00")
    records = [struct.pack(">B3sII", root_flag, b"\x00\x00\x00", 0, num_entries)]
    for flag, name, first, second in entries:
        name_ofst = len(strings)
        strings += name.encode("utf-8") + b"\x00"
        records.append(struct.pack(">B3sII", flag, name_ofst.to_bytes(3, "big"), first, second))
    return b"".join(records) + bytes(strings)


def make_banner(
    magic: bytes = b"BNR1",
    pixels: bytes | None = None,
    texts: dict[str, bytes] | None = None,
) -> bytes:
    data = bytearray(BANNER_SIZE)
    data[0:4] = magic
    data[0x20:0x20 + 0x1800] = pixels if pixels is not None else bytes(range(256)) * 24
    texts = texts if texts is not None else {
        "game_name": b"Test Game",
        "developer": b"Test Dev",
        "full_game_title": b"Test Game: The Full Title",
        "full_developer_name": b"Test Developer Inc.",
        "description": b"A disc image built for tests.",
    }
    for name, offset, width in BANNER_TEXT_LAYOUT:
        raw = texts.get(name, b"")
        assert len(raw) <= width
        data[offset:offset + len(raw)] = raw
    return bytes(data)


def default_entries() -> list[tuple[int, str, int, int]]:
    return [
        (FILE, "opening.bnr", BANNER_OFFSET, BANNER_SIZE),
        (DIRECTORY, "audio", 0, 4),
        (FILE, "track.adp", 0x30000, 0x20),
        (FILE, "start.dol", DOL_OFFSET, 0x100),
    ]


@dataclass
class DiscImageBuilder:
    """Assembles a synthetic disc image; tweak fields before building."""
    size: int = DVD_IMAGE_SIZE
    header: bytes = field(default_factory=make_header)
    fst_ofst: int = FST_OFFSET
    entries: list[tuple[int, str, int, int]] = field(default_factory=default_entries)
    root_flag: int = DIRECTORY
    banner: bytes = field(default_factory=make_banner)
    banner_ofst: int = BANNER_OFFSET

    def fst(self) -> bytes:
        return make_fst(self.entries, self.root_flag)

    def regions(self) -> list[tuple[int, bytes]]:
        return [
            (0, self.header),
            (self.fst_ofst, self.fst()),
            (self.banner_ofst, self.banner),
        ]

    def build_sparse(self) -> SparseImage:
        image = SparseImage(self.size)
        for offset, data in self.regions():
            image.write_at(offset, data)
        return image

    def write(self, path: Path) -> Path:
        with open(path, "wb") as f:
            for offset, data in self.regions():
                f.seek(offset)
                f.write(data)
            f.truncate(self.size)
        return path


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Drop handlers a test configured so later tests start clean."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture
def builder() -> DiscImageBuilder:
    return DiscImageBuilder()


@pytest.fixture
def image_path(tmp_path: Path, builder: DiscImageBuilder) -> Path:
    return builder.write(tmp_path / "game.iso")
