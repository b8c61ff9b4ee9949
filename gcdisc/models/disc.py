"""Disc image data models."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import overload


class Region(Enum):
    """Distribution territory encoded in byte 3 of the game code."""
    USA = "USA"
    EUR = "EUR"
    JPN = "JPN"
    FRA = "FRA"


class EntryKind(Enum):
    """Kind of an FST record, as given by its flag byte."""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class DiscHeader:
    """Decoded 0x440-byte disc header."""
    game_code: bytes
    maker_code: bytes
    disk_id: int
    version: int
    audio_streaming: bool
    stream_buf_sz: int
    magic_word: int
    game_name: str  # NUL padding kept as read
    dol_ofst: int
    fst_ofst: int
    fst_sz: int
    max_fst_sz: int

    @property
    def game_id(self) -> str:
        """Six character game ID, e.g. ``GM4E01``."""
        return (self.game_code + self.maker_code).decode("ascii", errors="replace")

    @property
    def region_code(self) -> int:
        return self.game_code[3]


@dataclass(frozen=True)
class FileEntry:
    """Payload of a file record."""
    file_offset: int
    file_length: int


@dataclass(frozen=True)
class DirectoryEntry:
    """Payload of a directory record."""
    parent_offset: int
    next_offset: int


@dataclass(frozen=True)
class FilesystemEntry:
    """One FST record paired with its resolved filename.

    The kind follows from the payload type.
    """
    index: int
    name: str
    data: FileEntry | DirectoryEntry

    @property
    def kind(self) -> EntryKind:
        return EntryKind.FILE if isinstance(self.data, FileEntry) else EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return isinstance(self.data, FileEntry)

    @property
    def is_directory(self) -> bool:
        return isinstance(self.data, DirectoryEntry)


@dataclass(frozen=True)
class RootDirectory:
    """Root FST record: entry count and where the string table starts."""
    num_entries: int
    string_table_ofst: int


class FilesystemTree(Sequence[FilesystemEntry]):
    """Ordered snapshot of FST entries, in on-disk record order.

    The hierarchy is not materialized; directory records keep their
    parent/next indices and callers may rebuild a tree from them.
    """

    def __init__(self, entries: Sequence[FilesystemEntry] = ()) -> None:
        self._entries: tuple[FilesystemEntry, ...] = tuple(entries)

    @overload
    def __getitem__(self, index: int) -> FilesystemEntry: ...

    @overload
    def __getitem__(self, index: slice) -> "FilesystemTree": ...

    def __getitem__(self, index: int | slice) -> "FilesystemEntry | FilesystemTree":
        if isinstance(index, slice):
            return FilesystemTree(self._entries[index])
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FilesystemEntry]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilesystemTree):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"FilesystemTree({len(self._entries)} entries)"

    def files(self) -> list[FilesystemEntry]:
        """Return only file entries, in order."""
        return [e for e in self._entries if e.is_file]

    def directories(self) -> list[FilesystemEntry]:
        """Return only directory entries, in order."""
        return [e for e in self._entries if e.is_directory]


@dataclass(frozen=True)
class Banner:
    """Decoded ``opening.bnr`` resource."""
    magic_word: bytes
    graphical_data: bytes  # 96x32 RGB5A1 pixels, stored as on disc
    game_name: str
    developer: str
    full_game_title: str
    full_developer_name: str
    description: str

    @property
    def version(self) -> int:
        """Banner format version from the magic word (1 or 2)."""
        return self.magic_word[3] - ord("0")
