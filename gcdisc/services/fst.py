"""File system table (FST) walker.

The FST is a flat array of 12-byte records followed by a string table:
    +0  flags        u8  (0 = file, otherwise directory)
    +1  name_ofst    u24 (offset into the string table)
    +4  file: data offset   | dir: parent record index
    +8  file: data length   | dir: next record index (root: entry count)

Record 0 is the root directory. The string table starts right after the
last record, at ``num_entries * 12`` from the start of the FST.
"""

import struct
from collections.abc import Iterator

import structlog

from ..models import (
    DirectoryEntry,
    FileEntry,
    FilesystemEntry,
    FilesystemTree,
    RootDirectory,
)
from .byte_reader import ByteReader
from .errors import EntryNotFoundError, HeaderFault, InvalidHeaderError

log = structlog.stdlib.get_logger()

FST_ENTRY_SIZE = 0x0C
ROOT_FLAG = 1

_RECORD = struct.Struct(">B3sII")


def _decode_record(index: int, name: str, record: bytes) -> FilesystemEntry:
    flags, _, first, second = _RECORD.unpack(record)
    if flags == 0:
        return FilesystemEntry(
            index=index,
            name=name,
            data=FileEntry(file_offset=first, file_length=second),
        )
    return FilesystemEntry(
        index=index,
        name=name,
        data=DirectoryEntry(parent_offset=first, next_offset=second),
    )


class FstWalker:
    """Reads FST records and resolves their names on demand.

    No state is kept between calls: each lookup or listing re-reads the
    root record and walks the table from the start.
    """

    def __init__(
        self,
        reader: ByteReader,
        fst_ofst: int,
        max_name_length: int | None = None,
    ) -> None:
        self._reader = reader
        self._fst_ofst = fst_ofst
        self._max_name_length = max_name_length

    @property
    def fst_ofst(self) -> int:
        return self._fst_ofst

    def read_root(self) -> RootDirectory:
        """Read and check the root directory record.

        Raises:
            InvalidHeaderError: If the root record is not a directory
        """
        record = self._reader.read_exact_at(self._fst_ofst, FST_ENTRY_SIZE)
        flags, _, _, num_entries = _RECORD.unpack(record)
        if flags != ROOT_FLAG:
            raise InvalidHeaderError(HeaderFault.BAD_ROOT_FLAG, detail=f"Flags: {flags:#04x}")

        root = RootDirectory(
            num_entries=num_entries,
            string_table_ofst=num_entries * FST_ENTRY_SIZE,
        )
        log.debug("Root FST entry read", num_entries=num_entries, string_table_ofst=root.string_table_ofst)
        return root

    def read_entry(self, index: int, root: RootDirectory) -> FilesystemEntry:
        """Read record ``index`` and resolve its filename."""
        record = self._reader.read_exact_at(self._fst_ofst + index * FST_ENTRY_SIZE, FST_ENTRY_SIZE)
        name_ofst = int.from_bytes(record[1:4], "big")
        name_pos = self._fst_ofst + root.string_table_ofst + name_ofst
        raw_name = self._reader.read_cstring_at(name_pos, self._max_name_length)
        try:
            name = raw_name.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidHeaderError(
                HeaderFault.FILENAME_ENCODING,
                detail=f"Entry: {index}\nName offset: {name_ofst:#x}",
            ) from e
        return _decode_record(index, name, record)

    def iter_entries(self, root: RootDirectory | None = None) -> Iterator[FilesystemEntry]:
        """Yield every record in on-disk order, the root record included."""
        if root is None:
            root = self.read_root()
        for index in range(root.num_entries):
            yield self.read_entry(index, root)

    def list_entries(self) -> FilesystemTree:
        """Read a fresh snapshot of the whole table."""
        tree = FilesystemTree(list(self.iter_entries()))
        log.debug("FST listed", entries=len(tree))
        return tree

    def find_by_name(self, name: str, root: RootDirectory | None = None) -> FilesystemEntry:
        """Return the first file entry named exactly ``name``.

        Directories are skipped even when their name matches.

        Raises:
            EntryNotFoundError: If no file entry has that name
        """
        for entry in self.iter_entries(root):
            if entry.is_file and entry.name == name:
                log.debug("FST entry found", name=name, index=entry.index)
                return entry
        raise EntryNotFoundError(name)
