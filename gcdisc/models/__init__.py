"""Data models for the GameCube disc inspector."""

from .config import BANNER_NAME, DVD_IMAGE_SIZE, ReaderConfig
from .disc import (
    Banner,
    DirectoryEntry,
    DiscHeader,
    EntryKind,
    FileEntry,
    FilesystemEntry,
    FilesystemTree,
    Region,
    RootDirectory,
)

__all__ = [
    "BANNER_NAME",
    "Banner",
    "DVD_IMAGE_SIZE",
    "DirectoryEntry",
    "DiscHeader",
    "EntryKind",
    "FileEntry",
    "FilesystemEntry",
    "FilesystemTree",
    "ReaderConfig",
    "Region",
    "RootDirectory",
]
