"""Disc image facade: open, validate and browse a GameCube disc image."""

from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Self

import structlog

from ..models import (
    Banner,
    DiscHeader,
    FilesystemEntry,
    FilesystemTree,
    ReaderConfig,
    Region,
)
from .banner import BannerExtractor, validate_banner
from .byte_reader import ByteReader
from .errors import DiscError, DiscIOError, InvalidFileTypeError
from .fst import FstWalker
from .header import DVD_HEADER_SIZE, parse_header, validate_header
from .region import resolve_region

log = structlog.stdlib.get_logger()


class DiscImage:
    """A validated GameCube disc image backed by one open handle.

    Instances only come from ``open`` or ``from_handle``, which run the full
    header, region and banner checks first; a ``DiscImage`` is never partially
    valid. The image owns its handle and closes it on ``close`` or when
    leaving a ``with`` block.

    Not thread safe: all reads share one file position.
    """

    def __init__(
        self,
        handle: BinaryIO,
        reader: ByteReader,
        header: DiscHeader,
        region: Region,
        banner: Banner,
        config: ReaderConfig,
        path: Path | None = None,
    ) -> None:
        self._handle = handle
        self._reader = reader
        self._header = header
        self._region = region
        self._banner = banner
        self._config = config
        self._path = path
        self._walker = FstWalker(reader, header.fst_ofst, config.max_filename_length)
        self._closed = False

    @classmethod
    def open(cls, path: Path | str, config: ReaderConfig | None = None) -> Self:
        """Open and validate the image at ``path``.

        The file is closed again if any check fails.

        Raises:
            DiscIOError: If the file cannot be opened or read
            DiscError: The first format violation found
        """
        path = Path(path)
        log.info("Opening disc image", path=str(path))
        try:
            handle = open(path, "rb")
        except OSError as e:
            log.error("Failed to open disc image", path=str(path), error=str(e))
            raise DiscIOError("Unable to open image", original_error=e, path=str(path)) from e

        try:
            return cls._load(handle, config or ReaderConfig(), path)
        except BaseException:
            handle.close()
            raise

    @classmethod
    def from_handle(cls, handle: BinaryIO, config: ReaderConfig | None = None) -> Self:
        """Validate an already-open seekable binary handle.

        On success the image takes ownership of ``handle``. On failure the
        handle is left open for the caller.
        """
        return cls._load(handle, config or ReaderConfig(), None)

    @classmethod
    def _load(cls, handle: BinaryIO, config: ReaderConfig, path: Path | None) -> Self:
        reader = ByteReader(handle, str(path) if path else None)
        try:
            size = reader.size()
            if size != config.expected_image_size:
                raise InvalidFileTypeError(size, config.expected_image_size)

            header = parse_header(reader.read_exact_at(0, DVD_HEADER_SIZE))
            validate_header(header, config.expected_image_size)

            region = resolve_region(header.region_code)

            walker = FstWalker(reader, header.fst_ofst, config.max_filename_length)
            root = walker.read_root()

            banner = BannerExtractor(reader, walker, config.banner_name).extract(region)
            validate_banner(banner)
        except DiscError as e:
            log.error(
                "Disc image rejected",
                path=str(path) if path else None,
                category=e.category.value,
                error=e.message,
            )
            raise

        log.info(
            "Disc image opened",
            path=str(path) if path else None,
            game_id=header.game_id,
            region=region.value,
            fst_entries=root.num_entries,
        )
        return cls(handle, reader, header, region, banner, config, path)

    @property
    def header(self) -> DiscHeader:
        return self._header

    @property
    def region(self) -> Region:
        return self._region

    @property
    def banner(self) -> Banner:
        return self._banner

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise DiscIOError("Disc image is closed", path=str(self._path) if self._path else None)

    def list_entries(self) -> FilesystemTree:
        """Return a fresh snapshot of every FST entry, in on-disk order.

        The root directory record is included as entry 0.
        """
        self._ensure_open()
        return self._walker.list_entries()

    def find_file(self, name: str) -> FilesystemEntry:
        """Return the first file entry named exactly ``name``.

        Raises:
            EntryNotFoundError: If no file entry has that name
        """
        self._ensure_open()
        return self._walker.find_by_name(name)

    def close(self) -> None:
        """Release the underlying handle. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._handle.close()
        log.debug("Disc image closed", path=str(self._path) if self._path else None)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<DiscImage {self._header.game_id} {self._region.value} ({state})>"
