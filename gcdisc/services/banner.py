"""Banner (``opening.bnr``) extraction and validation.

Banner layout (6496 bytes):
    +0x0000  magic_word[4]            "BNR1" or "BNR2"
    +0x0020  graphical_data[0x1800]   96x32 RGB5A1 pixels
    +0x1820  game_name[0x20]
    +0x1840  developer[0x20]
    +0x1860  full_game_title[0x40]
    +0x18A0  full_developer_name[0x40]
    +0x18E0  description[0x80]
"""

import structlog

from ..models import BANNER_NAME, Banner, FileEntry, Region
from .byte_reader import ByteReader
from .errors import BannerFault, InvalidBannerError
from .fst import FstWalker
from .region import decode_text

log = structlog.stdlib.get_logger()

BANNER_SIZE = 6_496
BANNER_PIXEL_SIZE = 0x1800
BANNER_MAGIC_PREFIX = b"BNR"
BANNER_VERSIONS = (ord("1"), ord("2"))

# (field, offset, width)
_TEXT_FIELDS: tuple[tuple[str, int, int], ...] = (
    ("game_name", 0x1820, 0x20),
    ("developer", 0x1840, 0x20),
    ("full_game_title", 0x1860, 0x40),
    ("full_developer_name", 0x18A0, 0x40),
    ("description", 0x18E0, 0x80),
)


def parse_banner(data: bytes, region: Region) -> Banner:
    """Decode a banner's fixed layout; text uses the region's charset."""
    if len(data) != BANNER_SIZE:
        raise InvalidBannerError(BannerFault.WRONG_LENGTH, detail=f"Length: {len(data)}")

    text = {
        field: decode_text(data[offset:offset + width], region)
        for field, offset, width in _TEXT_FIELDS
    }
    return Banner(
        magic_word=data[0x000:0x004],
        graphical_data=data[0x020:0x020 + BANNER_PIXEL_SIZE],
        **text,
    )


def validate_banner(banner: Banner) -> None:
    """Check the banner magic is ``BNR1`` or ``BNR2``.

    Raises:
        InvalidBannerError: If the magic word is anything else
    """
    magic = banner.magic_word
    if magic[:3] != BANNER_MAGIC_PREFIX or len(magic) != 4 or magic[3] not in BANNER_VERSIONS:
        raise InvalidBannerError(BannerFault.BAD_MAGIC, detail=f"Magic: {magic!r}")


class BannerExtractor:
    """Locates the banner file through the FST and decodes it."""

    def __init__(self, reader: ByteReader, walker: FstWalker, banner_name: str = BANNER_NAME) -> None:
        self._reader = reader
        self._walker = walker
        self._banner_name = banner_name

    def extract(self, region: Region) -> Banner:
        """Find, read and decode the banner.

        Raises:
            EntryNotFoundError: If the FST has no file with the banner name
            InvalidBannerError: If the banner file is not exactly 6496 bytes
        """
        entry = self._walker.find_by_name(self._banner_name)
        file_data = entry.data
        if not isinstance(file_data, FileEntry) or file_data.file_length != BANNER_SIZE:
            raise InvalidBannerError(
                BannerFault.WRONG_LENGTH,
                detail=f"Entry: {entry.index}\nData: {file_data}",
            )

        data = self._reader.read_exact_at(file_data.file_offset, BANNER_SIZE)
        banner = parse_banner(data, region)
        log.debug("Banner decoded", magic=banner.magic_word, region=region.value)
        return banner
