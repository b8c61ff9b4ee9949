"""Disc header parsing and validation.

Header layout (0x440 bytes, all integers big-endian):
    +0x000  game_code[4]      console id, game id (2), region
    +0x004  maker_code[2]
    +0x006  disk_id           u8
    +0x007  version           u8
    +0x008  audio_streaming   u8 (nonzero = enabled)
    +0x009  stream_buf_sz     u8
    +0x01C  magic_word        u32 (0xC2339F3D)
    +0x020  game_name[0x3E0]  NUL-padded text
    +0x420  dol_ofst          u32
    +0x424  fst_ofst          u32
    +0x428  fst_sz            u32
    +0x42C  max_fst_sz        u32
"""

import struct

import structlog

from ..models import DVD_IMAGE_SIZE, DiscHeader
from .errors import HeaderFault, InvalidHeaderError

log = structlog.stdlib.get_logger()

DVD_HEADER_SIZE = 0x440
DVD_MAGIC_NUMBER = 0xC2339F3D
GAME_NAME_SIZE = 0x3E0
CONSOLE_ID = 0x47  # 'G'

_IDENT = struct.Struct(">4s2sBBBB")
_MAGIC = struct.Struct(">I")
_OFFSETS = struct.Struct(">IIII")


def parse_header(data: bytes) -> DiscHeader:
    """Decode the fixed disc header.

    The game name is decoded as UTF-8 regardless of region, with its NUL
    padding kept.

    Raises:
        InvalidHeaderError: If ``data`` is short or the game name is not UTF-8
    """
    if len(data) < DVD_HEADER_SIZE:
        raise InvalidHeaderError(HeaderFault.TRUNCATED, detail=f"Length: {len(data):#x}")

    game_code, maker_code, disk_id, version, audio, stream_buf_sz = _IDENT.unpack_from(data, 0x000)
    (magic_word,) = _MAGIC.unpack_from(data, 0x01C)
    raw_name = data[0x020:0x020 + GAME_NAME_SIZE]
    dol_ofst, fst_ofst, fst_sz, max_fst_sz = _OFFSETS.unpack_from(data, 0x420)

    try:
        game_name = raw_name.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidHeaderError(HeaderFault.GAME_NAME_ENCODING, detail=str(e)) from e

    header = DiscHeader(
        game_code=game_code,
        maker_code=maker_code,
        disk_id=disk_id,
        version=version,
        audio_streaming=audio != 0,
        stream_buf_sz=stream_buf_sz,
        magic_word=magic_word,
        game_name=game_name,
        dol_ofst=dol_ofst,
        fst_ofst=fst_ofst,
        fst_sz=fst_sz,
        max_fst_sz=max_fst_sz,
    )
    log.debug(
        "Header parsed",
        game_code=game_code.hex(),
        magic_word=f"{magic_word:#010x}",
        fst_ofst=fst_ofst,
        dol_ofst=dol_ofst,
    )
    return header


def validate_header(header: DiscHeader, image_size: int = DVD_IMAGE_SIZE) -> None:
    """Check header invariants, stopping at the first failure.

    Order: magic word, FST offset, DOL offset, console id.

    Raises:
        InvalidHeaderError: Naming the first violated invariant
    """
    if header.magic_word != DVD_MAGIC_NUMBER:
        raise InvalidHeaderError(
            HeaderFault.BAD_MAGIC,
            detail=f"Magic: {header.magic_word:#010x}",
        )
    if header.fst_ofst >= image_size:
        raise InvalidHeaderError(
            HeaderFault.FST_OFFSET_OUT_OF_RANGE,
            detail=f"FST offset: {header.fst_ofst:#x}",
        )
    if header.dol_ofst >= image_size:
        raise InvalidHeaderError(
            HeaderFault.DOL_OFFSET_OUT_OF_RANGE,
            detail=f"DOL offset: {header.dol_ofst:#x}",
        )
    if header.game_code[0] != CONSOLE_ID:
        raise InvalidHeaderError(
            HeaderFault.WRONG_CONSOLE_ID,
            detail=f"Console id: {header.game_code[0]:#04x}",
        )
