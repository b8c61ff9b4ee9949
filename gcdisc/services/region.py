"""Region resolution and region-dependent text decoding."""

from ..models import Region
from .errors import InvalidRegionError

_REGION_CODES: dict[int, Region] = {
    ord("E"): Region.USA,
    ord("P"): Region.EUR,
    ord("J"): Region.JPN,
    ord("F"): Region.FRA,
}

# Banner text charset per region; JPN uses the Windows/WHATWG flavour of Shift-JIS
REGION_CODECS: dict[Region, str] = {
    Region.USA: "utf-8",
    Region.EUR: "utf-8",
    Region.FRA: "utf-8",
    Region.JPN: "cp932",
}


def resolve_region(code: int) -> Region:
    """Map game code byte 3 to a region.

    Raises:
        InvalidRegionError: Carrying ``code`` if it is not E, P, J or F
    """
    try:
        return _REGION_CODES[code]
    except KeyError:
        raise InvalidRegionError(code) from None


def decode_text(data: bytes, region: Region) -> str:
    """Decode a fixed-width text field using the region's charset.

    Malformed sequences become U+FFFD. Padding is not stripped.
    """
    return data.decode(REGION_CODECS[region], errors="replace")
