"""Service layer: disc image parsing, validation and application plumbing."""

from .banner import BANNER_SIZE, BannerExtractor, parse_banner, validate_banner
from .byte_reader import ByteReader
from .config import ConfigurationService, ValidationResult
from .disc_image import DiscImage
from .errors import (
    AppError,
    BannerFault,
    ConfigurationError,
    DiscError,
    DiscIOError,
    EntryNotFoundError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    HeaderFault,
    InvalidBannerError,
    InvalidFileTypeError,
    InvalidHeaderError,
    InvalidRegionError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
    handle_error,
)
from .fst import FST_ENTRY_SIZE, FstWalker
from .header import CONSOLE_ID, DVD_HEADER_SIZE, DVD_MAGIC_NUMBER, parse_header, validate_header
from .region import REGION_CODECS, decode_text, resolve_region

__all__ = [
    "AppError",
    "BANNER_SIZE",
    "BannerExtractor",
    "BannerFault",
    "ByteReader",
    "CONSOLE_ID",
    "ConfigurationError",
    "ConfigurationService",
    "DVD_HEADER_SIZE",
    "DVD_MAGIC_NUMBER",
    "DiscError",
    "DiscIOError",
    "DiscImage",
    "EntryNotFoundError",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FST_ENTRY_SIZE",
    "FstWalker",
    "HeaderFault",
    "InvalidBannerError",
    "InvalidFileTypeError",
    "InvalidHeaderError",
    "InvalidRegionError",
    "REGION_CODECS",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "decode_text",
    "get_error_service",
    "handle_error",
    "parse_banner",
    "parse_header",
    "resolve_region",
    "validate_banner",
    "validate_header",
]
