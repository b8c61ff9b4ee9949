"""Configuration data models."""

from dataclasses import dataclass

DVD_IMAGE_SIZE = 1_459_978_240
BANNER_NAME = "opening.bnr"


@dataclass(frozen=True)
class ReaderConfig:
    """Settings for opening and walking disc images."""
    expected_image_size: int = DVD_IMAGE_SIZE
    max_filename_length: int | None = 1024  # None = scan until NUL or EOF
    banner_name: str = BANNER_NAME
    log_level: str = "INFO"
