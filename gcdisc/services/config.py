"""Configuration service for managing reader settings."""

import json
from dataclasses import replace
from pathlib import Path

import structlog

from ..models import ReaderConfig
from .errors import ConfigurationError

log = structlog.stdlib.get_logger()

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
NULL_VALUES = ("", "none", "null")


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for loading, validating and saving ``ReaderConfig``."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "gc-disc-inspector" / "config.json"
        log.info("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> ReaderConfig:
        """Load configuration from file or return default configuration."""
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return self._get_default_config()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data: dict[str, str | int | None] = json.load(f)

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self._get_default_config()

            log.info("Configuration loaded successfully")
            return config

        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self._get_default_config()

    def save_config(self, config: ReaderConfig) -> None:
        """Save configuration to file.

        Raises:
            ConfigurationError: If the configuration fails validation
        """
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ConfigurationError(
                f"Invalid configuration: {', '.join(validation_result.errors)}",
                current_value=self._config_to_dict(config),
            )

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            data = self._config_to_dict(config)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            log.info("Configuration saved successfully")

        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def validate_config(self, config: ReaderConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        # bool is an int subclass; reject it explicitly
        size = config.expected_image_size
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            errors.append("expected_image_size must be a positive integer")

        max_len = config.max_filename_length
        if max_len is not None:
            if not isinstance(max_len, int) or isinstance(max_len, bool) or max_len < 1:
                errors.append("max_filename_length must be a positive integer or None")

        if not isinstance(config.banner_name, str) or not config.banner_name:
            errors.append("banner_name cannot be empty")
        elif "\x00" in config.banner_name:
            errors.append("banner_name cannot contain NUL characters")

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        return ValidationResult(len(errors) == 0, errors)

    def apply_setting(self, config: ReaderConfig, setting: str) -> ReaderConfig:
        """Return a copy of ``config`` with one ``KEY=VALUE`` setting applied.

        Values are converted to the field's type but not validated; that
        happens on save.

        Raises:
            ConfigurationError: If the setting is malformed, names an unknown
                key, or its value cannot be converted
        """
        key, sep, value = setting.partition("=")
        key = key.strip()
        value = value.strip()
        if not sep or not key:
            raise ConfigurationError(
                f"Malformed setting: {setting}",
                current_value=setting,
                expected="KEY=VALUE",
            )

        if key == "expected_image_size":
            return replace(config, expected_image_size=self._parse_int(key, value))
        elif key == "max_filename_length":
            limit = None if value.lower() in NULL_VALUES else self._parse_int(key, value)
            return replace(config, max_filename_length=limit)
        elif key == "banner_name":
            return replace(config, banner_name=value)
        elif key == "log_level":
            return replace(config, log_level=value.upper())

        raise ConfigurationError(
            f"Unknown setting: {key}",
            setting=key,
            expected=", ".join(self._config_to_dict(config)),
        )

    @staticmethod
    def _parse_int(key: str, value: str) -> int:
        try:
            return int(value, 0)
        except ValueError:
            raise ConfigurationError(
                f"{key} must be an integer",
                setting=key,
                current_value=value,
                expected="an integer, e.g. 1459978240 or 0x57058000",
            ) from None

    def _get_default_config(self) -> ReaderConfig:
        """Get default configuration."""
        return ReaderConfig()

    def _config_to_dict(self, config: ReaderConfig) -> dict[str, str | int | None]:
        """Convert ReaderConfig to dictionary for JSON serialization."""
        return {
            "expected_image_size": config.expected_image_size,
            "max_filename_length": config.max_filename_length,
            "banner_name": config.banner_name,
            "log_level": config.log_level,
        }

    def _dict_to_config(self, data: dict[str, str | int | None]) -> ReaderConfig:
        """Convert dictionary to ReaderConfig, falling back per missing key."""
        defaults = ReaderConfig()

        size_raw = data.get("expected_image_size", defaults.expected_image_size)
        expected_image_size = int(size_raw) if isinstance(size_raw, int) else defaults.expected_image_size

        # Explicit null disables the filename scan limit
        max_len_raw = data.get("max_filename_length", defaults.max_filename_length)
        max_filename_length = int(max_len_raw) if isinstance(max_len_raw, int) else None

        banner_raw = data.get("banner_name", defaults.banner_name)
        banner_name = str(banner_raw) if isinstance(banner_raw, str) else defaults.banner_name

        level_raw = data.get("log_level", defaults.log_level)
        log_level = str(level_raw).upper() if isinstance(level_raw, str) else defaults.log_level

        return ReaderConfig(
            expected_image_size=expected_image_size,
            max_filename_length=max_filename_length,
            banner_name=banner_name,
            log_level=log_level,
        )
