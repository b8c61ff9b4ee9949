"""Error handling module for the GameCube disc inspector.

This module provides:
- Custom exception classes for each way a disc image can be rejected
- User-friendly error message generation with suggested actions
- Centralized error handling service used by the CLI and TUI

Every disc-format error derives from ``DiscError`` and is raised at the
first violated invariant; nothing is aggregated or retried.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""
    IO = "io"
    FILE_TYPE = "file_type"
    REGION = "region"
    HEADER = "header"
    BANNER = "banner"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class HeaderFault(Enum):
    """Named reasons a disc header or FST is rejected."""
    TRUNCATED = "header is shorter than 0x440 bytes"
    BAD_MAGIC = "incorrect or missing magic number"
    FST_OFFSET_OUT_OF_RANGE = "malformed filesystem table offset"
    DOL_OFFSET_OUT_OF_RANGE = "malformed bootfile offset"
    WRONG_CONSOLE_ID = "incorrect console id"
    GAME_NAME_ENCODING = "game name is not valid UTF-8"
    BAD_ROOT_FLAG = "root FST entry is not a directory"
    FILENAME_ENCODING = "FST filename is not valid UTF-8"
    FILENAME_TOO_LONG = "FST filename exceeds the scan limit"


class BannerFault(Enum):
    """Named reasons a banner is rejected."""
    WRONG_LENGTH = "malformed banner file"
    BAD_MAGIC = "invalid banner magic word"


@dataclass(frozen=True)
class UserFriendlyError:
    """User-friendly error representation with suggested actions."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str]
    technical_details: str | None = None
    recoverable: bool = True


class AppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.suggested_actions = suggested_actions or []
        self.technical_details = technical_details
        self.recoverable = recoverable

    def to_user_friendly(self) -> UserFriendlyError:
        """Convert to user-friendly error representation."""
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=self.suggested_actions,
            technical_details=self.technical_details,
            recoverable=self.recoverable,
        )


class DiscError(AppError):
    """Base class for everything that can go wrong reading a disc image."""


class DiscIOError(DiscError):
    """A seek, read or open on the image could not complete."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
        offset: int | None = None,
        length: int | None = None,
    ) -> None:
        suggested_actions = self._get_suggested_actions(original_error)

        technical_details = None
        if path:
            technical_details = f"Path: {path}"
        if offset is not None:
            technical_details = (technical_details or "") + f"\nOffset: {offset:#x}"
        if length is not None:
            technical_details = (technical_details or "") + f"\nLength: {length:#x}"
        if original_error:
            technical_details = (technical_details or "") + f"\nError: {type(original_error).__name__}: {original_error}"

        super().__init__(
            message=message,
            category=ErrorCategory.IO,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details.strip() if technical_details else None,
            recoverable=False,
        )
        self.original_error = original_error
        self.path = path
        self.offset = offset
        self.length = length

    @staticmethod
    def _get_suggested_actions(original_error: Exception | None) -> list[str]:
        """Get suggested actions based on the underlying OS error."""
        if isinstance(original_error, PermissionError):
            return [
                "Check file permissions on the image",
                "Try running with appropriate permissions",
            ]
        elif isinstance(original_error, FileNotFoundError):
            return [
                "Verify the image path is correct",
                "Check if the file was moved or deleted",
            ]
        elif isinstance(original_error, IsADirectoryError):
            return ["Pass the path of the image file, not its directory"]

        return [
            "Check that the image file is readable",
            "Verify the image was not truncated during copying",
        ]


class InvalidFileTypeError(DiscError):
    """The source is not the size of a GameCube disc image."""

    def __init__(self, actual_size: int, expected_size: int) -> None:
        super().__init__(
            message="invalid image size",
            category=ErrorCategory.FILE_TYPE,
            severity=ErrorSeverity.ERROR,
            suggested_actions=[
                "Make sure the file is an uncompressed GameCube ISO/GCM",
                "Convert RVZ, GCZ or CISO images back to a full-size ISO first",
            ],
            technical_details=f"Size: {actual_size}\nExpected: {expected_size}",
            recoverable=False,
        )
        self.actual_size = actual_size
        self.expected_size = expected_size


class InvalidRegionError(DiscError):
    """Game code byte 3 does not name a known region."""

    def __init__(self, region_byte: int) -> None:
        super().__init__(
            message="invalid region code",
            category=ErrorCategory.REGION,
            severity=ErrorSeverity.ERROR,
            suggested_actions=["Expected one of E, P, J or F as the fourth game code character"],
            technical_details=f"Region byte: {region_byte:#04x}",
            recoverable=False,
        )
        self.region_byte = region_byte


class InvalidHeaderError(DiscError):
    """The disc header or FST violates the format."""

    def __init__(self, reason: HeaderFault, detail: str | None = None) -> None:
        technical_details = f"Reason: {reason.name}"
        if detail:
            technical_details += f"\n{detail}"

        super().__init__(
            message=reason.value,
            category=ErrorCategory.HEADER,
            severity=ErrorSeverity.ERROR,
            suggested_actions=[
                "The image may be corrupted or not a GameCube disc",
                "Verify the image against a known-good dump",
            ],
            technical_details=technical_details,
            recoverable=False,
        )
        self.reason = reason


class InvalidBannerError(DiscError):
    """The banner is missing its magic or has the wrong size."""

    def __init__(self, reason: BannerFault, detail: str | None = None) -> None:
        technical_details = f"Reason: {reason.name}"
        if detail:
            technical_details += f"\n{detail}"

        super().__init__(
            message=reason.value,
            category=ErrorCategory.BANNER,
            severity=ErrorSeverity.ERROR,
            suggested_actions=["The banner resource is damaged or in an unsupported format"],
            technical_details=technical_details,
            recoverable=False,
        )
        self.reason = reason


class EntryNotFoundError(DiscError):
    """No file entry in the FST has the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"no {name} found",
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.WARNING,
            suggested_actions=[
                "Names are matched exactly, including case",
                "Directories are never returned by name lookup",
            ],
            technical_details=f"Name: {name}",
            recoverable=True,
        )
        self.name = name


class ValidationError(AppError):
    """Exception for validation-related errors."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        constraints: list[str] | None = None,
    ) -> None:
        suggested_actions = ["Review the input requirements"]
        if constraints:
            suggested_actions.extend([f"Ensure: {c}" for c in constraints])

        technical_details = None
        if field:
            technical_details = f"Field: {field}"
        if value is not None:
            value_str = str(value)[:100]  # Truncate long values
            technical_details = (technical_details or "") + f"\nValue: {value_str}"

        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
            recoverable=True,
        )
        self.field = field
        self.value = value
        self.constraints = constraints or []


class ConfigurationError(AppError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        current_value: Any = None,
        expected: str | None = None,
    ) -> None:
        suggested_actions = [
            "Check the configuration settings",
            "Reset to default values if needed",
        ]
        if expected:
            suggested_actions.append(f"Expected: {expected}")

        technical_details = None
        if setting:
            technical_details = f"Setting: {setting}"
        if current_value is not None:
            technical_details = (technical_details or "") + f"\nCurrent: {current_value}"

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
            recoverable=True,
        )
        self.setting = setting
        self.current_value = current_value
        self.expected = expected


class ErrorHandlingService:
    """Centralized error handling service.

    This service provides:
    - Error classification and user-friendly message generation
    - Error logging with technical details
    """

    def __init__(self) -> None:
        """Initialize the error handling service."""
        log.info("Error handling service initialized")

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Handle an error and return a user-friendly representation.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            component: The component where the error occurred
            context: Additional context information

        Returns:
            User-friendly error representation
        """
        app_error = self._convert_to_app_error(error, context)

        self._log_error(app_error, operation, component, context)

        return app_error.to_user_friendly()

    def _convert_to_app_error(self, error: Exception, context: dict[str, Any] | None) -> AppError:
        """Convert a standard exception to an AppError."""
        if isinstance(error, AppError):
            return error

        path = context.get("path") if context else None

        if isinstance(error, PermissionError):
            return DiscIOError(
                message="Permission denied. You don't have access to this image.",
                original_error=error,
                path=path,
            )
        elif isinstance(error, FileNotFoundError):
            return DiscIOError(
                message="The image file was not found.",
                original_error=error,
                path=path,
            )
        elif isinstance(error, OSError):
            return DiscIOError(
                message=f"An I/O error occurred: {error}",
                original_error=error,
                path=path,
            )

        elif isinstance(error, UnicodeDecodeError):
            return ValidationError(
                message=f"Text could not be decoded: {error.reason}",
                field=context.get("field") if context else None,
            )
        elif isinstance(error, ValueError):
            return ValidationError(
                message=str(error),
                field=context.get("field") if context else None,
                value=context.get("value") if context else None,
            )

        return AppError(
            message="An unexpected error occurred.",
            category=ErrorCategory.UNEXPECTED,
            severity=ErrorSeverity.ERROR,
            technical_details=f"{type(error).__name__}: {error}",
            recoverable=False,
        )

    def _log_error(
        self,
        error: AppError,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> None:
        """Log error with full technical details."""
        log_method = log.warning if error.severity == ErrorSeverity.WARNING else log.error

        log_method(
            "Error occurred",
            error_message=error.message,
            category=error.category.value,
            severity=error.severity.value,
            operation=operation,
            component=component,
            technical_details=error.technical_details,
            recoverable=error.recoverable,
            context=context,
        )

    def create_user_message(
        self,
        error: UserFriendlyError,
        include_suggestions: bool = True,
    ) -> str:
        """Create a formatted user message from an error.

        Args:
            error: The user-friendly error
            include_suggestions: Whether to include suggested actions

        Returns:
            Formatted message string
        """
        parts = [error.message]

        if include_suggestions and error.suggested_actions:
            parts.append("\nSuggested actions:")
            for action in error.suggested_actions[:3]:  # Limit to 3 suggestions
                parts.append(f"  • {action}")

        return "\n".join(parts)


# Global error handling service instance
_error_service: ErrorHandlingService | None = None


def get_error_service() -> ErrorHandlingService:
    """Get the global error handling service instance."""
    global _error_service
    if _error_service is None:
        _error_service = ErrorHandlingService()
    return _error_service


def handle_error(
    error: Exception,
    operation: str,
    component: str,
    context: dict[str, Any] | None = None,
) -> UserFriendlyError:
    """Convenience function to handle errors using the global service.

    Args:
        error: The exception that occurred
        operation: The operation being performed
        component: The component where the error occurred
        context: Additional context information

    Returns:
        User-friendly error representation
    """
    return get_error_service().handle_error(error, operation, component, context)
