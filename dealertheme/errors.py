"""Error codes and error handling utilities for DealerTheme."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for theming operations."""

    # Theme lookup errors
    THEME_NOT_FOUND = auto()
    TOKENS_NOT_FOUND = auto()
    TOKENS_INVALID = auto()

    # Store errors
    STORE_UNAVAILABLE = auto()
    STORE_CORRUPT = auto()
    STORE_CONSTRAINT = auto()

    # File errors (import/export)
    FILE_NOT_FOUND = auto()
    FILE_ACCESS_DENIED = auto()
    FILE_INVALID = auto()

    # Configuration errors
    CONFIG_INVALID = auto()

    OPERATION_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.THEME_NOT_FOUND: "The theme was not found. It may have been deleted.",
    ErrorCode.TOKENS_NOT_FOUND: "The theme has no design tokens. Save tokens for it first.",
    ErrorCode.TOKENS_INVALID: "The design tokens are invalid. Fix the listed values and save again.",

    ErrorCode.STORE_UNAVAILABLE: "The theme store could not be reached. Check the store path in settings.",
    ErrorCode.STORE_CORRUPT: "The theme store contains unreadable data.",
    ErrorCode.STORE_CONSTRAINT: "The theme store rejected the change.",

    ErrorCode.FILE_NOT_FOUND: "The file was not found. It may have been moved or deleted.",
    ErrorCode.FILE_ACCESS_DENIED: "Access denied. Check file permissions.",
    ErrorCode.FILE_INVALID: "The file is not a valid JSON or YAML token document.",

    ErrorCode.CONFIG_INVALID: "Configuration is invalid. Reset to defaults?",

    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",
}


@dataclass
class ThemeError(Exception):
    """Base exception for DealerTheme with error code and context."""

    code: ErrorCode
    message: str = ""
    theme_id: str | None = None
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion and self.code in ERROR_MESSAGES:
            self.suggestion = ERROR_MESSAGES[self.code]

    def __str__(self) -> str:
        parts = [self.message]
        if self.theme_id:
            parts.append(f"\nTheme: {self.theme_id}")
        if self.path:
            parts.append(f"\nFile: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or UI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "theme_id": self.theme_id,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def classify_exception(exc: Exception, path: Path | None = None) -> ThemeError:
    """Classify a generic exception into a ThemeError with appropriate code."""
    if isinstance(exc, ThemeError):
        return exc

    exc_name = type(exc).__name__
    exc_str = str(exc).lower()

    if "FileNotFoundError" in exc_name or "no such file" in exc_str:
        return ThemeError(ErrorCode.FILE_NOT_FOUND, path=path, details={"original": exc_str})
    if "PermissionError" in exc_name or "permission denied" in exc_str:
        return ThemeError(ErrorCode.FILE_ACCESS_DENIED, path=path, details={"original": exc_str})
    if "TokenValidationError" in exc_name:
        return ThemeError(
            ErrorCode.TOKENS_INVALID,
            message=str(exc),
            path=path,
            details={"original": exc_str},
        )
    if "JSONDecodeError" in exc_name or "YAMLError" in exc_name or "ScannerError" in exc_name:
        return ThemeError(ErrorCode.FILE_INVALID, path=path, details={"original": exc_str})

    # sqlite3 errors
    if "IntegrityError" in exc_name or "constraint" in exc_str:
        return ThemeError(ErrorCode.STORE_CONSTRAINT, details={"original": exc_str})
    if "DatabaseError" in exc_name and "malformed" in exc_str:
        return ThemeError(ErrorCode.STORE_CORRUPT, details={"original": exc_str})
    if "OperationalError" in exc_name or "unable to open" in exc_str or "locked" in exc_str:
        return ThemeError(ErrorCode.STORE_UNAVAILABLE, details={"original": exc_str})

    return ThemeError(
        ErrorCode.OPERATION_FAILED,
        message=f"{exc_name}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def format_error_for_user(error: ThemeError | Exception) -> str:
    """Format an error for display to the user with actionable suggestions."""
    if isinstance(error, ThemeError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n\n{error.suggestion}")
        if error.theme_id:
            parts.append(f"\n\nTheme: {error.theme_id}")
        if error.path:
            parts.append(f"\n\nFile: {error.path.name}")
        return "".join(parts)

    classified = classify_exception(error)
    return format_error_for_user(classified)
