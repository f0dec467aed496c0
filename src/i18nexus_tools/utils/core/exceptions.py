"""
Basic exception classes for i18nexus-tools.

This module contains the exception hierarchy shared by the codemods. It has
no imports from the rest of the package so it can be used everywhere without
creating import cycles.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    PARSE = "parse"
    RESOLUTION = "resolution"
    LOCALE = "locale"
    CONFIGURATION = "configuration"
    RESOURCE = "resource"
    UNKNOWN = "unknown"


class I18nexusToolsError(Exception):
    """Base exception class for i18nexus-tools specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.context: object | None = context
        self.recoverable: bool = recoverable


class SourceParseError(I18nexusToolsError):
    """A source file could not be parsed. The file is skipped."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        line: int | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PARSE,
            severity=ErrorSeverity.MEDIUM,
            context=file_path,
            recoverable=True,
        )
        self.file_path: Path | None = file_path
        self.line: int | None = line


class ExternalResolutionError(I18nexusToolsError):
    """An imported module could not be located or analyzed."""

    def __init__(self, message: str, file_path: Path | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.RESOLUTION,
            severity=ErrorSeverity.LOW,
            context=file_path,
            recoverable=True,
        )
        self.file_path: Path | None = file_path


class LocaleFileError(I18nexusToolsError):
    """An existing locale file is unreadable or is not a flat JSON object."""

    def __init__(self, message: str, file_path: Path | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.LOCALE,
            severity=ErrorSeverity.MEDIUM,
            context=file_path,
            recoverable=True,
        )
        self.file_path: Path | None = file_path


class ConfigurationError(I18nexusToolsError):
    """Configuration-related errors."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            recoverable=False,
        )


class NoSourceFilesError(I18nexusToolsError):
    """The source pattern matched no files."""

    def __init__(self, pattern: str) -> None:
        super().__init__(
            f"No files found matching pattern: {pattern}",
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            context=pattern,
            recoverable=False,
        )
        self.pattern: str = pattern


class OutputPathError(I18nexusToolsError):
    """An output location could not be created or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.RESOURCE,
            severity=ErrorSeverity.CRITICAL,
            context=path,
            recoverable=False,
        )
        self.path: Path | None = path
