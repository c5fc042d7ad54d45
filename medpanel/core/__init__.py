"""
Core module for application configuration, logging, and shared constants.

This module provides:
- Settings: Application configuration via pydantic-settings
- Exceptions: Domain-specific exception classes with HTTP status codes
- Datetime utilities: UTC-first datetime handling

Dependency injection lives in core.dependencies and is not re-exported
here, since it imports the service layer.
"""
from medpanel.core.config import settings, Settings

# Exception classes for consistent error handling
from medpanel.core.exceptions import (
    MedPanelError,
    ExtractionError,
    ExtractionTimeoutError,
    InvalidVitalError,
    UploadError,
    EmptyFileError,
    FileTooLargeError,
    SessionNotFoundError,
    IncompleteRecordError,
    setup_exception_handlers,
)

# UTC datetime utilities
from medpanel.core.datetime_utils import (
    utc_now,
    to_utc,
    format_iso,
    format_for_display,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Exceptions
    "MedPanelError",
    "ExtractionError",
    "ExtractionTimeoutError",
    "InvalidVitalError",
    "UploadError",
    "EmptyFileError",
    "FileTooLargeError",
    "SessionNotFoundError",
    "IncompleteRecordError",
    "setup_exception_handlers",
    # Datetime utilities
    "utc_now",
    "to_utc",
    "format_iso",
    "format_for_display",
]
