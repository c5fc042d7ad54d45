"""
Shared exception classes and error handling utilities for MedPanel.

This module provides:
- Custom exception hierarchy for domain-specific errors
- Consistent error response formatting
- Exception handlers for FastAPI integration

Usage:
    from medpanel.core.exceptions import ExtractionError, SessionNotFoundError

    # In service layer - raise domain exceptions
    raise ExtractionError(filename="report.pdf", reason="not a PDF")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class MedPanelError(Exception):
    """
    Base exception for all MedPanel domain errors.

    Provides consistent error structure with status code and detail message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context to include in error response.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = {key: value for key, value in kwargs.items() if value is not None}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result: Dict[str, Any] = {"detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# DOCUMENT EXCEPTIONS
# =============================================================================

class ExtractionError(MedPanelError):
    """Raised when a PDF is malformed, unreadable or rejected by the PDF engine."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Could not extract text from PDF"

    def __init__(
        self,
        filename: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs: Any
    ):
        detail = kwargs.pop("detail", None)
        if detail is None:
            detail = self.__class__.detail
            if filename:
                detail = f"{detail} '{filename}'"
            if reason:
                detail = f"{detail}: {reason}"
        super().__init__(detail=detail, filename=filename, reason=reason, **kwargs)


class ExtractionTimeoutError(ExtractionError):
    """Raised when the PDF engine does not finish within the configured timeout."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    detail = "Timed out extracting text from PDF"


class InvalidVitalError(MedPanelError):
    """Raised in strict mode when an extracted vital is outside physiological limits."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Extracted vital sign is out of range"

    def __init__(
        self,
        vital: Optional[str] = None,
        value: Optional[float] = None,
        **kwargs: Any
    ):
        detail = self.__class__.detail
        if vital is not None:
            detail = f"Extracted {vital} value {value} is out of range"
        super().__init__(detail=detail, vital=vital, value=value, **kwargs)


# =============================================================================
# UPLOAD EXCEPTIONS
# =============================================================================

class UploadError(MedPanelError):
    """Base exception for upload-related errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Upload failed"


class EmptyFileError(UploadError):
    """Raised when an uploaded file has no content."""

    detail = "File is empty"


class FileTooLargeError(UploadError):
    """Raised when uploaded file exceeds size limit."""

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    detail = "File size exceeds maximum allowed"


# =============================================================================
# SESSION EXCEPTIONS
# =============================================================================

class SessionNotFoundError(MedPanelError):
    """Raised when a session id does not exist (or was evicted)."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Session not found"

    def __init__(self, session_id: Optional[str] = None, **kwargs: Any):
        detail = f"Session '{session_id}' not found" if session_id else self.detail
        super().__init__(detail=detail, session_id=session_id, **kwargs)


class IncompleteRecordError(MedPanelError):
    """Raised when the dashboard is requested before the record holds any vitals."""

    status_code = status.HTTP_409_CONFLICT
    detail = "No medical data available yet - upload a PDF record first"


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def medpanel_exception_handler(
    request: Request,
    exc: MedPanelError
) -> JSONResponse:
    """
    Handle MedPanelError exceptions and return consistent JSON responses.
    """
    logger.warning(
        f"MedPanelError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(MedPanelError, medpanel_exception_handler)
