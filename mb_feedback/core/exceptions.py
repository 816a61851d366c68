"""
Exception hierarchy for the application and the global FastAPI handler.
Error responses follow a Problem-Details-like shape.
"""

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidInputError(AppError):
    """Malformed filter, query parameters or input value."""
    def __init__(self, message: str = "Invalid input", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, details)


class InvalidPhoneNumberError(InvalidInputError):
    """Phone number does not match any accepted shape."""
    def __init__(self, phone: str):
        super().__init__(f"Invalid phone number format: {phone}", {"phone": phone})


class ObjectNotFoundError(AppError):
    """A required single-row lookup returned nothing."""
    def __init__(self, message: str = "Object not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class BadStatusCodeError(AppError):
    """An external HTTP call returned a non-success status."""
    def __init__(self, service: str, status_code: int, body: str = ""):
        self.upstream_status = status_code
        super().__init__(
            f"{service} responded with status {status_code}",
            status.HTTP_502_BAD_GATEWAY,
            {"service": service, "status_code": status_code, "body": body[:200]},
        )


class StageError(AppError):
    """Base class for errors that abort a pipeline stage."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


class FetchError(StageError):
    """Fetching data from the broker failed."""


class OrdersMissedError(StageError):
    """New orders were fetched but none of them could be stored."""


class PersistenceError(StageError):
    """A batch insert failed."""


class NotificationRecordError(StageError):
    """Recording the outcome of a notification attempt failed."""


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.__class__.__name__,
                    "message": exc.message,
                    "details": exc.details,
                    "path": request.url.path,
                }
            },
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "InternalServerError",
                "message": "An unexpected error occurred. Please try again later.",
                "path": request.url.path,
            }
        },
    )
