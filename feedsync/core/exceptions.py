"""
Custom exceptions for the application
"""

from typing import Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from feedsync.core.logging import log


# Ingestion errors. These abort the feed being processed and are recorded on
# that feed's status; they never cross the orchestrator boundary.


class IngestionError(Exception):
    """Base class for errors that abort a single feed run"""

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class FetchError(IngestionError):
    """Network failure, timeout or non-2xx response while fetching a feed"""


class ParseError(IngestionError):
    """Feed document is not well-formed markup"""


class WriteError(IngestionError):
    """Catalog store rejected a write"""


class ConfigurationError(IngestionError):
    """Feed configuration cannot be used (unknown profile, missing item path)"""


# API errors


class BaseAPIException(HTTPException):
    """Base exception for API errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, str]] = None, **kwargs):
        super().__init__(status_code=self.status_code, detail=detail or self.detail, headers=headers or self.headers)
        # Store any additional context
        self.context = kwargs


class NotFoundError(BaseAPIException):
    """Resource not found"""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"


class BadRequestError(BaseAPIException):
    """Bad request"""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Bad request"


class ForbiddenError(BaseAPIException):
    """Forbidden access"""

    status_code = status.HTTP_403_FORBIDDEN
    detail = "forbidden"


class DatabaseError(BaseAPIException):
    """Database operation error"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database error"


class ImportFailedError(BaseAPIException):
    """A synchronous import run aborted"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Import failed"


# Exception handlers. Trigger endpoints answer with the {ok, error} envelope.


async def handle_api_exception(request: Request, exc: BaseAPIException) -> JSONResponse:
    """Handle API exceptions with the ok/error envelope"""
    log.warning("Request rejected", path=request.url.path, status=exc.status_code, error=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    # Log the full exception
    log.opt(exception=exc).error("Unexpected error", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"ok": False, "error": str(exc) or exc.__class__.__name__},
    )


async def handle_validation_exception(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request payloads are rejected before any feed is touched"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"ok": False, "error": "; ".join(messages) or "Invalid request"},
    )
