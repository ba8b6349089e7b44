# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every failure is rendered in the same envelope as successful responses:
#   {"success": false, "message": "...", "code": "..."}
#
# Taxonomy:
# - ValidationError (400): client-fixable input problem
# - NotFoundError (404): record absent OR not owned by the caller (same shape)
# - UnexpectedError (500): storage/database failure, detail logged server-side
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class MemoryWallException(Exception):
    """
    Base exception for the Memory Wall API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MEMORY_WALL_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response envelope."""
        result = {
            "success": False,
            "message": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        return result


# =============================================================================
# Validation Exceptions (400)
# =============================================================================

class ValidationError(MemoryWallException):
    """Raised when request input is missing, malformed or out of range."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            suggestion=suggestion,
            details=details,
        )


class PhotoRequiredError(ValidationError):
    """Raised when a memory is created without a photo."""

    def __init__(self):
        super().__init__(
            message="Photo is required. Please choose a photo.",
            code="PHOTO_REQUIRED",
            suggestion="Attach an image in the 'photo' form field",
        )


class InvalidFileTypeError(ValidationError):
    """Raised when the uploaded photo has an extension we don't accept."""

    def __init__(self, filename: str, allowed: list[str] | tuple[str, ...]):
        allowed_list = ", ".join(allowed)
        super().__init__(
            message=f"File type not allowed. Allowed image types: {allowed_list}",
            code="INVALID_FILE_TYPE",
            suggestion=f"Only these file types are supported: {allowed_list}",
            details={"filename": filename, "allowed_types": list(allowed)},
        )


class FileTooLargeError(ValidationError):
    """Raised when the uploaded photo exceeds the size ceiling."""

    def __init__(self, size_bytes: int, max_bytes: int):
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(
            message=f"Photo size exceeds the limit ({max_mb:g}MB)",
            code="FILE_TOO_LARGE",
            suggestion=f"Upload a photo smaller than {max_mb:g}MB",
            details={"size_bytes": size_bytes, "max_bytes": max_bytes},
        )


class TenantNotFoundError(ValidationError):
    """Raised when no college id can be resolved for the student."""

    def __init__(self, user_id: str):
        super().__init__(
            message="College ID not found. Please update your profile.",
            code="COLLEGE_ID_NOT_FOUND",
            suggestion="Set your college in your profile before using the memory wall",
            details={"user_id": user_id},
        )


# =============================================================================
# Not Found (404)
# =============================================================================

class NotFoundError(MemoryWallException):
    """
    Raised when a memory doesn't exist or belongs to another student/college.

    Both causes share one message so callers can't probe for records
    outside their own wall.
    """

    def __init__(self, memory_id: str):
        super().__init__(
            message="Memory not found",
            code="MEMORY_NOT_FOUND",
            status_code=404,
            details={"memory_id": memory_id},
        )


# =============================================================================
# Unexpected Failures (500)
# =============================================================================

class UnexpectedError(MemoryWallException):
    """Raised when storage or the database fails. The message stays generic."""

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details=details,
        )


class StorageUploadError(UnexpectedError):
    """Raised when photo upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to upload photo",
            code="STORAGE_UPLOAD_ERROR",
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def memory_wall_exception_handler(
    request: Request,
    exc: MemoryWallException
) -> JSONResponse:
    """
    Convert MemoryWallException to the JSON envelope.

    Internal details (exc.details) are logged, never returned.
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.details}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle FastAPI request validation errors (bad JSON, wrong types).

    Reported as 400 like every other client-fixable input problem.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"Invalid value for {location}: {message}"

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": message,
            "code": "VALIDATION_ERROR",
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap HTTPException (e.g. 401 from auth) in the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": str(exc.detail),
            "code": "HTTP_ERROR",
        },
        headers=getattr(exc, "headers", None),
    )
