# =============================================================================
# app/responses.py - Response Envelope
# =============================================================================
# Every endpoint answers with the same shape:
#   {"success": true, "message": "...", "data": ...}
# Errors use the same keys with success=false (see app/exceptions.py).
# =============================================================================

from typing import Any, Generic, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform response body, used for OpenAPI docs."""
    success: bool = True
    message: str
    data: T | None = None


def success_response(data: Any, message: str, status_code: int = 200) -> JSONResponse:
    """Wrap data in a success envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": True,
            "message": message,
            "data": jsonable_encoder(data),
        },
    )
