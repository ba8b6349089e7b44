# =============================================================================
# core/models/memory.py - Memory Wall Schemas
# =============================================================================
# These models define the API contract for memory wall operations:
# - MemoryResponse: A persisted memory (photo + metadata) returned to clients
# - MemoryUpdateRequest: Partial update body (title, date, description only)
# - MemoryFilters: Search and date range filters for listing
# - MemoryStats: Aggregate counts for the student's wall
#
# Every memory is owned by one student and one college (tenant).
# =============================================================================

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field

# Columns that may change after a memory is created
MUTABLE_FIELDS = ("title", "date", "description")

TITLE_MAX_LENGTH = 200


class MemoryResponse(BaseModel):
    """
    Schema for returning a memory to clients.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "student_id": "660e8400-...",
            "college_id": "770e8400-...",
            "title": "Field Trip",
            "date": "2024-03-14",
            "description": "Botanical garden visit",
            "photo_url": "https://xxx.supabase.co/storage/v1/object/public/memory-wall/...",
            "photo_path": "770e8400-.../660e8400-.../a1b2c3.jpg"
        }
    """

    id: str = Field(..., description="Unique memory identifier")

    student_id: str = Field(..., description="Owner (authenticated student) id")

    college_id: str = Field(..., description="Tenant (college) id, fixed at creation")

    title: str = Field(
        ...,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Memory title"
    )

    date: dt.date = Field(..., description="Calendar date of the memory")

    description: str | None = Field(default=None, description="Optional description")

    photo_url: str | None = Field(default=None, description="Public URL of the photo")

    photo_path: str | None = Field(default=None, description="Storage key of the photo")

    photo_original_name: str | None = None
    photo_size: int | None = None
    photo_mime_type: str | None = None

    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    model_config = {"from_attributes": True}


class MemoryUpdateRequest(BaseModel):
    """
    Body of PUT /memory-wall/{id}.

    Any subset of the fields may be sent. Fields left out are not touched;
    an explicit null description clears it. Use model_dump(exclude_unset=True)
    to tell the two apart.
    """

    title: str | None = Field(default=None, examples=["Graduation Day"])
    date: str | None = Field(default=None, examples=["2024-05-30"])
    description: str | None = Field(default=None, examples=["With the whole batch"])

    model_config = {"extra": "ignore"}


class MemoryFilters(BaseModel):
    """Optional filters for listing memories."""

    search: str | None = Field(
        default=None,
        description="Case-insensitive substring matched against title and description"
    )
    start_date: str | None = Field(default=None, description="Inclusive lower bound (YYYY-MM-DD)")
    end_date: str | None = Field(default=None, description="Inclusive upper bound (YYYY-MM-DD)")


class MemoryStats(BaseModel):
    """Aggregate counts for a student's memory wall."""

    total_memories: int = 0
    memories_this_month: int = 0
    memories_this_year: int = 0
    first_memory_date: dt.date | None = None
    latest_memory_date: dt.date | None = None


def serialize_memory(row: dict[str, Any]) -> dict[str, Any]:
    """Validate a database row and return a JSON-ready dict."""
    return MemoryResponse.model_validate(row).model_dump(mode="json")
