# =============================================================================
# app/routers/memory_wall.py - Memory Wall Endpoints
# =============================================================================
# A student's photo wall: upload a photo with a title/date/description,
# list with filters, read, edit metadata, delete, and summary stats.
# All endpoints require authentication and are scoped to the student's
# college; someone else's memory always answers 404.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, File, Form, Path, Query, UploadFile

from app.dependencies import MemoryWallServiceDep, TenantContextDep
from app.responses import Envelope, success_response
from core.models.memory import (
    MemoryFilters,
    MemoryResponse,
    MemoryStats,
    MemoryUpdateRequest,
    serialize_memory,
)
from core.models.upload import PhotoUpload

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_photo(photo: UploadFile | None) -> PhotoUpload | None:
    """Turn the multipart file into a PhotoUpload (None when no file was sent)."""
    if photo is None or not photo.filename:
        return None

    content = await photo.read()
    logger.info(
        f"Photo received: name={photo.filename}, size={len(content)}, "
        f"mimetype={photo.content_type}"
    )
    return PhotoUpload(
        original_filename=photo.filename,
        size=len(content),
        mime_type=photo.content_type,
        content=content,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", status_code=201, response_model=Envelope[MemoryResponse])
async def create_memory(
    context: TenantContextDep,
    service: MemoryWallServiceDep,
    photo: Annotated[UploadFile | None, File(description="Image file")] = None,
    title: Annotated[str | None, Form(description="Title, up to 200 characters")] = None,
    date: Annotated[str | None, Form(description="Date of the memory (YYYY-MM-DD)")] = None,
    description: Annotated[str | None, Form(description="Optional description")] = None,
):
    """
    Create a new memory with a photo.

    Accepts multipart form data with fields photo, title, date and description.
    The photo must be jpg, jpeg, png, gif, webp, heic or heif and within the
    configured size limit. The date cannot be in the future.
    """
    logger.info(f"Create memory request received from user {context.user_id}")

    memory = service.create_memory(
        context,
        photo=await _read_photo(photo),
        title=title,
        date=date,
        description=description,
    )

    return success_response(serialize_memory(memory), "Memory created successfully", 201)


@router.get("", response_model=Envelope[list[MemoryResponse]])
async def list_memories(
    context: TenantContextDep,
    service: MemoryWallServiceDep,
    search: Annotated[str | None, Query(description="Search title and description")] = None,
    start_date: Annotated[str | None, Query(alias="startDate", description="From date (inclusive)")] = None,
    end_date: Annotated[str | None, Query(alias="endDate", description="To date (inclusive)")] = None,
):
    """
    List the student's memories, newest first.

    Optional filters: search (case-insensitive), startDate and endDate.
    """
    filters = MemoryFilters(search=search, start_date=start_date, end_date=end_date)
    memories = service.list_memories(context, filters)

    return success_response(
        [serialize_memory(m) for m in memories],
        "Memories retrieved successfully",
    )


@router.get("/stats", response_model=Envelope[MemoryStats])
async def get_memory_stats(
    context: TenantContextDep,
    service: MemoryWallServiceDep,
):
    """Get memory counts (total, this month, this year) for the student."""
    stats = service.get_stats(context)
    return success_response(stats.model_dump(mode="json"), "Memory statistics retrieved successfully")


@router.get("/{memory_id}", response_model=Envelope[MemoryResponse])
async def get_memory(
    memory_id: Annotated[str, Path(description="Memory UUID")],
    context: TenantContextDep,
    service: MemoryWallServiceDep,
):
    """Get a single memory. Returns 404 if it doesn't exist or isn't yours."""
    memory = service.get_memory(memory_id, context)
    return success_response(serialize_memory(memory), "Memory retrieved successfully")


@router.put("/{memory_id}", response_model=Envelope[MemoryResponse])
async def update_memory(
    memory_id: Annotated[str, Path(description="Memory UUID")],
    request: MemoryUpdateRequest,
    context: TenantContextDep,
    service: MemoryWallServiceDep,
):
    """
    Update a memory's title, date and/or description.

    The photo can't be changed. Send only the fields to change; an explicit
    null or empty description clears it.
    """
    fields: dict[str, Any] = request.model_dump(exclude_unset=True)
    memory = service.update_memory(memory_id, context, fields)
    return success_response(serialize_memory(memory), "Memory updated successfully")


@router.delete("/{memory_id}", response_model=Envelope[MemoryResponse])
async def delete_memory(
    memory_id: Annotated[str, Path(description="Memory UUID")],
    context: TenantContextDep,
    service: MemoryWallServiceDep,
):
    """Delete a memory and its photo. Returns the deleted memory."""
    memory = service.delete_memory(memory_id, context)
    return success_response(serialize_memory(memory), "Memory deleted successfully")
