# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - memory.py: Memory wall records, update body, filters and stats
# - upload.py: Photo upload payload and upload limits
#
# These models define the "contract" between API and clients.
# =============================================================================

from .memory import (
    MUTABLE_FIELDS,
    TITLE_MAX_LENGTH,
    MemoryFilters,
    MemoryResponse,
    MemoryStats,
    MemoryUpdateRequest,
    serialize_memory,
)
from .upload import (
    DEFAULT_IMAGE_EXTENSIONS,
    DEFAULT_MAX_IMAGE_SIZE,
    PhotoUpload,
    UploadConfig,
)

__all__ = [
    # Memory
    "MUTABLE_FIELDS",
    "TITLE_MAX_LENGTH",
    "MemoryFilters",
    "MemoryResponse",
    "MemoryStats",
    "MemoryUpdateRequest",
    "serialize_memory",
    # Upload
    "DEFAULT_IMAGE_EXTENSIONS",
    "DEFAULT_MAX_IMAGE_SIZE",
    "PhotoUpload",
    "UploadConfig",
]
