# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .memory_wall_service import MemoryWallService
from .storage_service import StorageService
from .tenant_resolver import TenantContext, TenantResolver

__all__ = [
    "MemoryWallService",
    "StorageService",
    "TenantContext",
    "TenantResolver",
]
