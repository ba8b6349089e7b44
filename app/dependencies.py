# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# - get_request_tenant: college id hinted by the request (header/subdomain)
# - get_tenant_context: authenticated user + both tenant hints
# - get_memory_wall_service: service wired with settings-based upload limits
# =============================================================================

import logging
from typing import Annotated

from fastapi import Depends, Request

from app.auth import AuthUser, get_current_user
from app.config import settings
from core.services.memory_wall_service import MemoryWallService
from core.services.tenant_resolver import TenantContext, TenantResolver
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Subdomains that never name a college
_RESERVED_SUBDOMAINS = {"www", "api", "app", "localhost"}


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client instance.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


def get_request_tenant(request: Request) -> str | None:
    """
    Read the college id the request itself carries.

    The TENANT_HEADER header wins; when TENANT_FROM_SUBDOMAIN is enabled
    the first label of a 3+ label host is used (e.g. "abc" in
    abc.campus.example.com).
    """
    header_value = request.headers.get(settings.TENANT_HEADER)
    if header_value and header_value.strip():
        return header_value.strip()

    if settings.TENANT_FROM_SUBDOMAIN:
        host = (request.headers.get("host") or "").split(":")[0]
        labels = host.split(".")
        if len(labels) >= 3 and labels[0] and labels[0].lower() not in _RESERVED_SUBDOMAINS:
            return labels[0]

    return None


def get_tenant_context(
    user: AuthUser = Depends(get_current_user),
    request_tenant: str | None = Depends(get_request_tenant),
) -> TenantContext:
    """Bundle the authenticated user with the tenant hints for the resolver chain."""
    return TenantContext(
        user_id=str(user.id),
        session_tenant_id=user.college_id,
        request_tenant_id=request_tenant,
    )


def get_memory_wall_service(
    client: type[SupabaseClient] = Depends(get_supabase_client),
) -> MemoryWallService:
    """Build the memory wall service from settings."""
    return MemoryWallService(
        config=settings.upload_config,
        tenant_resolver=TenantResolver.default(client),
        repository=client,
    )


# Type aliases for dependency injection
TenantContextDep = Annotated[TenantContext, Depends(get_tenant_context)]
MemoryWallServiceDep = Annotated[MemoryWallService, Depends(get_memory_wall_service)]
