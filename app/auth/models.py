# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database. college_id is only present once the
    student's college has been copied into the token claims.
    """
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    college_id: Optional[str] = None

    class Config:
        frozen = True  # Make immutable


class TokenPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    Supabase tokens include standard JWT claims plus custom claims.
    Custom claims may sit at the top level or inside app_metadata /
    user_metadata depending on how the project's auth hook is set up.
    Numeric ids are accepted and read back as strings.
    """
    sub: str  # User ID
    email: Optional[str] = None
    aud: Optional[str | list[str]] = None  # Audience (should be "authenticated")
    exp: Optional[int] = None
    role: Optional[str] = None  # Postgres role, "authenticated" for signed-in users
    college_id: Optional[str | int] = None
    app_metadata: dict[str, Any] = {}
    user_metadata: dict[str, Any] = {}

    def claim(self, name: str) -> Optional[str]:
        """
        Look a custom claim up in app_metadata, then top level, then user_metadata.

        app_metadata is only writable server-side, so it wins; this also lets
        an application role there take precedence over the top-level
        Postgres role.
        """
        top_level = self.model_dump(exclude={"app_metadata", "user_metadata"})
        for source in (self.app_metadata, top_level, self.user_metadata):
            value = source.get(name)
            if value:
                return str(value)
        return None
