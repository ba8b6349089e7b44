# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for:
# - Profile lookups (college id fallback)
# - Memory wall rows (scoped to student + college)
#
# Every memory query filters on student_id AND college_id, so a row owned by
# someone else looks exactly like a missing row.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   memory = SupabaseClient.fetch_memory(memory_id, student_id, college_id)
# =============================================================================

from __future__ import annotations

import logging
import re
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

MEMORY_TABLE = "memory_wall"
PROFILE_TABLE = "profiles"

# LIKE metacharacters that must match themselves in a search term
_LIKE_SPECIAL = re.compile(r"([\\%_])")


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def _is_no_rows_error(error: Exception) -> bool:
    """PostgREST reports .single() on an empty result as PGRST116."""
    return "PGRST116" in str(error)


def search_pattern(term: str) -> str:
    """
    Build a quoted ilike value that matches `term` as a literal substring.

    %, _ and backslash are LIKE-escaped so they match themselves. The pattern
    is then double-quoted (with " and backslash escaped) so commas and
    parentheses stay inside the or=(...) value. PostgREST rewrites * to %,
    so a literal * can only be matched with the one-character wildcard.

    Example:
        search_pattern("Rock, Paper")  ->  '"%Rock, Paper%"'
    """
    like = _LIKE_SPECIAL.sub(r"\\\1", term).replace("*", "_")
    quoted = like.replace("\\", "\\\\").replace('"', '\\"')
    return f'"%{quoted}%"'


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        memories = SupabaseClient.list_memories(
            student_id="550e8400-...",
            college_id="660e8400-...",
            search="trip",
        )
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations; tenant scoping is
        enforced by the filters in this class.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile_college_id(cls, user_id: str | UUID) -> str | None:
        """
        Read the college_id stored on a user's profile.

        Args:
            user_id: The profile (auth user) UUID

        Returns:
            The college id, or None if the profile is missing or has none

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table(PROFILE_TABLE)
                .select("college_id")
                .eq("id", user_id_str)
                .single()
                .execute()
            )

            if not response.data:
                return None
            college_id = response.data.get("college_id")
            return str(college_id) if college_id else None

        except Exception as e:
            if _is_no_rows_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                suggestion="Check that the profiles table is accessible",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Memory Wall - Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_memory(
        cls,
        memory_id: str | UUID,
        student_id: str | UUID,
        college_id: str | UUID,
    ) -> dict[str, Any] | None:
        """
        Fetch a single memory owned by the given student and college.

        Returns:
            Memory dict, or None if it doesn't exist or isn't theirs

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        memory_id_str = cls._normalize_uuid(memory_id)

        try:
            response = (
                client.table(MEMORY_TABLE)
                .select("*")
                .eq("id", memory_id_str)
                .eq("student_id", cls._normalize_uuid(student_id))
                .eq("college_id", cls._normalize_uuid(college_id))
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            if _is_no_rows_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch memory: {e}",
                code="FETCH_MEMORY_FAILED",
                details={"memory_id": memory_id_str}
            )

    @classmethod
    def list_memories(
        cls,
        student_id: str | UUID,
        college_id: str | UUID,
        search: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List a student's memories, newest first.

        Args:
            student_id: Owner UUID
            college_id: Tenant UUID
            search: Case-insensitive substring on title or description
            start_date: Inclusive lower bound on date (YYYY-MM-DD)
            end_date: Inclusive upper bound on date (YYYY-MM-DD)

        Returns:
            List of memory dicts ordered by date desc, then created_at desc

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        query = (
            client.table(MEMORY_TABLE)
            .select("*")
            .eq("student_id", cls._normalize_uuid(student_id))
            .eq("college_id", cls._normalize_uuid(college_id))
        )

        if search:
            pattern = search_pattern(search)
            query = query.or_(f"title.ilike.{pattern},description.ilike.{pattern}")
        if start_date:
            query = query.gte("date", start_date)
        if end_date:
            query = query.lte("date", end_date)

        query = query.order("date", desc=True).order("created_at", desc=True)

        try:
            response = query.execute()
            memories = response.data or []
            logger.debug(f"Fetched {len(memories)} memories for student {student_id}")
            return memories

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list memories: {e}",
                code="LIST_MEMORIES_FAILED",
                details={"student_id": str(student_id), "college_id": str(college_id)}
            )

    @classmethod
    def fetch_memory_dates(
        cls,
        student_id: str | UUID,
        college_id: str | UUID,
    ) -> list[str]:
        """
        Fetch only the date column of a student's memories (for stats).

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(MEMORY_TABLE)
                .select("date")
                .eq("student_id", cls._normalize_uuid(student_id))
                .eq("college_id", cls._normalize_uuid(college_id))
                .execute()
            )
            return [row["date"] for row in (response.data or []) if row.get("date")]

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch memory dates: {e}",
                code="FETCH_STATS_FAILED",
                details={"student_id": str(student_id), "college_id": str(college_id)}
            )

    # -------------------------------------------------------------------------
    # Memory Wall - Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert_memory(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new memory row.

        Returns:
            Inserted memory dict with generated id and timestamps

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(MEMORY_TABLE)
                .insert(data)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert memory: {e}",
                code="INSERT_MEMORY_FAILED",
                details={"student_id": data.get("student_id"), "college_id": data.get("college_id")}
            )

    @classmethod
    def update_memory(
        cls,
        memory_id: str | UUID,
        student_id: str | UUID,
        college_id: str | UUID,
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a memory owned by the given student and college.

        Returns:
            Updated memory dict, or None if no row matched

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        memory_id_str = cls._normalize_uuid(memory_id)

        try:
            response = (
                client.table(MEMORY_TABLE)
                .update(updates)
                .eq("id", memory_id_str)
                .eq("student_id", cls._normalize_uuid(student_id))
                .eq("college_id", cls._normalize_uuid(college_id))
                .execute()
            )

            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update memory: {e}",
                code="UPDATE_MEMORY_FAILED",
                details={"memory_id": memory_id_str}
            )

    @classmethod
    def delete_memory(
        cls,
        memory_id: str | UUID,
        student_id: str | UUID,
        college_id: str | UUID,
    ) -> dict[str, Any] | None:
        """
        Delete a memory row owned by the given student and college.

        Returns:
            The deleted row, or None if no row matched

        Raises:
            SupabaseClientError: If delete fails
        """
        client = cls.get_client()
        memory_id_str = cls._normalize_uuid(memory_id)

        try:
            response = (
                client.table(MEMORY_TABLE)
                .delete()
                .eq("id", memory_id_str)
                .eq("student_id", cls._normalize_uuid(student_id))
                .eq("college_id", cls._normalize_uuid(college_id))
                .execute()
            )

            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete memory: {e}",
                code="DELETE_MEMORY_FAILED",
                details={"memory_id": memory_id_str}
            )
