# =============================================================================
# core/services/memory_wall_service.py - Memory Wall Business Logic
# =============================================================================
# Orchestrates the memory wall workflow:
#   validate fields -> resolve college -> store photo -> write metadata row
#
# All validation happens before the first storage/database call, so a
# rejected request never leaves partial state behind. Reads and writes are
# scoped to (student_id, college_id); a memory owned by someone else is
# reported exactly like a missing one.
# =============================================================================

import datetime as dt
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator
from uuid import UUID

from app.exceptions import NotFoundError, UnexpectedError, ValidationError
from core.models.memory import MemoryFilters, MemoryStats
from core.models.upload import PhotoUpload, UploadConfig
from core.services.memory_validation import (
    build_update_fields,
    normalize_description,
    parse_date,
    validate_date,
    validate_filter_date,
    validate_photo,
    validate_title,
)
from core.services.storage_service import StorageService
from core.services.tenant_resolver import TenantContext, TenantResolver
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class MemoryWallService:
    """
    Service for memory wall operations.

    Collaborators are passed in so tests can swap them:
    - config: photo size/extension limits
    - tenant_resolver: ordered college id resolvers
    - repository: database access (SupabaseClient by default)
    - storage: photo storage (StorageService by default)
    - clock: returns "today" for the future-date check
    """

    def __init__(
        self,
        config: UploadConfig,
        tenant_resolver: TenantResolver | None = None,
        repository=SupabaseClient,
        storage=StorageService,
        clock: Callable[[], dt.date] = dt.date.today,
    ):
        self.config = config
        self.repository = repository
        self.storage = storage
        self.tenant_resolver = tenant_resolver or TenantResolver.default(repository)
        self.clock = clock

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_memory(
        self,
        context: TenantContext,
        photo: PhotoUpload | None,
        title: Any,
        date: Any,
        description: Any = None,
    ) -> dict[str, Any]:
        """
        Validate and persist a new memory with its photo.

        Args:
            context: Authenticated user and tenant hints
            photo: Uploaded image (None if the form had no file)
            title: Raw title from the form
            date: Raw date string from the form
            description: Optional raw description

        Returns:
            The inserted memory row

        Raises:
            ValidationError: Any field is invalid or no college id resolves
            UnexpectedError: Storage or database failure
        """
        photo = validate_photo(photo, self.config)
        clean_title = validate_title(title, required=True)
        clean_date = validate_date(date, self.clock())
        clean_description = normalize_description(description)

        college_id = self.tenant_resolver.resolve(context)
        student_id = context.user_id

        logger.info(
            f"Creating memory for student {student_id} (college {college_id}): "
            f"title={clean_title!r}, date={clean_date}, photo_size={photo.size}"
        )

        path = self.storage.build_photo_path(college_id, student_id, photo.extension)
        self.storage.upload_photo(path, photo.content, photo.mime_type)

        try:
            photo_url = self.storage.get_public_url(path)
            memory = self.repository.insert_memory({
                "student_id": student_id,
                "college_id": college_id,
                "title": clean_title,
                "date": clean_date,
                "description": clean_description,
                "photo_url": photo_url,
                "photo_path": path,
                "photo_original_name": photo.original_filename,
                "photo_size": photo.size,
                "photo_mime_type": photo.mime_type,
            })
        except Exception as e:
            logger.error(f"Failed to save memory row, removing uploaded photo {path}: {e}")
            if not self.storage.delete_file(path):
                logger.warning(
                    f"Orphaned photo left in storage: path={path} "
                    f"student={student_id} college={college_id}"
                )
            raise UnexpectedError("Failed to create memory", details={"error": str(e)})

        logger.info(f"Created memory {memory.get('id')} for student {student_id}")
        return memory

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def list_memories(
        self,
        context: TenantContext,
        filters: MemoryFilters | None = None,
    ) -> list[dict[str, Any]]:
        """
        List the student's memories, newest first.

        Raises:
            ValidationError: A filter date is malformed or the range is inverted
        """
        filters = filters or MemoryFilters()
        start_date = validate_filter_date(filters.start_date, "startDate")
        end_date = validate_filter_date(filters.end_date, "endDate")
        if start_date and end_date and start_date > end_date:
            raise ValidationError("startDate must not be after endDate")

        search = filters.search.strip() if filters.search else None

        college_id = self.tenant_resolver.resolve(context)

        with self._repository_errors("Failed to fetch memories"):
            return self.repository.list_memories(
                student_id=context.user_id,
                college_id=college_id,
                search=search or None,
                start_date=start_date,
                end_date=end_date,
            )

    def get_memory(self, memory_id: str, context: TenantContext) -> dict[str, Any]:
        """
        Fetch one memory owned by the student.

        Raises:
            NotFoundError: Absent, malformed id, or owned by someone else
        """
        self._check_memory_id(memory_id)
        college_id = self.tenant_resolver.resolve(context)

        with self._repository_errors("Failed to fetch memory"):
            memory = self.repository.fetch_memory(memory_id, context.user_id, college_id)

        if not memory:
            raise NotFoundError(memory_id)
        return memory

    def get_stats(self, context: TenantContext) -> MemoryStats:
        """Count the student's memories overall, this month and this year."""
        college_id = self.tenant_resolver.resolve(context)

        with self._repository_errors("Failed to fetch memory statistics"):
            raw_dates = self.repository.fetch_memory_dates(context.user_id, college_id)

        dates = [d for d in (parse_date(str(value)) for value in raw_dates) if d is not None]
        today = self.clock()

        return MemoryStats(
            total_memories=len(raw_dates),
            memories_this_month=sum(
                1 for d in dates if d.year == today.year and d.month == today.month
            ),
            memories_this_year=sum(1 for d in dates if d.year == today.year),
            first_memory_date=min(dates) if dates else None,
            latest_memory_date=max(dates) if dates else None,
        )

    # -------------------------------------------------------------------------
    # Update / Delete
    # -------------------------------------------------------------------------

    def update_memory(
        self,
        memory_id: str,
        context: TenantContext,
        fields: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Update title, date and/or description of a memory.

        Args:
            memory_id: Memory UUID
            context: Authenticated user and tenant hints
            fields: Only the keys the client actually sent

        Raises:
            ValidationError: Invalid field or nothing to update
            NotFoundError: Absent or owned by someone else
        """
        updates = build_update_fields(fields, self.clock())
        self._check_memory_id(memory_id)
        college_id = self.tenant_resolver.resolve(context)

        with self._repository_errors("Failed to update memory"):
            memory = self.repository.update_memory(
                memory_id, context.user_id, college_id, updates
            )

        if not memory:
            raise NotFoundError(memory_id)

        logger.info(f"Updated memory {memory_id} fields={sorted(updates)}")
        return memory

    def delete_memory(self, memory_id: str, context: TenantContext) -> dict[str, Any]:
        """
        Delete a memory row, then its photo.

        The row goes first. If removing the photo fails afterwards the
        request still succeeds and the orphaned path is logged for cleanup.

        Returns:
            The deleted memory row

        Raises:
            NotFoundError: Absent or owned by someone else
        """
        self._check_memory_id(memory_id)
        college_id = self.tenant_resolver.resolve(context)

        with self._repository_errors("Failed to delete memory"):
            existing = self.repository.fetch_memory(memory_id, context.user_id, college_id)
            if not existing:
                raise NotFoundError(memory_id)

            deleted = self.repository.delete_memory(memory_id, context.user_id, college_id)
            if not deleted:
                raise NotFoundError(memory_id)

        photo_path = deleted.get("photo_path") or existing.get("photo_path")
        if photo_path and not self.storage.delete_file(photo_path):
            logger.warning(
                f"Orphaned photo left in storage: path={photo_path} "
                f"memory={memory_id} college={college_id}"
            )

        logger.info(f"Deleted memory {memory_id} for student {context.user_id}")
        return deleted

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_memory_id(memory_id: str) -> None:
        """A malformed id can't match any row."""
        try:
            UUID(str(memory_id))
        except ValueError:
            raise NotFoundError(str(memory_id))

    @staticmethod
    @contextmanager
    def _repository_errors(message: str) -> Iterator[None]:
        """Turn SupabaseClientError into a generic UnexpectedError."""
        try:
            yield
        except SupabaseClientError as e:
            logger.error(f"{message}: {e}")
            raise UnexpectedError(message, details={"error": str(e)}) from e
