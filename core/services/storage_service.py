# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles memory photo upload/delete operations with Supabase Storage.
# Photos live at {college_id}/{student_id}/{random}.{ext} in one bucket.
# =============================================================================

import logging
from uuid import uuid4

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import StorageUploadError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading, addressing and deleting memory photos.
    """

    @staticmethod
    def build_photo_path(college_id: str, student_id: str, extension: str) -> str:
        """Generate a unique storage key for a new photo."""
        suffix = f".{extension}" if extension else ""
        return f"{college_id}/{student_id}/{uuid4().hex}{suffix}"

    @staticmethod
    def upload_photo(
        path: str,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        """
        Upload photo bytes to the memory wall bucket.

        Args:
            path: Storage key (see build_photo_path)
            content: Raw image bytes
            content_type: MIME type reported by the client

        Returns:
            Storage path where the photo was uploaded

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(settings.MEMORY_WALL_BUCKET).upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type or "application/octet-stream",
                    "upsert": "false",
                }
            )

            logger.info(f"Uploaded photo to storage: {path} ({len(content)} bytes)")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def get_public_url(storage_path: str) -> str:
        """
        Get a public URL for a stored photo.

        Args:
            storage_path: Path in storage bucket

        Returns:
            Public URL string
        """
        client = SupabaseClient.get_client()

        try:
            return client.storage.from_(settings.MEMORY_WALL_BUCKET).get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise

    @staticmethod
    def delete_file(storage_path: str) -> bool:
        """
        Delete a photo from storage.

        Args:
            storage_path: Path in storage bucket

        Returns:
            True if deleted successfully, False otherwise (already logged)
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(settings.MEMORY_WALL_BUCKET).remove([storage_path])
            logger.info(f"Deleted photo from storage: {storage_path}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete photo {storage_path}: {e}")
            return False
