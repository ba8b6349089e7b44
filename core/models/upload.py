# =============================================================================
# core/models/upload.py - Photo Upload Schemas
# =============================================================================
# These models describe an incoming photo and the limits it is checked against:
# - UploadConfig: Size ceiling and allowed extensions (read-only after startup)
# - PhotoUpload: The file extracted from the multipart request
#
# UploadConfig is built from settings in app/config.py and handed to
# MemoryWallService, so tests can pass their own limits.
# =============================================================================

from pydantic import BaseModel, Field

DEFAULT_MAX_IMAGE_SIZE = 10 * 1024 * 1024

DEFAULT_IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "heic", "heif")


class UploadConfig(BaseModel):
    """
    Limits applied to memory photos.

    Example:
        UploadConfig(max_size_bytes=5 * 1024 * 1024, allowed_extensions=("png",))
    """

    max_size_bytes: int = Field(
        default=DEFAULT_MAX_IMAGE_SIZE,
        ge=1,
        description="Maximum photo size in bytes"
    )

    allowed_extensions: tuple[str, ...] = Field(
        default=DEFAULT_IMAGE_EXTENSIONS,
        description="Lowercase extensions without the leading dot"
    )

    model_config = {"frozen": True}


class PhotoUpload(BaseModel):
    """
    A photo received from the client.

    Mirrors what the multipart parser hands us: the original filename,
    the byte count, the declared MIME type and the raw content.
    """

    original_filename: str
    size: int = Field(..., ge=0)
    mime_type: str | None = None
    content: bytes = Field(default=b"", repr=False)

    @property
    def extension(self) -> str:
        """Lowercase extension without the dot ("" when the name has none)."""
        name = self.original_filename or ""
        if "." not in name:
            return ""
        return name.rsplit(".", 1)[-1].lower()
