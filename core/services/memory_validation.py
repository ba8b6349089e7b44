# =============================================================================
# core/services/memory_validation.py - Memory Field Validation
# =============================================================================
# Pure checks for the fields a student controls: photo, title, date and
# description. Every check raises ValidationError (HTTP 400) before any
# storage or database call is made.
#
# Date checks run in a fixed order: presence -> format -> not in the future.
# =============================================================================

import datetime as dt
from typing import Any

from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    PhotoRequiredError,
    ValidationError,
)
from core.models.memory import MUTABLE_FIELDS, TITLE_MAX_LENGTH
from core.models.upload import PhotoUpload, UploadConfig


def validate_photo(photo: PhotoUpload | None, config: UploadConfig) -> PhotoUpload:
    """
    Check that a photo was sent, has an allowed extension and fits the limit.

    Raises:
        PhotoRequiredError: No photo (or an empty filename) was uploaded
        InvalidFileTypeError: Extension not in config.allowed_extensions
        FileTooLargeError: More than config.max_size_bytes
    """
    if photo is None or not photo.original_filename:
        raise PhotoRequiredError()

    if photo.extension not in config.allowed_extensions:
        raise InvalidFileTypeError(photo.original_filename, config.allowed_extensions)

    if photo.size > config.max_size_bytes:
        raise FileTooLargeError(photo.size, config.max_size_bytes)

    return photo


def validate_title(title: Any, *, required: bool = True) -> str:
    """
    Trim a title and enforce 1..200 characters.

    `required` only changes the wording: creation says the title is
    required, an update says it cannot be empty.
    """
    if title is not None and not isinstance(title, str):
        raise ValidationError("Title must be text")

    trimmed = (title or "").strip()
    if not trimmed:
        raise ValidationError("Title is required" if required else "Title cannot be empty")

    if len(trimmed) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must not exceed {TITLE_MAX_LENGTH} characters")

    return trimmed


def parse_date(value: str) -> dt.date | None:
    """
    Parse an ISO date or datetime string into a calendar date.

    Timezone-aware datetimes are converted to server local time first.
    Returns None when the string isn't a valid date.
    """
    text = value.strip()
    if not text:
        return None

    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        pass

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = dt.datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


def validate_date(value: Any, today: dt.date) -> str:
    """
    Check a memory date and return it as YYYY-MM-DD.

    A date equal to `today` is accepted (the cut-off is end of day).

    Raises:
        ValidationError: missing, unparseable, or after today
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Date is required")

    parsed = parse_date(value) if isinstance(value, str) else None
    if parsed is None:
        raise ValidationError("Invalid date format")

    if parsed > today:
        raise ValidationError("Memory date cannot be in the future")

    return parsed.isoformat()


def normalize_description(value: Any) -> str | None:
    """Trim a description; empty or missing becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Description must be text")
    trimmed = value.strip()
    return trimmed or None


def build_update_fields(fields: dict[str, Any], today: dt.date) -> dict[str, Any]:
    """
    Validate a partial update and return the columns to write.

    Only title, date and description are considered; anything else in
    `fields` is ignored. A key that is present is validated even when its
    value is None, so an explicit null description clears it while a null
    title is rejected.

    Raises:
        ValidationError: a present field is invalid, or nothing to update
    """
    updates: dict[str, Any] = {}

    if "title" in fields:
        updates["title"] = validate_title(fields["title"], required=False)

    if "date" in fields:
        updates["date"] = validate_date(fields["date"], today)

    if "description" in fields:
        updates["description"] = normalize_description(fields["description"])

    if not any(name in updates for name in MUTABLE_FIELDS):
        raise ValidationError("No valid fields to update")

    return updates


def validate_filter_date(value: str | None, name: str) -> str | None:
    """Parse an optional list filter date; blank means no bound."""
    if value is None or not value.strip():
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(f"Invalid date format for {name}")
    return parsed.isoformat()
