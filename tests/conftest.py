# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-ins for the Supabase repository and photo storage
# - A MemoryWallService wired to those fakes with a fixed "today"
# =============================================================================

import os
from datetime import date, datetime, timezone
from typing import Any
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-hs256-signing")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from core.models.upload import PhotoUpload, UploadConfig
from core.services.memory_wall_service import MemoryWallService
from core.services.tenant_resolver import TenantContext, TenantResolver
from lib.supabase_client import SupabaseClientError

TODAY = date(2024, 6, 15)

STUDENT_ID = "11111111-1111-1111-1111-111111111111"
OTHER_STUDENT_ID = "22222222-2222-2222-2222-222222222222"
COLLEGE_ID = "c0000000-0000-0000-0000-00000000000a"
OTHER_COLLEGE_ID = "c0000000-0000-0000-0000-00000000000b"


# =============================================================================
# Fakes
# =============================================================================

class FakeRepository:
    """In-memory replacement for SupabaseClient's memory wall methods."""

    def __init__(self):
        self.rows: dict[str, dict[str, Any]] = {}
        self.profiles: dict[str, str | None] = {}
        self.calls: list[str] = []
        self.fail_insert = False
        self.fail_reads = False

    def _owned(self, row, student_id, college_id) -> bool:
        return row["student_id"] == str(student_id) and row["college_id"] == str(college_id)

    def fetch_profile_college_id(self, user_id):
        self.calls.append("fetch_profile_college_id")
        return self.profiles.get(str(user_id))

    def insert_memory(self, data):
        self.calls.append("insert_memory")
        if self.fail_insert:
            raise SupabaseClientError("insert failed", code="INSERT_MEMORY_FAILED")
        now = datetime.now(timezone.utc).isoformat()
        row = {"id": str(uuid4()), "created_at": now, "updated_at": now, **data}
        self.rows[row["id"]] = row
        return dict(row)

    def fetch_memory(self, memory_id, student_id, college_id):
        self.calls.append("fetch_memory")
        if self.fail_reads:
            raise SupabaseClientError("read failed", code="FETCH_MEMORY_FAILED")
        row = self.rows.get(str(memory_id))
        if row and self._owned(row, student_id, college_id):
            return dict(row)
        return None

    def list_memories(self, student_id, college_id, search=None, start_date=None, end_date=None):
        self.calls.append("list_memories")
        if self.fail_reads:
            raise SupabaseClientError("list failed", code="LIST_MEMORIES_FAILED")
        result = []
        for row in self.rows.values():
            if not self._owned(row, student_id, college_id):
                continue
            if search:
                haystack = f"{row['title']} {row.get('description') or ''}".lower()
                if search.lower() not in haystack:
                    continue
            if start_date and row["date"] < start_date:
                continue
            if end_date and row["date"] > end_date:
                continue
            result.append(dict(row))
        return sorted(result, key=lambda r: (r["date"], r["created_at"]), reverse=True)

    def fetch_memory_dates(self, student_id, college_id):
        self.calls.append("fetch_memory_dates")
        return [
            row["date"] for row in self.rows.values()
            if self._owned(row, student_id, college_id)
        ]

    def update_memory(self, memory_id, student_id, college_id, updates):
        self.calls.append("update_memory")
        row = self.rows.get(str(memory_id))
        if not row or not self._owned(row, student_id, college_id):
            return None
        row.update(updates)
        return dict(row)

    def delete_memory(self, memory_id, student_id, college_id):
        self.calls.append("delete_memory")
        row = self.rows.get(str(memory_id))
        if not row or not self._owned(row, student_id, college_id):
            return None
        return self.rows.pop(str(memory_id))


class FakeStorage:
    """In-memory replacement for StorageService."""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.calls: list[str] = []
        self.fail_delete = False

    def build_photo_path(self, college_id, student_id, extension):
        return f"{college_id}/{student_id}/{uuid4().hex}.{extension}"

    def upload_photo(self, path, content, content_type=None):
        self.calls.append("upload_photo")
        self.files[path] = content
        return path

    def get_public_url(self, path):
        return f"https://test-project.supabase.co/storage/v1/object/public/memory-wall/{path}"

    def delete_file(self, path):
        self.calls.append("delete_file")
        if self.fail_delete:
            return False
        self.files.pop(path, None)
        return True


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def upload_config():
    """Default photo limits (10MB, common image types)."""
    return UploadConfig()


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def service(upload_config, repository, storage):
    """MemoryWallService backed by the fakes, with today fixed to TODAY."""
    return MemoryWallService(
        config=upload_config,
        tenant_resolver=TenantResolver.default(repository),
        repository=repository,
        storage=storage,
        clock=lambda: TODAY,
    )


@pytest.fixture
def context():
    """A student whose token already carries their college id."""
    return TenantContext(user_id=STUDENT_ID, session_tenant_id=COLLEGE_ID)


@pytest.fixture
def jpeg_photo():
    """A 2MB JPEG upload."""
    size = 2 * 1024 * 1024
    return PhotoUpload(
        original_filename="field_trip.jpg",
        size=size,
        mime_type="image/jpeg",
        content=b"\xff\xd8\xff" + b"\x00" * (size - 3),
    )


@pytest.fixture
def sample_memory_row():
    """A memory row as Supabase returns it."""
    return {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "student_id": STUDENT_ID,
        "college_id": COLLEGE_ID,
        "title": "Field Trip",
        "date": "2024-03-14",
        "description": "Botanical garden visit",
        "photo_url": "https://test-project.supabase.co/storage/v1/object/public/memory-wall/a.jpg",
        "photo_path": f"{COLLEGE_ID}/{STUDENT_ID}/a.jpg",
        "photo_original_name": "trip.jpg",
        "photo_size": 2048,
        "photo_mime_type": "image/jpeg",
        "created_at": "2024-03-14T10:30:00+00:00",
        "updated_at": "2024-03-14T10:30:00+00:00",
    }
