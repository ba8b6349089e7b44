# =============================================================================
# tests/test_memory_wall_routes.py - Memory Wall HTTP Tests
# =============================================================================
# Drives the FastAPI app through TestClient. Auth and the service are
# replaced with dependency overrides; the service runs on the conftest fakes.
# =============================================================================

from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.auth import AuthUser, get_current_user
from app.dependencies import get_memory_wall_service
from app.main import app
from tests.conftest import COLLEGE_ID, OTHER_COLLEGE_ID, STUDENT_ID

BASE = "/api/v1/memory-wall"

JPEG = ("trip.jpg", b"\xff\xd8\xff" + b"\x00" * 2048, "image/jpeg")


@pytest.fixture
def current_user():
    return AuthUser(id=UUID(STUDENT_ID), email="student@example.edu", college_id=COLLEGE_ID)


@pytest.fixture
def client(service, current_user):
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_memory_wall_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def post_memory(client, title="Field Trip", date="2024-06-15", description=None, photo=JPEG, headers=None):
    data = {"title": title, "date": date}
    if description is not None:
        data["description"] = description
    files = {"photo": photo} if photo else None
    return client.post(BASE, data=data, files=files, headers=headers or {})


# =============================================================================
# POST /memory-wall
# =============================================================================

class TestCreate:
    """Tests for POST /memory-wall."""

    def test_created(self, client):
        response = post_memory(client, title="  Field Trip  ")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Memory created successfully"
        assert body["data"]["title"] == "Field Trip"
        assert body["data"]["date"] == "2024-06-15"
        assert body["data"]["photo_url"]
        assert body["data"]["college_id"] == COLLEGE_ID

    def test_blank_title(self, client, repository):
        response = post_memory(client, title="")

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "Title is required" in body["message"]
        assert repository.rows == {}

    def test_missing_photo(self, client):
        response = post_memory(client, photo=None)

        assert response.status_code == 400
        assert "Photo is required" in response.json()["message"]

    def test_wrong_file_type(self, client, storage):
        response = post_memory(client, photo=("notes.txt", b"hello", "text/plain"))

        assert response.status_code == 400
        assert "Allowed image types" in response.json()["message"]
        assert storage.files == {}

    def test_future_date(self, client):
        response = post_memory(client, date="2024-06-16")

        assert response.status_code == 400
        assert response.json()["message"] == "Memory date cannot be in the future"

    def test_invalid_date(self, client):
        response = post_memory(client, date="June 5th")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid date format"

    def test_storage_failure_is_generic_500(self, client, repository):
        repository.fail_insert = True

        response = post_memory(client)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "insert failed" not in body["message"]


# =============================================================================
# Reads
# =============================================================================

class TestReads:
    """Tests for GET endpoints."""

    def test_list_with_filters(self, client):
        post_memory(client, title="Field Trip", date="2024-03-14")
        post_memory(client, title="Graduation", date="2024-05-30")

        response = client.get(BASE, params={"search": "TRIP", "startDate": "2024-01-01", "endDate": "2024-06-01"})

        assert response.status_code == 200
        titles = [m["title"] for m in response.json()["data"]]
        assert titles == ["Field Trip"]

    def test_list_bad_filter_date(self, client):
        response = client.get(BASE, params={"startDate": "soon"})
        assert response.status_code == 400

    def test_get_by_id(self, client):
        created = post_memory(client).json()["data"]

        response = client.get(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_get_unknown_id(self, client):
        response = client.get(f"{BASE}/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Memory not found",
            "code": "MEMORY_NOT_FOUND",
        }

    def test_stats_route_is_not_an_id(self, client):
        post_memory(client, date="2024-06-01")

        response = client.get(f"{BASE}/stats")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_memories"] == 1
        assert data["memories_this_month"] == 1


# =============================================================================
# PUT / DELETE
# =============================================================================

class TestUpdateDelete:
    """Tests for PUT and DELETE."""

    def test_update(self, client):
        created = post_memory(client, description="old").json()["data"]

        response = client.put(f"{BASE}/{created['id']}", json={"title": "Renamed"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renamed"
        assert data["description"] == "old"

    def test_update_with_no_fields(self, client):
        created = post_memory(client).json()["data"]

        response = client.put(f"{BASE}/{created['id']}", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "No valid fields to update"

    def test_update_wrong_type_is_400(self, client):
        created = post_memory(client).json()["data"]

        response = client.put(f"{BASE}/{created['id']}", json={"title": ["not", "text"]})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_update_unknown(self, client):
        response = client.put(f"{BASE}/00000000-0000-0000-0000-000000000000", json={"title": "x"})
        assert response.status_code == 404

    def test_delete(self, client, storage):
        created = post_memory(client).json()["data"]

        response = client.delete(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]
        assert storage.files == {}
        assert client.get(f"{BASE}/{created['id']}").status_code == 404

    def test_delete_from_other_college_is_404_not_403(self, client, service, current_user):
        created = post_memory(client).json()["data"]

        app.dependency_overrides[get_current_user] = lambda: current_user.model_copy(
            update={"college_id": OTHER_COLLEGE_ID}
        )
        response = client.delete(f"{BASE}/{created['id']}")

        assert response.status_code == 404
        assert response.json()["message"] == "Memory not found"


# =============================================================================
# Tenant header
# =============================================================================

class TestTenantHeader:
    """The X-Tenant-ID header is used when the token has no college."""

    def test_header_used_when_token_has_no_college(self, client, current_user):
        app.dependency_overrides[get_current_user] = lambda: current_user.model_copy(
            update={"college_id": None}
        )

        response = post_memory(client, headers={"X-Tenant-ID": OTHER_COLLEGE_ID})

        assert response.status_code == 201
        assert response.json()["data"]["college_id"] == OTHER_COLLEGE_ID

    def test_no_college_anywhere(self, client, current_user):
        app.dependency_overrides[get_current_user] = lambda: current_user.model_copy(
            update={"college_id": None}
        )

        response = post_memory(client)

        assert response.status_code == 400
        assert "College ID not found" in response.json()["message"]
