# =============================================================================
# tests/test_auth.py - Authentication Tests
# =============================================================================
# Verifies JWT decoding (HS256 with the test secret) and claim extraction,
# including the college_id claim used for tenant resolution.
# =============================================================================

import asyncio
import time
from uuid import UUID

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from jose import jwt

from app.auth.dependencies import get_current_user, user_from_payload
from app.config import settings
from app.main import app
from tests.conftest import COLLEGE_ID, STUDENT_ID


def make_token(**claims) -> str:
    payload = {
        "sub": STUDENT_ID,
        "aud": "authenticated",
        "exp": int(time.time()) + 3600,
        "email": "student@example.edu",
        **claims,
    }
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


def authenticate(token: str):
    credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)
    return asyncio.run(get_current_user(credentials))


class TestUserFromPayload:
    """Tests for claim extraction."""

    def test_top_level_college_id(self):
        user = user_from_payload({"sub": STUDENT_ID, "college_id": COLLEGE_ID})
        assert user.id == UUID(STUDENT_ID)
        assert user.college_id == COLLEGE_ID

    def test_college_id_in_app_metadata(self):
        user = user_from_payload({
            "sub": STUDENT_ID,
            "app_metadata": {"college_id": COLLEGE_ID, "role": "student"},
        })
        assert user.college_id == COLLEGE_ID

    def test_numeric_college_id(self):
        user = user_from_payload({"sub": STUDENT_ID, "college_id": 42})
        assert user.college_id == "42"

    def test_numeric_college_id_in_app_metadata(self):
        user = user_from_payload({"sub": STUDENT_ID, "app_metadata": {"college_id": 7}})
        assert user.college_id == "7"

    def test_app_metadata_role_wins_over_postgres_role(self):
        user = user_from_payload({
            "sub": STUDENT_ID,
            "role": "authenticated",
            "app_metadata": {"role": "student"},
        })
        assert user.role == "student"

    def test_postgres_role_when_no_app_role(self):
        user = user_from_payload({"sub": STUDENT_ID, "role": "authenticated"})
        assert user.role == "authenticated"

    def test_no_college_id(self):
        assert user_from_payload({"sub": STUDENT_ID}).college_id is None

    def test_missing_sub(self):
        with pytest.raises(HTTPException) as exc_info:
            user_from_payload({"email": "x@example.edu"})
        assert exc_info.value.status_code == 401

    def test_malformed_sub(self):
        with pytest.raises(HTTPException) as exc_info:
            user_from_payload({"sub": "not-a-uuid"})
        assert exc_info.value.status_code == 401


class TestGetCurrentUser:
    """Tests for get_current_user with HS256 tokens."""

    def test_valid_token(self):
        user = authenticate(make_token(college_id=COLLEGE_ID))
        assert str(user.id) == STUDENT_ID
        assert user.email == "student@example.edu"
        assert user.college_id == COLLEGE_ID

    def test_numeric_college_id_claim(self):
        user = authenticate(make_token(college_id=42))
        assert user.college_id == "42"

    def test_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            authenticate(make_token(exp=int(time.time()) - 10))
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": STUDENT_ID, "aud": "authenticated"}, "some-other-secret", algorithm="HS256"
        )
        with pytest.raises(HTTPException) as exc_info:
            authenticate(token)
        assert exc_info.value.status_code == 401


class TestUnauthenticatedRequests:
    """Requests without a valid token get an error envelope."""

    def test_invalid_token_is_401_envelope(self):
        with TestClient(app) as client:
            response = client.get(
                "/api/v1/memory-wall",
                headers={"Authorization": "Bearer garbage"},
            )

        assert response.status_code == 401
        assert response.json()["success"] is False
