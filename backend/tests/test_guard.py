"""Tests for the access guard and token handling."""
from datetime import timedelta

import pytest
from jose import jwt

from course_eval.core import security
from course_eval.core.guard import GuardState, evaluate
from course_eval.core.security import Role, create_access_token, create_refresh_token, decode_token


class TestEvaluate:
    def test_matching_role_authorized(self):
        assert evaluate({"role": "ADMIN"}, "ADMIN") is GuardState.AUTHORIZED

    def test_other_role_rejected(self):
        assert evaluate({"role": "STUDENT"}, "ADMIN") is GuardState.REJECTED

    @pytest.mark.parametrize("claims", [None, {}, {"role": None}, {"role": 1}, "ADMIN", ["ADMIN"]])
    def test_missing_or_malformed_claim_rejected(self, claims):
        assert evaluate(claims, "ADMIN") is GuardState.REJECTED


class TestTokens:
    def test_round_trip_claims(self):
        claims = decode_token(create_access_token("user-9", Role.STUDENT.value))
        assert claims["sub"] == "user-9"
        assert claims["role"] == "STUDENT"

    def test_forged_token_rejected(self):
        token = jwt.encode({"sub": "user-9", "role": "ADMIN"}, "someone-elses-secret", algorithm="HS256")
        assert decode_token(token) is None

    def test_expired_token_rejected(self):
        token = security._encode("user-9", "ADMIN", timedelta(seconds=-30))
        assert decode_token(token) is None

    def test_empty_token(self):
        assert decode_token(None) is None
        assert decode_token("") is None

    def test_refresh_token_is_not_a_bearer_credential(self):
        assert decode_token(create_refresh_token("user-9", Role.ADMIN.value)) is None

    def test_access_token_is_not_a_refresh_token(self):
        assert decode_token(create_access_token("user-9", Role.ADMIN.value), token_type=security.REFRESH) is None

    def test_token_without_type_rejected(self):
        token = jwt.encode({"sub": "user-9", "role": "ADMIN"}, security.settings.JWT_SECRET, algorithm="HS256")
        assert decode_token(token) is None


class TestProtectedRoutes:
    """The guard applied to real routes."""

    def test_admin_route_without_token(self, client):
        response = client.get("/admin/schools")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_admin_route_with_student_token(self, client, student_headers):
        response = client.get("/admin/schools", headers=student_headers)
        assert response.status_code == 401

    def test_admin_route_with_garbage_token(self, client):
        response = client.get("/admin/schools", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_admin_route_with_admin_token(self, client, admin_headers):
        response = client.get("/admin/schools", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"schools": []}

    def test_student_route_requires_token(self, client):
        response = client.post("/users/rating", json={})
        assert response.status_code == 401

    def test_admin_refresh_token_rejected_as_bearer(self, client):
        token = create_refresh_token("admin-1", Role.ADMIN.value)
        response = client.get("/admin/schools", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_student_refresh_token_rejected_on_me(self, client, seeded):
        token = create_refresh_token("user-1", Role.STUDENT.value)
        assert client.get("/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401
