"""Tests for session tokens, tenant context, profiles and signup."""

import pytest
from fastapi import HTTPException
from jose import jws, jwt
from sqlalchemy.exc import IntegrityError

from clinic_agenda.auth import verify_session_token
from clinic_agenda.domain.profiles.repository import ProfileRepository
from clinic_agenda.models import Organization, Profile

from .conftest import JWT_SECRET, auth_headers, make_token


class TestSessionToken:
    def test_valid_token_returns_claims(self):
        claims = verify_session_token(make_token("user-1"))
        assert claims["sub"] == "user-1"

    def test_expired_token(self):
        with pytest.raises(HTTPException) as excinfo:
            verify_session_token(make_token("user-1", expires_in=-10))
        assert excinfo.value.status_code == 401
        assert excinfo.value.headers == {"X-Token-Expired": "true"}

    def test_wrong_secret(self):
        with pytest.raises(HTTPException) as excinfo:
            verify_session_token(make_token("user-1", secret="someone-else"))
        assert excinfo.value.status_code == 401

    def test_wrong_audience(self):
        with pytest.raises(HTTPException):
            verify_session_token(make_token("user-1", aud="anon"))

    def test_malformed_token(self):
        with pytest.raises(HTTPException) as excinfo:
            verify_session_token("not-a-jwt")
        assert excinfo.value.status_code == 401

    def test_signed_non_object_payload(self):
        token = jws.sign(b"[1, 2]", JWT_SECRET, algorithm="HS256")
        with pytest.raises(HTTPException) as excinfo:
            verify_session_token(token)
        assert excinfo.value.status_code == 401

    def test_missing_subject(self):
        token = jwt.encode({"aud": "authenticated", "exp": 4102444800}, JWT_SECRET, algorithm="HS256")
        with pytest.raises(HTTPException) as excinfo:
            verify_session_token(token)
        assert excinfo.value.status_code == 401

    def test_non_object_payload_is_401_over_http(self, client, clinic):
        token = jws.sign(b"[1, 2]", JWT_SECRET, algorithm="HS256")
        response = client.get(
            "/agenda", params={"date": "2030-01-07"}, headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401


class TestTenantContext:
    def test_unknown_identity_has_no_profile(self, client, clinic):
        response = client.get("/units", headers=auth_headers("stranger"))
        assert response.status_code == 403

    def test_default_unit_promoted_to_current(self, client, clinic, db):
        profile = db.get(Profile, clinic["profile_id"])
        profile.current_unit_id = None
        db.commit()

        response = client.get("/profiles/me", headers=clinic["headers"])
        assert response.status_code == 200
        assert response.json()["currentUnitId"] == clinic["unit_id"]

        db.expire_all()
        assert db.get(Profile, clinic["profile_id"]).current_unit_id == clinic["unit_id"]

    def test_switch_unit(self, client, clinic):
        headers = clinic["headers"]
        unit = client.post("/units", json={"name": "Unidade Norte"}, headers=headers).json()

        response = client.post("/profiles/me/unit", json={"unitId": unit["id"]}, headers=headers)
        assert response.status_code == 200
        assert response.json()["currentUnitId"] == unit["id"]

    def test_cannot_switch_to_foreign_unit(self, client, clinic, other_clinic):
        response = client.post(
            "/profiles/me/unit", json={"unitId": other_clinic["unit_id"]}, headers=clinic["headers"]
        )
        assert response.status_code == 404


class TestProfiles:
    def test_listed_with_default_unit_name(self, client, clinic):
        profiles = client.get("/profiles", headers=clinic["headers"]).json()
        assert [(p["name"], p["defaultUnitName"]) for p in profiles] == [("Ana Admin", "Unidade Centro")]

    def test_create_update_delete(self, client, clinic):
        headers = clinic["headers"]
        created = client.post(
            "/profiles", json={"name": "Rita Recepção", "email": "Rita@Clinic.test"}, headers=headers
        )
        assert created.status_code == 200
        profile = created.json()
        assert profile["email"] == "rita@clinic.test"
        assert profile["role"] == "front_desk"

        updated = client.patch(f"/profiles/{profile['id']}", json={"role": "supervisor"}, headers=headers)
        assert updated.json()["role"] == "supervisor"

        assert client.delete(f"/profiles/{profile['id']}", headers=headers).status_code == 200
        assert client.get(f"/profiles/{profile['id']}", headers=headers).status_code == 404

    def test_unknown_role_rejected(self, client, clinic):
        response = client.post(
            "/profiles", json={"name": "Rita", "email": "rita@clinic.test", "role": "owner"}, headers=clinic["headers"]
        )
        assert response.status_code == 422

    def test_cannot_delete_self(self, client, clinic):
        response = client.delete(f"/profiles/{clinic['profile_id']}", headers=clinic["headers"])
        assert response.status_code == 400


class TestProfileWithAuth:
    def payload(self, clinic, **extra):
        return {
            "email": "dora@clinic.test",
            "password": "secret123",
            "name": "Dora Doctor",
            "role": "doctor",
            "defaultUnitId": clinic["unit_id"],
            **extra,
        }

    def test_creates_identity_and_profile(self, client, clinic, identity):
        response = client.post("/profiles/with-auth", json=self.payload(clinic), headers=clinic["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == "auth-1"
        assert data["profile"]["userId"] == "auth-1"
        assert data["profile"]["defaultUnitName"] == "Unidade Centro"
        assert identity.created[0]["user_metadata"] == {
            "name": "Dora Doctor",
            "organization_id": clinic["organization_id"],
        }

    def test_links_existing_profile_by_email(self, client, clinic):
        headers = clinic["headers"]
        existing = client.post(
            "/profiles", json={"name": "Dora", "email": "dora@clinic.test"}, headers=headers
        ).json()

        data = client.post("/profiles/with-auth", json=self.payload(clinic), headers=headers).json()
        assert data["profile"]["id"] == existing["id"]
        assert data["profile"]["role"] == "doctor"
        assert len(client.get("/profiles", headers=headers).json()) == 2

    def test_auth_service_error_returned(self, client, clinic, identity):
        identity.fail_create = "User already registered"
        response = client.post("/profiles/with-auth", json=self.payload(clinic), headers=clinic["headers"])
        assert response.status_code == 400
        assert response.json() == {"error": "User already registered"}

    def test_profile_failure_removes_identity(self, client, clinic, identity, monkeypatch):
        def broken_create(db, **profile_data):
            raise IntegrityError("INSERT INTO profiles", {}, Exception("duplicate user"))

        monkeypatch.setattr(ProfileRepository, "create_profile", staticmethod(broken_create))
        response = client.post("/profiles/with-auth", json=self.payload(clinic), headers=clinic["headers"])

        assert response.status_code == 400
        assert "duplicate user" in response.json()["error"]
        assert identity.deleted == ["auth-1"]

    def test_other_organization_forbidden(self, client, clinic, other_clinic):
        response = client.post(
            "/profiles/with-auth",
            json=self.payload(clinic, organizationId=other_clinic["organization_id"], defaultUnitId=None),
            headers=clinic["headers"],
        )
        assert response.status_code == 403


class TestSignup:
    def test_creates_organization_and_admin(self, client, db, identity):
        response = client.post(
            "/auth/signup",
            json={
                "organizationName": "Clínica Nova",
                "cnpj": "12.345.678/0001-90",
                "userName": "Nina Nova",
                "email": "nina@nova.test",
                "password": "secret123",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["organization"]["name"] == "Clínica Nova"

        profile = db.get(Profile, data["profileId"])
        assert profile.role == "admin"
        assert profile.user_id == identity.created[0]["id"]
        assert db.get(Organization, data["organization"]["id"]) is not None

        # the new admin can use the API straight away
        me = client.get("/profiles/me", headers=auth_headers(profile.user_id))
        assert me.status_code == 200
        assert me.json()["currentUnitId"] is None

    def test_identity_rejection_surfaces(self, client, identity):
        identity.fail_create = "Password should be at least 6 characters"
        response = client.post(
            "/auth/signup",
            json={
                "organizationName": "Clínica Nova",
                "userName": "Nina Nova",
                "email": "nina@nova.test",
                "password": "secret123",
            },
        )
        assert response.status_code == 422
        assert response.json()["detail"] == "Password should be at least 6 characters"
