"""Shared fixtures: in-memory database, session tokens and a seeded clinic."""

import os
import time

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-jwt-secret"
os.environ["AUTH_SERVICE_ROLE_KEY"] = "test-service-role-key"
os.environ["AUTH_URL"] = "http://auth.test"
os.environ["CACHE_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["CLINIC_TIMEZONE"] = "America/Sao_Paulo"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from clinic_agenda.database import Base, get_db  # noqa: E402
from clinic_agenda.main import app  # noqa: E402
from clinic_agenda.models import Doctor, Organization, Patient, Profile, Unit  # noqa: E402
from clinic_agenda.services.identity_service import get_identity_client  # noqa: E402

JWT_SECRET = "test-jwt-secret"


def make_token(sub: str, expires_in: int = 3600, secret: str = JWT_SECRET, aud: str = "authenticated") -> str:
    """Mint an HS256 session token the way the auth service does"""
    claims = {"sub": sub, "aud": aud, "exp": int(time.time()) + expires_in}
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(sub: str) -> dict:
    return {"Authorization": f"Bearer {make_token(sub)}"}


class FakeIdentityClient:
    """Stands in for the auth admin API"""

    def __init__(self, fail_create: str = None):
        self.fail_create = fail_create
        self.created = []
        self.deleted = []

    async def create_user(self, email, password, metadata=None, email_confirm=True):
        from clinic_agenda.services.identity_service import AuthServiceError

        if self.fail_create:
            raise AuthServiceError(self.fail_create, 422)
        user = {"id": f"auth-{len(self.created) + 1}", "email": email, "user_metadata": metadata or {}}
        self.created.append(user)
        return user

    async def delete_user(self, user_id):
        self.deleted.append(user_id)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def identity():
    return FakeIdentityClient()


@pytest.fixture
def client(session_factory, identity):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_client] = lambda: identity
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def clinic(db):
    """One organization with a unit, an admin working in it, a doctor and a patient"""
    org = Organization(name="Clínica Central")
    db.add(org)
    db.flush()

    unit = Unit(
        organization_id=org.id,
        name="Unidade Centro",
        opening_time="08:00",
        closing_time="18:00",
        visit_duration=15,
    )
    db.add(unit)
    db.flush()

    profile = Profile(
        user_id="user-admin",
        organization_id=org.id,
        name="Ana Admin",
        email="ana@clinic.test",
        role="admin",
        current_unit_id=unit.id,
        default_unit_id=unit.id,
    )
    doctor = Doctor(organization_id=org.id, name="Dr. Xavier", license_number="CRM-1001")
    other_doctor = Doctor(organization_id=org.id, name="Dra. Yara", license_number="CRM-1002")
    patient = Patient(organization_id=org.id, name="Paulo Paciente", phone="11 99999-0000")
    db.add_all([profile, doctor, other_doctor, patient])
    db.commit()

    return {
        "organization_id": org.id,
        "unit_id": unit.id,
        "profile_id": profile.id,
        "doctor_id": doctor.id,
        "other_doctor_id": other_doctor.id,
        "patient_id": patient.id,
        "headers": auth_headers("user-admin"),
    }


@pytest.fixture
def other_clinic(db):
    """A second tenant, used to check isolation"""
    org = Organization(name="Outra Clínica")
    db.add(org)
    db.flush()
    unit = Unit(organization_id=org.id, name="Unidade Sul", visit_duration=30)
    db.add(unit)
    db.flush()
    profile = Profile(
        user_id="user-other",
        organization_id=org.id,
        name="Olga Other",
        email="olga@other.test",
        role="admin",
        current_unit_id=unit.id,
    )
    doctor = Doctor(organization_id=org.id, name="Dr. Outro", license_number="CRM-9")
    patient = Patient(organization_id=org.id, name="Pedro Outro")
    db.add_all([profile, doctor, patient])
    db.commit()
    return {
        "organization_id": org.id,
        "unit_id": unit.id,
        "doctor_id": doctor.id,
        "patient_id": patient.id,
        "headers": auth_headers("user-other"),
    }
