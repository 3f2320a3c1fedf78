import os
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set testing environment before the application is imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from nauricare.main import app
from nauricare import models
from nauricare.api.deps import get_notification_transport
from nauricare.core.database import get_db, get_redis, Base
from nauricare.core.security import create_access_token
from nauricare.services.notification_service import LoggingTransport

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

CLINIC_TZ = timezone(timedelta(hours=2))

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    get_redis().flushall()
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def email_transport():
    transport = LoggingTransport()
    app.dependency_overrides[get_notification_transport] = lambda: transport
    yield transport
    app.dependency_overrides.pop(get_notification_transport, None)

@pytest.fixture
def client(test_db, email_transport):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

def auth_headers(user_id=None, email="amina@example.com", role=None):
    payload = {"sub": user_id or str(uuid.uuid4()), "email": email}
    if role:
        payload["role"] = role
    return {"Authorization": f"Bearer {create_access_token(payload)}"}

@pytest.fixture
def patient_user():
    return {"id": str(uuid.uuid4()), "email": "amina@example.com"}

@pytest.fixture
def patient_headers(patient_user):
    return auth_headers(patient_user["id"], patient_user["email"])

@pytest.fixture
def patient_profile(client, patient_headers):
    response = client.post(
        "/api/v1/profiles/patients",
        json={"full_name": "Amina Uwase", "country": "Rwanda", "diagnosed_pcos": True},
        headers=patient_headers
    )
    assert response.status_code == 201
    return response.json()

@pytest.fixture
def clinician(db_session):
    profile = models.ClinicianProfile(
        user_id=str(uuid.uuid4()),
        full_name="Dr. Grace Mukamana",
        specialty="Gynecology",
        languages=["English", "Kinyarwanda"],
        telehealth_available=True,
        contact_email="grace@clinic.rw"
    )
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile

def next_slot(weekday=0, slot="10:00"):
    """Next clinic-local datetime on ``weekday`` (Monday=0) at ``slot``, at least a day ahead."""
    now = datetime.now(CLINIC_TZ)
    days = (weekday - now.weekday()) % 7 or 7
    day = (now + timedelta(days=days)).date()
    hour, minute = (int(part) for part in slot.split(":"))
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=CLINIC_TZ)
