"""
Pytest configuration: in-memory SQLite shared across the app and the tests.
"""

import os

# Must be set before any diabetes_app import reads config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from diabetes_app.main import app
from diabetes_app.db import Base, get_db
from diabetes_app.models import User
from diabetes_app.schemas import Gender, PatientMeasurements
from diabetes_app.security import hash_password

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user(db_session):
    u = User(
        email="jane@example.com",
        full_name="Jane Doe",
        password_hash=hash_password("s3cret-pass"),
    )
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def auth_headers(client, user):
    resp = client.post("/auth/login", json={"email": "jane@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def make_measurements(**overrides) -> PatientMeasurements:
    base = dict(
        age=25,
        gender=Gender.female,
        pulse_rate=72,
        systolic_bp=110,
        diastolic_bp=70,
        glucose=85,
        height=170,
        weight=65,
    )
    base.update(overrides)
    return PatientMeasurements(**base)


@pytest.fixture
def measurements_factory():
    return make_measurements


HIGH_RISK_FORM = {
    "age": 50,
    "gender": "male",
    "pulseRate": 80,
    "systolicBp": 145,
    "diastolicBp": 95,
    "glucose": 130,
    "height": 170,
    "weight": 90,
    "familyDiabetes": True,
    "hypertensive": True,
    "familyHypertension": False,
    "cardiovascularDisease": False,
    "stroke": False,
}

LOW_RISK_FORM = {
    "age": 25,
    "gender": "female",
    "pulseRate": 70,
    "systolicBp": 110,
    "diastolicBp": 70,
    "glucose": 85,
    "height": 170,
    "weight": 65,
    "familyDiabetes": False,
    "hypertensive": False,
    "familyHypertension": False,
    "cardiovascularDisease": False,
    "stroke": False,
}


@pytest.fixture
def high_risk_form():
    return dict(HIGH_RISK_FORM)


@pytest.fixture
def low_risk_form():
    return dict(LOW_RISK_FORM)
