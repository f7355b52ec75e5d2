import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set testing environment variable
os.environ["TESTING"] = "1"

# Ensure we're using SQLite for tests
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from medconnect.main import app
from medconnect.api.deps import get_diagnosis_service, get_payment_gateway
from medconnect.core.database import get_db, Base
from medconnect.core.exceptions import UpstreamError
from medconnect.core.security import UserRole, create_user_token
from medconnect.models.doctor import Doctor, DoctorAvailability
from medconnect.models.patient import Patient
from medconnect.models.user import User
from medconnect.services.payments import CheckoutSession, PaymentGateway

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

# Cairo, used as the default anchor for searches
CAIRO = (30.05, 31.23)

# 2030-01-07 is a Monday
MONDAY = "2030-01-07"
TUESDAY = "2030-01-08"

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db(test_db):
    session = TestingSessionLocal()
    yield session
    session.close()

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

def auth_headers(user: User) -> dict:
    token = create_user_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def make_patient(db):
    """Create a patient user; returns ``(patient, headers)``."""
    counter = {"n": 0}

    def _make(name="Test Patient", location=CAIRO):
        counter["n"] += 1
        user = User(
            email=f"patient{counter['n']}@example.com",
            role=UserRole.PATIENT,
            is_active=True,
            latitude=location[0] if location else None,
            longitude=location[1] if location else None,
        )
        db.add(user)
        db.flush()
        patient = Patient(user_id=user.id, name=name)
        db.add(patient)
        db.commit()
        db.refresh(patient)
        return patient, auth_headers(user)

    return _make

@pytest.fixture
def make_doctor(db):
    """Create a doctor with published times, e.g. ``{"monday": ["10:00"]}``."""
    counter = {"n": 0}

    def _make(
        name="Dr. Ahmed Hassan",
        speciality="cardiology",
        location=(30.06, 31.25),
        times=None,
        fees=300,
    ):
        counter["n"] += 1
        user = User(
            email=f"doctor{counter['n']}@example.com",
            role=UserRole.DOCTOR,
            is_active=True,
        )
        db.add(user)
        db.flush()
        doctor = Doctor(
            user_id=user.id,
            name=name,
            speciality=speciality,
            latitude=location[0],
            longitude=location[1],
            fees=fees,
            rate=0,
            rating_num=0,
        )
        if times is None:
            times = {"monday": ["10:00", "11:00"]}
        for day, slots in times.items():
            for slot in slots:
                doctor.available_times.append(DoctorAvailability(day=day, time=slot))
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor

    return _make

class FakePaymentGateway(PaymentGateway):
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    async def create_checkout_session(self, doctor, patient, day, time, base_url):
        self.calls.append((doctor.id, patient.id, day, time, base_url))
        if self.fail:
            raise UpstreamError()
        return CheckoutSession(
            id="cs_test_123",
            url="https://checkout.example.com/pay/cs_test_123",
            metadata={
                "doctor_id": str(doctor.id),
                "patient_id": str(patient.id),
                "date": day.isoformat(),
                "time": time,
            },
        )

@pytest.fixture
def payment_gateway():
    gateway = FakePaymentGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield gateway
    app.dependency_overrides.pop(get_payment_gateway, None)

@pytest.fixture
def override_diagnosis():
    """Install a diagnosis service factory for the duration of a test."""
    def _install(service):
        app.dependency_overrides[get_diagnosis_service] = lambda: service

    yield _install
    app.dependency_overrides.pop(get_diagnosis_service, None)
