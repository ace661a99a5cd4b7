"""Shared test fixtures."""
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from telecare import schemas
from telecare.config import Settings
from telecare.services import build_services

# A Wednesday; the Monday used by the booking scenarios is two days earlier.
NOW = datetime(2026, 3, 11, 8, 0, tzinfo=timezone.utc)
MONDAY = date(2026, 3, 16)


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(seed_demo_data=False, lock_timeout_seconds=2.0)


@pytest.fixture
def services(settings, clock):
    """Empty core with Dr. A offering Monday 09:00 and 10:00."""
    core = build_services(settings, clock=clock)
    core.directory.add(
        schemas.Doctor(
            id="dr-a",
            name="Dr. A",
            email="dr.a@example.com",
            specialty="Cardiology",
            consultation_fee=Decimal("150"),
            languages=["English"],
            rating=4.5,
            location="Boston, MA",
        ),
        schemas.DoctorAvailability(
            doctor_id="dr-a",
            weekly={schemas.Weekday.monday: ["09:00", "10:00"]},
        ),
    )
    yield core
    core.shutdown()


@pytest.fixture
def book(services):
    """Book Dr. A for patient p-1 with sensible defaults."""

    def _book(**overrides) -> schemas.Appointment:
        params = {
            "patient_id": "p-1",
            "doctor_id": "dr-a",
            "date": MONDAY,
            "time": "09:00",
            "type": schemas.ConsultationType.video,
            "symptoms": "Chest pain",
            "patient_name": "Pat One",
        }
        params.update(overrides)
        return services.book(**params)

    return _book


@pytest.fixture
def doctor_actor() -> schemas.Actor:
    return schemas.Actor(user_id="dr-a", role=schemas.UserRole.doctor)


@pytest.fixture
def patient_actor() -> schemas.Actor:
    return schemas.Actor(user_id="p-1", role=schemas.UserRole.patient)
