"""Booking workflow preconditions and side effects."""
from datetime import timedelta
from decimal import Decimal

import pytest

from telecare import schemas
from telecare.errors import NotFound, SlotConflict, SlotUnavailable, ValidationError

from conftest import MONDAY


def test_video_booking_gets_a_meeting_link(services, book):
    appointment = book(type=schemas.ConsultationType.video)

    assert appointment.meeting_link
    assert appointment.meeting_link.startswith(services.settings.meeting_base_url)
    assert services.conferencing.issued[0]["link"] == appointment.meeting_link


def test_phone_booking_never_gets_a_meeting_link(services, book):
    appointment = book(type=schemas.ConsultationType.phone)

    assert appointment.meeting_link is None
    assert services.conferencing.issued == []


def test_booking_copies_fee_and_denormalized_fields(services, book):
    appointment = book(notes="Prefers mornings")

    assert appointment.amount == Decimal("150")
    assert appointment.paid is False
    assert appointment.doctor_name == "Dr. A"
    assert appointment.specialty == "Cardiology"
    assert appointment.patient_name == "Pat One"
    assert appointment.notes == "Prefers mornings"
    assert appointment.duration == services.settings.default_duration_minutes
    assert appointment.status == schemas.AppointmentStatus.pending


def test_slot_outside_offering_is_unavailable(services, book):
    with pytest.raises(SlotUnavailable):
        book(time="11:00")
    with pytest.raises(SlotUnavailable):
        book(date=MONDAY + timedelta(days=1))


def test_slot_check_runs_before_symptom_check(services, book):
    with pytest.raises(SlotUnavailable):
        book(time="11:00", symptoms="")


@pytest.mark.parametrize("symptoms", ["", "   "])
def test_blank_symptoms_are_rejected(services, book, symptoms):
    with pytest.raises(ValidationError):
        book(symptoms=symptoms)

    assert services.ledger.list_all() == []
    assert services.list_open_slots("dr-a", MONDAY) == ["09:00", "10:00"]


def test_taken_slot_is_no_longer_offered(services, book):
    book()

    with pytest.raises(SlotUnavailable):
        book(patient_id="p-2")

    assert len(services.ledger.list_all()) == 1


def test_unknown_doctor_raises_not_found(services, book):
    with pytest.raises(NotFound):
        book(doctor_id="dr-nobody")


def test_unparseable_time_is_unavailable(services, book):
    with pytest.raises(SlotUnavailable):
        book(time="whenever")


def test_failed_meeting_link_leaves_nothing_behind(services, book, monkeypatch):
    def broken(request):
        raise RuntimeError("conferencing backend down")

    monkeypatch.setattr(services.conferencing, "issue_link", broken)

    with pytest.raises(RuntimeError):
        book(type=schemas.ConsultationType.video)

    assert services.ledger.list_all() == []
    assert services.notifications.list_for("p-1") == []
    assert services.list_open_slots("dr-a", MONDAY) == ["09:00", "10:00"]


def test_booking_queues_reminders_for_both_parties(services, book):
    appointment = book()

    for recipient in ("p-1", "dr-a"):
        [reminder] = services.notifications.list_for(recipient)
        assert reminder.type == schemas.NotificationType.reminder
        assert reminder.appointment_id == appointment.id
        assert services.dispatcher.unread_count(recipient) == 1


def test_booking_lock_timeout_is_a_retryable_conflict(services, book):
    services.ledger.lock_timeout = 0.05

    with services.ledger.doctor_lock("dr-a"):
        with pytest.raises(SlotConflict) as excinfo:
            book()

    assert excinfo.value.retryable
    assert services.ledger.list_all() == []


def test_other_doctors_are_not_affected(services, book):
    services.directory.add(
        schemas.Doctor(
            id="dr-b",
            name="Dr. B",
            email="dr.b@example.com",
            specialty="Dermatology",
            consultation_fee=Decimal("120"),
        ),
        schemas.DoctorAvailability(
            doctor_id="dr-b", weekly={schemas.Weekday.monday: ["09:00"]}
        ),
    )
    book()

    other = book(doctor_id="dr-b", patient_id="p-2")

    assert other.amount == Decimal("120")
    assert services.list_open_slots("dr-b", MONDAY) == []
    assert services.list_open_slots("dr-a", MONDAY) == ["10:00"]
