"""Notification dispatching and badge bookkeeping."""
from datetime import timedelta

import pytest

from telecare import schemas
from telecare.errors import InvalidTransition, NotFound

Kind = schemas.NotificationType
Status = schemas.AppointmentStatus


def _titles(services, recipient):
    return [item.title for item in services.notifications.list_for(recipient)]


def test_mark_all_as_read_is_idempotent(services, book):
    book()
    book(time="10:00")

    services.dispatcher.mark_all_as_read("p-1")
    assert services.dispatcher.unread_count("p-1") == 0
    services.dispatcher.mark_all_as_read("p-1")
    assert services.dispatcher.unread_count("p-1") == 0
    assert all(item.read for item in services.notifications.list_for("p-1"))


def test_mark_all_only_touches_the_recipient(services, book):
    book()

    services.dispatcher.mark_all_as_read("p-1")

    assert services.dispatcher.unread_count("dr-a") == 1


def test_deleting_twice_raises_not_found(services, book):
    book()
    [reminder] = services.notifications.list_for("p-1")

    services.dispatcher.delete(reminder.id)
    with pytest.raises(NotFound):
        services.dispatcher.delete(reminder.id)

    assert services.dispatcher.unread_count("p-1") == 0


def test_unread_count_follows_reads_and_deletes(services, book, doctor_actor):
    appointment = book()
    services.transition(appointment.id, Status.confirmed, actor=doctor_actor)
    first, second = services.notifications.list_for("p-1")
    assert services.dispatcher.unread_count("p-1") == 2

    services.dispatcher.mark_as_read(first.id)
    services.dispatcher.mark_as_read(first.id)
    assert services.dispatcher.unread_count("p-1") == 1

    services.dispatcher.delete(first.id)
    assert services.dispatcher.unread_count("p-1") == 1

    services.dispatcher.delete(second.id)
    assert services.dispatcher.unread_count("p-1") == 0


def test_reading_or_deleting_never_touches_the_appointment(services, book):
    appointment = book()
    before = services.get_appointment(appointment.id)

    for item in services.notifications.list_for("p-1"):
        services.dispatcher.mark_as_read(item.id)
        services.dispatcher.delete(item.id)

    assert services.get_appointment(appointment.id) == before


def test_confirmation_notifies_patient(services, book, doctor_actor):
    appointment = book()

    services.transition(appointment.id, Status.confirmed, actor=doctor_actor)

    latest = services.notifications.list_for("p-1")[0]
    assert latest.type == Kind.appointment
    assert latest.title == "Appointment Confirmed"
    assert _titles(services, "dr-a") == ["New Appointment Request"]


def test_cancellation_notifies_both_parties(services, book, patient_actor):
    appointment = book()

    services.cancel(appointment.id, actor=patient_actor)

    for recipient in ("p-1", "dr-a"):
        latest = services.notifications.list_for(recipient)[0]
        assert latest.title == "Appointment Cancelled"
        assert latest.priority == schemas.NotificationPriority.high


def test_notifications_are_listed_newest_first(services, book, clock):
    book()
    clock.now = clock.now + timedelta(minutes=5)
    book(time="10:00")

    timestamps = [item.timestamp for item in services.notifications.list_for("p-1")]

    assert timestamps == sorted(timestamps, reverse=True)
    assert timestamps[0] > timestamps[1]


def test_captured_payment_marks_paid_and_notifies(services, book):
    appointment = book()

    paid = services.pay(appointment.id)

    assert paid.paid is True
    latest = services.notifications.list_for("p-1")[0]
    assert latest.type == Kind.payment
    assert latest.title == "Payment Received"


def test_declined_payment_keeps_unpaid(services, book):
    appointment = book()
    services.payments.declined.add(appointment.id)

    result = services.pay(appointment.id)

    assert result.paid is False
    assert services.notifications.list_for("p-1")[0].title == "Payment Failed"


def test_paying_twice_captures_once(services, book):
    appointment = book()

    services.pay(appointment.id)
    services.pay(appointment.id)

    assert len(services.payments.captures) == 1


def test_cancelled_appointments_cannot_be_paid(services, book):
    appointment = book()
    services.cancel(appointment.id)

    with pytest.raises(InvalidTransition):
        services.pay(appointment.id)

    assert services.payments.captures == []


def test_prescription_event_notifies_patient(services):
    doctor = services.directory.get("dr-a")

    services.report_prescription(
        doctor, schemas.PrescriptionNotice(patient_id="p-7", medication="Lisinopril")
    )

    [notice] = services.notifications.list_for("p-7")
    assert notice.type == Kind.prescription
    assert "Lisinopril" in notice.message


def test_direct_system_notification(services):
    created = services.dispatcher.notify(
        schemas.NotificationCreate(
            recipient_id="p-1", title="Maintenance", message="Tonight 2-4 AM"
        )
    )

    assert created.type == Kind.system
    assert created.priority == schemas.NotificationPriority.low
    assert services.dispatcher.unread_count("p-1") == 1


def test_failing_observer_does_not_undo_booking(services, book):
    def explode(event):
        raise RuntimeError("observer bug")

    from telecare.events import AppointmentBooked

    services.bus.subscribe(AppointmentBooked, explode)

    appointment = book()

    assert services.get_appointment(appointment.id).status == Status.pending
