"""Dashboard projections."""
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from telecare import projections, schemas

Status = schemas.AppointmentStatus
TODAY = date(2026, 3, 11)
STAMP = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make(
    appointment_id,
    *,
    day=TODAY,
    time="10:00 AM",
    status=Status.pending,
    doctor_id="dr-a",
    patient_id="p-1",
    paid=False,
    amount="100",
):
    return schemas.Appointment(
        id=appointment_id,
        patient_id=patient_id,
        doctor_id=doctor_id,
        patient_name="Pat",
        doctor_name="Dr. A",
        specialty="Cardiology",
        date=day,
        time=time,
        type=schemas.ConsultationType.phone,
        status=status,
        symptoms="Cough",
        amount=Decimal(amount),
        paid=paid,
        created_at=STAMP,
        last_updated=STAMP,
    )


RECORDS = [
    make("future-pending", day=TODAY + timedelta(days=2)),
    make("today-confirmed", status=Status.confirmed, time="2:00 PM"),
    make("today-early", status=Status.confirmed, time="9:00 AM", patient_id="p-2"),
    make("yesterday-confirmed", day=TODAY - timedelta(days=1), status=Status.confirmed),
    make("done", day=TODAY - timedelta(days=3), status=Status.completed, paid=True),
    make("dropped", day=TODAY + timedelta(days=1), status=Status.cancelled),
    make("other-doctor", status=Status.confirmed, doctor_id="dr-b", patient_id="p-1"),
]


def ids(records):
    return [record.id for record in records]


def test_upcoming_is_active_and_not_before_today():
    assert ids(projections.upcoming(RECORDS, TODAY)) == [
        "today-early",
        "other-doctor",
        "today-confirmed",
        "future-pending",
    ]


def test_past_excludes_cancelled():
    assert ids(projections.past(RECORDS, TODAY)) == ["done", "yesterday-confirmed"]


def test_cancelled_view():
    assert ids(projections.cancelled(RECORDS)) == ["dropped"]


def test_todays_schedule_is_confirmed_for_one_doctor():
    assert ids(projections.todays_schedule(RECORDS, "dr-a", TODAY)) == [
        "today-early",
        "today-confirmed",
    ]


def test_for_user_scopes_by_role_and_status():
    patient = projections.for_user(RECORDS, "p-1", schemas.UserRole.patient)
    doctor_b = projections.for_user(RECORDS, "dr-b", schemas.UserRole.doctor)
    admin_confirmed = projections.for_user(
        RECORDS, "root", schemas.UserRole.admin, Status.confirmed
    )

    assert "today-early" not in ids(patient)
    assert ids(doctor_b) == ["other-doctor"]
    assert ids(admin_confirmed) == [
        "yesterday-confirmed",
        "today-early",
        "other-doctor",
        "today-confirmed",
    ]


def test_earnings_summary():
    summary = projections.earnings(RECORDS, "dr-a")

    assert summary.paid_total == Decimal("100")
    # today-confirmed, today-early and yesterday-confirmed are unpaid.
    assert summary.outstanding_total == Decimal("300")
    assert summary.completed_count == 1


def test_doctor_dashboard():
    actor = schemas.Actor(user_id="dr-a", role=schemas.UserRole.doctor)

    view = projections.dashboard(RECORDS, actor, TODAY, unread_notifications=4)

    assert ids(view.today) == ["today-early", "today-confirmed"]
    assert ids(view.cancelled) == ["dropped"]
    assert view.unread_notifications == 4


def test_patient_dashboard_today_is_confirmed_only():
    actor = schemas.Actor(user_id="p-1", role=schemas.UserRole.patient)

    view = projections.dashboard(RECORDS, actor, TODAY, unread_notifications=0)

    assert ids(view.today) == ["other-doctor", "today-confirmed"]


def test_confirmed_upcoming_leaves_out_pending():
    assert ids(projections.confirmed_upcoming(RECORDS, TODAY)) == [
        "today-early",
        "other-doctor",
        "today-confirmed",
    ]


def test_patient_dashboard_confirmed_upcoming():
    actor = schemas.Actor(user_id="p-1", role=schemas.UserRole.patient)

    view = projections.dashboard(RECORDS, actor, TODAY, unread_notifications=0)

    assert ids(view.upcoming) == ["other-doctor", "today-confirmed", "future-pending"]
    assert ids(view.confirmed_upcoming) == ["other-doctor", "today-confirmed"]
