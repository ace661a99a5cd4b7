"""Construction and lifetime of the booking core services.

``build_services`` is called once when the application starts; the returned
container owns every store and is torn down with ``shutdown``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from . import projections, schemas
from .availability import AvailabilityModel
from .booking import BookingWorkflow
from .collaborators import ConferencingGateway, PaymentGateway
from .config import Settings
from .events import (
    AppointmentBooked,
    AppointmentTransitioned,
    EventBus,
    NotesAnnotated,
    PaymentProcessed,
    PrescriptionIssued,
)
from .logging_config import get_logger
from .notifications import NotificationDispatcher
from .storage import (
    AppointmentLedger,
    AuditTrail,
    DoctorDirectory,
    NotificationStore,
    default_dataset,
    utcnow,
)

logger = get_logger(__name__)


@dataclass
class Services:
    """The booking core as seen by the HTTP layer."""

    settings: Settings
    clock: Callable[[], datetime]
    bus: EventBus
    directory: DoctorDirectory
    ledger: AppointmentLedger
    availability: AvailabilityModel
    booking: BookingWorkflow
    notifications: NotificationStore
    dispatcher: NotificationDispatcher
    audit: AuditTrail
    payments: PaymentGateway
    conferencing: ConferencingGateway

    def today(self) -> date:
        return self.clock().date()

    # Read API

    def list_appointments(
        self,
        user_id: str,
        role: schemas.UserRole,
        status_filter: Optional[schemas.AppointmentStatus] = None,
    ) -> list[schemas.Appointment]:
        return projections.for_user(self.ledger.list_all(), user_id, role, status_filter)

    def get_appointment(self, appointment_id: str) -> schemas.Appointment:
        return self.ledger.get(appointment_id)

    def list_open_slots(self, doctor_id: str, day: date) -> list[str]:
        return self.availability.open_slots(doctor_id, day)

    # Write API

    def book(
        self,
        *,
        patient_id: str,
        doctor_id: str,
        date: date,
        time: str,
        type: schemas.ConsultationType,
        symptoms: str,
        notes: Optional[str] = None,
        patient_name: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> schemas.Appointment:
        return self.booking.book(
            patient_id=patient_id,
            doctor_id=doctor_id,
            date=date,
            time=time,
            type=type,
            symptoms=symptoms,
            notes=notes,
            patient_name=patient_name,
            actor_id=actor_id,
        )

    def transition(
        self,
        appointment_id: str,
        target_status: schemas.AppointmentStatus,
        *,
        actor: Optional[schemas.Actor] = None,
        expected_last_updated: Optional[datetime] = None,
    ) -> schemas.Appointment:
        return self.ledger.transition(
            appointment_id,
            target_status,
            actor=actor,
            expected_last_updated=expected_last_updated,
        )

    def annotate_notes(
        self, appointment_id: str, text: str, *, actor: Optional[schemas.Actor] = None
    ) -> schemas.Appointment:
        return self.ledger.annotate_notes(appointment_id, text, actor=actor)

    def cancel(
        self, appointment_id: str, *, actor: Optional[schemas.Actor] = None
    ) -> schemas.Appointment:
        return self.ledger.transition(
            appointment_id, schemas.AppointmentStatus.cancelled, actor=actor
        )

    def pay(
        self, appointment_id: str, *, actor: Optional[schemas.Actor] = None
    ) -> schemas.Appointment:
        return self.ledger.settle_payment(
            appointment_id,
            lambda record: self.payments.capture(record.id, record.amount),
            actor=actor,
        )

    def report_prescription(
        self, doctor: schemas.Doctor, notice: schemas.PrescriptionNotice
    ) -> None:
        self.bus.publish(
            PrescriptionIssued(
                doctor_id=doctor.id,
                doctor_name=doctor.name,
                patient_id=notice.patient_id,
                medication=notice.medication,
                appointment_id=notice.appointment_id,
            )
        )

    def shutdown(self) -> None:
        self.bus.clear()
        logger.info("services_stopped", appointments=len(self.ledger.list_all()))


def attach_audit_trail(
    bus: EventBus, audit: AuditTrail, clock: Callable[[], datetime]
) -> None:
    """Record every ledger write in the hash-chained audit trail."""

    def on_booked(event: AppointmentBooked) -> None:
        audit.record(
            actor=event.actor_id,
            action="booked",
            appointment_id=event.appointment.id,
            timestamp=clock(),
            details=(event.appointment.date.isoformat(), event.appointment.time),
        )

    def on_transitioned(event: AppointmentTransitioned) -> None:
        audit.record(
            actor=event.actor_id,
            action=f"{event.previous.value}->{event.appointment.status.value}",
            appointment_id=event.appointment.id,
            timestamp=clock(),
        )

    def on_annotated(event: NotesAnnotated) -> None:
        audit.record(
            actor=event.actor_id,
            action="notes_annotated",
            appointment_id=event.appointment.id,
            timestamp=clock(),
            details=(event.appointment.notes or "",),
        )

    def on_payment(event: PaymentProcessed) -> None:
        audit.record(
            actor=event.actor_id,
            action="payment_captured" if event.captured else "payment_declined",
            appointment_id=event.appointment.id,
            timestamp=clock(),
            details=(str(event.appointment.amount),),
        )

    bus.subscribe(AppointmentBooked, on_booked)
    bus.subscribe(AppointmentTransitioned, on_transitioned)
    bus.subscribe(NotesAnnotated, on_annotated)
    bus.subscribe(PaymentProcessed, on_payment)


def build_services(
    settings: Settings, *, clock: Callable[[], datetime] = utcnow
) -> Services:
    bus = EventBus()
    directory = DoctorDirectory()
    ledger = AppointmentLedger(
        bus=bus, clock=clock, lock_timeout=settings.lock_timeout_seconds
    )
    availability = AvailabilityModel(directory, ledger)
    conferencing = ConferencingGateway(settings.meeting_base_url)
    notifications = NotificationStore(clock=clock)
    dispatcher = NotificationDispatcher(notifications)
    dispatcher.attach(bus)
    audit = AuditTrail()
    attach_audit_trail(bus, audit, clock)

    if settings.seed_demo_data:
        dataset = default_dataset(clock())
        for doctor, hours in zip(dataset.doctors, dataset.availability):
            directory.add(doctor, hours)
        ledger.seed(dataset.appointments)
        notifications.seed(dataset.notifications)

    services = Services(
        settings=settings,
        clock=clock,
        bus=bus,
        directory=directory,
        ledger=ledger,
        availability=availability,
        booking=BookingWorkflow(
            directory=directory,
            availability=availability,
            ledger=ledger,
            conferencing=conferencing,
            default_duration=settings.default_duration_minutes,
            clock=clock,
        ),
        notifications=notifications,
        dispatcher=dispatcher,
        audit=audit,
        payments=PaymentGateway(),
        conferencing=conferencing,
    )
    logger.info(
        "services_started",
        doctors=len(directory.search()),
        appointments=len(ledger.list_all()),
    )
    return services
