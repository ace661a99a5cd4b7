"""Booking workflow: turns a slot request into a pending appointment."""
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional
from uuid import uuid4

from . import schemas
from .availability import AvailabilityModel
from .collaborators import ConferencingGateway, MeetingRequest
from .errors import SlotConflict, SlotUnavailable, ValidationError
from .logging_config import get_logger
from .storage import AppointmentLedger, DoctorDirectory, utcnow

logger = get_logger(__name__)


class BookingWorkflow:
    """Validates a requested slot and commits the appointment atomically.

    Checks run in a fixed order, each with its own failure:

    1. the time is one of the doctor's open slots (``SlotUnavailable``);
    2. symptoms are present (``ValidationError``);
    3. under the doctor's lock, nobody took the slot meanwhile (``SlotConflict``).

    The meeting link is issued before the record is inserted, so a failing
    conferencing call leaves the ledger untouched.
    """

    def __init__(
        self,
        *,
        directory: DoctorDirectory,
        availability: AvailabilityModel,
        ledger: AppointmentLedger,
        conferencing: ConferencingGateway,
        default_duration: int = 30,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.directory = directory
        self.availability = availability
        self.ledger = ledger
        self.conferencing = conferencing
        self.default_duration = default_duration
        self.clock = clock

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
        doctor = self.directory.get(doctor_id)

        label = self.availability.match_open_slot(doctor_id, date, time)
        if label is None:
            logger.info(
                "booking_rejected",
                reason="slot_unavailable",
                doctor_id=doctor_id,
                date=date.isoformat(),
                time=time,
            )
            raise SlotUnavailable(
                f"{doctor.name} has no open slot on {date.isoformat()} at {time}"
            )

        if not symptoms or not symptoms.strip():
            logger.info("booking_rejected", reason="missing_symptoms", doctor_id=doctor_id)
            raise ValidationError("Symptoms are required to book an appointment")

        try:
            consultation = schemas.ConsultationType(type)
        except ValueError as error:
            raise ValidationError(f"Unknown consultation type: {type!r}") from error

        with self.ledger.doctor_lock(doctor_id):
            if self.ledger.is_slot_taken(doctor_id, date, label):
                logger.info(
                    "booking_rejected",
                    reason="slot_conflict",
                    doctor_id=doctor_id,
                    date=date.isoformat(),
                    time=label,
                )
                raise SlotConflict(
                    f"{doctor.name} was booked on {date.isoformat()} at {label} meanwhile"
                )

            meeting_link = None
            if consultation == schemas.ConsultationType.video:
                meeting_link = self.conferencing.issue_link(
                    MeetingRequest(
                        doctor_id=doctor_id, patient_id=patient_id, date=date, time=label
                    )
                )

            now = self.clock()
            appointment = schemas.Appointment(
                id=f"apt-{uuid4().hex[:12]}",
                patient_id=patient_id,
                doctor_id=doctor.id,
                patient_name=patient_name or patient_id,
                doctor_name=doctor.name,
                specialty=doctor.specialty,
                date=date,
                time=label,
                duration=self.default_duration,
                type=consultation,
                status=schemas.AppointmentStatus.pending,
                symptoms=symptoms.strip(),
                notes=notes,
                amount=doctor.consultation_fee,
                paid=False,
                meeting_link=meeting_link,
                created_at=now,
                last_updated=now,
            )
            return self.ledger.insert(appointment, actor_id=actor_id or patient_id)
