"""In-memory appointment ledger, doctor directory, notifications and audit trail."""
from __future__ import annotations

import hashlib
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Callable, Hashable, Iterable, Iterator, Optional
from uuid import uuid4

from . import schemas
from .errors import InvalidTransition, NotFound, SlotConflict, ValidationError
from .events import (
    AppointmentBooked,
    AppointmentTransitioned,
    EventBus,
    NotesAnnotated,
    PaymentProcessed,
)
from .logging_config import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]

Status = schemas.AppointmentStatus
Role = schemas.UserRole

APPOINTMENT_LOCK_STRIPES = 64

# (from, to) -> roles allowed to trigger it. Administrators may trigger any.
TRANSITIONS: dict[tuple[Status, Status], frozenset[Role]] = {
    (Status.pending, Status.confirmed): frozenset({Role.doctor}),
    (Status.pending, Status.cancelled): frozenset({Role.doctor, Role.patient}),
    (Status.confirmed, Status.completed): frozenset({Role.doctor}),
    (Status.confirmed, Status.cancelled): frozenset({Role.doctor, Role.patient}),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def stable_hash(*components: str) -> str:
    """Create a stable, reproducible hash for audit payloads."""

    payload = "|".join(components)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class KeyedLocks:
    """One lazily created mutex per key.

    With ``stripes`` set, keys share a fixed pool of mutexes chosen by hash,
    so the pool stays bounded however many keys are seen. Callers must not
    hold two striped keys at once.
    """

    def __init__(self, stripes: Optional[int] = None) -> None:
        self._locks: dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()
        self._stripes = (
            [threading.Lock() for _ in range(stripes)] if stripes else None
        )

    def __len__(self) -> int:
        return len(self._stripes) if self._stripes else len(self._locks)

    def _lock_for(self, key: Hashable) -> threading.Lock:
        if self._stripes:
            return self._stripes[hash(key) % len(self._stripes)]
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(
        self, key: Hashable, timeout: float, on_timeout: Callable[[], Exception]
    ) -> Iterator[None]:
        lock = self._lock_for(key)
        if not lock.acquire(timeout=timeout):
            raise on_timeout()
        try:
            yield
        finally:
            lock.release()


SlotKey = tuple[str, date, time]


class AppointmentLedger:
    """Authoritative appointment table and its lifecycle rules.

    Records are frozen pydantic models. Every change swaps in a new record
    under the table lock, so readers always observe a whole record either
    before or after a write. Active slots are indexed by
    ``(doctor_id, date, time)``; inserting into an occupied slot fails the
    same way a unique constraint would.
    """

    def __init__(
        self,
        *,
        bus: Optional[EventBus] = None,
        clock: Clock = utcnow,
        lock_timeout: float = 5.0,
    ) -> None:
        self.bus = bus
        self.clock = clock
        self.lock_timeout = lock_timeout
        self._records: dict[str, schemas.Appointment] = {}
        self._active_slots: dict[SlotKey, str] = {}
        self._table_lock = threading.RLock()
        self._doctor_locks = KeyedLocks()
        # Appointment ids grow without bound; doctor ids do not.
        self._appointment_locks = KeyedLocks(stripes=APPOINTMENT_LOCK_STRIPES)

    @staticmethod
    def slot_key(doctor_id: str, day: date, label: str) -> SlotKey:
        return (doctor_id, day, schemas.parse_time_label(label))

    def _next_timestamp(self, previous: datetime) -> datetime:
        now = self.clock()
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    def _publish(self, event: object) -> None:
        if self.bus is not None:
            self.bus.publish(event)

    @contextmanager
    def doctor_lock(self, doctor_id: str) -> Iterator[None]:
        """Critical section for validating and committing a booking."""
        with self._doctor_locks.hold(
            doctor_id,
            self.lock_timeout,
            lambda: SlotConflict(
                f"Booking lock for doctor {doctor_id} is busy", retryable=True
            ),
        ):
            yield

    def _appointment_lock(self, appointment_id: str):
        return self._appointment_locks.hold(
            appointment_id,
            self.lock_timeout,
            lambda: InvalidTransition(
                f"Appointment {appointment_id} is being updated", retryable=True
            ),
        )

    def get(self, appointment_id: str) -> schemas.Appointment:
        with self._table_lock:
            record = self._records.get(appointment_id)
        if record is None:
            raise NotFound(f"Appointment {appointment_id} not found")
        return record

    def list_all(self) -> list[schemas.Appointment]:
        with self._table_lock:
            return list(self._records.values())

    def find(
        self,
        *,
        doctor_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        day: Optional[date] = None,
        statuses: Optional[Iterable[Status]] = None,
    ) -> list[schemas.Appointment]:
        wanted = set(statuses) if statuses is not None else None
        records = [
            record
            for record in self.list_all()
            if (doctor_id is None or record.doctor_id == doctor_id)
            and (patient_id is None or record.patient_id == patient_id)
            and (day is None or record.date == day)
            and (wanted is None or record.status in wanted)
        ]
        return sorted(records, key=chronological)

    def occupied_times(self, doctor_id: str, day: date) -> set[time]:
        with self._table_lock:
            return {
                slot_time
                for (owner, slot_day, slot_time) in self._active_slots
                if owner == doctor_id and slot_day == day
            }

    def is_slot_taken(self, doctor_id: str, day: date, label: str) -> bool:
        key = self.slot_key(doctor_id, day, label)
        with self._table_lock:
            return key in self._active_slots

    def _store(self, appointment: schemas.Appointment) -> None:
        key = self.slot_key(appointment.doctor_id, appointment.date, appointment.time)
        active = appointment.status in schemas.ACTIVE_STATUSES
        with self._table_lock:
            if appointment.id in self._records:
                raise ValidationError(f"Appointment id {appointment.id} already exists")
            if active and key in self._active_slots:
                raise SlotConflict(
                    f"Doctor {appointment.doctor_id} is already booked on "
                    f"{appointment.date.isoformat()} at {appointment.time}"
                )
            self._records[appointment.id] = appointment
            if active:
                self._active_slots[key] = appointment.id

    def insert(
        self, appointment: schemas.Appointment, *, actor_id: str = "system"
    ) -> schemas.Appointment:
        self._store(appointment)
        logger.info(
            "appointment_booked",
            appointment_id=appointment.id,
            doctor_id=appointment.doctor_id,
            date=appointment.date.isoformat(),
            time=appointment.time,
        )
        self._publish(AppointmentBooked(appointment=appointment, actor_id=actor_id))
        return appointment

    def seed(self, appointments: Iterable[schemas.Appointment]) -> None:
        """Load existing records without emitting booking events."""
        for appointment in appointments:
            self._store(appointment)

    def _replace(self, updated: schemas.Appointment) -> None:
        key = self.slot_key(updated.doctor_id, updated.date, updated.time)
        with self._table_lock:
            self._records[updated.id] = updated
            if (
                updated.status not in schemas.ACTIVE_STATUSES
                and self._active_slots.get(key) == updated.id
            ):
                del self._active_slots[key]

    @staticmethod
    def check_transition(
        current: Status, target: Status, role: Optional[Role] = None
    ) -> None:
        if current in schemas.TERMINAL_STATUSES:
            raise InvalidTransition(
                f"Appointment is already {current.value}",
                current=current.value,
                target=target.value,
            )
        allowed = TRANSITIONS.get((current, target))
        if allowed is None:
            raise InvalidTransition(
                f"Cannot move an appointment from {current.value} to {target.value}",
                current=current.value,
                target=target.value,
            )
        if role is not None and role != Role.admin and role not in allowed:
            raise InvalidTransition(
                f"A {role.value} may not move an appointment to {target.value}",
                current=current.value,
                target=target.value,
            )

    def transition(
        self,
        appointment_id: str,
        target: Status,
        *,
        actor: Optional[schemas.Actor] = None,
        expected_last_updated: Optional[datetime] = None,
    ) -> schemas.Appointment:
        try:
            target = Status(target)
        except ValueError as error:
            raise ValidationError(f"Unknown appointment status: {target}") from error
        with self._appointment_lock(appointment_id):
            current = self.get(appointment_id)
            if (
                expected_last_updated is not None
                and expected_last_updated != current.last_updated
            ):
                raise InvalidTransition(
                    f"Appointment {appointment_id} changed since it was read",
                    current=current.status.value,
                    target=target.value,
                    retryable=True,
                )
            try:
                self.check_transition(
                    current.status, target, actor.role if actor else None
                )
            except InvalidTransition:
                logger.warning(
                    "transition_rejected",
                    appointment_id=appointment_id,
                    current=current.status.value,
                    target=target.value,
                )
                raise
            updated = current.model_copy(
                update={
                    "status": target,
                    "last_updated": self._next_timestamp(current.last_updated),
                }
            )
            self._replace(updated)
        logger.info(
            "appointment_transitioned",
            appointment_id=appointment_id,
            previous=current.status.value,
            status=target.value,
        )
        self._publish(
            AppointmentTransitioned(
                appointment=updated,
                previous=current.status,
                actor_id=actor.user_id if actor else "system",
            )
        )
        return updated

    def annotate_notes(
        self,
        appointment_id: str,
        text: str,
        *,
        actor: Optional[schemas.Actor] = None,
    ) -> schemas.Appointment:
        if text is None:
            raise ValidationError("Notes text is required")
        if actor is not None and actor.role not in (Role.doctor, Role.admin):
            raise InvalidTransition(
                f"A {actor.role.value} may not annotate appointment notes"
            )
        with self._appointment_lock(appointment_id):
            current = self.get(appointment_id)
            updated = current.model_copy(
                update={
                    "notes": text,
                    "last_updated": self._next_timestamp(current.last_updated),
                }
            )
            self._replace(updated)
        logger.info("appointment_annotated", appointment_id=appointment_id)
        self._publish(
            NotesAnnotated(
                appointment=updated, actor_id=actor.user_id if actor else "system"
            )
        )
        return updated

    def settle_payment(
        self,
        appointment_id: str,
        capture: Callable[[schemas.Appointment], bool],
        *,
        actor: Optional[schemas.Actor] = None,
    ) -> schemas.Appointment:
        """Run ``capture`` under the appointment lock and store its outcome.

        Already-paid appointments are returned untouched and ``capture`` is
        not called again.
        """
        with self._appointment_lock(appointment_id):
            current = self.get(appointment_id)
            if current.paid:
                return current
            if current.status == Status.cancelled:
                raise InvalidTransition(
                    "Cancelled appointments cannot be paid",
                    current=current.status.value,
                )
            captured = bool(capture(current))
            updated = current
            if captured:
                updated = current.model_copy(
                    update={
                        "paid": True,
                        "last_updated": self._next_timestamp(current.last_updated),
                    }
                )
                self._replace(updated)
        logger.info(
            "payment_processed", appointment_id=appointment_id, captured=captured
        )
        self._publish(
            PaymentProcessed(
                appointment=updated,
                captured=captured,
                actor_id=actor.user_id if actor else "system",
            )
        )
        return updated


def chronological(record: schemas.Appointment) -> tuple[date, time]:
    return (record.date, schemas.parse_time_label(record.time))


class DoctorDirectory:
    """Doctor profiles and their doctor-owned availability."""

    def __init__(self) -> None:
        self._doctors: dict[str, schemas.Doctor] = {}
        self._availability: dict[str, schemas.DoctorAvailability] = {}
        self._lock = threading.RLock()

    def add(
        self,
        doctor: schemas.Doctor,
        availability: Optional[schemas.DoctorAvailability] = None,
    ) -> schemas.Doctor:
        with self._lock:
            if doctor.id in self._doctors:
                raise ValidationError(f"Doctor {doctor.id} already exists")
            self._doctors[doctor.id] = doctor
            self._availability[doctor.id] = availability or schemas.DoctorAvailability(
                doctor_id=doctor.id
            )
        return doctor

    def get(self, doctor_id: str) -> schemas.Doctor:
        with self._lock:
            doctor = self._doctors.get(doctor_id)
        if doctor is None:
            raise NotFound(f"Doctor {doctor_id} not found")
        return doctor

    def search(
        self,
        *,
        specialty: Optional[str] = None,
        location: Optional[str] = None,
        language: Optional[str] = None,
        min_rating: Optional[float] = None,
    ) -> list[schemas.Doctor]:
        with self._lock:
            doctors = list(self._doctors.values())
        if specialty:
            doctors = [doctor for doctor in doctors if doctor.specialty == specialty]
        if location:
            needle = location.lower()
            doctors = [doctor for doctor in doctors if needle in doctor.location.lower()]
        if language:
            doctors = [doctor for doctor in doctors if language in doctor.languages]
        if min_rating:
            doctors = [doctor for doctor in doctors if doctor.rating >= min_rating]
        return doctors

    def availability(self, doctor_id: str) -> schemas.DoctorAvailability:
        self.get(doctor_id)
        with self._lock:
            return self._availability[doctor_id].model_copy(deep=True)

    def set_weekly_hours(
        self, doctor_id: str, weekday: schemas.Weekday, times: Iterable[str]
    ) -> schemas.DoctorAvailability:
        self.get(doctor_id)
        offered: dict[time, str] = {}
        for label in times:
            try:
                parsed = schemas.parse_time_label(label)
            except ValueError as error:
                raise ValidationError(str(error)) from error
            offered.setdefault(parsed, label.strip())
        ordered = [offered[key] for key in sorted(offered)]
        with self._lock:
            self._availability[doctor_id].weekly[schemas.Weekday(weekday)] = ordered
        logger.info(
            "weekly_hours_updated",
            doctor_id=doctor_id,
            weekday=schemas.Weekday(weekday).value,
            slots=len(ordered),
        )
        return self.availability(doctor_id)

    def add_blocked_interval(
        self, doctor_id: str, payload: schemas.BlockedIntervalCreate
    ) -> schemas.BlockedInterval:
        self.get(doctor_id)
        try:
            start = schemas.parse_time_label(payload.start_time)
            end = schemas.parse_time_label(payload.end_time)
        except ValueError as error:
            raise ValidationError(str(error)) from error
        if start >= end:
            raise ValidationError("Blocked interval must end after it starts")
        interval = schemas.BlockedInterval(
            id=f"blk-{uuid4().hex[:8]}",
            date=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            reason=payload.reason,
        )
        with self._lock:
            self._availability[doctor_id].blocked.append(interval)
        return interval

    def remove_blocked_interval(self, doctor_id: str, interval_id: str) -> None:
        self.get(doctor_id)
        with self._lock:
            blocked = self._availability[doctor_id].blocked
            remaining = [interval for interval in blocked if interval.id != interval_id]
            if len(remaining) == len(blocked):
                raise NotFound(f"Blocked interval {interval_id} not found")
            self._availability[doctor_id].blocked = remaining


class NotificationStore:
    """Per-recipient notifications with an incrementally kept unread count."""

    def __init__(self, clock: Clock = utcnow) -> None:
        self.clock = clock
        self._items: dict[str, schemas.Notification] = {}
        self._unread: dict[str, int] = {}
        self._lock = threading.Lock()

    def _put(self, notification: schemas.Notification) -> None:
        self._items[notification.id] = notification
        if not notification.read:
            recipient = notification.recipient_id
            self._unread[recipient] = self._unread.get(recipient, 0) + 1

    def add(
        self,
        *,
        recipient_id: str,
        type: schemas.NotificationType,
        title: str,
        message: str,
        priority: schemas.NotificationPriority = schemas.NotificationPriority.medium,
        appointment_id: Optional[str] = None,
    ) -> schemas.Notification:
        notification = schemas.Notification(
            id=f"ntf-{uuid4().hex[:12]}",
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            timestamp=self.clock(),
            priority=priority,
            appointment_id=appointment_id,
        )
        with self._lock:
            self._put(notification)
        return notification

    def seed(self, notifications: Iterable[schemas.Notification]) -> None:
        with self._lock:
            for notification in notifications:
                self._put(notification)

    def get(self, notification_id: str) -> schemas.Notification:
        with self._lock:
            notification = self._items.get(notification_id)
        if notification is None:
            raise NotFound(f"Notification {notification_id} not found")
        return notification

    def list_for(
        self, recipient_id: str, *, unread_only: bool = False
    ) -> list[schemas.Notification]:
        with self._lock:
            items = [
                item
                for item in reversed(list(self._items.values()))
                if item.recipient_id == recipient_id and not (unread_only and item.read)
            ]
        return sorted(items, key=lambda item: item.timestamp, reverse=True)

    def mark_as_read(self, notification_id: str) -> schemas.Notification:
        with self._lock:
            notification = self._items.get(notification_id)
            if notification is None:
                raise NotFound(f"Notification {notification_id} not found")
            if notification.read:
                return notification
            updated = notification.model_copy(update={"read": True})
            self._items[notification_id] = updated
            self._unread[updated.recipient_id] -= 1
        return updated

    def mark_all_as_read(self, recipient_id: str) -> int:
        with self._lock:
            changed = 0
            for notification_id, notification in self._items.items():
                if notification.recipient_id == recipient_id and not notification.read:
                    self._items[notification_id] = notification.model_copy(
                        update={"read": True}
                    )
                    changed += 1
            self._unread[recipient_id] = 0
        return changed

    def delete(self, notification_id: str) -> None:
        with self._lock:
            notification = self._items.pop(notification_id, None)
            if notification is None:
                raise NotFound(f"Notification {notification_id} not found")
            if not notification.read:
                self._unread[notification.recipient_id] -= 1

    def unread_count(self, recipient_id: str) -> int:
        return self._unread.get(recipient_id, 0)


@dataclass
class AuditTrail:
    """Append-only audit trail with hash chaining."""

    events: list[schemas.AuditEvent] = field(default_factory=list)
    last_hash: str = ""
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def append(self, event: schemas.AuditEvent) -> schemas.AuditEvent:
        with self._lock:
            chained_hash = hashlib.sha256(
                f"{event.payload_hash}{self.last_hash}".encode("utf-8")
            ).hexdigest()
            stored = event.model_copy(update={"payload_hash": chained_hash})
            self.events.append(stored)
            self.last_hash = chained_hash
        return stored

    def record(
        self,
        *,
        actor: str,
        action: str,
        appointment_id: Optional[str],
        timestamp: datetime,
        details: Iterable[str] = (),
    ) -> schemas.AuditEvent:
        return self.append(
            schemas.AuditEvent(
                id=f"aud-{uuid4().hex[:12]}",
                actor=actor,
                action=action,
                appointment_id=appointment_id,
                timestamp=timestamp,
                payload_hash=stable_hash(actor, action, appointment_id or "", *details),
            )
        )

    def for_appointment(self, appointment_id: str) -> list[schemas.AuditEvent]:
        with self._lock:
            return [event for event in self.events if event.appointment_id == appointment_id]


@dataclass
class BookingDataset:
    """Initial dataset for demo purposes."""

    doctors: list[schemas.Doctor]
    availability: list[schemas.DoctorAvailability]
    appointments: list[schemas.Appointment]
    notifications: list[schemas.Notification]


def _weekly(weekdays: list[str], saturday: list[str]) -> dict[schemas.Weekday, list[str]]:
    hours = {day: list(weekdays) for day in list(schemas.Weekday)[:5]}
    hours[schemas.Weekday.saturday] = list(saturday)
    hours[schemas.Weekday.sunday] = []
    return hours


def default_dataset(now: datetime) -> BookingDataset:
    """Seed data used by the FastAPI application."""

    today = now.date()
    doctors = [
        schemas.Doctor(
            id="dr-sarah-johnson",
            name="Dr. Sarah Johnson",
            email="doctor@telemed.com",
            specialty="Cardiology",
            consultation_fee=Decimal("150"),
            languages=["English", "Spanish"],
            rating=4.9,
            location="New York, NY",
            verified=True,
            bio="Board-certified cardiologist with over 15 years of experience.",
        ),
        schemas.Doctor(
            id="dr-michael-chen",
            name="Dr. Michael Chen",
            email="mchen@telemed.com",
            specialty="Dermatology",
            consultation_fee=Decimal("120"),
            languages=["English", "Mandarin"],
            rating=4.8,
            location="San Francisco, CA",
            verified=True,
            bio="Medical and cosmetic dermatology, skin cancer prevention.",
        ),
        schemas.Doctor(
            id="dr-emily-rodriguez",
            name="Dr. Emily Rodriguez",
            email="erodriguez@telemed.com",
            specialty="Pediatrics",
            consultation_fee=Decimal("130"),
            languages=["English", "Spanish", "Portuguese"],
            rating=4.9,
            location="Miami, FL",
            verified=True,
            bio="Comprehensive care for children.",
        ),
    ]
    availability = [
        schemas.DoctorAvailability(
            doctor_id="dr-sarah-johnson",
            weekly=_weekly(
                ["9:00 AM", "10:00 AM", "11:00 AM", "2:00 PM", "3:00 PM"],
                ["10:00 AM", "11:00 AM"],
            ),
        ),
        schemas.DoctorAvailability(
            doctor_id="dr-michael-chen",
            weekly=_weekly(["8:00 AM", "9:00 AM", "10:00 AM", "1:00 PM", "2:00 PM"], []),
        ),
        schemas.DoctorAvailability(
            doctor_id="dr-emily-rodriguez",
            weekly=_weekly(
                ["9:00 AM", "10:00 AM", "11:00 AM", "3:00 PM", "4:00 PM"],
                ["10:00 AM", "11:00 AM"],
            ),
        ),
    ]
    appointments = [
        schemas.Appointment(
            id="apt-0001",
            patient_id="pat-john",
            doctor_id="dr-sarah-johnson",
            patient_name="John Patient",
            doctor_name="Dr. Sarah Johnson",
            specialty="Cardiology",
            date=today + timedelta(days=1),
            time="10:00 AM",
            type=schemas.ConsultationType.video,
            status=Status.confirmed,
            symptoms="Chest pain, shortness of breath",
            amount=Decimal("150"),
            paid=True,
            meeting_link="https://meet.telecare.local/abc-defg-hij",
            created_at=now,
            last_updated=now,
        ),
        schemas.Appointment(
            id="apt-0002",
            patient_id="pat-john",
            doctor_id="dr-michael-chen",
            patient_name="John Patient",
            doctor_name="Dr. Michael Chen",
            specialty="Dermatology",
            date=today + timedelta(days=3),
            time="2:00 PM",
            type=schemas.ConsultationType.video,
            status=Status.pending,
            symptoms="Skin rash, itching",
            amount=Decimal("120"),
            meeting_link="https://meet.telecare.local/klm-nopq-rst",
            created_at=now,
            last_updated=now,
        ),
        schemas.Appointment(
            id="apt-0003",
            patient_id="pat-jane",
            doctor_id="dr-sarah-johnson",
            patient_name="Jane Smith",
            doctor_name="Dr. Sarah Johnson",
            specialty="Cardiology",
            date=today,
            time="3:00 PM",
            type=schemas.ConsultationType.video,
            status=Status.completed,
            symptoms="Follow-up consultation",
            amount=Decimal("150"),
            paid=True,
            meeting_link="https://meet.telecare.local/xyz-uvwx-rst",
            created_at=now,
            last_updated=now,
        ),
    ]
    notifications = [
        schemas.Notification(
            id="ntf-seed-1",
            recipient_id="pat-john",
            type=schemas.NotificationType.appointment,
            title="Upcoming Appointment",
            message="You have an appointment with Dr. Sarah Johnson tomorrow at 10:00 AM",
            timestamp=now - timedelta(minutes=5),
            priority=schemas.NotificationPriority.high,
            appointment_id="apt-0001",
        ),
        schemas.Notification(
            id="ntf-seed-2",
            recipient_id="pat-john",
            type=schemas.NotificationType.prescription,
            title="Prescription Ready",
            message="Your prescription for Lisinopril is ready for download",
            timestamp=now - timedelta(hours=2),
            priority=schemas.NotificationPriority.medium,
        ),
        schemas.Notification(
            id="ntf-seed-3",
            recipient_id="pat-john",
            type=schemas.NotificationType.system,
            title="System Maintenance",
            message="Scheduled maintenance tonight from 2-4 AM EST",
            timestamp=now - timedelta(hours=24),
            read=True,
            priority=schemas.NotificationPriority.low,
        ),
    ]
    return BookingDataset(
        doctors=doctors,
        availability=availability,
        appointments=appointments,
        notifications=notifications,
    )
