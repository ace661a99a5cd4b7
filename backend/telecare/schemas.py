"""Pydantic schemas for the Telecare booking core and API."""
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRole(str, Enum):
    """Roles supplied by the identity provider."""

    patient = "patient"
    doctor = "doctor"
    admin = "admin"


class ConsultationType(str, Enum):
    video = "video"
    phone = "phone"


class AppointmentStatus(str, Enum):
    """Lifecycle states of an appointment."""

    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


ACTIVE_STATUSES = frozenset({AppointmentStatus.pending, AppointmentStatus.confirmed})
TERMINAL_STATUSES = frozenset({AppointmentStatus.completed, AppointmentStatus.cancelled})


class NotificationType(str, Enum):
    appointment = "appointment"
    prescription = "prescription"
    system = "system"
    payment = "payment"
    reminder = "reminder"


class NotificationPriority(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class Weekday(str, Enum):
    """Weekday keys of a doctor's weekly offering, Monday first."""

    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

    @classmethod
    def of(cls, day: dt.date) -> "Weekday":
        return list(cls)[day.weekday()]


class Actor(BaseModel):
    """Current caller as vouched for by the identity provider."""

    user_id: str
    role: UserRole
    display_name: Optional[str] = None


class Doctor(BaseModel):
    """Public doctor profile listed in the directory."""

    id: str = Field(..., description="Stable identifier of the doctor")
    name: str
    email: EmailStr
    specialty: str
    consultation_fee: Decimal
    languages: List[str] = []
    rating: float = 0.0
    location: str = ""
    verified: bool = False
    bio: Optional[str] = None


class BlockedInterval(BaseModel):
    """One-off interval during which a doctor takes no bookings."""

    id: str
    date: dt.date
    start_time: str
    end_time: str
    reason: Optional[str] = None


class BlockedIntervalCreate(BaseModel):
    date: dt.date
    start_time: str
    end_time: str
    reason: Optional[str] = None


class DoctorAvailability(BaseModel):
    """Weekly recurring offering plus ad-hoc blocked intervals."""

    doctor_id: str
    weekly: Dict[Weekday, List[str]] = Field(default_factory=dict)
    blocked: List[BlockedInterval] = Field(default_factory=list)


class WeeklyHoursUpdate(BaseModel):
    times: List[str] = Field(
        default_factory=list,
        description="Offered start-time labels for the weekday, e.g. '9:00 AM'.",
    )


class Appointment(BaseModel):
    """An appointment record as held by the ledger.

    Records are immutable snapshots; the ledger replaces them wholesale on
    every change.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    patient_id: str
    doctor_id: str
    patient_name: str
    doctor_name: str
    specialty: str
    date: dt.date
    time: str
    duration: int = 30
    type: ConsultationType
    status: AppointmentStatus = AppointmentStatus.pending
    symptoms: str
    notes: Optional[str] = None
    amount: Decimal
    paid: bool = False
    meeting_link: Optional[str] = None
    created_at: dt.datetime
    last_updated: dt.datetime


class BookingRequest(BaseModel):
    """Incoming booking request from the patient booking flow."""

    doctor_id: str
    date: dt.date
    time: str
    type: ConsultationType = ConsultationType.video
    symptoms: str
    notes: Optional[str] = None
    patient_id: Optional[str] = Field(
        None, description="Only honoured for administrators booking on behalf of a patient."
    )
    patient_name: Optional[str] = None


class TransitionRequest(BaseModel):
    status: AppointmentStatus
    expected_last_updated: Optional[dt.datetime] = Field(
        None,
        description="Optimistic concurrency token; the transition fails if the record changed since.",
    )


class NotesRequest(BaseModel):
    notes: str


class Notification(BaseModel):
    """Notification shown in the badge/panel UI."""

    model_config = ConfigDict(frozen=True)

    id: str
    recipient_id: str
    type: NotificationType
    title: str
    message: str
    timestamp: dt.datetime
    read: bool = False
    priority: NotificationPriority = NotificationPriority.medium
    appointment_id: Optional[str] = None


class NotificationCreate(BaseModel):
    recipient_id: str
    type: NotificationType = NotificationType.system
    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.low


class UnreadCount(BaseModel):
    count: int


class PrescriptionNotice(BaseModel):
    """A doctor reporting that a prescription was issued to a patient."""

    patient_id: str
    medication: str
    appointment_id: Optional[str] = None


class AuditEvent(BaseModel):
    """Structured audit trail event."""

    id: str
    actor: str
    action: str
    appointment_id: Optional[str]
    timestamp: dt.datetime
    payload_hash: str


class EarningsSummary(BaseModel):
    doctor_id: str
    paid_total: Decimal
    outstanding_total: Decimal
    completed_count: int


class Dashboard(BaseModel):
    """Projection bundle rendered by the patient and doctor dashboards."""

    upcoming: List[Appointment]
    confirmed_upcoming: List[Appointment] = Field(
        default_factory=list,
        description="Confirmed appointments on or after today, as on the patient home page",
    )
    past: List[Appointment]
    cancelled: List[Appointment]
    today: List[Appointment]
    unread_notifications: int


def parse_time_label(label: str) -> dt.time:
    """Parse a slot label such as ``"9:00 AM"`` or ``"14:30"``."""

    cleaned = " ".join(label.strip().upper().split())
    for pattern in ("%I:%M %p", "%I:%M%p", "%H:%M"):
        try:
            return dt.datetime.strptime(cleaned, pattern).time()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised time label: {label!r}")
