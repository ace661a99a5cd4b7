"""Notification dispatcher: turns domain events into badge/panel notifications."""
from __future__ import annotations

from . import schemas
from .events import (
    AppointmentBooked,
    AppointmentTransitioned,
    EventBus,
    PaymentProcessed,
    PrescriptionIssued,
)
from .logging_config import get_logger
from .storage import NotificationStore

logger = get_logger(__name__)

Kind = schemas.NotificationType
Priority = schemas.NotificationPriority


def _when(appointment: schemas.Appointment) -> str:
    return f"{appointment.date.strftime('%A, %B %d')} at {appointment.time}"


class NotificationDispatcher:
    """Observes ledger and domain events and files notifications.

    Purely observational: nothing here writes back to the ledger.
    """

    def __init__(self, store: NotificationStore) -> None:
        self.store = store

    def attach(self, bus: EventBus) -> None:
        bus.subscribe(AppointmentBooked, self.on_booked)
        bus.subscribe(AppointmentTransitioned, self.on_transitioned)
        bus.subscribe(PaymentProcessed, self.on_payment)
        bus.subscribe(PrescriptionIssued, self.on_prescription)

    def _notify(self, **fields) -> schemas.Notification:
        notification = self.store.add(**fields)
        logger.info(
            "notification_dispatched",
            notification_id=notification.id,
            recipient_id=notification.recipient_id,
            type=notification.type.value,
        )
        return notification

    def on_booked(self, event: AppointmentBooked) -> None:
        appointment = event.appointment
        self._notify(
            recipient_id=appointment.patient_id,
            type=Kind.reminder,
            title="Appointment Requested",
            message=(
                f"Your {appointment.type.value} consultation with "
                f"{appointment.doctor_name} on {_when(appointment)} awaits confirmation"
            ),
            priority=Priority.high,
            appointment_id=appointment.id,
        )
        self._notify(
            recipient_id=appointment.doctor_id,
            type=Kind.reminder,
            title="New Appointment Request",
            message=f"{appointment.patient_name} requested {_when(appointment)}",
            priority=Priority.high,
            appointment_id=appointment.id,
        )

    def on_transitioned(self, event: AppointmentTransitioned) -> None:
        appointment = event.appointment
        if appointment.status == schemas.AppointmentStatus.confirmed:
            self._notify(
                recipient_id=appointment.patient_id,
                type=Kind.appointment,
                title="Appointment Confirmed",
                message=f"{appointment.doctor_name} confirmed your appointment on {_when(appointment)}",
                priority=Priority.medium,
                appointment_id=appointment.id,
            )
        elif appointment.status == schemas.AppointmentStatus.cancelled:
            for recipient in (appointment.patient_id, appointment.doctor_id):
                self._notify(
                    recipient_id=recipient,
                    type=Kind.appointment,
                    title="Appointment Cancelled",
                    message=(
                        f"The appointment between {appointment.patient_name} and "
                        f"{appointment.doctor_name} on {_when(appointment)} was cancelled"
                    ),
                    priority=Priority.high,
                    appointment_id=appointment.id,
                )

    def on_payment(self, event: PaymentProcessed) -> None:
        appointment = event.appointment
        if event.captured:
            self._notify(
                recipient_id=appointment.patient_id,
                type=Kind.payment,
                title="Payment Received",
                message=f"Payment of ${appointment.amount} for {_when(appointment)} was processed",
                priority=Priority.medium,
                appointment_id=appointment.id,
            )
        else:
            self._notify(
                recipient_id=appointment.patient_id,
                type=Kind.payment,
                title="Payment Failed",
                message=f"We could not process ${appointment.amount} for {_when(appointment)}",
                priority=Priority.high,
                appointment_id=appointment.id,
            )

    def on_prescription(self, event: PrescriptionIssued) -> None:
        self._notify(
            recipient_id=event.patient_id,
            type=Kind.prescription,
            title="Prescription Ready",
            message=f"{event.doctor_name} issued your prescription for {event.medication}",
            priority=Priority.medium,
            appointment_id=event.appointment_id,
        )

    def notify(self, payload: schemas.NotificationCreate) -> schemas.Notification:
        """File a notification directly from a user-facing flow."""
        return self._notify(
            recipient_id=payload.recipient_id,
            type=payload.type,
            title=payload.title,
            message=payload.message,
            priority=payload.priority,
        )

    def mark_as_read(self, notification_id: str) -> schemas.Notification:
        return self.store.mark_as_read(notification_id)

    def mark_all_as_read(self, recipient_id: str) -> int:
        return self.store.mark_all_as_read(recipient_id)

    def delete(self, notification_id: str) -> None:
        self.store.delete(notification_id)

    def unread_count(self, recipient_id: str) -> int:
        return self.store.unread_count(recipient_id)
