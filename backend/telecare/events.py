"""Domain events and the in-process bus that carries them.

The ledger publishes an event after every committed write. Observers (the
notification dispatcher, the audit trail) subscribe per event type and run
synchronously in subscription order.
"""
from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Optional

from . import schemas
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AppointmentBooked:
    appointment: schemas.Appointment
    actor_id: str


@dataclass(frozen=True)
class AppointmentTransitioned:
    appointment: schemas.Appointment
    previous: schemas.AppointmentStatus
    actor_id: str


@dataclass(frozen=True)
class NotesAnnotated:
    appointment: schemas.Appointment
    actor_id: str


@dataclass(frozen=True)
class PaymentProcessed:
    appointment: schemas.Appointment
    captured: bool
    actor_id: str


@dataclass(frozen=True)
class PrescriptionIssued:
    doctor_id: str
    doctor_name: str
    patient_id: str
    medication: str
    appointment_id: Optional[str] = None


Handler = Callable[[object], None]


class EventBus:
    """Synchronous publish/subscribe keyed by event class."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: type, handler: Handler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def publish(self, event: object) -> None:
        with self._lock:
            handlers = list(self._handlers.get(type(event), ()))
        for handler in handlers:
            # The write is already committed; a failing observer must not
            # make it look rolled back to the caller.
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "event_handler_failed",
                    event_type=type(event).__name__,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                )

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()
