"""Open-slot computation for a single doctor and date."""
from __future__ import annotations

from datetime import date
from typing import Optional

from . import schemas
from .storage import AppointmentLedger, DoctorDirectory


class AvailabilityModel:
    """Derives bookable slots from the weekly offering, blocks and bookings.

    Nothing here is stored: a cancelled appointment frees its slot simply by
    leaving the set of active records.
    """

    def __init__(self, directory: DoctorDirectory, ledger: AppointmentLedger) -> None:
        self.directory = directory
        self.ledger = ledger

    def open_slots(self, doctor_id: str, day: date) -> list[str]:
        availability = self.directory.availability(doctor_id)
        offered = availability.weekly.get(schemas.Weekday.of(day), [])
        blocked = [
            (
                schemas.parse_time_label(interval.start_time),
                schemas.parse_time_label(interval.end_time),
            )
            for interval in availability.blocked
            if interval.date == day
        ]
        taken = self.ledger.occupied_times(doctor_id, day)
        slots = []
        for label in offered:
            slot = schemas.parse_time_label(label)
            if slot in taken:
                continue
            if any(start <= slot < end for start, end in blocked):
                continue
            slots.append(label)
        return slots

    def match_open_slot(self, doctor_id: str, day: date, label: str) -> Optional[str]:
        """Return the doctor's own label for ``label`` if that slot is open."""
        try:
            wanted = schemas.parse_time_label(label)
        except ValueError:
            return None
        return next(
            (
                offered
                for offered in self.open_slots(doctor_id, day)
                if schemas.parse_time_label(offered) == wanted
            ),
            None,
        )
