"""Read-only views over the ledger used by the dashboards.

All functions are pure: they take a sequence of appointments and the current
date and return new lists in chronological order.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from . import schemas
from .storage import chronological

Status = schemas.AppointmentStatus


def for_user(
    records: Iterable[schemas.Appointment],
    user_id: str,
    role: schemas.UserRole,
    status: Optional[Status] = None,
) -> list[schemas.Appointment]:
    """Appointments visible to a user; administrators see every record."""
    if role == schemas.UserRole.doctor:
        records = [record for record in records if record.doctor_id == user_id]
    elif role == schemas.UserRole.patient:
        records = [record for record in records if record.patient_id == user_id]
    if status is not None:
        records = [record for record in records if record.status == status]
    return sorted(records, key=chronological)


def upcoming(records: Iterable[schemas.Appointment], today: date) -> list[schemas.Appointment]:
    return sorted(
        (
            record
            for record in records
            if record.status in schemas.ACTIVE_STATUSES and record.date >= today
        ),
        key=chronological,
    )


def confirmed_upcoming(
    records: Iterable[schemas.Appointment], today: date
) -> list[schemas.Appointment]:
    """Confirmed appointments on or after today; pending requests are left out."""
    return [record for record in upcoming(records, today) if record.status == Status.confirmed]


def past(records: Iterable[schemas.Appointment], today: date) -> list[schemas.Appointment]:
    """Completed appointments plus anything dated before today.

    Cancelled appointments are listed only by ``cancelled`` so the dashboard
    tabs never overlap.
    """
    return sorted(
        (
            record
            for record in records
            if record.status != Status.cancelled
            and (record.status == Status.completed or record.date < today)
        ),
        key=chronological,
    )


def cancelled(records: Iterable[schemas.Appointment]) -> list[schemas.Appointment]:
    return sorted(
        (record for record in records if record.status == Status.cancelled),
        key=chronological,
    )


def todays_schedule(
    records: Iterable[schemas.Appointment], doctor_id: str, today: date
) -> list[schemas.Appointment]:
    """A doctor's confirmed appointments for today."""
    return sorted(
        (
            record
            for record in records
            if record.doctor_id == doctor_id
            and record.date == today
            and record.status == Status.confirmed
        ),
        key=chronological,
    )


def earnings(records: Iterable[schemas.Appointment], doctor_id: str) -> schemas.EarningsSummary:
    paid_total = Decimal("0")
    outstanding_total = Decimal("0")
    completed_count = 0
    for record in records:
        if record.doctor_id != doctor_id or record.status == Status.cancelled:
            continue
        if record.paid:
            paid_total += record.amount
        elif record.status in (Status.confirmed, Status.completed):
            outstanding_total += record.amount
        if record.status == Status.completed:
            completed_count += 1
    return schemas.EarningsSummary(
        doctor_id=doctor_id,
        paid_total=paid_total,
        outstanding_total=outstanding_total,
        completed_count=completed_count,
    )


def dashboard(
    records: Iterable[schemas.Appointment],
    actor: schemas.Actor,
    today: date,
    unread_notifications: int,
) -> schemas.Dashboard:
    mine = for_user(records, actor.user_id, actor.role)
    if actor.role == schemas.UserRole.doctor:
        today_list = todays_schedule(mine, actor.user_id, today)
    else:
        today_list = [
            record
            for record in mine
            if record.date == today and record.status == Status.confirmed
        ]
    return schemas.Dashboard(
        upcoming=upcoming(mine, today),
        confirmed_upcoming=confirmed_upcoming(mine, today),
        past=past(mine, today),
        cancelled=cancelled(mine),
        today=today_list,
        unread_notifications=unread_notifications,
    )
