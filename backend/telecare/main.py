"""FastAPI application exposing the Telecare booking core."""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from . import errors, projections, schemas
from .config import Settings, get_settings
from .logging_config import (
    bind_request_id,
    clear_request_context,
    generate_request_id,
    get_logger,
    setup_structured_logging,
)
from .services import Services, build_services
from .storage import utcnow

logger = get_logger(__name__)

ERROR_STATUS: dict[type, int] = {
    errors.NotFound: 404,
    errors.ValidationError: 400,
    errors.SlotUnavailable: 409,
    errors.SlotConflict: 409,
    errors.InvalidTransition: 409,
}


def to_http_error(error: errors.BookingError) -> HTTPException:
    status_code = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(error, kind)), 400
    )
    headers = {"Retry-After": "1"} if error.retryable else None
    return HTTPException(
        status_code=status_code,
        detail={"error": type(error).__name__, "message": str(error)},
        headers=headers,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_current_actor(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
) -> schemas.Actor:
    """Identity as asserted by the upstream session provider."""
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        role = schemas.UserRole(x_user_role)
    except ValueError as error:
        raise HTTPException(status_code=401, detail="Unknown role") from error
    return schemas.Actor(user_id=x_user_id, role=role, display_name=x_user_name)


def require_roles(actor: schemas.Actor, roles: Sequence[schemas.UserRole]) -> None:
    if actor.role not in roles:
        raise HTTPException(status_code=403, detail="Insufficient permissions")


def require_doctor_owner(actor: schemas.Actor, doctor_id: str) -> None:
    """Only the doctor themself (or an administrator) manages a doctor's data."""
    if actor.role == schemas.UserRole.admin:
        return
    if actor.role != schemas.UserRole.doctor or actor.user_id != doctor_id:
        raise HTTPException(status_code=403, detail="Doctor mismatch for this resource")


def require_party(actor: schemas.Actor, appointment: schemas.Appointment) -> None:
    if actor.role == schemas.UserRole.admin:
        return
    if actor.role == schemas.UserRole.doctor and actor.user_id == appointment.doctor_id:
        return
    if actor.role == schemas.UserRole.patient and actor.user_id == appointment.patient_id:
        return
    raise HTTPException(status_code=403, detail="Not a party to this appointment")


def load_appointment(services: Services, appointment_id: str) -> schemas.Appointment:
    try:
        return services.get_appointment(appointment_id)
    except errors.NotFound as error:
        raise to_http_error(error) from error


router = APIRouter()


@router.get("/health")
async def health(services: Services = Depends(get_services)) -> dict:
    return {"status": "ok", "appointments": len(services.ledger.list_all())}


@router.get("/doctors", response_model=list[schemas.Doctor])
async def list_doctors(
    specialty: Optional[str] = None,
    location: Optional[str] = None,
    language: Optional[str] = None,
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    services: Services = Depends(get_services),
) -> list[schemas.Doctor]:
    """Directory search with the portal's filters."""

    return services.directory.search(
        specialty=specialty, location=location, language=language, min_rating=min_rating
    )


@router.get("/doctors/{doctor_id}", response_model=schemas.Doctor)
async def get_doctor(
    doctor_id: str, services: Services = Depends(get_services)
) -> schemas.Doctor:
    try:
        return services.directory.get(doctor_id)
    except errors.NotFound as error:
        raise to_http_error(error) from error


@router.get("/doctors/{doctor_id}/availability", response_model=schemas.DoctorAvailability)
async def get_availability(
    doctor_id: str, services: Services = Depends(get_services)
) -> schemas.DoctorAvailability:
    try:
        return services.directory.availability(doctor_id)
    except errors.NotFound as error:
        raise to_http_error(error) from error


@router.put(
    "/doctors/{doctor_id}/availability/{weekday}",
    response_model=schemas.DoctorAvailability,
)
async def set_weekly_hours(
    doctor_id: str,
    weekday: schemas.Weekday,
    payload: schemas.WeeklyHoursUpdate,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.DoctorAvailability:
    require_doctor_owner(current, doctor_id)
    try:
        return services.directory.set_weekly_hours(doctor_id, weekday, payload.times)
    except errors.BookingError as error:
        raise to_http_error(error) from error


@router.post(
    "/doctors/{doctor_id}/blocked-intervals",
    response_model=schemas.BlockedInterval,
    status_code=201,
)
async def add_blocked_interval(
    doctor_id: str,
    payload: schemas.BlockedIntervalCreate,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.BlockedInterval:
    require_doctor_owner(current, doctor_id)
    try:
        return services.directory.add_blocked_interval(doctor_id, payload)
    except errors.BookingError as error:
        raise to_http_error(error) from error


@router.delete("/doctors/{doctor_id}/blocked-intervals/{interval_id}", status_code=204)
async def remove_blocked_interval(
    doctor_id: str,
    interval_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> Response:
    require_doctor_owner(current, doctor_id)
    try:
        services.directory.remove_blocked_interval(doctor_id, interval_id)
    except errors.NotFound as error:
        raise to_http_error(error) from error
    return Response(status_code=204)


@router.get("/doctors/{doctor_id}/slots", response_model=list[str])
async def list_open_slots(
    doctor_id: str,
    day: date = Query(..., alias="date"),
    services: Services = Depends(get_services),
) -> list[str]:
    """Open start times for one doctor on one date; empty when fully booked."""

    try:
        return services.list_open_slots(doctor_id, day)
    except errors.NotFound as error:
        raise to_http_error(error) from error


@router.get(
    "/doctors/{doctor_id}/schedule/today", response_model=list[schemas.Appointment]
)
async def todays_schedule(
    doctor_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> list[schemas.Appointment]:
    require_doctor_owner(current, doctor_id)
    return projections.todays_schedule(
        services.ledger.list_all(), doctor_id, services.today()
    )


@router.get("/doctors/{doctor_id}/earnings", response_model=schemas.EarningsSummary)
async def doctor_earnings(
    doctor_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.EarningsSummary:
    require_doctor_owner(current, doctor_id)
    return projections.earnings(services.ledger.list_all(), doctor_id)


@router.get("/appointments", response_model=list[schemas.Appointment])
async def list_appointments(
    status: Optional[schemas.AppointmentStatus] = None,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> list[schemas.Appointment]:
    return services.list_appointments(current.user_id, current.role, status)


@router.post("/appointments", response_model=schemas.Appointment, status_code=201)
def book_appointment(
    payload: schemas.BookingRequest,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Appointment:
    require_roles(current, [schemas.UserRole.patient, schemas.UserRole.admin])
    if current.role == schemas.UserRole.patient:
        patient_id = current.user_id
        patient_name = current.display_name or payload.patient_name
    else:
        if not payload.patient_id:
            raise HTTPException(status_code=400, detail="patient_id required for admin bookings")
        patient_id = payload.patient_id
        patient_name = payload.patient_name
    try:
        return services.book(
            patient_id=patient_id,
            doctor_id=payload.doctor_id,
            date=payload.date,
            time=payload.time,
            type=payload.type,
            symptoms=payload.symptoms,
            notes=payload.notes,
            patient_name=patient_name,
            actor_id=current.user_id,
        )
    except errors.BookingError as error:
        raise to_http_error(error) from error


@router.get("/appointments/{appointment_id}", response_model=schemas.Appointment)
async def get_appointment(
    appointment_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Appointment:
    appointment = load_appointment(services, appointment_id)
    require_party(current, appointment)
    return appointment


@router.post(
    "/appointments/{appointment_id}/transition", response_model=schemas.Appointment
)
def transition_appointment(
    appointment_id: str,
    payload: schemas.TransitionRequest,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Appointment:
    require_party(current, load_appointment(services, appointment_id))
    try:
        return services.transition(
            appointment_id,
            payload.status,
            actor=current,
            expected_last_updated=payload.expected_last_updated,
        )
    except errors.BookingError as error:
        raise to_http_error(error) from error


@router.post("/appointments/{appointment_id}/cancel", response_model=schemas.Appointment)
def cancel_appointment(
    appointment_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Appointment:
    require_party(current, load_appointment(services, appointment_id))
    try:
        return services.cancel(appointment_id, actor=current)
    except errors.BookingError as error:
        raise to_http_error(error) from error


@router.put("/appointments/{appointment_id}/notes", response_model=schemas.Appointment)
def annotate_notes(
    appointment_id: str,
    payload: schemas.NotesRequest,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Appointment:
    require_roles(current, [schemas.UserRole.doctor, schemas.UserRole.admin])
    require_party(current, load_appointment(services, appointment_id))
    try:
        return services.annotate_notes(appointment_id, payload.notes, actor=current)
    except errors.BookingError as error:
        raise to_http_error(error) from error


@router.post("/appointments/{appointment_id}/payment", response_model=schemas.Appointment)
def pay_appointment(
    appointment_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Appointment:
    require_roles(current, [schemas.UserRole.patient, schemas.UserRole.admin])
    require_party(current, load_appointment(services, appointment_id))
    try:
        return services.pay(appointment_id, actor=current)
    except errors.BookingError as error:
        raise to_http_error(error) from error


@router.get(
    "/appointments/{appointment_id}/history", response_model=list[schemas.AuditEvent]
)
async def appointment_history(
    appointment_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> list[schemas.AuditEvent]:
    require_party(current, load_appointment(services, appointment_id))
    return services.audit.for_appointment(appointment_id)


@router.get("/dashboard", response_model=schemas.Dashboard)
async def dashboard(
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Dashboard:
    return projections.dashboard(
        services.ledger.list_all(),
        current,
        services.today(),
        services.dispatcher.unread_count(current.user_id),
    )


@router.get("/notifications", response_model=list[schemas.Notification])
async def list_notifications(
    unread_only: bool = False,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> list[schemas.Notification]:
    return services.notifications.list_for(current.user_id, unread_only=unread_only)


@router.get("/notifications/unread-count", response_model=schemas.UnreadCount)
async def unread_count(
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.UnreadCount:
    return schemas.UnreadCount(count=services.dispatcher.unread_count(current.user_id))


@router.post("/notifications", response_model=schemas.Notification, status_code=201)
async def create_notification(
    payload: schemas.NotificationCreate,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Notification:
    require_roles(current, [schemas.UserRole.admin])
    return services.dispatcher.notify(payload)


@router.post("/notifications/read-all", response_model=schemas.UnreadCount)
async def mark_all_notifications_read(
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.UnreadCount:
    services.dispatcher.mark_all_as_read(current.user_id)
    return schemas.UnreadCount(count=services.dispatcher.unread_count(current.user_id))


def load_own_notification(
    services: Services, actor: schemas.Actor, notification_id: str
) -> schemas.Notification:
    try:
        notification = services.notifications.get(notification_id)
    except errors.NotFound as error:
        raise to_http_error(error) from error
    if notification.recipient_id != actor.user_id:
        raise HTTPException(status_code=403, detail="Not your notification")
    return notification


@router.post("/notifications/{notification_id}/read", response_model=schemas.Notification)
async def mark_notification_read(
    notification_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> schemas.Notification:
    load_own_notification(services, current, notification_id)
    try:
        return services.dispatcher.mark_as_read(notification_id)
    except errors.NotFound as error:
        raise to_http_error(error) from error


@router.delete("/notifications/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: str,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> Response:
    load_own_notification(services, current, notification_id)
    try:
        services.dispatcher.delete(notification_id)
    except errors.NotFound as error:
        raise to_http_error(error) from error
    return Response(status_code=204)


@router.post("/prescriptions/issued", status_code=202)
async def report_prescription(
    payload: schemas.PrescriptionNotice,
    current: schemas.Actor = Depends(get_current_actor),
    services: Services = Depends(get_services),
) -> dict:
    require_roles(current, [schemas.UserRole.doctor])
    try:
        doctor = services.directory.get(current.user_id)
    except errors.NotFound as error:
        raise to_http_error(error) from error
    services.report_prescription(doctor, payload)
    return {"status": "accepted"}


def create_app(
    settings: Optional[Settings] = None,
    *,
    clock: Callable[[], datetime] = utcnow,
) -> FastAPI:
    settings = settings or get_settings()
    setup_structured_logging(settings.log_level)
    services = build_services(settings, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        services.shutdown()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Appointment booking and lifecycle engine for the telemedicine portal. "
            "Validates slots against doctor availability, keeps the appointment "
            "ledger consistent and files notifications for every change."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[],
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        bind_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(router)
    return app


app = create_app()
