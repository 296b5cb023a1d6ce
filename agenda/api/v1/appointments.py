# ============================================================================
# agenda/api/v1/appointments.py
# Booking endpoints - thin HTTP layer over the booking and query services
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from agenda.config.database import get_db
from agenda.config.settings import get_settings
from agenda.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentUpdate,
    DailyCountResponse,
)
from agenda.services.appointment.appointment_query_service import AppointmentQueryService
from agenda.services.appointment.booking_service import AppointmentBookingService

router = APIRouter(prefix="/appointments", tags=["appointments"])


def get_booking_service(db: AsyncSession = Depends(get_db)) -> AppointmentBookingService:
    return AppointmentBookingService(db)


def get_query_service(db: AsyncSession = Depends(get_db)) -> AppointmentQueryService:
    return AppointmentQueryService(db)


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
        data: AppointmentCreate,
        service: AppointmentBookingService = Depends(get_booking_service)
):
    """Book an appointment for one client with one or more sub-services"""
    appointment = await service.create(data)
    return AppointmentResponse.from_model(appointment)


@router.get("", response_model=AppointmentListResponse)
async def list_appointments(
        start: Optional[datetime] = Query(None, description="Appointments at or after this instant"),
        end: Optional[datetime] = Query(None, description="Appointments at or before this instant"),
        client_id: Optional[UUID] = Query(None, description="Filter by client"),
        include_cancelled: bool = Query(True),
        service: AppointmentQueryService = Depends(get_query_service)
):
    appointments = await service.list(
        start=start,
        end=end,
        client_id=client_id,
        include_cancelled=include_cancelled,
    )
    return AppointmentListResponse(
        total=len(appointments),
        appointments=[AppointmentResponse.from_model(a) for a in appointments],
    )


@router.get("/stats/daily", response_model=DailyCountResponse)
async def count_appointments_for_day(
        day: date = Query(..., description="Calendar day (YYYY-MM-DD)"),
        tz: Optional[str] = Query(None, description="IANA timezone; defaults to the configured one"),
        service: AppointmentQueryService = Depends(get_query_service)
):
    """Number of appointments on a calendar day, cancelled ones included"""
    tz_name = tz or get_settings().DEFAULT_TIMEZONE
    total = await service.count_for_day(day, tz_name)
    return DailyCountResponse(day=day.isoformat(), timezone=tz_name, total_appointments=total)


@router.get("/by-client/{client_id}", response_model=AppointmentListResponse)
async def list_client_appointments(
        client_id: UUID = Path(..., description="The client ID"),
        service: AppointmentQueryService = Depends(get_query_service)
):
    appointments = await service.list_for_client(client_id)
    return AppointmentListResponse(
        total=len(appointments),
        appointments=[AppointmentResponse.from_model(a) for a in appointments],
    )


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentQueryService = Depends(get_query_service)
):
    return AppointmentResponse.from_model(await service.get(appointment_id))


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
        data: AppointmentUpdate,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentBookingService = Depends(get_booking_service)
):
    """
    Partial update. Sending sub_service_ids replaces every line item
    and recomputes the total.
    """
    appointment = await service.update(appointment_id, data)
    return AppointmentResponse.from_model(appointment)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentBookingService = Depends(get_booking_service)
):
    return AppointmentResponse.from_model(await service.cancel(appointment_id))


@router.post("/{appointment_id}/restore", response_model=AppointmentResponse)
async def restore_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentBookingService = Depends(get_booking_service)
):
    return AppointmentResponse.from_model(await service.restore(appointment_id))
