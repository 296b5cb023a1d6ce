"""Reminder endpoints"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.database import get_db
from agenda.models import ReminderStatus
from agenda.schemas.reminder import ReminderCreate, ReminderResponse, ReminderStatusUpdate, ReminderUpdate
from agenda.services.reminder.reminder_service import ReminderService

router = APIRouter(prefix="/reminders", tags=["reminders"])


def get_reminder_service(db: AsyncSession = Depends(get_db)) -> ReminderService:
    return ReminderService(db)


@router.get("", response_model=List[ReminderResponse])
async def list_reminders(
        status: Optional[ReminderStatus] = Query(None, description="pending, sent or failed"),
        client_id: Optional[UUID] = Query(None),
        service: ReminderService = Depends(get_reminder_service)
):
    if status is not None:
        return await service.list_by_status(status)
    if client_id is not None:
        return await service.list_for_client(client_id)
    return await service.list_all()


@router.get("/pending", response_model=List[ReminderResponse])
async def list_pending_reminders(
        limit: Optional[int] = Query(None, ge=1, le=500),
        service: ReminderService = Depends(get_reminder_service)
):
    """Pending reminders that are due now"""
    return await service.pending_to_send(limit=limit)


@router.get("/count")
async def count_reminders(
        status: ReminderStatus = Query(ReminderStatus.PENDING),
        service: ReminderService = Depends(get_reminder_service)
):
    return {"status": status.value, "total": await service.count_by_status(status)}


@router.post("", response_model=ReminderResponse, status_code=201)
async def create_reminder(data: ReminderCreate, service: ReminderService = Depends(get_reminder_service)):
    return await service.create(data)


@router.get("/{reminder_id}", response_model=ReminderResponse)
async def get_reminder(reminder_id: UUID, service: ReminderService = Depends(get_reminder_service)):
    return await service.get(reminder_id)


@router.patch("/{reminder_id}", response_model=ReminderResponse)
async def update_reminder(
        reminder_id: UUID,
        data: ReminderUpdate,
        service: ReminderService = Depends(get_reminder_service)
):
    return await service.update(reminder_id, data)


@router.patch("/{reminder_id}/status", response_model=ReminderResponse)
async def update_reminder_status(
        reminder_id: UUID,
        data: ReminderStatusUpdate,
        service: ReminderService = Depends(get_reminder_service)
):
    """Record a delivery result"""
    return await service.update_status(
        reminder_id,
        data.status,
        request_payload=data.request_payload,
        response_payload=data.response_payload,
        error_message=data.error_message,
    )


@router.delete("/{reminder_id}", status_code=204)
async def delete_reminder(reminder_id: UUID, service: ReminderService = Depends(get_reminder_service)):
    await service.delete(reminder_id)
    return Response(status_code=204)
