"""Appointment repository - Database operations for appointments"""
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from agenda.models import Appointment, AppointmentLineItem, Reminder
from agenda.models.base import utcnow


class AppointmentRepository:
    """
    Plain data access. Business validation lives in the booking service;
    nothing here commits.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _joined_query(self):
        # populate_existing: re-reads always reflect the latest committed rows.
        # Soft-deleted reminders stay off the appointment.
        return (
            select(Appointment)
            .options(
                selectinload(Appointment.client),
                selectinload(Appointment.line_items).selectinload(AppointmentLineItem.sub_service),
                selectinload(Appointment.reminders.and_(Reminder.deleted_at.is_(None))),
            )
            .execution_options(populate_existing=True)
        )

    async def find_by_id(self, appointment_id: UUID) -> Optional[Appointment]:
        """Get an appointment joined with client, line items and reminders"""
        result = await self.db.execute(self._joined_query().where(Appointment.id == appointment_id))
        return result.scalar_one_or_none()

    async def find_by_client(self, client_id: UUID) -> Sequence[Appointment]:
        result = await self.db.execute(
            self._joined_query()
            .where(Appointment.client_id == client_id)
            .order_by(Appointment.scheduled_at.desc())
        )
        return result.scalars().all()

    async def find_by_date_range(
            self,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None,
            client_id: Optional[UUID] = None,
            include_cancelled: bool = True
    ) -> Sequence[Appointment]:
        """Appointments with start <= scheduled_at <= end, oldest first"""
        query = self._joined_query()
        if start is not None:
            query = query.where(Appointment.scheduled_at >= start)
        if end is not None:
            query = query.where(Appointment.scheduled_at <= end)
        if client_id is not None:
            query = query.where(Appointment.client_id == client_id)
        if not include_cancelled:
            query = query.where(Appointment.cancelled.is_(False))
        result = await self.db.execute(query.order_by(Appointment.scheduled_at.asc()))
        return result.scalars().all()

    async def count_by_date(self, start: datetime, end: datetime) -> int:
        """Count appointments with start <= scheduled_at < end (one calendar day)"""
        result = await self.db.execute(
            select(func.count(Appointment.id)).where(
                Appointment.scheduled_at >= start,
                Appointment.scheduled_at < end,
            )
        )
        return result.scalar_one()

    async def create(self, **data) -> Appointment:
        appointment = Appointment(**data)
        self.db.add(appointment)
        await self.db.flush()
        return appointment

    async def update(self, appointment: Appointment, **updates) -> Appointment:
        """Patch fields and touch updated_at"""
        for key, value in updates.items():
            setattr(appointment, key, value)
        appointment.updated_at = utcnow()
        await self.db.flush()
        return appointment

    async def mark_cancelled(self, appointment_id: UUID) -> None:
        """Idempotent single-statement cancel, safe to retry"""
        await self.db.execute(
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .values(cancelled=True, updated_at=utcnow())
        )
