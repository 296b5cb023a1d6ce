"""Reminder repository - scheduled outbound messages"""
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from agenda.models import Appointment, Reminder, ReminderStatus
from agenda.models.base import utcnow


class ReminderRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self):
        # populate_existing also refreshes the linked appointment, so its
        # reminder list is reloaded with it
        return (
            select(Reminder)
            .options(
                selectinload(Reminder.client),
                selectinload(Reminder.template),
                selectinload(Reminder.appointment).selectinload(
                    Appointment.reminders.and_(Reminder.deleted_at.is_(None))
                ),
            )
            .where(Reminder.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )

    async def find_all(self) -> Sequence[Reminder]:
        result = await self.db.execute(self._base_query().order_by(Reminder.send_at.desc()))
        return result.scalars().all()

    async def find_by_id(self, reminder_id: UUID) -> Optional[Reminder]:
        result = await self.db.execute(self._base_query().where(Reminder.id == reminder_id))
        return result.scalar_one_or_none()

    async def find_by_status(self, status: ReminderStatus) -> Sequence[Reminder]:
        result = await self.db.execute(
            self._base_query()
            .where(Reminder.status == status.value)
            .order_by(Reminder.send_at.asc())
        )
        return result.scalars().all()

    async def find_by_client(self, client_id: UUID) -> Sequence[Reminder]:
        result = await self.db.execute(
            self._base_query()
            .where(Reminder.client_id == client_id)
            .order_by(Reminder.send_at.desc())
        )
        return result.scalars().all()

    async def find_pending_before(self, before: datetime, limit: Optional[int] = None) -> Sequence[Reminder]:
        """Pending reminders whose send time has been reached"""
        query = (
            self._base_query()
            .where(
                Reminder.status == ReminderStatus.PENDING.value,
                Reminder.send_at <= before,
            )
            .order_by(Reminder.send_at.asc())
        )
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def count_by_status(self, status: ReminderStatus) -> int:
        result = await self.db.execute(
            select(func.count(Reminder.id)).where(
                Reminder.status == status.value,
                Reminder.deleted_at.is_(None),
            )
        )
        return result.scalar_one()

    async def create(self, **data) -> Reminder:
        reminder = Reminder(**data)
        self.db.add(reminder)
        await self.db.flush()
        return reminder

    async def update(self, reminder: Reminder, **updates) -> Reminder:
        for key, value in updates.items():
            setattr(reminder, key, value)
        reminder.updated_at = utcnow()
        await self.db.flush()
        return reminder

    async def soft_delete(self, reminder: Reminder) -> None:
        reminder.deleted_at = utcnow()
        await self.db.flush()
