"""Line-item repository - appointment / sub-service junction rows"""
from typing import Iterable, List
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.models import AppointmentLineItem, SubService


class LineItemRepository:
    """Line items are created and replaced wholesale, never edited in place"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_many(
            self,
            appointment_id: UUID,
            sub_services: Iterable[SubService]
    ) -> List[AppointmentLineItem]:
        """One row per sub-service, copying its current price; position keeps the selection order"""
        items = [
            AppointmentLineItem(
                appointment_id=appointment_id,
                sub_service_id=sub_service.id,
                price=sub_service.price,
                position=position,
            )
            for position, sub_service in enumerate(sub_services)
        ]
        self.db.add_all(items)
        await self.db.flush()
        return items

    async def delete_for_appointment(self, appointment_id: UUID) -> None:
        await self.db.execute(
            delete(AppointmentLineItem).where(AppointmentLineItem.appointment_id == appointment_id)
        )

    async def replace(
            self,
            appointment_id: UUID,
            sub_services: Iterable[SubService]
    ) -> List[AppointmentLineItem]:
        """Delete every existing row for the appointment, then insert the new set"""
        await self.delete_for_appointment(appointment_id)
        return await self.create_many(appointment_id, sub_services)
