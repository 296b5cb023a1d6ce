"""Client repository - Database operations for clients"""
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.models import Appointment, Client
from agenda.models.base import utcnow


class ClientRepository:
    """Repository for client database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, client_id: UUID, include_deleted: bool = False) -> Optional[Client]:
        """Get a specific client by ID"""
        query = select(Client).where(Client.id == client_id)
        if not include_deleted:
            query = query.where(Client.deleted_at.is_(None))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_all(self) -> Sequence[Client]:
        """Get all non-deleted clients ordered by name"""
        result = await self.db.execute(
            select(Client).where(Client.deleted_at.is_(None)).order_by(Client.name.asc())
        )
        return result.scalars().all()

    async def search(self, term: str) -> Sequence[Client]:
        """Case-insensitive search on name, contact and email"""
        pattern = f"%{term.lower()}%"
        result = await self.db.execute(
            select(Client)
            .where(
                Client.deleted_at.is_(None),
                or_(
                    func.lower(Client.name).like(pattern),
                    func.lower(Client.contact).like(pattern),
                    func.lower(Client.email).like(pattern),
                ),
            )
            .order_by(Client.name.asc())
        )
        return result.scalars().all()

    async def find_by_contact(self, contact: str) -> Optional[Client]:
        result = await self.db.execute(
            select(Client).where(Client.contact == contact, Client.deleted_at.is_(None)).limit(1)
        )
        return result.scalar_one_or_none()

    async def find_by_minor_status(self, is_minor: bool) -> Sequence[Client]:
        result = await self.db.execute(
            select(Client)
            .where(Client.is_minor == is_minor, Client.deleted_at.is_(None))
            .order_by(Client.name.asc())
        )
        return result.scalars().all()

    async def count(self) -> int:
        result = await self.db.execute(
            select(func.count(Client.id)).where(Client.deleted_at.is_(None))
        )
        return result.scalar_one()

    async def create(self, **client_data) -> Client:
        """Create a new client"""
        client = Client(**client_data)
        self.db.add(client)
        await self.db.flush()
        return client

    async def update(self, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            setattr(client, key, value)
        client.updated_at = utcnow()
        await self.db.flush()
        return client

    async def soft_delete(self, client: Client) -> None:
        client.deleted_at = utcnow()
        await self.db.flush()

    async def get_stats(self, client_id: UUID) -> dict:
        """Billing totals over the client's non-cancelled appointments"""
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Appointment.total_amount), 0),
                func.count(Appointment.id),
                func.max(Appointment.scheduled_at),
            ).where(
                Appointment.client_id == client_id,
                Appointment.cancelled.is_(False),
            )
        )
        total_billed, appointment_count, last_visit = result.one()
        return {
            "total_billed": int(total_billed or 0),
            "appointment_count": int(appointment_count or 0),
            "last_visit": last_visit,
        }
