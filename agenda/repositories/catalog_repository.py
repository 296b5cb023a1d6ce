"""Service catalog repository - services and sub-services"""
from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.models import Service, SubService
from agenda.models.base import utcnow


class CatalogRepository:
    """Repository for service categories and their priced sub-services"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Service categories
    async def find_services(self) -> Sequence[Service]:
        result = await self.db.execute(select(Service).order_by(Service.name.asc()))
        return result.scalars().all()

    async def find_service_by_id(self, service_id: UUID) -> Optional[Service]:
        result = await self.db.execute(select(Service).where(Service.id == service_id))
        return result.scalar_one_or_none()

    async def create_service(self, name: str) -> Service:
        service = Service(name=name)
        self.db.add(service)
        await self.db.flush()
        return service

    async def update_service(self, service: Service, **updates) -> Service:
        for key, value in updates.items():
            setattr(service, key, value)
        service.updated_at = utcnow()
        await self.db.flush()
        return service

    # Sub-services
    async def find_sub_services(self, service_id: Optional[UUID] = None) -> Sequence[SubService]:
        """Active sub-services, optionally restricted to one service"""
        query = select(SubService).where(SubService.deleted_at.is_(None))
        if service_id is not None:
            query = query.where(SubService.service_id == service_id)
        result = await self.db.execute(query.order_by(SubService.name.asc()))
        return result.scalars().all()

    async def find_sub_service_by_id(
            self,
            sub_service_id: UUID,
            include_deleted: bool = False
    ) -> Optional[SubService]:
        query = select(SubService).where(SubService.id == sub_service_id)
        if not include_deleted:
            query = query.where(SubService.deleted_at.is_(None))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_sub_services_by_ids(
            self,
            ids: Iterable[UUID],
            include_deleted: bool = False
    ) -> Sequence[SubService]:
        """
        Batch read. Returns only the ids that resolve; callers diff against
        the requested set to find missing ones.
        """
        ids = list(ids)
        if not ids:
            return []
        query = select(SubService).where(SubService.id.in_(ids))
        if not include_deleted:
            query = query.where(SubService.deleted_at.is_(None))
        result = await self.db.execute(query)
        return result.scalars().all()

    async def create_sub_service(self, **data) -> SubService:
        sub_service = SubService(**data)
        self.db.add(sub_service)
        await self.db.flush()
        return sub_service

    async def update_sub_service(self, sub_service: SubService, **updates) -> SubService:
        for key, value in updates.items():
            setattr(sub_service, key, value)
        sub_service.updated_at = utcnow()
        await self.db.flush()
        return sub_service

    async def soft_delete_sub_service(self, sub_service: SubService) -> None:
        sub_service.deleted_at = utcnow()
        await self.db.flush()
