"""Service catalog - categories and priced sub-services"""
import logging
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.errors import NotFoundError, ValidationError, translate_store_errors
from agenda.models import Service, SubService
from agenda.repositories.catalog_repository import CatalogRepository
from agenda.schemas.catalog import ServiceCreate, ServiceUpdate, SubServiceCreate, SubServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = CatalogRepository(db)

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required", {"name": ["Required"]})
        if len(name) > 200:
            raise ValidationError("Name cannot exceed 200 characters", {"name": ["Too long"]})
        return name

    @staticmethod
    def _check_price(price: Optional[int]) -> int:
        if price is None or price < 0:
            raise ValidationError("Price must be zero or greater", {"price": ["Must be a non-negative integer"]})
        return price

    # Services
    async def list_services(self) -> Sequence[Service]:
        with translate_store_errors("service listing"):
            return await self.repo.find_services()

    async def get_service(self, service_id: UUID) -> Service:
        with translate_store_errors("service lookup"):
            service = await self.repo.find_service_by_id(service_id)
        if not service:
            raise NotFoundError("Service", service_id)
        return service

    async def create_service(self, data: ServiceCreate) -> Service:
        name = self._clean_name(data.name)
        with translate_store_errors("service creation"):
            service = await self.repo.create_service(name)
            await self.db.commit()
        logger.info(f"Created service {service.id} ({name})")
        return service

    async def update_service(self, service_id: UUID, data: ServiceUpdate) -> Service:
        service = await self.get_service(service_id)
        if "name" not in data.model_fields_set:
            return service
        with translate_store_errors("service update"):
            service = await self.repo.update_service(service, name=self._clean_name(data.name))
            await self.db.commit()
        return service

    # Sub-services
    async def list_sub_services(self, service_id: Optional[UUID] = None) -> Sequence[SubService]:
        if service_id is not None:
            await self.get_service(service_id)
        with translate_store_errors("sub-service listing"):
            return await self.repo.find_sub_services(service_id)

    async def get_sub_service(self, sub_service_id: UUID) -> SubService:
        with translate_store_errors("sub-service lookup"):
            sub_service = await self.repo.find_sub_service_by_id(sub_service_id)
        if not sub_service:
            raise NotFoundError("Sub-service", sub_service_id)
        return sub_service

    async def create_sub_service(self, data: SubServiceCreate) -> SubService:
        name = self._clean_name(data.name)
        price = self._check_price(data.price)
        await self.get_service(data.service_id)
        with translate_store_errors("sub-service creation"):
            sub_service = await self.repo.create_sub_service(service_id=data.service_id, name=name, price=price)
            await self.db.commit()
        logger.info(f"Created sub-service {sub_service.id} ({name}, {price})")
        return sub_service

    async def update_sub_service(self, sub_service_id: UUID, data: SubServiceUpdate) -> SubService:
        """Price changes never touch existing appointments; their line items keep their own price"""
        sub_service = await self.get_sub_service(sub_service_id)
        fields = data.model_fields_set
        updates: Dict[str, Any] = {}

        if "name" in fields:
            updates["name"] = self._clean_name(data.name)
        if "price" in fields:
            updates["price"] = self._check_price(data.price)
        if "service_id" in fields and data.service_id is not None:
            await self.get_service(data.service_id)
            updates["service_id"] = data.service_id

        if not updates:
            return sub_service
        with translate_store_errors("sub-service update"):
            sub_service = await self.repo.update_sub_service(sub_service, **updates)
            await self.db.commit()
        return sub_service

    async def delete_sub_service(self, sub_service_id: UUID) -> None:
        """Soft delete; no longer selectable for new bookings"""
        sub_service = await self.get_sub_service(sub_service_id)
        with translate_store_errors("sub-service deletion"):
            await self.repo.soft_delete_sub_service(sub_service)
            await self.db.commit()
        logger.info(f"Deleted sub-service {sub_service_id}")
