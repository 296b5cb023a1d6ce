"""Client service - Business logic for client operations"""
import logging
import re
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.errors import BusinessLogicError, NotFoundError, ValidationError, translate_store_errors
from agenda.models import Client
from agenda.repositories.client_repository import ClientRepository
from agenda.schemas.client import ClientCreate, ClientStats, ClientUpdate

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = ClientRepository(db)

    # ------------------------------------------------------------------
    # Field validation
    # ------------------------------------------------------------------
    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if len(name) < 2:
            raise ValidationError("Name must be at least 2 characters", {"name": ["Too short"]})
        if len(name) > 200:
            raise ValidationError("Name cannot exceed 200 characters", {"name": ["Too long"]})
        return name

    @staticmethod
    def _clean_email(email: Optional[str]) -> Optional[str]:
        if email is None or not email.strip():
            return None
        email = email.strip()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Invalid email format", {"email": [f"'{email}' is not a valid email"]})
        return email

    @staticmethod
    def _clean_contact(contact: Optional[str]) -> Optional[str]:
        if contact is None or not contact.strip():
            return None
        contact = contact.strip()
        if len(contact) < 6:
            raise ValidationError("Contact must be at least 6 characters", {"contact": ["Too short"]})
        return contact

    async def _ensure_contact_unique(self, contact: Optional[str], exclude_id: Optional[UUID] = None) -> None:
        if not contact:
            return
        existing = await self.repo.find_by_contact(contact)
        if existing and existing.id != exclude_id:
            raise BusinessLogicError(
                f"A client with contact {contact} already exists",
                {"existing_client_id": str(existing.id)},
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def get_clients(self) -> Sequence[Client]:
        with translate_store_errors("client listing"):
            return await self.repo.find_all()

    async def get_client(self, client_id: UUID) -> Client:
        with translate_store_errors("client lookup"):
            client = await self.repo.find_by_id(client_id)
        if not client:
            raise NotFoundError("Client", client_id)
        return client

    async def search_clients(self, term: str) -> Sequence[Client]:
        term = (term or "").strip()
        if not term:
            return await self.get_clients()
        with translate_store_errors("client search"):
            return await self.repo.search(term)

    async def get_minors(self, is_minor: bool = True) -> Sequence[Client]:
        with translate_store_errors("client listing"):
            return await self.repo.find_by_minor_status(is_minor)

    async def count_clients(self) -> int:
        with translate_store_errors("client count"):
            return await self.repo.count()

    async def get_stats(self, client_id: UUID) -> ClientStats:
        """Totals over the client's non-cancelled appointments"""
        await self.get_client(client_id)
        with translate_store_errors("client stats"):
            stats = await self.repo.get_stats(client_id)
        count = stats["appointment_count"]
        return ClientStats(
            client_id=client_id,
            total_billed=stats["total_billed"],
            appointment_count=count,
            average_amount=stats["total_billed"] // count if count else 0,
            last_visit=stats["last_visit"],
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    async def create_client(self, data: ClientCreate) -> Client:
        """Create a new client with validation"""
        name = self._clean_name(data.name)
        contact = self._clean_contact(data.contact)
        email = self._clean_email(data.email)
        guardian_name = (data.guardian_name or "").strip() or None
        if data.is_minor and not guardian_name:
            raise ValidationError(
                "Guardian name is required for minors",
                {"guardian_name": ["Required when the client is a minor"]},
            )

        with translate_store_errors("client creation"):
            await self._ensure_contact_unique(contact)
            client = await self.repo.create(
                name=name,
                contact=contact,
                email=email,
                is_minor=data.is_minor,
                guardian_name=guardian_name if data.is_minor else None,
                sex=data.sex.value if data.sex else None,
            )
            await self.db.commit()

        logger.info(f"Created client {client.id} ({name})")
        return client

    async def update_client(self, client_id: UUID, data: ClientUpdate) -> Client:
        """Update only the fields that were sent"""
        client = await self.get_client(client_id)
        fields = data.model_fields_set
        updates: Dict[str, Any] = {}

        if "name" in fields:
            updates["name"] = self._clean_name(data.name)
        if "email" in fields:
            updates["email"] = self._clean_email(data.email)
        if "contact" in fields:
            updates["contact"] = self._clean_contact(data.contact)
        if "sex" in fields:
            updates["sex"] = data.sex.value if data.sex else None

        is_minor = client.is_minor
        if "is_minor" in fields and data.is_minor is not None:
            is_minor = data.is_minor
            updates["is_minor"] = is_minor

        guardian_name = client.guardian_name
        if "guardian_name" in fields:
            guardian_name = (data.guardian_name or "").strip() or None
        if is_minor and not guardian_name:
            raise ValidationError(
                "Guardian name is required for minors",
                {"guardian_name": ["Required when the client is a minor"]},
            )
        # Guardian only kept for minors
        updates["guardian_name"] = guardian_name if is_minor else None

        with translate_store_errors("client update"):
            if updates.get("contact") and updates["contact"] != client.contact:
                await self._ensure_contact_unique(updates["contact"], exclude_id=client.id)
            client = await self.repo.update(client, **updates)
            await self.db.commit()

        return client

    async def delete_client(self, client_id: UUID) -> None:
        """Soft delete; past appointments keep pointing at the client"""
        client = await self.get_client(client_id)
        with translate_store_errors("client deletion"):
            await self.repo.soft_delete(client)
            await self.db.commit()
        logger.info(f"Deleted client {client_id}")
