"""Message template repository"""
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.models import MessageTemplate
from agenda.models.base import utcnow


class TemplateRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self) -> Sequence[MessageTemplate]:
        result = await self.db.execute(
            select(MessageTemplate)
            .where(MessageTemplate.deleted_at.is_(None))
            .order_by(MessageTemplate.title.asc())
        )
        return result.scalars().all()

    async def find_by_id(self, template_id: UUID) -> Optional[MessageTemplate]:
        result = await self.db.execute(
            select(MessageTemplate).where(
                MessageTemplate.id == template_id,
                MessageTemplate.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def search(self, term: str) -> Sequence[MessageTemplate]:
        pattern = f"%{term.lower()}%"
        result = await self.db.execute(
            select(MessageTemplate)
            .where(
                MessageTemplate.deleted_at.is_(None),
                or_(
                    func.lower(MessageTemplate.title).like(pattern),
                    func.lower(MessageTemplate.body).like(pattern),
                ),
            )
            .order_by(MessageTemplate.title.asc())
        )
        return result.scalars().all()

    async def create(self, **data) -> MessageTemplate:
        template = MessageTemplate(**data)
        self.db.add(template)
        await self.db.flush()
        return template

    async def update(self, template: MessageTemplate, **updates) -> MessageTemplate:
        for key, value in updates.items():
            setattr(template, key, value)
        template.updated_at = utcnow()
        await self.db.flush()
        return template

    async def soft_delete(self, template: MessageTemplate) -> None:
        template.deleted_at = utcnow()
        await self.db.flush()
