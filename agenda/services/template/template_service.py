"""Message template service"""
import logging
from typing import Any, Dict, Optional, Sequence
from urllib.parse import urlparse
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.errors import NotFoundError, ValidationError, translate_store_errors
from agenda.models import MessageTemplate
from agenda.repositories.template_repository import TemplateRepository
from agenda.schemas.template import TemplateCreate, TemplateUpdate

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200
BODY_MAX_LENGTH = 5000


class TemplateService:
    """Reusable reminder message texts"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = TemplateRepository(db)

    @staticmethod
    def _clean_title(title: Optional[str]) -> str:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required", {"title": ["Required"]})
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters", {"title": ["Too long"]})
        return title

    @staticmethod
    def _clean_body(body: Optional[str]) -> str:
        body = (body or "").strip()
        if not body:
            raise ValidationError("Body is required", {"body": ["Required"]})
        if len(body) > BODY_MAX_LENGTH:
            raise ValidationError(f"Body cannot exceed {BODY_MAX_LENGTH} characters", {"body": ["Too long"]})
        return body

    @staticmethod
    def _clean_url(url: Optional[str]) -> Optional[str]:
        if url is None or not url.strip():
            return None
        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError("Invalid attachment URL", {"attachment_url": [f"'{url}' is not an http(s) URL"]})
        return url

    async def list_templates(self) -> Sequence[MessageTemplate]:
        with translate_store_errors("template listing"):
            return await self.repo.find_all()

    async def search_templates(self, term: str) -> Sequence[MessageTemplate]:
        term = (term or "").strip()
        if not term:
            return await self.list_templates()
        with translate_store_errors("template search"):
            return await self.repo.search(term)

    async def get_template(self, template_id: UUID) -> MessageTemplate:
        with translate_store_errors("template lookup"):
            template = await self.repo.find_by_id(template_id)
        if not template:
            raise NotFoundError("Message template", template_id)
        return template

    async def create_template(self, data: TemplateCreate) -> MessageTemplate:
        fields = {
            "title": self._clean_title(data.title),
            "body": self._clean_body(data.body),
            "attachment_url": self._clean_url(data.attachment_url),
            "attachment_name": (data.attachment_name or "").strip() or None,
        }
        with translate_store_errors("template creation"):
            template = await self.repo.create(**fields)
            await self.db.commit()
        logger.info(f"Created template {template.id} ({fields['title']})")
        return template

    async def update_template(self, template_id: UUID, data: TemplateUpdate) -> MessageTemplate:
        template = await self.get_template(template_id)
        fields = data.model_fields_set
        updates: Dict[str, Any] = {}

        if "title" in fields:
            updates["title"] = self._clean_title(data.title)
        if "body" in fields:
            updates["body"] = self._clean_body(data.body)
        if "attachment_url" in fields:
            updates["attachment_url"] = self._clean_url(data.attachment_url)
        if "attachment_name" in fields:
            updates["attachment_name"] = (data.attachment_name or "").strip() or None

        if not updates:
            return template
        with translate_store_errors("template update"):
            template = await self.repo.update(template, **updates)
            await self.db.commit()
        return template

    async def duplicate_template(self, template_id: UUID) -> MessageTemplate:
        """Copy a template; the copy's title gets a " (Copia)" suffix"""
        original = await self.get_template(template_id)
        title = f"{original.title} (Copia)"[:TITLE_MAX_LENGTH]
        with translate_store_errors("template duplication"):
            template = await self.repo.create(
                title=title,
                body=original.body,
                attachment_url=original.attachment_url,
                attachment_name=original.attachment_name,
            )
            await self.db.commit()
        return template

    async def delete_template(self, template_id: UUID) -> None:
        template = await self.get_template(template_id)
        with translate_store_errors("template deletion"):
            await self.repo.soft_delete(template)
            await self.db.commit()
