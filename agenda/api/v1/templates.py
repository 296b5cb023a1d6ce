"""Message template endpoints"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.database import get_db
from agenda.schemas.template import TemplateCreate, TemplateResponse, TemplateUpdate
from agenda.services.template.template_service import TemplateService

router = APIRouter(prefix="/templates", tags=["templates"])


def get_template_service(db: AsyncSession = Depends(get_db)) -> TemplateService:
    return TemplateService(db)


@router.get("", response_model=List[TemplateResponse])
async def list_templates(
        q: Optional[str] = Query(None, description="Search title and body"),
        service: TemplateService = Depends(get_template_service)
):
    if q:
        return await service.search_templates(q)
    return await service.list_templates()


@router.post("", response_model=TemplateResponse, status_code=201)
async def create_template(data: TemplateCreate, service: TemplateService = Depends(get_template_service)):
    return await service.create_template(data)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: UUID, service: TemplateService = Depends(get_template_service)):
    return await service.get_template(template_id)


@router.patch("/{template_id}", response_model=TemplateResponse)
async def update_template(
        template_id: UUID,
        data: TemplateUpdate,
        service: TemplateService = Depends(get_template_service)
):
    return await service.update_template(template_id, data)


@router.post("/{template_id}/duplicate", response_model=TemplateResponse, status_code=201)
async def duplicate_template(template_id: UUID, service: TemplateService = Depends(get_template_service)):
    return await service.duplicate_template(template_id)


@router.delete("/{template_id}", status_code=204)
async def delete_template(template_id: UUID, service: TemplateService = Depends(get_template_service)):
    await service.delete_template(template_id)
    return Response(status_code=204)
