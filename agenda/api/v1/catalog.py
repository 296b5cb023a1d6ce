"""Service catalog endpoints"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.database import get_db
from agenda.schemas.catalog import (
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    SubServiceCreate,
    SubServiceListResponse,
    SubServiceResponse,
    SubServiceUpdate,
)
from agenda.services.catalog.catalog_service import CatalogService

router = APIRouter(prefix="/catalog", tags=["catalog"])


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


# ============================================================================
# SERVICES
# ============================================================================

@router.get("/services", response_model=List[ServiceResponse])
async def list_services(service: CatalogService = Depends(get_catalog_service)):
    return await service.list_services()


@router.post("/services", response_model=ServiceResponse, status_code=201)
async def create_service(data: ServiceCreate, service: CatalogService = Depends(get_catalog_service)):
    return await service.create_service(data)


@router.get("/services/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: UUID, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_service(service_id)


@router.patch("/services/{service_id}", response_model=ServiceResponse)
async def update_service(
        service_id: UUID,
        data: ServiceUpdate,
        service: CatalogService = Depends(get_catalog_service)
):
    return await service.update_service(service_id, data)


# ============================================================================
# SUB-SERVICES
# ============================================================================

@router.get("/sub-services", response_model=SubServiceListResponse)
async def list_sub_services(
        service_id: Optional[UUID] = Query(None, description="Only sub-services of this service"),
        service: CatalogService = Depends(get_catalog_service)
):
    sub_services = await service.list_sub_services(service_id)
    return SubServiceListResponse(
        total=len(sub_services),
        sub_services=[SubServiceResponse.model_validate(s) for s in sub_services],
    )


@router.post("/sub-services", response_model=SubServiceResponse, status_code=201)
async def create_sub_service(data: SubServiceCreate, service: CatalogService = Depends(get_catalog_service)):
    return await service.create_sub_service(data)


@router.get("/sub-services/{sub_service_id}", response_model=SubServiceResponse)
async def get_sub_service(sub_service_id: UUID, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_sub_service(sub_service_id)


@router.patch("/sub-services/{sub_service_id}", response_model=SubServiceResponse)
async def update_sub_service(
        sub_service_id: UUID,
        data: SubServiceUpdate,
        service: CatalogService = Depends(get_catalog_service)
):
    """Existing appointments keep the price they were booked at"""
    return await service.update_sub_service(sub_service_id, data)


@router.delete("/sub-services/{sub_service_id}", status_code=204)
async def delete_sub_service(sub_service_id: UUID, service: CatalogService = Depends(get_catalog_service)):
    await service.delete_sub_service(sub_service_id)
    return Response(status_code=204)
