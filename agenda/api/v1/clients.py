"""Client endpoints"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.database import get_db
from agenda.schemas.appointment import AppointmentListResponse, AppointmentResponse
from agenda.schemas.client import ClientCreate, ClientListResponse, ClientResponse, ClientStats, ClientUpdate
from agenda.services.appointment.appointment_query_service import AppointmentQueryService
from agenda.services.client.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


def get_client_service(db: AsyncSession = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


@router.get("", response_model=ClientListResponse)
async def list_clients(
        q: Optional[str] = Query(None, description="Search name, contact or email"),
        is_minor: Optional[bool] = Query(None),
        service: ClientService = Depends(get_client_service)
):
    if q:
        clients = await service.search_clients(q)
    elif is_minor is not None:
        clients = await service.get_minors(is_minor)
    else:
        clients = await service.get_clients()
    return ClientListResponse(
        total=len(clients),
        clients=[ClientResponse.model_validate(c) for c in clients],
    )


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(data: ClientCreate, service: ClientService = Depends(get_client_service)):
    return await service.create_client(data)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: UUID, service: ClientService = Depends(get_client_service)):
    return await service.get_client(client_id)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
        client_id: UUID,
        data: ClientUpdate,
        service: ClientService = Depends(get_client_service)
):
    return await service.update_client(client_id, data)


@router.delete("/{client_id}", status_code=204)
async def delete_client(client_id: UUID, service: ClientService = Depends(get_client_service)):
    await service.delete_client(client_id)
    return Response(status_code=204)


@router.get("/{client_id}/stats", response_model=ClientStats)
async def get_client_stats(client_id: UUID, service: ClientService = Depends(get_client_service)):
    """Billing totals over non-cancelled appointments"""
    return await service.get_stats(client_id)


@router.get("/{client_id}/appointments", response_model=AppointmentListResponse)
async def get_client_appointments(client_id: UUID, db: AsyncSession = Depends(get_db)):
    """Appointment history, newest first"""
    appointments = await AppointmentQueryService(db).list_for_client(client_id)
    return AppointmentListResponse(
        total=len(appointments),
        appointments=[AppointmentResponse.from_model(a) for a in appointments],
    )
