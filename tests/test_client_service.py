from datetime import datetime, timezone
from uuid import uuid4

import pytest

from agenda.core.errors import BusinessLogicError, NotFoundError, ValidationError
from agenda.schemas.appointment import AppointmentCreate
from agenda.schemas.client import ClientCreate, ClientUpdate
from agenda.services.appointment.booking_service import AppointmentBookingService
from agenda.services.client.client_service import ClientService
from agenda.utils.dates import ensure_utc


async def test_create_client(db):
    client = await ClientService(db).create_client(ClientCreate(
        name="  María López ", contact="0981 222333", email="maria@example.com", sex="female",
    ))
    assert client.name == "María López"
    assert client.contact == "0981 222333"
    assert client.sex == "female"
    assert client.guardian_name is None


@pytest.mark.parametrize("data", [
    {"name": "A"},
    {"name": "Ana", "email": "not-an-email"},
    {"name": "Ana", "contact": "123"},
    {"name": "Ana", "is_minor": True},
])
async def test_create_client_validation(db, data):
    with pytest.raises(ValidationError):
        await ClientService(db).create_client(ClientCreate(**data))


async def test_duplicate_contact(db, seed):
    with pytest.raises(BusinessLogicError):
        await ClientService(db).create_client(ClientCreate(name="Otra Ana", contact="+595981111111"))


async def test_minor_with_guardian(db):
    client = await ClientService(db).create_client(ClientCreate(
        name="Sofía", is_minor=True, guardian_name="Carmen",
    ))
    assert client.is_minor is True
    assert client.guardian_name == "Carmen"


async def test_no_longer_minor_clears_guardian(db):
    service = ClientService(db)
    client = await service.create_client(ClientCreate(name="Sofía", is_minor=True, guardian_name="Carmen"))

    updated = await service.update_client(client.id, ClientUpdate(is_minor=False))
    assert updated.is_minor is False
    assert updated.guardian_name is None


async def test_update_keeps_absent_fields(db, seed):
    updated = await ClientService(db).update_client(seed.c1.id, ClientUpdate(email="ana@example.com"))
    assert updated.email == "ana@example.com"
    assert updated.contact == "+595981111111"
    assert updated.name == "Ana Benítez"


async def test_update_to_taken_contact(db, seed):
    with pytest.raises(BusinessLogicError):
        await ClientService(db).update_client(seed.c2.id, ClientUpdate(contact="+595981111111"))


async def test_soft_delete(db, seed):
    service = ClientService(db)
    await service.delete_client(seed.c2.id)

    with pytest.raises(NotFoundError):
        await service.get_client(seed.c2.id)
    assert [c.id for c in await service.get_clients()] == [seed.c1.id]


async def test_search(db, seed):
    results = await ClientService(db).search_clients("benítez")
    assert [c.id for c in results] == [seed.c1.id]


async def test_stats_ignore_cancelled(db, seed):
    booking = AppointmentBookingService(db)
    await booking.create(AppointmentCreate(
        client_id=seed.c1.id, scheduled_at="2025-06-01T10:00:00Z", sub_service_ids=[seed.s1.id, seed.s2.id],
    ))
    await booking.create(AppointmentCreate(
        client_id=seed.c1.id, scheduled_at="2025-06-03T10:00:00Z", sub_service_ids=[seed.s2.id],
    ))
    cancelled = await booking.create(AppointmentCreate(
        client_id=seed.c1.id, scheduled_at="2025-06-05T10:00:00Z", sub_service_ids=[seed.s1.id],
    ))
    await booking.cancel(cancelled.id)

    stats = await ClientService(db).get_stats(seed.c1.id)

    assert stats.total_billed == 110000
    assert stats.appointment_count == 2
    assert stats.average_amount == 55000
    assert ensure_utc(stats.last_visit) == datetime(2025, 6, 3, 10, tzinfo=timezone.utc)


async def test_stats_without_appointments(db, seed):
    stats = await ClientService(db).get_stats(seed.c2.id)
    assert stats.total_billed == 0
    assert stats.average_amount == 0
    assert stats.last_visit is None


async def test_stats_unknown_client(db):
    with pytest.raises(NotFoundError):
        await ClientService(db).get_stats(uuid4())
