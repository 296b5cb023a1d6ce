from datetime import date, datetime, timezone
from uuid import uuid4

import pytest

from agenda.core.errors import NotFoundError, ValidationError
from agenda.schemas.appointment import AppointmentCreate
from agenda.services.appointment.appointment_query_service import AppointmentQueryService
from agenda.services.appointment.booking_service import AppointmentBookingService


async def book(db, seed, when, client=None):
    return await AppointmentBookingService(db).create(AppointmentCreate(
        client_id=(client or seed.c1).id,
        scheduled_at=when,
        sub_service_ids=[seed.s1.id],
    ))


@pytest.fixture
async def june(db, seed):
    """Four appointments around 2025-06-01, one of them cancelled"""
    first = await book(db, seed, "2025-06-01T10:00:00Z")
    cancelled = await book(db, seed, "2025-06-01T12:00:00Z")
    await AppointmentBookingService(db).cancel(cancelled.id)
    late = await book(db, seed, "2025-06-01T23:30:00Z", client=seed.c2)
    next_day = await book(db, seed, "2025-06-02T00:00:00Z")
    return [first, cancelled, late, next_day]


async def test_count_for_day_includes_cancelled(db, june):
    assert await AppointmentQueryService(db).count_for_day(date(2025, 6, 1), "UTC") == 3


async def test_count_for_day_uses_local_calendar(db, june):
    # 2025-06-01 in New York (UTC-4) runs from 04:00Z to 04:00Z the next day
    assert await AppointmentQueryService(db).count_for_day(date(2025, 6, 1), "America/New_York") == 4


async def test_count_for_empty_day(db, june):
    assert await AppointmentQueryService(db).count_for_day(date(2025, 7, 1), "UTC") == 0


async def test_get(db, june):
    appointment = await AppointmentQueryService(db).get(june[0].id)
    assert appointment.client.name == "Ana Benítez"
    assert [item.sub_service.name for item in appointment.line_items] == ["Corte"]


async def test_get_unknown(db, seed):
    with pytest.raises(NotFoundError):
        await AppointmentQueryService(db).get(uuid4())


async def test_list_in_range_oldest_first(db, june):
    appointments = await AppointmentQueryService(db).list(
        start=datetime(2025, 6, 1, 11, tzinfo=timezone.utc),
        end=datetime(2025, 6, 2, 0, tzinfo=timezone.utc),
    )
    assert [a.id for a in appointments] == [june[1].id, june[2].id, june[3].id]


async def test_list_without_cancelled(db, june):
    appointments = await AppointmentQueryService(db).list(include_cancelled=False)
    assert june[1].id not in {a.id for a in appointments}
    assert len(appointments) == 3


async def test_list_by_client(db, seed, june):
    appointments = await AppointmentQueryService(db).list(client_id=seed.c2.id)
    assert [a.id for a in appointments] == [june[2].id]


async def test_list_rejects_inverted_range(db, seed):
    with pytest.raises(ValidationError):
        await AppointmentQueryService(db).list(
            start=datetime(2025, 6, 2, tzinfo=timezone.utc),
            end=datetime(2025, 6, 1, tzinfo=timezone.utc),
        )


async def test_list_for_client_newest_first(db, seed, june):
    appointments = await AppointmentQueryService(db).list_for_client(seed.c1.id)
    assert [a.id for a in appointments] == [june[3].id, june[1].id, june[0].id]


async def test_list_for_unknown_client(db, seed):
    with pytest.raises(NotFoundError):
        await AppointmentQueryService(db).list_for_client(uuid4())
