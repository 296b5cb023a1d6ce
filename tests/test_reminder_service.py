from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from agenda.core.errors import NotFoundError, ValidationError
from agenda.models import ReminderStatus
from agenda.schemas.reminder import ReminderCreate, ReminderUpdate
from agenda.services.reminder.reminder_service import ReminderService
from agenda.utils.dates import ensure_utc


def manual(seed, **overrides):
    data = {
        "client_id": seed.c1.id,
        "recipient": "+595 981 111111",
        "send_at": "2025-06-01T13:00:00Z",
    }
    data.update(overrides)
    return ReminderCreate(**data)


async def test_create_manual_reminder(db, seed):
    reminder = await ReminderService(db).create(manual(seed))

    assert reminder.status == ReminderStatus.PENDING.value
    assert reminder.appointment_id is None
    assert ensure_utc(reminder.send_at) == datetime(2025, 6, 1, 13, tzinfo=timezone.utc)


@pytest.mark.parametrize("recipient", ["", "12345", "call-me-maybe", "+5959811111111111111111"])
async def test_invalid_recipient(db, seed, recipient):
    with pytest.raises(ValidationError):
        await ReminderService(db).create(manual(seed, recipient=recipient))


async def test_invalid_send_at(db, seed):
    with pytest.raises(ValidationError):
        await ReminderService(db).create(manual(seed, send_at="mañana"))


async def test_unknown_client(db, seed):
    with pytest.raises(NotFoundError):
        await ReminderService(db).create(manual(seed, client_id=uuid4()))


async def test_unknown_template(db, seed):
    with pytest.raises(NotFoundError):
        await ReminderService(db).create(manual(seed, template_id=uuid4()))


async def test_update_status_sent(db, seed):
    service = ReminderService(db)
    reminder = await service.create(manual(seed))

    updated = await service.update_status(
        reminder.id,
        ReminderStatus.SENT,
        request_payload={"to": "+595981111111"},
        response_payload={"sid": "SM123"},
    )

    assert updated.status == "sent"
    assert updated.sent_at is not None
    assert updated.response_payload == {"sid": "SM123"}
    assert await service.count_by_status(ReminderStatus.SENT) == 1
    assert await service.count_by_status(ReminderStatus.PENDING) == 0


async def test_update_status_failed(db, seed):
    service = ReminderService(db)
    reminder = await service.create(manual(seed))

    updated = await service.update_status(reminder.id, ReminderStatus.FAILED, error_message="unreachable")
    assert updated.status == "failed"
    assert updated.sent_at is None
    assert updated.error_message == "unreachable"
    assert [r.id for r in await service.list_by_status(ReminderStatus.FAILED)] == [reminder.id]


async def test_pending_to_send_only_due(db, seed):
    service = ReminderService(db)
    now = datetime(2025, 6, 1, 12, tzinfo=timezone.utc)
    due = await service.create(manual(seed, send_at=now - timedelta(minutes=5)))
    await service.create(manual(seed, send_at=now + timedelta(hours=1)))

    pending = await service.pending_to_send(now)
    assert [r.id for r in pending] == [due.id]


async def test_update_reminder(db, seed):
    service = ReminderService(db)
    reminder = await service.create(manual(seed))

    updated = await service.update(reminder.id, ReminderUpdate(recipient="0981222333"))
    assert updated.recipient == "0981222333"
    assert ensure_utc(updated.send_at) == datetime(2025, 6, 1, 13, tzinfo=timezone.utc)


async def test_delete(db, seed):
    service = ReminderService(db)
    reminder = await service.create(manual(seed))

    await service.delete(reminder.id)
    with pytest.raises(NotFoundError):
        await service.get(reminder.id)
    assert await service.list_all() == []
