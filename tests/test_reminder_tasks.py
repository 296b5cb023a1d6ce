from datetime import datetime, timezone

import pytest

from agenda.core.errors import ExternalServiceError
from agenda.repositories.appointment_repository import AppointmentRepository
from agenda.models import MessageTemplate, ReminderStatus
from agenda.schemas.appointment import AppointmentCreate
from agenda.schemas.reminder import ReminderCreate
from agenda.services.appointment.booking_service import AppointmentBookingService
from agenda.services.reminder.reminder_service import ReminderService
from agenda.tasks.reminder_tasks import dispatch_due, render_reminder_message

NOW = datetime(2025, 6, 1, 14, tzinfo=timezone.utc)


class FakeSMS:
    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send_sms(self, to_phone, message_body):
        request_payload = {"to": to_phone, "body": message_body}
        if to_phone in self.fail_for:
            raise ExternalServiceError("twilio", "unreachable", {"request": request_payload})
        self.sent.append((to_phone, message_body))
        return request_payload, {"sid": f"SM{len(self.sent)}", "status": "queued"}


@pytest.fixture
async def template(db):
    template = MessageTemplate(title="Recordatorio", body="Hola {cliente}, su cita es el {fecha} a las {hora}.")
    db.add(template)
    await db.commit()
    return template


async def book_with_reminder(db, seed, template_id=None):
    return await AppointmentBookingService(db).create(AppointmentCreate(
        client_id=seed.c1.id,
        scheduled_at="2025-06-01T14:30:00Z",
        sub_service_ids=[seed.s1.id],
        send_reminder=True,
        reminder_lead_minutes=60,
        template_id=template_id,
    ))


async def test_render_uses_template_and_appointment_time(db, seed, template):
    appointment = await book_with_reminder(db, seed, template.id)
    reminder = await ReminderService(db).get(appointment.reminder.id)

    body = render_reminder_message(reminder, "UTC")
    assert body == "Hola Ana Benítez, su cita es el 01/06/2025 a las 14:30."


async def test_render_default_text_in_local_time(db, seed):
    appointment = await book_with_reminder(db, seed)
    reminder = await ReminderService(db).get(appointment.reminder.id)

    body = render_reminder_message(reminder, "America/New_York")
    assert "Ana Benítez" in body
    assert "01/06/2025" in body
    assert "10:30" in body


async def test_dispatch_sends_due_reminders(db, seed, template):
    appointment = await book_with_reminder(db, seed, template.id)
    reminder_id = appointment.reminder.id
    sms = FakeSMS()

    result = await dispatch_due(db, sms, now=NOW)

    assert result == {"due": 1, "sent": 1, "failed": 0}
    assert sms.sent[0][0] == "+595981111111"
    reminder = await ReminderService(db).get(reminder_id)
    assert reminder.status == ReminderStatus.SENT.value
    assert reminder.response_payload["sid"] == "SM1"


async def test_dispatch_records_failure(db, seed):
    appointment = await book_with_reminder(db, seed)
    reminder_id = appointment.reminder.id

    result = await dispatch_due(db, FakeSMS(fail_for={"+595981111111"}), now=NOW)

    assert result == {"due": 1, "sent": 0, "failed": 1}
    reminder = await ReminderService(db).get(reminder_id)
    assert reminder.status == ReminderStatus.FAILED.value
    assert "unreachable" in reminder.error_message


async def test_dispatch_skips_cancelled_appointment(db, seed):
    appointment = await book_with_reminder(db, seed)
    await AppointmentBookingService(db).cancel(appointment.id)
    sms = FakeSMS()

    result = await dispatch_due(db, sms, now=NOW)

    assert result["failed"] == 1
    assert sms.sent == []


async def test_dispatch_ignores_future_reminders(db, seed):
    await ReminderService(db).create(ReminderCreate(
        client_id=seed.c1.id, recipient="+595981111111", send_at="2025-06-02T09:00:00Z",
    ))

    result = await dispatch_due(db, FakeSMS(), now=NOW)
    assert result == {"due": 0, "sent": 0, "failed": 0}


async def test_appointment_keeps_reminder_after_reminder_read(db, seed):
    appointment = await book_with_reminder(db, seed)

    await dispatch_due(db, FakeSMS(), now=NOW)

    assert appointment.reminder.status == ReminderStatus.SENT.value
    reloaded = await AppointmentRepository(db).find_by_id(appointment.id)
    assert reloaded.reminder.status == ReminderStatus.SENT.value


def flaky_status_updates(monkeypatch, failures):
    """Make the first `failures` status writes raise, then delegate"""
    original = ReminderService.update_status
    calls = {"count": 0}

    async def update_status(self, *args, **kwargs):
        calls["count"] += 1
        if calls["count"] <= failures:
            raise ExternalServiceError("database", "reminder status update failed")
        return await original(self, *args, **kwargs)

    monkeypatch.setattr(ReminderService, "update_status", update_status)
    return calls


async def test_status_write_is_retried_after_send(db, seed, monkeypatch):
    appointment = await book_with_reminder(db, seed)
    reminder_id = appointment.reminder.id
    flaky_status_updates(monkeypatch, failures=1)
    sms = FakeSMS()

    result = await dispatch_due(db, sms, now=NOW)

    assert result == {"due": 1, "sent": 1, "failed": 0}
    assert len(sms.sent) == 1
    reminder = await ReminderService(db).get(reminder_id)
    assert reminder.status == ReminderStatus.SENT.value


async def test_unrecorded_send_does_not_raise_or_resend(db, seed, monkeypatch):
    await book_with_reminder(db, seed)
    await book_with_reminder(db, seed)
    calls = flaky_status_updates(monkeypatch, failures=10)
    sms = FakeSMS()

    result = await dispatch_due(db, sms, now=NOW)

    assert result == {"due": 2, "sent": 2, "failed": 0}
    assert len(sms.sent) == 2
    assert calls["count"] == 4
