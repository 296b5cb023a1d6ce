# ===== agenda/tasks/reminder_tasks.py =====
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.celery_config import celery_app
from agenda.config.settings import get_settings
from agenda.core.errors import AppError
from agenda.models import Reminder, ReminderStatus
from agenda.services.messaging.sms_service import SMSService
from agenda.services.reminder.reminder_service import ReminderService
from agenda.utils.dates import ensure_utc

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Hola {cliente}, le recordamos su cita del {fecha} a las {hora}."


def render_reminder_message(reminder: Reminder, tz_name: Optional[str] = None) -> str:
    """Fill {cliente}, {fecha} and {hora} in the reminder's template (or the default text)"""
    tz = ZoneInfo(tz_name or get_settings().DEFAULT_TIMEZONE)
    body = reminder.template.body if reminder.template is not None else DEFAULT_MESSAGE

    # Without an appointment the send time stands in for the appointment time
    when = reminder.appointment.scheduled_at if reminder.appointment is not None else reminder.send_at
    when = ensure_utc(when).astimezone(tz)

    client_name = reminder.client.name if reminder.client is not None else ""
    return (
        body.replace("{cliente}", client_name)
        .replace("{fecha}", when.strftime("%d/%m/%Y"))
        .replace("{hora}", when.strftime("%H:%M"))
    )


async def _record(service: ReminderService, reminder_id, status: ReminderStatus, **outcome) -> bool:
    """Store one delivery outcome, trying a second time on a fresh transaction"""
    for attempt in (1, 2):
        try:
            await service.update_status(reminder_id, status, **outcome)
            return True
        except AppError as e:
            await service.db.rollback()
            logger.warning(f"Recording reminder {reminder_id} as {status.value} failed (attempt {attempt}): {e.message}")
    return False


async def dispatch_due(
        db: AsyncSession,
        sms_service: SMSService,
        now: Optional[datetime] = None,
        limit: Optional[int] = None
) -> dict:
    """
    Send every pending reminder that is due and record the outcome on each one.

    The batch is read once and rendered up front. A reminder whose outcome
    cannot be stored is logged and skipped, so the rest of the batch still
    goes out and nothing already sent is sent again by a task retry.
    """
    service = ReminderService(db)
    due = await service.pending_to_send(now or datetime.now(timezone.utc), limit=limit)

    # Rollbacks expire loaded rows, so keep plain values only
    batch = [
        (
            reminder.id,
            reminder.recipient,
            reminder.appointment is not None and reminder.appointment.cancelled,
            render_reminder_message(reminder),
        )
        for reminder in due
    ]

    loop = asyncio.get_running_loop()
    sent = failed = 0
    for reminder_id, recipient, cancelled, body in batch:
        if cancelled:
            await _record(service, reminder_id, ReminderStatus.FAILED, error_message="Appointment was cancelled")
            failed += 1
            continue

        try:
            # Twilio's client is blocking
            request_payload, response_payload = await loop.run_in_executor(
                None, sms_service.send_sms, recipient, body
            )
        except AppError as e:
            logger.error(f"Reminder {reminder_id} failed: {e.message}")
            await _record(
                service,
                reminder_id,
                ReminderStatus.FAILED,
                request_payload={"to": recipient, "body": body},
                error_message=e.message,
            )
            failed += 1
            continue

        sent += 1
        recorded = await _record(
            service,
            reminder_id,
            ReminderStatus.SENT,
            request_payload=request_payload,
            response_payload=response_payload,
        )
        if not recorded:
            logger.critical(
                f"Reminder {reminder_id} was sent ({response_payload}) but is still pending; "
                f"mark it sent manually before the next sweep"
            )

    return {"due": len(batch), "sent": sent, "failed": failed}


async def _dispatch_with_new_session(limit: int) -> dict:
    # Each asyncio.run gets its own loop, so the engine cannot be shared with the API process
    from agenda.config.database import AsyncSessionLocal, engine

    try:
        async with AsyncSessionLocal() as db:
            return await dispatch_due(db, SMSService(), limit=limit)
    finally:
        await engine.dispose()


@celery_app.task(bind=True, max_retries=3)
def dispatch_due_reminders(self):
    """Periodic task: deliver due reminders via SMS"""
    settings = get_settings()
    try:
        result = asyncio.run(_dispatch_with_new_session(settings.REMINDER_BATCH_SIZE))
        if result["due"]:
            logger.info(f"Reminder dispatch: {result}")
        return {"status": "success", **result}

    except Exception as exc:
        logger.error(f"Reminder dispatch failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
