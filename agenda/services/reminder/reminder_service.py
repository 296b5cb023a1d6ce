# ============================================================================
# agenda/services/reminder/reminder_service.py
# ============================================================================
"""Service for scheduling and tracking reminders"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.errors import NotFoundError, ValidationError, translate_store_errors
from agenda.models import Reminder, ReminderStatus
from agenda.repositories.appointment_repository import AppointmentRepository
from agenda.repositories.client_repository import ClientRepository
from agenda.repositories.reminder_repository import ReminderRepository
from agenda.repositories.template_repository import TemplateRepository
from agenda.schemas.reminder import ReminderCreate, ReminderUpdate
from agenda.utils.dates import parse_timestamp

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^[+]?[0-9\s()-]{8,20}$")


class ReminderService:
    """Creates, updates and reports on reminders. Never sends anything itself."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = ReminderRepository(db)
        self.clients = ClientRepository(db)
        self.templates = TemplateRepository(db)
        self.appointments = AppointmentRepository(db)

    # ------------------------------------------------------------------
    # Scheduling (used inside the booking transaction, does not commit)
    # ------------------------------------------------------------------
    async def schedule(
            self,
            client_id: UUID,
            recipient: str,
            send_at: datetime,
            appointment_id: Optional[UUID] = None,
            template_id: Optional[UUID] = None
    ) -> Reminder:
        """Write a pending reminder in the caller's transaction"""
        reminder = await self.repo.create(
            client_id=client_id,
            recipient=recipient,
            send_at=send_at,
            status=ReminderStatus.PENDING.value,
            appointment_id=appointment_id,
            template_id=template_id,
        )
        logger.info(f"Reminder {reminder.id} scheduled for {send_at.isoformat()} to {recipient}")
        return reminder

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    @staticmethod
    def validate_recipient(recipient: Optional[str]) -> str:
        if recipient is None or not recipient.strip():
            raise ValidationError("Recipient is required", {"recipient": ["Recipient is required"]})
        recipient = recipient.strip()
        if not PHONE_PATTERN.match(recipient):
            raise ValidationError("Invalid phone format", {"recipient": [f"'{recipient}' is not a valid phone number"]})
        return recipient

    async def _require_client(self, client_id: UUID):
        client = await self.clients.find_by_id(client_id)
        if not client:
            raise NotFoundError("Client", client_id)
        return client

    async def _require_template(self, template_id: UUID):
        template = await self.templates.find_by_id(template_id)
        if not template:
            raise NotFoundError("Message template", template_id)
        return template

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    async def get(self, reminder_id: UUID) -> Reminder:
        with translate_store_errors("reminder lookup"):
            reminder = await self.repo.find_by_id(reminder_id)
        if not reminder:
            raise NotFoundError("Reminder", reminder_id)
        return reminder

    async def list_all(self) -> Sequence[Reminder]:
        with translate_store_errors("reminder listing"):
            return await self.repo.find_all()

    async def list_by_status(self, status: ReminderStatus) -> Sequence[Reminder]:
        with translate_store_errors("reminder listing"):
            return await self.repo.find_by_status(status)

    async def list_for_client(self, client_id: UUID) -> Sequence[Reminder]:
        with translate_store_errors("reminder listing"):
            return await self.repo.find_by_client(client_id)

    async def pending_to_send(self, now: Optional[datetime] = None, limit: Optional[int] = None) -> Sequence[Reminder]:
        """Pending reminders that are due at `now` (defaults to the current time)"""
        now = now or datetime.now(timezone.utc)
        with translate_store_errors("pending reminder lookup"):
            return await self.repo.find_pending_before(now, limit=limit)

    async def count_by_status(self, status: ReminderStatus) -> int:
        with translate_store_errors("reminder count"):
            return await self.repo.count_by_status(status)

    async def create(self, data: ReminderCreate) -> Reminder:
        """Create a manual reminder"""
        recipient = self.validate_recipient(data.recipient)
        send_at = parse_timestamp(data.send_at, field="send_at")

        with translate_store_errors("reminder creation"):
            await self._require_client(data.client_id)
            if data.template_id:
                await self._require_template(data.template_id)
            if data.appointment_id and not await self.appointments.find_by_id(data.appointment_id):
                raise NotFoundError("Appointment", data.appointment_id)

            reminder = await self.schedule(
                client_id=data.client_id,
                recipient=recipient,
                send_at=send_at,
                appointment_id=data.appointment_id,
                template_id=data.template_id,
            )
            await self.db.commit()

        return await self.get(reminder.id)

    async def update(self, reminder_id: UUID, data: ReminderUpdate) -> Reminder:
        reminder = await self.get(reminder_id)
        fields = data.model_fields_set
        updates: Dict[str, Any] = {}

        if "recipient" in fields:
            updates["recipient"] = self.validate_recipient(data.recipient)
        if "send_at" in fields and data.send_at is not None:
            updates["send_at"] = parse_timestamp(data.send_at, field="send_at")

        with translate_store_errors("reminder update"):
            if "client_id" in fields and data.client_id is not None:
                await self._require_client(data.client_id)
                updates["client_id"] = data.client_id
            if "template_id" in fields:
                if data.template_id is not None:
                    await self._require_template(data.template_id)
                updates["template_id"] = data.template_id

            await self.repo.update(reminder, **updates)
            await self.db.commit()

        return await self.get(reminder_id)

    async def update_status(
            self,
            reminder_id: UUID,
            status: ReminderStatus,
            request_payload: Optional[Dict[str, Any]] = None,
            response_payload: Optional[Dict[str, Any]] = None,
            error_message: Optional[str] = None
    ) -> Reminder:
        """Record a delivery outcome reported by the messaging integration"""
        reminder = await self.get(reminder_id)

        updates: Dict[str, Any] = {"status": status.value}
        if request_payload is not None:
            updates["request_payload"] = request_payload
        if response_payload is not None:
            updates["response_payload"] = response_payload
        if error_message is not None:
            updates["error_message"] = error_message
        if status == ReminderStatus.SENT:
            updates["sent_at"] = datetime.now(timezone.utc)

        with translate_store_errors("reminder status update"):
            await self.repo.update(reminder, **updates)
            await self.db.commit()

        logger.info(f"Reminder {reminder_id} marked {status.value}")
        return await self.get(reminder_id)

    async def delete(self, reminder_id: UUID) -> None:
        """Soft delete"""
        reminder = await self.get(reminder_id)
        with translate_store_errors("reminder deletion"):
            await self.repo.soft_delete(reminder)
            await self.db.commit()
