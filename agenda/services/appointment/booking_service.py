# ============================================================================
# agenda/services/appointment/booking_service.py
# ============================================================================
"""
Appointment booking service.

Validates a booking request, prices it from the catalog, writes the
appointment with one line item per selected sub-service and optionally
schedules a reminder. All validation runs before the first write.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.settings import Settings, get_settings
from agenda.core.errors import (
    AppError,
    BusinessLogicError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
    translate_store_errors,
)
from agenda.models import Appointment, Client, SubService
from agenda.repositories.appointment_repository import AppointmentRepository
from agenda.repositories.catalog_repository import CatalogRepository
from agenda.repositories.client_repository import ClientRepository
from agenda.repositories.line_item_repository import LineItemRepository
from agenda.repositories.template_repository import TemplateRepository
from agenda.schemas.appointment import AppointmentCreate, AppointmentUpdate
from agenda.services.reminder.reminder_service import ReminderService
from agenda.utils.dates import parse_timestamp

logger = logging.getLogger(__name__)


def calculate_total(sub_services: Iterable[SubService]) -> int:
    """Sum of current catalog prices, in minor currency units"""
    return sum(sub_service.price for sub_service in sub_services)


def reminder_send_at(scheduled_at: datetime, lead_minutes: int) -> datetime:
    return scheduled_at - timedelta(minutes=lead_minutes)


class AppointmentBookingService:
    """Create, update, cancel and restore appointments"""

    def __init__(self, db: AsyncSession, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.appointments = AppointmentRepository(db)
        self.line_items = LineItemRepository(db)
        self.clients = ClientRepository(db)
        self.catalog = CatalogRepository(db)
        self.templates = TemplateRepository(db)
        self.reminders = ReminderService(db)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    async def _require_client(self, client_id: UUID) -> Client:
        with translate_store_errors("client lookup"):
            client = await self.clients.find_by_id(client_id)
        if not client:
            raise NotFoundError("Client", client_id)
        return client

    async def _resolve_sub_services(
            self,
            sub_service_ids: Sequence[UUID],
            keep_deleted: Iterable[UUID] = ()
    ) -> List[SubService]:
        """
        Resolve the selection in one batch read, de-duplicated in request order.

        Soft-deleted sub-services are rejected unless their id is in
        keep_deleted (already on the appointment being edited).
        """
        if not sub_service_ids:
            raise ValidationError(
                "At least one sub-service required",
                {"sub_service_ids": ["At least one sub-service required"]},
            )

        unique_ids = list(dict.fromkeys(sub_service_ids))
        keep_deleted = set(keep_deleted)

        with translate_store_errors("sub-service lookup"):
            found = await self.catalog.find_sub_services_by_ids(unique_ids, include_deleted=bool(keep_deleted))

        by_id = {
            sub_service.id: sub_service
            for sub_service in found
            if sub_service.deleted_at is None or sub_service.id in keep_deleted
        }
        missing = [str(sub_service_id) for sub_service_id in unique_ids if sub_service_id not in by_id]
        if missing:
            raise ValidationError(
                f"Sub-services not found: {', '.join(missing)}",
                {"missing_sub_service_ids": missing},
            )

        return [by_id[sub_service_id] for sub_service_id in unique_ids]

    async def _require_template(self, template_id: UUID) -> None:
        with translate_store_errors("template lookup"):
            template = await self.templates.find_by_id(template_id)
        if not template:
            raise NotFoundError("Message template", template_id)

    def _lead_minutes(self, requested: Optional[int]) -> int:
        if requested is None:
            return self.settings.DEFAULT_REMINDER_LEAD_MINUTES
        if requested < 0:
            raise ValidationError(
                "Reminder lead time cannot be negative",
                {"reminder_lead_minutes": ["Must be zero or greater"]},
            )
        return requested

    @staticmethod
    def _reminder_recipient(client: Client) -> str:
        contact = (client.contact or "").strip()
        if not contact:
            raise BusinessLogicError(
                f"Client {client.name} has no contact number for reminders",
                {"client_id": str(client.id)},
            )
        return contact

    @staticmethod
    def _classify(exc: Exception, operation: str) -> AppError:
        """Application errors pass through; store and any other failures become ExternalServiceError"""
        if isinstance(exc, AppError):
            return exc
        if isinstance(exc, SQLAlchemyError):
            return ExternalServiceError("database", f"{operation} failed")
        return ExternalServiceError("booking", f"{operation} failed: {exc}")

    async def _reload(self, appointment_id: UUID) -> Appointment:
        with translate_store_errors("appointment lookup"):
            appointment = await self.appointments.find_by_id(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    async def _prepare(self, request: AppointmentCreate) -> Tuple[Dict[str, Any], List[SubService], Optional[Dict[str, Any]]]:
        """Run every booking check in order; returns the rows to write"""
        client = await self._require_client(request.client_id)
        sub_services = await self._resolve_sub_services(request.sub_service_ids)
        scheduled_at = parse_timestamp(request.scheduled_at)

        reminder_args = None
        if request.send_reminder:
            recipient = self._reminder_recipient(client)
            lead_minutes = self._lead_minutes(request.reminder_lead_minutes)
            if request.template_id:
                await self._require_template(request.template_id)
            reminder_args = {
                "client_id": client.id,
                "recipient": recipient,
                "send_at": reminder_send_at(scheduled_at, lead_minutes),
                "template_id": request.template_id,
            }

        fields = {
            "client_id": client.id,
            "scheduled_at": scheduled_at,
            "total_amount": calculate_total(sub_services),
            "notes": request.notes,
            "send_reminder": request.send_reminder,
            "cancelled": False,
        }
        return fields, sub_services, reminder_args

    async def create(self, request: AppointmentCreate) -> Appointment:
        """
        Book an appointment.

        Raises NotFoundError for an unknown client or template,
        ValidationError for an empty/unknown selection or a bad timestamp,
        BusinessLogicError when a reminder is requested for a client
        without contact, ExternalServiceError when a write step fails.
        """
        try:
            fields, sub_services, reminder_args = await self._prepare(request)
        except (ValidationError, NotFoundError, BusinessLogicError) as e:
            logger.warning(f"Booking rejected for client {request.client_id}: {e.code} {e.message}")
            raise

        if self.settings.BOOKING_ATOMIC_WRITES:
            appointment_id = await self._write_atomic(fields, sub_services, reminder_args)
        else:
            appointment_id = await self._write_with_compensation(fields, sub_services, reminder_args)

        logger.info(
            f"Booked appointment {appointment_id} for client {fields['client_id']} at "
            f"{fields['scheduled_at'].isoformat()} ({len(sub_services)} items, total {fields['total_amount']})"
        )
        return await self._reload(appointment_id)

    async def _write_atomic(
            self,
            fields: Dict[str, Any],
            sub_services: List[SubService],
            reminder_args: Optional[Dict[str, Any]]
    ) -> UUID:
        """Appointment, line items and reminder in one transaction"""
        try:
            appointment = await self.appointments.create(**fields)
            appointment_id = appointment.id
            await self.line_items.create_many(appointment_id, sub_services)
            if reminder_args:
                await self.reminders.schedule(appointment_id=appointment_id, **reminder_args)
            await self.db.commit()
        except Exception as exc:
            await self.db.rollback()
            logger.error(f"Booking failed, transaction rolled back: {exc}", exc_info=True)
            classified = self._classify(exc, "appointment booking")
            if classified is exc:
                raise
            raise classified from exc
        return appointment_id

    async def _write_with_compensation(
            self,
            fields: Dict[str, Any],
            sub_services: List[SubService],
            reminder_args: Optional[Dict[str, Any]]
    ) -> UUID:
        """
        Commit the appointment first, then line items, then the reminder.
        A failure after the first commit cancels the appointment before
        the error is re-raised.
        """
        try:
            appointment = await self.appointments.create(**fields)
            appointment_id = appointment.id
            await self.db.commit()
        except Exception as exc:
            await self.db.rollback()
            logger.error(f"Booking failed before any write: {exc}", exc_info=True)
            classified = self._classify(exc, "appointment booking")
            if classified is exc:
                raise
            raise classified from exc

        try:
            await self.line_items.create_many(appointment_id, sub_services)
            await self.db.commit()
            if reminder_args:
                await self.reminders.schedule(appointment_id=appointment_id, **reminder_args)
                await self.db.commit()
        except Exception as exc:
            await self.db.rollback()
            logger.error(f"Booking of appointment {appointment_id} failed after insert: {exc}", exc_info=True)
            await self._compensate(appointment_id)
            classified = self._classify(exc, "appointment booking")
            if classified is exc:
                raise
            raise classified from exc
        return appointment_id

    async def _compensate(self, appointment_id: UUID) -> None:
        try:
            await self.appointments.mark_cancelled(appointment_id)
            await self.db.commit()
            logger.warning(f"Appointment {appointment_id} cancelled after partial booking failure")
        except Exception as exc:
            await self.db.rollback()
            logger.critical(
                f"Could not cancel partially booked appointment {appointment_id}; "
                f"it remains active and needs manual cleanup: {exc}",
                exc_info=True,
            )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------
    async def update(self, appointment_id: UUID, request: AppointmentUpdate) -> Appointment:
        """
        Apply only the fields present in the request. A new sub-service list
        replaces every line item and recomputes the total, all in one
        transaction.
        """
        appointment = await self._reload(appointment_id)
        fields = request.model_fields_set
        updates: Dict[str, Any] = {}

        if "client_id" in fields and request.client_id is not None:
            client = await self._require_client(request.client_id)
            updates["client_id"] = client.id

        sub_services = None
        if "sub_service_ids" in fields and request.sub_service_ids is not None:
            current_ids = [item.sub_service_id for item in appointment.line_items]
            sub_services = await self._resolve_sub_services(request.sub_service_ids, keep_deleted=current_ids)
            updates["total_amount"] = calculate_total(sub_services)

        if "scheduled_at" in fields and request.scheduled_at is not None:
            updates["scheduled_at"] = parse_timestamp(request.scheduled_at)
        if "notes" in fields:
            updates["notes"] = request.notes
        if "cancelled" in fields and request.cancelled is not None:
            updates["cancelled"] = request.cancelled

        if not updates:
            return appointment

        try:
            await self.appointments.update(appointment, **updates)
            if sub_services is not None:
                self.db.expire(appointment, ["line_items"])
                await self.line_items.replace(appointment_id, sub_services)
            await self.db.commit()
        except Exception as exc:
            await self.db.rollback()
            logger.error(f"Update of appointment {appointment_id} failed: {exc}", exc_info=True)
            classified = self._classify(exc, "appointment update")
            if classified is exc:
                raise
            raise classified from exc

        logger.info(f"Updated appointment {appointment_id}: {sorted(updates)}")
        return await self._reload(appointment_id)

    # ------------------------------------------------------------------
    # Cancel / restore
    # ------------------------------------------------------------------
    async def cancel(self, appointment_id: UUID) -> Appointment:
        return await self._set_cancelled(appointment_id, True)

    async def restore(self, appointment_id: UUID) -> Appointment:
        return await self._set_cancelled(appointment_id, False)

    async def _set_cancelled(self, appointment_id: UUID, cancelled: bool) -> Appointment:
        appointment = await self._reload(appointment_id)
        if appointment.cancelled == cancelled:
            # Already in the requested state
            return appointment

        with translate_store_errors("appointment cancel" if cancelled else "appointment restore"):
            await self.appointments.update(appointment, cancelled=cancelled)
            await self.db.commit()

        logger.info(f"Appointment {appointment_id} {'cancelled' if cancelled else 'restored'}")
        return await self._reload(appointment_id)
