# ============================================================================
# agenda/services/appointment/appointment_query_service.py
# Read-only appointment queries
# ============================================================================
import logging
from datetime import date, datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config.settings import get_settings
from agenda.core.errors import NotFoundError, ValidationError, translate_store_errors
from agenda.models import Appointment
from agenda.repositories.appointment_repository import AppointmentRepository
from agenda.repositories.client_repository import ClientRepository
from agenda.utils.dates import day_bounds, ensure_utc

logger = logging.getLogger(__name__)


class AppointmentQueryService:
    """Service layer for appointment lookups and reports"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.appointments = AppointmentRepository(db)
        self.clients = ClientRepository(db)

    async def get(self, appointment_id: UUID) -> Appointment:
        with translate_store_errors("appointment lookup"):
            appointment = await self.appointments.find_by_id(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    async def list(
            self,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None,
            client_id: Optional[UUID] = None,
            include_cancelled: bool = True
    ) -> Sequence[Appointment]:
        """Appointments in [start, end], oldest first"""
        start, end = ensure_utc(start), ensure_utc(end)
        if start and end and start > end:
            raise ValidationError("start must not be after end", {"start": ["Must be before end"]})

        with translate_store_errors("appointment listing"):
            return await self.appointments.find_by_date_range(
                start=start,
                end=end,
                client_id=client_id,
                include_cancelled=include_cancelled,
            )

    async def list_for_client(self, client_id: UUID) -> Sequence[Appointment]:
        """Full history of one client, newest first. Deleted clients keep their history."""
        with translate_store_errors("client appointment listing"):
            client = await self.clients.find_by_id(client_id, include_deleted=True)
            if not client:
                raise NotFoundError("Client", client_id)
            return await self.appointments.find_by_client(client_id)

    async def count_for_day(self, day: date, tz_name: Optional[str] = None) -> int:
        """
        Number of appointments (cancelled included) whose instant falls on
        the given calendar day in tz_name (defaults to DEFAULT_TIMEZONE).
        """
        tz_name = tz_name or get_settings().DEFAULT_TIMEZONE
        start, end = day_bounds(day, tz_name)
        with translate_store_errors("daily appointment count"):
            total = await self.appointments.count_by_date(start, end)
        logger.debug(f"{total} appointments on {day.isoformat()} ({tz_name})")
        return total
