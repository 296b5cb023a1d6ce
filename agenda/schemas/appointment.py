"""
Pydantic schemas for appointment booking requests and responses
"""
from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from agenda.models.appointment import Appointment
from agenda.utils.dates import ensure_utc


# ============================================================================
# Request Schemas (for incoming data)
# ============================================================================

class AppointmentCreate(BaseModel):
    """Booking request: one client, one instant, one or more sub-services"""
    client_id: UUID
    # Kept as text so that unparseable values surface as a booking ValidationError
    scheduled_at: Union[datetime, str] = Field(..., description="ISO-8601 instant; past values allowed")
    sub_service_ids: List[UUID] = Field(default_factory=list)
    notes: Optional[str] = None
    send_reminder: bool = False
    reminder_lead_minutes: Optional[int] = Field(None, description="Minutes before the appointment")
    template_id: Optional[UUID] = Field(None, description="Message template for the reminder")


class AppointmentUpdate(BaseModel):
    """
    Partial update. Only fields that are present are applied.
    sub_service_ids, when present, replaces the whole selection.
    """
    client_id: Optional[UUID] = None
    scheduled_at: Optional[Union[datetime, str]] = None
    sub_service_ids: Optional[List[UUID]] = None
    notes: Optional[str] = None
    cancelled: Optional[bool] = None


# ============================================================================
# Response Schemas
# ============================================================================

class LineItemResponse(BaseModel):
    sub_service_id: UUID
    name: Optional[str] = None
    price: int


class ReminderSummary(BaseModel):
    id: UUID
    recipient: str
    send_at: datetime
    status: str
    template_id: Optional[UUID] = None


class AppointmentResponse(BaseModel):
    id: UUID
    client_id: UUID
    client_name: Optional[str] = None
    scheduled_at: datetime
    total_amount: int
    cancelled: bool
    notes: Optional[str] = None
    send_reminder: bool = False
    line_items: List[LineItemResponse] = Field(default_factory=list)
    reminder: Optional[ReminderSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, appointment: Appointment) -> "AppointmentResponse":
        """Build the response from an appointment loaded with its relations"""
        reminder = appointment.reminder
        client = appointment.client
        return cls(
            id=appointment.id,
            client_id=appointment.client_id,
            client_name=client.name if client is not None else None,
            scheduled_at=ensure_utc(appointment.scheduled_at),
            total_amount=appointment.total_amount,
            cancelled=appointment.cancelled,
            notes=appointment.notes,
            send_reminder=appointment.send_reminder,
            line_items=[
                LineItemResponse(
                    sub_service_id=item.sub_service_id,
                    name=item.sub_service.name if item.sub_service is not None else None,
                    price=item.price,
                )
                for item in appointment.line_items
            ],
            reminder=ReminderSummary(
                id=reminder.id,
                recipient=reminder.recipient,
                send_at=ensure_utc(reminder.send_at),
                status=reminder.status,
                template_id=reminder.template_id,
            ) if reminder is not None else None,
            created_at=ensure_utc(appointment.created_at),
            updated_at=ensure_utc(appointment.updated_at),
        )


class AppointmentListResponse(BaseModel):
    total: int
    appointments: List[AppointmentResponse]


class DailyCountResponse(BaseModel):
    day: str
    timezone: str
    total_appointments: int
