"""
Pydantic schemas for reminders
"""
from datetime import datetime
from typing import Any, Dict, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from agenda.models.reminder import ReminderStatus


class ReminderCreate(BaseModel):
    client_id: UUID
    recipient: str
    send_at: Union[datetime, str]
    template_id: Optional[UUID] = None
    appointment_id: Optional[UUID] = None


class ReminderUpdate(BaseModel):
    client_id: Optional[UUID] = None
    recipient: Optional[str] = None
    send_at: Optional[Union[datetime, str]] = None
    template_id: Optional[UUID] = None


class ReminderStatusUpdate(BaseModel):
    """Delivery result reported by the messaging integration"""
    status: ReminderStatus
    request_payload: Optional[Dict[str, Any]] = None
    response_payload: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = Field(None, max_length=2000)


class ReminderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    template_id: Optional[UUID] = None
    appointment_id: Optional[UUID] = None
    recipient: str
    send_at: datetime
    status: str
    request_payload: Optional[Dict[str, Any]] = None
    response_payload: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
