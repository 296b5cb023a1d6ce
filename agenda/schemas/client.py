"""
Pydantic schemas for client management
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from agenda.models.client import Sex


class ClientCreate(BaseModel):
    name: str
    contact: Optional[str] = None
    email: Optional[str] = None
    is_minor: bool = False
    guardian_name: Optional[str] = None
    sex: Optional[Sex] = None


class ClientUpdate(BaseModel):
    """All fields are optional - only send what you want to update."""
    name: Optional[str] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    is_minor: Optional[bool] = None
    guardian_name: Optional[str] = None
    sex: Optional[Sex] = None


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    contact: Optional[str] = None
    email: Optional[str] = None
    is_minor: bool
    guardian_name: Optional[str] = None
    sex: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClientListResponse(BaseModel):
    total: int
    clients: List[ClientResponse]


class ClientStats(BaseModel):
    client_id: UUID
    total_billed: int
    appointment_count: int
    average_amount: int
    last_visit: Optional[datetime] = None
