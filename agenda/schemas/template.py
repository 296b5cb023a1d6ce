"""
Pydantic schemas for message templates
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TemplateCreate(BaseModel):
    title: str
    body: str
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None


class TemplateUpdate(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None


class TemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    body: str
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
