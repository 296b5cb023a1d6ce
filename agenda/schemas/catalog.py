"""
Pydantic schemas for the service catalog (services and sub-services)
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubServiceCreate(BaseModel):
    service_id: UUID
    name: str
    price: int = Field(..., description="Price in the smallest currency unit")


class SubServiceUpdate(BaseModel):
    service_id: Optional[UUID] = None
    name: Optional[str] = None
    price: Optional[int] = None


class SubServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    service_id: UUID
    name: str
    price: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubServiceListResponse(BaseModel):
    total: int
    sub_services: List[SubServiceResponse]
