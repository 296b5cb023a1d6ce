# agenda/models/client.py
"""
Client Model - people who book appointments.
Soft-deleted through deleted_at; booking only references clients, never edits them.
"""
import enum
import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from agenda.models.base import Base, utcnow


class Sex(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Client(Base):
    __tablename__ = "clients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False)
    # Contact channel used for reminders (phone / WhatsApp number)
    contact = Column(String(32), nullable=True)
    email = Column(String(255), nullable=True)

    is_minor = Column(Boolean, nullable=False, default=False)
    guardian_name = Column(String(200), nullable=True)
    sex = Column(String(10), nullable=True)  # male, female, other

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    appointments = relationship("Appointment", back_populates="client")

    __table_args__ = (
        Index("ix_clients_contact", "contact"),
        Index("ix_clients_deleted_at", "deleted_at"),
    )

    def __repr__(self):
        return f"<Client(id={self.id}, name={self.name})>"

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
