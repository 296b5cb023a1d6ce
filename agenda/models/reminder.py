# agenda/models/reminder.py
"""
Reminder Model - a scheduled outbound message.
Delivery (pending -> sent / failed) is recorded by the messaging integration.
"""
import enum
import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from agenda.models.base import Base, utcnow


class ReminderStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    client_id = Column(UUID(as_uuid=True), ForeignKey("clients.id"), nullable=False, index=True)
    template_id = Column(
        UUID(as_uuid=True),
        ForeignKey("message_templates.id", ondelete="SET NULL"),
        nullable=True
    )
    appointment_id = Column(
        UUID(as_uuid=True),
        ForeignKey("appointments.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    recipient = Column(String(32), nullable=False)
    send_at = Column(DateTime(timezone=True), nullable=False)

    # Delivery tracking
    status = Column(String(20), nullable=False, default=ReminderStatus.PENDING.value)  # pending, sent, failed
    request_payload = Column(JSON, nullable=True)
    response_payload = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    client = relationship("Client")
    template = relationship("MessageTemplate")
    appointment = relationship("Appointment", back_populates="reminders")

    __table_args__ = (
        Index("ix_reminders_status_send_at", "status", "send_at"),
    )

    def __repr__(self):
        return f"<Reminder(id={self.id}, recipient={self.recipient}, status={self.status})>"
