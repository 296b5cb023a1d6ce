# agenda/models/appointment.py
"""
Appointment (cita) and its line items.

total_amount is denormalized: it must equal the sum of the line items'
snapshotted prices. Cancelling is a business state, not a deletion.
"""
import uuid

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from agenda.models.base import Base, utcnow


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    client_id = Column(UUID(as_uuid=True), ForeignKey("clients.id"), nullable=False, index=True)

    # Appointment details
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    total_amount = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    send_reminder = Column(Boolean, nullable=False, default=False)

    # Status tracking
    cancelled = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    client = relationship("Client", back_populates="appointments")
    line_items = relationship(
        "AppointmentLineItem",
        back_populates="appointment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="AppointmentLineItem.position",
    )
    # Reminders are linked, not owned
    reminders = relationship(
        "Reminder",
        back_populates="appointment",
        order_by="Reminder.created_at",
    )

    __table_args__ = (
        Index("ix_appointments_scheduled_at", "scheduled_at"),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, client_id={self.client_id}, scheduled_at={self.scheduled_at})>"

    @property
    def reminder(self):
        """Most recent reminder linked to this appointment, if any"""
        return self.reminders[-1] if self.reminders else None


class AppointmentLineItem(Base):
    """Junction between an appointment and a sub-service, with the price frozen at booking"""
    __tablename__ = "appointment_line_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    appointment_id = Column(
        UUID(as_uuid=True),
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    sub_service_id = Column(UUID(as_uuid=True), ForeignKey("sub_services.id"), nullable=False)
    price = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    appointment = relationship("Appointment", back_populates="line_items")
    sub_service = relationship("SubService")

    def __repr__(self):
        return f"<AppointmentLineItem(appointment_id={self.appointment_id}, sub_service_id={self.sub_service_id})>"
