# agenda/models/service.py
"""
Service catalog models.
A Service is a category; SubService is the priced, bookable unit inside it.
"""
import uuid

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from agenda.models.base import Base, utcnow


class Service(Base):
    __tablename__ = "services"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    sub_services = relationship("SubService", back_populates="service")

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name})>"


class SubService(Base):
    """
    Source of truth for price at booking time.
    Line items copy the price when booked and never read it again.
    """
    __tablename__ = "sub_services"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    service_id = Column(
        UUID(as_uuid=True),
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    # Smallest currency unit (guaraníes have no minor unit)
    price = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    service = relationship("Service", back_populates="sub_services")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_sub_services_price_non_negative"),
    )

    def __repr__(self):
        return f"<SubService(id={self.id}, name={self.name}, price={self.price})>"

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
