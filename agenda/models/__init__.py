# agenda/models/__init__.py
from .base import Base
from .client import Client, Sex
from .service import Service, SubService
from .template import MessageTemplate
from .appointment import Appointment, AppointmentLineItem
from .reminder import Reminder, ReminderStatus

__all__ = [
    "Base",
    "Client",
    "Sex",
    "Service",
    "SubService",
    "MessageTemplate",
    "Appointment",
    "AppointmentLineItem",
    "Reminder",
    "ReminderStatus",
]
