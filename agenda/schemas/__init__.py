# agenda/schemas/__init__.py
from .appointment import (
    AppointmentCreate,
    AppointmentUpdate,
    AppointmentResponse,
    AppointmentListResponse,
    DailyCountResponse,
    LineItemResponse,
    ReminderSummary,
)

from .client import (
    ClientCreate,
    ClientUpdate,
    ClientResponse,
    ClientListResponse,
    ClientStats,
)

from .catalog import (
    ServiceCreate,
    ServiceUpdate,
    ServiceResponse,
    SubServiceCreate,
    SubServiceUpdate,
    SubServiceResponse,
    SubServiceListResponse,
)

from .template import (
    TemplateCreate,
    TemplateUpdate,
    TemplateResponse,
)

from .reminder import (
    ReminderCreate,
    ReminderUpdate,
    ReminderStatusUpdate,
    ReminderResponse,
)
