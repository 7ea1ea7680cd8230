"""Modelos de domínio do calendário de agendamentos."""

from scheduling.domain.appointment import (
    DEFAULT_DURATION_MIN,
    AppointmentDraft,
    AppointmentRecord,
)
from scheduling.domain.calendar_event import (
    AppointmentStatus,
    CalendarEvent,
    wall_clock_to_minutes,
)
from scheduling.domain.errors import InvalidAppointmentDocumentError
from scheduling.domain.session import SessionContext
from scheduling.domain.view import CalendarView, VisibleRange, monday_of

__all__ = [
    "DEFAULT_DURATION_MIN",
    "AppointmentDraft",
    "AppointmentRecord",
    "AppointmentStatus",
    "CalendarEvent",
    "CalendarView",
    "InvalidAppointmentDocumentError",
    "SessionContext",
    "VisibleRange",
    "monday_of",
    "wall_clock_to_minutes",
]
