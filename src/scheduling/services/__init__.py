"""Serviços do calendário: grade, fronteira, cache, reagendamento e fachada."""

from scheduling.services.appointment_cache import (
    AppointmentCache,
    CacheSource,
    CacheState,
    reduce_cache,
)
from scheduling.services.appointment_mapper import (
    build_create_payload,
    build_update_payload,
    parse_appointment_document,
    parse_snapshot,
    placeholder_events,
)
from scheduling.services.event_validation import (
    find_conflicts,
    is_slot_available,
    sort_events_by_time,
    validate_calendar_event,
)
from scheduling.services.reschedule_coordinator import (
    DragGesture,
    RescheduleCoordinator,
    RescheduleOutcome,
)
from scheduling.services.scheduling_calendar import EventLayout, SchedulingCalendar
from scheduling.services.store_errors import message_for_store_error
from scheduling.services.time_grid import (
    DensityBucket,
    EventCardTreatment,
    TimeGridEngine,
    TimeSlotStyle,
    classify_density,
    format_event_duration,
)

__all__ = [
    "AppointmentCache",
    "CacheSource",
    "CacheState",
    "DensityBucket",
    "DragGesture",
    "EventCardTreatment",
    "EventLayout",
    "RescheduleCoordinator",
    "RescheduleOutcome",
    "SchedulingCalendar",
    "TimeGridEngine",
    "TimeSlotStyle",
    "build_create_payload",
    "build_update_payload",
    "classify_density",
    "find_conflicts",
    "format_event_duration",
    "is_slot_available",
    "message_for_store_error",
    "parse_appointment_document",
    "parse_snapshot",
    "placeholder_events",
    "reduce_cache",
    "sort_events_by_time",
    "validate_calendar_event",
]
