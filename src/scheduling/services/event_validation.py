"""Validação determinística de agendamentos (formulário e ocupação da grade).

Mensagens em romeno, prontas para exibição. Entradas do formulário chegam
sem tipo garantido: horários são comparados em minutos e valores
malformados viram erro de validação, nunca exceção.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from scheduling.constants.messages import (
    DESCRIPTION_TOO_LONG,
    END_BEFORE_START,
    END_TIME_REQUIRED,
    INVALID_TIME_FORMAT,
    SAME_DAY_REQUIRED,
    START_TIME_REQUIRED,
    TITLE_REQUIRED,
    TITLE_TOO_LONG,
)
from scheduling.domain import wall_clock_to_minutes
from scheduling.services.appointment_mapper import draft_interval
from scheduling.services.time_grid import wall_clock_minutes

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from scheduling.domain import AppointmentDraft, CalendarEvent

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


def validate_calendar_event(
    title: Any,
    start_time: Any,
    end_time: Any,
    description: Any = None,
) -> list[str]:
    """Retorna a lista de erros; lista vazia quando válido."""
    errors: list[str] = []
    clean_title = title.strip() if isinstance(title, str) else ""
    if not clean_title:
        errors.append(TITLE_REQUIRED)
    elif len(clean_title) > MAX_TITLE_LENGTH:
        errors.append(TITLE_TOO_LONG)
    if not start_time:
        errors.append(START_TIME_REQUIRED)
    if not end_time:
        errors.append(END_TIME_REQUIRED)
    start_minutes = wall_clock_minutes(start_time)
    end_minutes = wall_clock_minutes(end_time)
    if (start_time and start_minutes is None) or (end_time and end_minutes is None):
        errors.append(INVALID_TIME_FORMAT)
    elif start_minutes is not None and end_minutes is not None and start_minutes >= end_minutes:
        errors.append(END_BEFORE_START)
    if isinstance(description, str) and len(description) > MAX_DESCRIPTION_LENGTH:
        errors.append(DESCRIPTION_TOO_LONG)
    return errors


def validate_draft(draft: AppointmentDraft) -> list[str]:
    """Valida o formulário de criação, incluindo o fim no mesmo dia."""
    start_time, end_time = draft_interval(draft)
    if end_time is None:
        errors = validate_calendar_event(draft.patient_name, start_time, "23:59", draft.symptoms)
        return [*errors, SAME_DAY_REQUIRED]
    return validate_calendar_event(draft.patient_name, start_time, end_time, draft.symptoms)


def find_conflicts(
    events: Iterable[CalendarEvent],
    candidate: CalendarEvent,
) -> list[CalendarEvent]:
    """Eventos do mesmo dia cujo intervalo se sobrepõe ao candidato."""
    return [
        event
        for event in events
        if event.display_id != candidate.display_id
        and event.event_date == candidate.event_date
        and wall_clock_to_minutes(event.start_time) < wall_clock_to_minutes(candidate.end_time)
        and wall_clock_to_minutes(candidate.start_time) < wall_clock_to_minutes(event.end_time)
    ]


def is_slot_available(events: Iterable[CalendarEvent], day: date, time: str) -> bool:
    """True quando nenhum evento do dia cobre `time` (início inclusivo, fim exclusivo).

    Horário malformado nunca é considerado disponível.
    """
    minute = wall_clock_minutes(time)
    if minute is None:
        return False
    return not any(
        event.event_date == day
        and wall_clock_to_minutes(event.start_time)
        <= minute
        < wall_clock_to_minutes(event.end_time)
        for event in events
    )


def sort_events_by_time(events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
    """Ordena por data e horário de início; não altera a entrada."""
    return sorted(
        events, key=lambda event: (event.event_date, wall_clock_to_minutes(event.start_time))
    )


__all__ = [
    "MAX_DESCRIPTION_LENGTH",
    "MAX_TITLE_LENGTH",
    "find_conflicts",
    "is_slot_available",
    "sort_events_by_time",
    "validate_calendar_event",
    "validate_draft",
]
