"""Fronteira entre documentos do store e CalendarEvent.

Documentos chegam com tipos frouxos (timestamps do SDK, strings ISO,
campos ausentes). Aqui eles são validados uma única vez com
`AppointmentRecord` e convertidos para `CalendarEvent` em wall-clock local.
No caminho inverso, drafts e eventos viram payloads de escrita onde campos
opcionais vazios são omitidos, nunca enviados como None.
"""

from __future__ import annotations

import logging
import re
import time as time_module
import uuid
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from scheduling.constants.messages import (
    DEFAULT_DESCRIPTION_TEMPLATE,
    DEFAULT_LOCATION,
    DEFAULT_ORGANIZER,
    SAME_DAY_REQUIRED,
)
from scheduling.constants.placeholder_events import PLACEHOLDER_EVENTS
from scheduling.domain import (
    AppointmentRecord,
    CalendarEvent,
    InvalidAppointmentDocumentError,
)
from scheduling.protocols.appointment_store import DELETE_FIELD
from scheduling.services.time_grid import format_wall_clock, parse_wall_clock

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from scheduling.domain import AppointmentDraft, SessionContext
    from scheduling.protocols import StoreDocument

logger = logging.getLogger(__name__)

_LAST_MINUTE = time(23, 59)
_CNP_PATTERN = re.compile(r"^\d{13}$")
# Primeiro dígito do CNP -> século de nascimento
_CNP_CENTURY = {"1": 1900, "2": 1900, "3": 1800, "4": 1800, "5": 2000, "6": 2000}


def new_display_id() -> str:
    """Gera id local no formato `event_<ms>_<rand9>`."""
    return f"event_{int(time_module.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def from_store_datetime(value: datetime) -> datetime:
    """Converte datetime do store para wall-clock local naive."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def to_store_datetime(value: datetime) -> datetime:
    """Converte wall-clock local naive para datetime aware (timezone local)."""
    if value.tzinfo is not None:
        return value
    return value.astimezone()


def birth_date_from_cnp(cnp: str | None) -> date | None:
    """Extrai a data de nascimento de um CNP romeno (S AA LL ZZ ...).

    Valida apenas formato (13 dígitos) e data; o dígito de controle não é
    verificado. Retorna None quando não for possível extrair.
    """
    if not cnp:
        return None
    digits = re.sub(r"\s", "", cnp)
    if not _CNP_PATTERN.match(digits):
        return None
    century = _CNP_CENTURY.get(digits[0], 1900)
    try:
        return date(century + int(digits[1:3]), int(digits[3:5]), int(digits[5:7]))
    except ValueError:
        return None


def normalize_phone(raw: str | None) -> str | None:
    """Normaliza telefone romeno para `+40 <dígitos>`; None se vazio."""
    digits = re.sub(r"\D", "", raw or "")
    if not digits:
        return None
    if digits.startswith("40") and len(digits) > 10:
        digits = digits[2:]
    return f"+40 {digits.lstrip('0')}"


def parse_appointment_document(
    document_id: str,
    data: Mapping[str, Any],
    *,
    display_id: str | None = None,
) -> CalendarEvent:
    """Converte um documento do store em CalendarEvent.

    Raises:
        InvalidAppointmentDocumentError: patientName/dateTime ausentes ou inválidos
    """
    try:
        record = AppointmentRecord.model_validate(dict(data))
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise InvalidAppointmentDocumentError(document_id, ", ".join(fields)) from exc

    start = from_store_datetime(record.date_time)
    end = start + timedelta(minutes=record.duration)
    end_time = end.time()
    if end.date() != start.date():
        logger.warning(
            "appointment_end_capped",
            extra={
                "component": "appointment_mapper",
                "action": "parse_document",
                "result": "capped",
                "document_id": document_id,
            },
        )
        end_time = _LAST_MINUTE
    if end_time <= start.time().replace(second=0, microsecond=0):
        raise InvalidAppointmentDocumentError(document_id, "dateTime no último minuto do dia")

    return CalendarEvent(
        display_id=display_id or new_display_id(),
        document_id=document_id,
        title=record.patient_name,
        start_time=format_wall_clock(start.hour, start.minute),
        end_time=format_wall_clock(end_time.hour, end_time.minute),
        day=start.isoweekday(),
        event_date=start.date(),
        description=record.symptoms,
        notes=record.notes,
        location=DEFAULT_LOCATION,
        organizer=DEFAULT_ORGANIZER,
        attendees=(record.patient_name,),
        status=record.status,
        patient_cnp=record.patient_cnp,
        patient_email=record.patient_email,
        patient_phone=record.patient_phone,
        patient_birth_date=record.patient_birth_date,
    )


def parse_snapshot(documents: Iterable[StoreDocument]) -> list[CalendarEvent]:
    """Converte um snapshot inteiro, pulando documentos malformados."""
    events: list[CalendarEvent] = []
    skipped = 0
    for document in documents:
        try:
            events.append(parse_appointment_document(document.document_id, document.data))
        except InvalidAppointmentDocumentError as exc:
            skipped += 1
            logger.warning(
                "appointment_document_skipped",
                extra={
                    "component": "appointment_mapper",
                    "action": "parse_snapshot",
                    "result": "skipped",
                    "document_id": exc.document_id,
                    "reason": exc.reason,
                },
            )
    logger.debug(
        "snapshot_parsed",
        extra={
            "component": "appointment_mapper",
            "action": "parse_snapshot",
            "result": "ok",
            "events": len(events),
            "skipped": skipped,
        },
    )
    return events


def draft_interval(draft: AppointmentDraft) -> tuple[str, str | None]:
    """Retorna (início, fim) do draft; fim None quando passaria da meia-noite."""
    hours, minutes = parse_wall_clock(draft.start_time)
    end_minutes = hours * 60 + minutes + draft.duration_min
    if end_minutes >= 24 * 60:
        return draft.start_time, None
    return draft.start_time, format_wall_clock(*divmod(end_minutes, 60))


def build_provisional_event(
    draft: AppointmentDraft,
    *,
    display_id: str | None = None,
) -> CalendarEvent:
    """Monta o evento provisório exibido enquanto a criação remota não resolve."""
    start_time, end_time = draft_interval(draft)
    if end_time is None:
        raise ValueError(SAME_DAY_REQUIRED)
    title = draft.patient_name.strip()
    cnp = _digits_or_none(draft.patient_cnp)
    return CalendarEvent(
        display_id=display_id or new_display_id(),
        title=title,
        start_time=start_time,
        end_time=end_time,
        day=draft.appointment_date.isoweekday(),
        event_date=draft.appointment_date,
        description=draft.symptoms.strip() or DEFAULT_DESCRIPTION_TEMPLATE.format(title=title),
        notes=draft.notes.strip(),
        location=DEFAULT_LOCATION,
        organizer=DEFAULT_ORGANIZER,
        attendees=(title,),
        status=draft.status,
        patient_cnp=cnp,
        patient_email=draft.patient_email.strip().lower() or None,
        patient_phone=normalize_phone(draft.patient_phone),
        patient_birth_date=draft.patient_birth_date or birth_date_from_cnp(cnp),
        provisional=True,
    )


def build_create_payload(draft: AppointmentDraft, session: SessionContext) -> dict[str, Any]:
    """Monta o payload de criação do documento.

    Campos obrigatórios sempre presentes; `patientEmail`, `patientPhone`,
    `patientCNP`, `patientBirthDate` e `notes` só entram quando preenchidos.
    """
    if not session.is_authenticated:
        msg = "Sessão sem owner_id não pode criar agendamentos"
        raise ValueError(msg)
    hours, minutes = parse_wall_clock(draft.start_time)
    start = datetime.combine(draft.appointment_date, time(hours, minutes))
    payload: dict[str, Any] = {
        "patientName": draft.patient_name.strip(),
        "dateTime": to_store_datetime(start),
        "duration": draft.duration_min,
        "symptoms": draft.symptoms.strip(),
        "status": draft.status.value,
        "userId": session.owner_id,
        "createdBy": session.owner_id,
    }
    cnp = _digits_or_none(draft.patient_cnp)
    birth_date = draft.patient_birth_date or birth_date_from_cnp(cnp)
    optional: dict[str, Any] = {
        "patientEmail": draft.patient_email.strip().lower() or None,
        "patientPhone": normalize_phone(draft.patient_phone),
        "patientCNP": cnp,
        "patientBirthDate": birth_date.isoformat() if birth_date else None,
        "notes": draft.notes.strip() or None,
    }
    payload.update({key: value for key, value in optional.items() if value is not None})
    return payload


def build_update_payload(event: CalendarEvent) -> dict[str, Any]:
    """Campos de conteúdo para atualização após edição no modal.

    Dados opcionais do paciente apagados na edição viram `DELETE_FIELD`,
    para que o documento remoto não mantenha o valor antigo.
    """
    payload: dict[str, Any] = {
        "patientName": event.title,
        "dateTime": to_store_datetime(event.start_datetime),
        "duration": event.duration_minutes,
        "symptoms": event.description,
        "notes": event.notes,
        "status": event.status.value,
    }
    optional: dict[str, Any] = {
        "patientEmail": event.patient_email,
        "patientPhone": event.patient_phone,
        "patientCNP": event.patient_cnp,
        "patientBirthDate": (
            event.patient_birth_date.isoformat() if event.patient_birth_date else None
        ),
    }
    payload.update({key: value or DELETE_FIELD for key, value in optional.items()})
    return payload


def build_reschedule_payload(event: CalendarEvent) -> dict[str, Any]:
    """Único campo alterado por um reagendamento via drag."""
    return {"dateTime": to_store_datetime(event.start_datetime)}


def placeholder_events(week_start: date) -> list[CalendarEvent]:
    """Agendamentos de exemplo posicionados na semana que começa em `week_start`."""
    return [
        CalendarEvent(
            display_id=f"placeholder_{index}",
            event_date=week_start + timedelta(days=item["day"] - 1),
            **item,
        )
        for index, item in enumerate(PLACEHOLDER_EVENTS, start=1)
    ]


def _digits_or_none(value: str | None) -> str | None:
    text = re.sub(r"\s", "", value or "")
    return text or None


__all__ = [
    "birth_date_from_cnp",
    "build_create_payload",
    "build_provisional_event",
    "build_reschedule_payload",
    "build_update_payload",
    "draft_interval",
    "from_store_datetime",
    "new_display_id",
    "normalize_phone",
    "parse_appointment_document",
    "parse_snapshot",
    "placeholder_events",
    "to_store_datetime",
]
