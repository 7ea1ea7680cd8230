"""Modelo em memória de um agendamento exibido na grade do calendário.

`CalendarEvent` é imutável: edições, reagendamentos e rollbacks sempre
produzem uma nova instância via `model_copy(update=...)`. Isso garante que
o snapshot pré-edição capturado pelo coordenador nunca seja alterado por
caminhos posteriores.
"""

from __future__ import annotations

from datetime import date, datetime, time  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

WALL_CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AppointmentStatus(StrEnum):
    """Status de um agendamento no store."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


def wall_clock_to_minutes(value: str) -> int:
    """Converte "HH:MM" em minutos desde a meia-noite."""
    hours, minutes = value.split(":", 1)
    return int(hours) * 60 + int(minutes)


class CalendarEvent(BaseModel):
    """Agendamento renderizável na grade semanal/diária."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    display_id: str = Field(..., min_length=1, description="Id local da sessao de render.")
    document_id: str | None = Field(
        default=None,
        description="Id do documento no store; None enquanto provisório.",
    )
    title: str = Field(..., description="Nome do paciente exibido no card.")
    start_time: str = Field(..., pattern=WALL_CLOCK_PATTERN)
    end_time: str = Field(..., pattern=WALL_CLOCK_PATTERN)
    day: int = Field(..., ge=1, le=7, description="Dia da semana, 1=segunda .. 7=domingo.")
    event_date: date = Field(..., description="Data civil do evento.")
    description: str = Field(default="", description="Sintomas / descricao livre.")
    notes: str = Field(default="")
    location: str = Field(default="")
    organizer: str = Field(default="")
    attendees: tuple[str, ...] = Field(default=())
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)
    patient_cnp: str | None = Field(default=None)
    patient_email: str | None = Field(default=None)
    patient_phone: str | None = Field(default=None)
    patient_birth_date: date | None = Field(default=None)
    provisional: bool = Field(
        default=False,
        description="Criado localmente; ainda não apareceu num snapshot remoto.",
    )

    @model_validator(mode="after")
    def _end_after_start(self) -> CalendarEvent:
        if wall_clock_to_minutes(self.end_time) <= wall_clock_to_minutes(self.start_time):
            raise ValueError("end_time deve ser posterior a start_time no mesmo dia")
        if self.event_date.isoweekday() != self.day:
            raise ValueError("day deve corresponder ao dia da semana de event_date")
        return self

    @property
    def duration_minutes(self) -> int:
        return wall_clock_to_minutes(self.end_time) - wall_clock_to_minutes(self.start_time)

    @property
    def start_datetime(self) -> datetime:
        """Data/hora de início em wall-clock local (naive)."""
        hours, minutes = divmod(wall_clock_to_minutes(self.start_time), 60)
        return datetime.combine(self.event_date, time(hours, minutes))

    @property
    def is_persisted(self) -> bool:
        return self.document_id is not None

    @property
    def is_pending_create(self) -> bool:
        """Provisório cuja escrita de criação ainda não resolveu."""
        return self.provisional and self.document_id is None


__all__ = [
    "WALL_CLOCK_PATTERN",
    "AppointmentStatus",
    "CalendarEvent",
    "wall_clock_to_minutes",
]
