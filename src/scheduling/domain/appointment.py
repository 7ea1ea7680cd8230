"""Contratos de agendamento na fronteira com o store de documentos.

`AppointmentRecord` descreve o documento como o store o entrega (campos
em camelCase, tipos frouxos). `AppointmentDraft` descreve o formulário
de "Programare Nouă" antes de virar payload de criação.
"""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scheduling.domain.calendar_event import WALL_CLOCK_PATTERN, AppointmentStatus

DEFAULT_DURATION_MIN = 60


class AppointmentRecord(BaseModel):
    """Documento `appointments/{id}` validado na fronteira."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    patient_name: str = Field(..., alias="patientName", min_length=1)
    date_time: datetime = Field(..., alias="dateTime")
    duration: int = Field(default=DEFAULT_DURATION_MIN, description="Duracao em minutos.")
    symptoms: str = Field(default="")
    notes: str = Field(default="")
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)
    patient_cnp: str | None = Field(default=None, alias="patientCNP")
    patient_email: str | None = Field(default=None, alias="patientEmail")
    patient_phone: str | None = Field(default=None, alias="patientPhone")
    patient_birth_date: date | None = Field(default=None, alias="patientBirthDate")
    user_id: str = Field(default="", alias="userId")

    @field_validator("patient_name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("date_time", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        # Timestamps do SDK expõem to_datetime(); DatetimeWithNanoseconds já é datetime
        if not isinstance(value, (datetime, str)) and hasattr(value, "to_datetime"):
            return value.to_datetime()
        return value

    @field_validator("patient_birth_date", mode="before")
    @classmethod
    def _coerce_birth_date(cls, value: Any) -> Any:
        if value in ("", None):
            return None
        if isinstance(value, datetime):
            return value.date()
        if not isinstance(value, (date, str)) and hasattr(value, "to_datetime"):
            return value.to_datetime().date()
        return value

    @field_validator("duration", mode="before")
    @classmethod
    def _default_duration(cls, value: Any) -> int:
        try:
            minutes = int(value)
        except (TypeError, ValueError):
            return DEFAULT_DURATION_MIN
        return minutes if minutes > 0 else DEFAULT_DURATION_MIN

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        valid = {status.value for status in AppointmentStatus}
        if isinstance(value, str) and value in valid:
            return value
        return AppointmentStatus.SCHEDULED

    @field_validator("symptoms", "notes", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return str(value).strip() if value is not None else ""

    @field_validator("patient_cnp", "patient_email", "patient_phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class AppointmentDraft(BaseModel):
    """Dados do formulário de criação de agendamento."""

    model_config = ConfigDict(extra="ignore")

    patient_name: str = Field(..., description="Nume pacient.")
    appointment_date: date = Field(..., description="Data Programării.")
    start_time: str = Field(..., pattern=WALL_CLOCK_PATTERN, description="Ora Început.")
    duration_min: int = Field(default=DEFAULT_DURATION_MIN, ge=1, description="Durată.")
    symptoms: str = Field(default="", description="Descriere / simptome.")
    notes: str = Field(default="")
    patient_cnp: str = Field(default="")
    patient_email: str = Field(default="")
    patient_phone: str = Field(default="")
    patient_birth_date: date | None = Field(default=None)
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)


__all__ = ["DEFAULT_DURATION_MIN", "AppointmentDraft", "AppointmentRecord"]
