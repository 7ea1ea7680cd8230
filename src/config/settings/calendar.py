"""Settings da grade do calendário de agendamentos.

A grade diária começa às 8h, termina às 22h (exclusivo) e cada hora ocupa
80px. Esses valores alimentam TimeGridEngine e RescheduleCoordinator.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

StoreBackend = Literal["memory", "firestore"]
DefaultView = Literal["day", "week", "month"]


class CalendarSettings(BaseModel):
    """Configurações da grade e do backend do calendário."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    grid_start_hour: int = Field(
        default=8,
        ge=0,
        le=23,
        description="Primeira hora exibida na grade (origem vertical).",
    )
    grid_end_hour: int = Field(
        default=22,
        ge=1,
        le=24,
        description="Limite exclusivo para a hora de início de um evento.",
    )
    hour_height_px: int = Field(
        default=80,
        ge=1,
        description="Altura em pixels de uma hora na grade.",
    )
    default_duration_min: int = Field(
        default=60,
        ge=1,
        description="Duracao usada quando o documento nao informa duration.",
    )
    default_view: DefaultView = Field(
        default="week",
        description="Visualizacao inicial do calendario.",
    )
    store_backend: StoreBackend = Field(
        default="memory",
        description="Backend de agendamentos (memory apenas para dev/test).",
    )

    def validate_settings(self, *, is_development: bool = True) -> list[str]:
        """Valida coerência entre os campos.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []
        if self.grid_end_hour <= self.grid_start_hour:
            errors.append("CALENDAR_GRID_END_HOUR deve ser maior que CALENDAR_GRID_START_HOUR")
        if self.store_backend == "memory" and not is_development:
            errors.append("CALENDAR_STORE_BACKEND=memory proibido em staging/production")
        return errors


def _parse_backend(value: str) -> StoreBackend:
    lowered = value.strip().lower()
    if lowered not in ("memory", "firestore"):
        raise ValueError(f"CALENDAR_STORE_BACKEND inválido: {value}")
    return lowered  # type: ignore[return-value]



def _parse_view(value: str) -> DefaultView:
    lowered = value.strip().lower()
    if lowered in ("day", "month"):
        return lowered  # type: ignore[return-value]
    return "week"


def _load_calendar_from_env() -> CalendarSettings:
    """Carrega CalendarSettings a partir de variaveis de ambiente."""
    return CalendarSettings(
        grid_start_hour=int(os.getenv("CALENDAR_GRID_START_HOUR", "8")),
        grid_end_hour=int(os.getenv("CALENDAR_GRID_END_HOUR", "22")),
        hour_height_px=int(os.getenv("CALENDAR_HOUR_HEIGHT_PX", "80")),
        default_duration_min=int(os.getenv("CALENDAR_DEFAULT_DURATION_MIN", "60")),
        default_view=_parse_view(os.getenv("CALENDAR_DEFAULT_VIEW", "week")),
        store_backend=_parse_backend(os.getenv("CALENDAR_STORE_BACKEND", "memory")),
    )


@lru_cache(maxsize=1)
def get_calendar_settings() -> CalendarSettings:
    """Retorna instancia cacheada de CalendarSettings."""
    return _load_calendar_from_env()


__all__ = ["CalendarSettings", "DefaultView", "StoreBackend", "get_calendar_settings"]
