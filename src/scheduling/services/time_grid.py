"""Geometria da grade de tempo do calendário (sem I/O, sem timezone).

Converte horários wall-clock "HH:MM" em posição/altura em pixels relativas
à origem da grade e o caminho inverso (offset de drop -> horário
candidato). Entradas malformadas não são corrigidas: intervalos invertidos
produzem altura zero ou negativa e cabe ao chamador validar antes.

Regras:
- top = (início - grid_start_hour) * hour_height_px
- height = (fim - início) * hour_height_px
- horas fracionárias: h + m/60
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from config.settings import CalendarSettings

_MINUTES_PER_DAY = 24 * 60


class DensityBucket(StrEnum):
    """Faixas de duração que definem tipografia e espaçamento do card."""

    TINY = "tiny"  # até 15 min
    SHORT = "short"  # até 20 min
    COMPACT = "compact"  # até 30 min
    REGULAR = "regular"  # acima de 30 min


# (font_size, padding) por faixa
_DENSITY_TOKENS: dict[DensityBucket, tuple[str, str]] = {
    DensityBucket.TINY: ("text-[9px]", "px-1 py-0"),
    DensityBucket.SHORT: ("text-[10px]", "px-1 py-0.5"),
    DensityBucket.COMPACT: ("text-[11px]", "p-1"),
    DensityBucket.REGULAR: ("text-xs", "p-2"),
}


@dataclass(frozen=True, slots=True)
class TimeSlotStyle:
    """Posição do card em pixels relativa à origem da grade."""

    top: float
    height: float

    def as_css(self) -> dict[str, str]:
        """Renderiza como `{"top": "80px", "height": "80px"}`."""
        return {"top": f"{_format_px(self.top)}px", "height": f"{_format_px(self.height)}px"}


@dataclass(frozen=True, slots=True)
class EventCardTreatment:
    """Tratamento visual do card: borda e tokens de densidade."""

    border_style: str
    density: DensityBucket
    font_size: str
    padding: str


def parse_wall_clock(value: str) -> tuple[int, int]:
    """Quebra "HH:MM" em (hora, minuto). Levanta ValueError se malformado."""
    try:
        hours_text, minutes_text = value.split(":", 1)
        hours, minutes = int(hours_text), int(minutes_text)
    except (AttributeError, ValueError) as exc:
        msg = f"Horário inválido: {value!r}"
        raise ValueError(msg) from exc
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        msg = f"Horário fora do intervalo: {value!r}"
        raise ValueError(msg)
    return hours, minutes


def format_wall_clock(hour: int, minute: int) -> str:
    """Formata (hora, minuto) como "HH:MM" com zero à esquerda."""
    return f"{hour:02d}:{minute:02d}"


def normalize_wall_clock(value: Any) -> Any:
    """"9:00" -> "09:00". Valores não parseáveis voltam intactos para a validação."""
    if not isinstance(value, str):
        return value
    try:
        return format_wall_clock(*parse_wall_clock(value.strip()))
    except ValueError:
        return value


def wall_clock_minutes(value: Any) -> int | None:
    """Minutos desde a meia-noite, ou None se `value` não for um "H:MM" válido."""
    if not isinstance(value, str):
        return None
    try:
        hours, minutes = parse_wall_clock(value.strip())
    except ValueError:
        return None
    return hours * 60 + minutes


def format_event_duration(start_time: str, end_time: str) -> str:
    """Rótulo do card: "09:00 - 10:30"."""
    return f"{normalize_wall_clock(start_time)} - {normalize_wall_clock(end_time)}"


def fractional_hours(value: str) -> float:
    hours, minutes = parse_wall_clock(value)
    return hours + minutes / 60


def classify_density(duration_hours: float) -> DensityBucket:
    """Classifica a duração (em horas) numa faixa de densidade."""
    minutes = round(duration_hours * 60)
    if minutes <= 15:
        return DensityBucket.TINY
    if minutes <= 20:
        return DensityBucket.SHORT
    if minutes <= 30:
        return DensityBucket.COMPACT
    return DensityBucket.REGULAR


@dataclass(frozen=True, slots=True)
class TimeGridEngine:
    """Engine de geometria para uma grade [grid_start_hour, grid_end_hour)."""

    grid_start_hour: int = 8
    grid_end_hour: int = 22
    hour_height_px: int = 80

    def __post_init__(self) -> None:
        if self.hour_height_px <= 0:
            raise ValueError("hour_height_px deve ser positivo")
        if self.grid_end_hour <= self.grid_start_hour:
            raise ValueError("grid_end_hour deve ser maior que grid_start_hour")

    @classmethod
    def from_settings(cls, settings: CalendarSettings) -> TimeGridEngine:
        return cls(
            grid_start_hour=settings.grid_start_hour,
            grid_end_hour=settings.grid_end_hour,
            hour_height_px=settings.hour_height_px,
        )

    @property
    def visible_hours(self) -> list[int]:
        """Horas exibidas como linhas da grade (fim exclusivo)."""
        return list(range(self.grid_start_hour, self.grid_end_hour))

    def time_slots(self, step_minutes: int = 60) -> list[str]:
        """Rótulos "HH:MM" das linhas da grade, do início até antes do fim."""
        if step_minutes <= 0:
            raise ValueError("step_minutes deve ser positivo")
        return [
            format_wall_clock(*divmod(minute, 60))
            for minute in range(
                self.grid_start_hour * 60, self.grid_end_hour * 60, step_minutes
            )
        ]

    def style_for_interval(self, start_time: str, end_time: str) -> TimeSlotStyle:
        """Calcula top/height do card. Não faz clamp nem valida ordem."""
        start = fractional_hours(start_time)
        end = fractional_hours(end_time)
        return TimeSlotStyle(
            top=(start - self.grid_start_hour) * self.hour_height_px,
            height=(end - start) * self.hour_height_px,
        )

    def is_aligned_to_grid(self, start_time: str, end_time: str) -> bool:
        """True quando a duração é múltipla de 15 minutos.

        Só decide borda sólida vs tracejada; nunca rejeita.
        """
        start_h, start_m = parse_wall_clock(start_time)
        end_h, end_m = parse_wall_clock(end_time)
        duration_min = (end_h * 60 + end_m) - (start_h * 60 + start_m)
        return duration_min % 15 == 0

    def card_treatment(self, start_time: str, end_time: str) -> EventCardTreatment:
        density = classify_density(fractional_hours(end_time) - fractional_hours(start_time))
        font_size, padding = _DENSITY_TOKENS[density]
        return EventCardTreatment(
            border_style="solid" if self.is_aligned_to_grid(start_time, end_time) else "dashed",
            density=density,
            font_size=font_size,
            padding=padding,
        )

    def candidate_from_offset(self, offset_px: float) -> tuple[int, int]:
        """Converte offset vertical do drop em (hora, minuto) candidatos.

        Sem snapping além do minuto inteiro; a hora pode cair fora da
        grade e deve ser checada com `is_within_working_hours`.
        """
        hour = math.floor(offset_px / self.hour_height_px) + self.grid_start_hour
        minute = math.floor((offset_px % self.hour_height_px) / self.hour_height_px * 60)
        return hour, minute

    def is_within_working_hours(self, hour: int) -> bool:
        return self.grid_start_hour <= hour < self.grid_end_hour

    def shift_interval(
        self,
        start_time: str,
        end_time: str,
        new_hour: int,
        new_minute: int,
    ) -> tuple[str, str] | None:
        """Move o intervalo para o novo início mantendo a duração original.

        Retorna None quando o novo fim passaria da meia-noite.
        """
        start_h, start_m = parse_wall_clock(start_time)
        end_h, end_m = parse_wall_clock(end_time)
        duration_min = (end_h * 60 + end_m) - (start_h * 60 + start_m)
        new_start_min = new_hour * 60 + new_minute
        new_end_min = new_start_min + duration_min
        if new_start_min < 0 or new_end_min >= _MINUTES_PER_DAY:
            return None
        return (
            format_wall_clock(new_hour, new_minute),
            format_wall_clock(*divmod(new_end_min, 60)),
        )


def _format_px(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


__all__ = [
    "DensityBucket",
    "EventCardTreatment",
    "TimeGridEngine",
    "TimeSlotStyle",
    "classify_density",
    "format_event_duration",
    "format_wall_clock",
    "fractional_hours",
    "normalize_wall_clock",
    "parse_wall_clock",
    "wall_clock_minutes",
]
