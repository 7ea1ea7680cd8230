"""Visualização ativa e intervalo de datas visível no calendário.

Semanas começam na segunda-feira. O intervalo é inclusivo nas duas
pontas; `start_datetime`/`end_datetime` cobrem o dia inteiro.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import StrEnum


class CalendarView(StrEnum):
    """Visualizações suportadas pelo calendário."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def monday_of(value: date) -> date:
    """Retorna a segunda-feira da semana de `value`."""
    return value - timedelta(days=value.isoweekday() - 1)


@dataclass(frozen=True, slots=True)
class VisibleRange:
    """Intervalo [start, end] exibido pela visualização ativa."""

    view: CalendarView
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("end não pode ser anterior a start")

    @classmethod
    def for_view(cls, anchor: date, view: CalendarView | str) -> VisibleRange:
        """Calcula o intervalo visível a partir de uma data âncora."""
        view = CalendarView(view)
        if view is CalendarView.DAY:
            return cls(view=view, start=anchor, end=anchor)
        if view is CalendarView.WEEK:
            start = monday_of(anchor)
            return cls(view=view, start=start, end=start + timedelta(days=6))
        last_day = calendar.monthrange(anchor.year, anchor.month)[1]
        return cls(
            view=view,
            start=anchor.replace(day=1),
            end=anchor.replace(day=last_day),
        )

    @property
    def week_start(self) -> date:
        return monday_of(self.start)

    @property
    def start_datetime(self) -> datetime:
        return datetime.combine(self.start, time.min)

    @property
    def end_datetime(self) -> datetime:
        return datetime.combine(self.end, time.max)

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range((self.end - self.start).days + 1)]

    def next(self) -> VisibleRange:
        """Avança um dia, uma semana ou um mês conforme a visualização."""
        return self._shift(1)

    def previous(self) -> VisibleRange:
        """Recua um dia, uma semana ou um mês conforme a visualização."""
        return self._shift(-1)

    def with_view(self, view: CalendarView | str) -> VisibleRange:
        """Troca de visualização mantendo o início atual como âncora."""
        return VisibleRange.for_view(self.start, view)

    def _shift(self, step: int) -> VisibleRange:
        if self.view is CalendarView.DAY:
            return VisibleRange.for_view(self.start + timedelta(days=step), self.view)
        if self.view is CalendarView.WEEK:
            return VisibleRange.for_view(self.start + timedelta(weeks=step), self.view)
        month_index = self.start.year * 12 + (self.start.month - 1) + step
        year, month = divmod(month_index, 12)
        return VisibleRange.for_view(date(year, month + 1, 1), self.view)


__all__ = ["CalendarView", "VisibleRange", "monday_of"]
