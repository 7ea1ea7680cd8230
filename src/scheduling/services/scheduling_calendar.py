"""Fachada do calendário consumida pela camada de UI.

Contrato: `events`, `on_event_click`, `on_drag_end`, `on_create`,
`on_update`, `on_delete`. Nenhuma operação levanta exceção para o
chamador: falhas viram notificações localizadas via `NotifierProtocol`.

O contexto de sessão é injetado na construção; a fachada nunca consulta
o provedor de autenticação.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from config.settings import get_calendar_settings
from scheduling.constants.messages import (
    APPOINTMENT_CREATED,
    APPOINTMENT_DELETED,
    APPOINTMENT_UPDATED,
    AUTH_REQUIRED_CREATE,
    AUTH_REQUIRED_MODIFY,
    CONFLICT_ERROR,
    CREATE_FAILED_PREFIX,
    DELETE_FAILED_PREFIX,
    INVALID_DATE,
    NOT_FOUND_ERROR,
    SAVE_PENDING_ERROR,
    UPDATE_FAILED_PREFIX,
)
from scheduling.domain import CalendarEvent, CalendarView, VisibleRange
from scheduling.observability import (
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from scheduling.services.appointment_cache import (
    AppointmentCache,
    EventRemoved,
    EventRestored,
    EventUpserted,
    ProvisionalAdded,
    ProvisionalConfirmed,
    ProvisionalDiscarded,
)
from scheduling.services.appointment_mapper import (
    build_create_payload,
    build_provisional_event,
    build_update_payload,
)
from scheduling.services.event_validation import (
    find_conflicts,
    sort_events_by_time,
    validate_calendar_event,
    validate_draft,
)
from scheduling.services.reschedule_coordinator import RescheduleCoordinator, RescheduleOutcome
from scheduling.services.store_errors import message_for_store_error
from scheduling.services.time_grid import (
    EventCardTreatment,
    TimeGridEngine,
    TimeSlotStyle,
    format_event_duration,
    normalize_wall_clock,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from config.settings import CalendarSettings
    from scheduling.domain import AppointmentDraft, SessionContext
    from scheduling.protocols import AppointmentStoreProtocol, NotifierProtocol

logger = logging.getLogger(__name__)

# Campos que a edição no modal não pode alterar
_IMMUTABLE_FIELDS = frozenset({"display_id", "document_id", "provisional"})


@dataclass(frozen=True, slots=True)
class EventLayout:
    """Geometria e tratamento visual de um card na grade."""

    event: CalendarEvent
    column: int
    style: TimeSlotStyle
    treatment: EventCardTreatment
    label: str

    def as_css(self) -> dict[str, str]:
        return self.style.as_css()


class SchedulingCalendar:
    """Calendário de agendamentos: cache + grade + coordenador de drag."""

    def __init__(
        self,
        *,
        store: AppointmentStoreProtocol,
        notifier: NotifierProtocol,
        session: SessionContext,
        settings: CalendarSettings | None = None,
        visible_range: VisibleRange | None = None,
        today: date | None = None,
    ) -> None:
        self._settings = settings or get_calendar_settings()
        self._store = store
        self._notifier = notifier
        self._session = session
        self._grid = TimeGridEngine.from_settings(self._settings)
        self._cache = AppointmentCache(store)
        self._visible_range = visible_range or VisibleRange.for_view(
            today or date.today(), self._settings.default_view
        )
        self._active = False
        self._selected_id: str | None = None
        self._coordinator = RescheduleCoordinator(
            grid=self._grid,
            cache=self._cache,
            store=store,
            notifier=notifier,
            session=lambda: self._session,
            is_active=lambda: self._active,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Ciclo de vida
    # ──────────────────────────────────────────────────────────────────────

    @property
    def is_open(self) -> bool:
        return self._active

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def grid(self) -> TimeGridEngine:
        return self._grid

    @property
    def cache(self) -> AppointmentCache:
        return self._cache

    @property
    def visible_range(self) -> VisibleRange:
        return self._visible_range

    def open(self) -> None:
        """Monta o calendário e assina o intervalo visível."""
        self._active = True
        self._resubscribe()

    def close(self) -> None:
        """Desmonta: encerra a assinatura; escritas em voo são ignoradas ao resolver."""
        self._active = False
        self._cache.unsubscribe()
        self._selected_id = None

    def change_range(self, visible_range: VisibleRange) -> None:
        """Troca intervalo/visualização; único gatilho de nova assinatura."""
        if visible_range == self._visible_range:
            return
        self._visible_range = visible_range
        if self._active:
            self._resubscribe()

    def change_view(self, view: CalendarView | str) -> None:
        self.change_range(self._visible_range.with_view(view))

    def next_range(self) -> None:
        self.change_range(self._visible_range.next())

    def previous_range(self) -> None:
        self.change_range(self._visible_range.previous())

    def _resubscribe(self) -> None:
        if not self._session.is_authenticated or self._session.owner_id is None:
            self._cache.unsubscribe()
            self._cache.clear()
            logger.info(
                "subscription_skipped",
                extra={
                    "component": "scheduling_calendar",
                    "action": "subscribe",
                    "result": "unauthenticated",
                },
            )
            return
        self._cache.subscribe(self._session.owner_id, self._visible_range)

    # ──────────────────────────────────────────────────────────────────────
    # Leitura
    # ──────────────────────────────────────────────────────────────────────

    @property
    def events(self) -> list[CalendarEvent]:
        """Eventos em cache ordenados por data e horário."""
        return sort_events_by_time(self._cache.events)

    @property
    def selected_event(self) -> CalendarEvent | None:
        if self._selected_id is None:
            return None
        return self._cache.get(self._selected_id)

    def layout(self) -> list[EventLayout]:
        """Geometria por evento do intervalo visível, pronta para render."""
        return [
            EventLayout(
                event=event,
                column=event.day,
                style=self._grid.style_for_interval(event.start_time, event.end_time),
                treatment=self._grid.card_treatment(event.start_time, event.end_time),
                label=format_event_duration(event.start_time, event.end_time),
            )
            for event in self.events
            if self._visible_range.contains(event.event_date)
        ]

    def on_event_click(self, display_id: str) -> CalendarEvent | None:
        """Seleciona o evento para o modal de detalhes."""
        event = self._cache.get(display_id)
        self._selected_id = event.display_id if event is not None else None
        return event

    # ──────────────────────────────────────────────────────────────────────
    # Escrita
    # ──────────────────────────────────────────────────────────────────────

    async def on_drag_end(
        self,
        display_id: str,
        offset_px: float,
        target_day: int,
    ) -> RescheduleOutcome | None:
        """Encaminha o drop ao coordenador; None se o evento não existe."""
        gesture = self._coordinator.begin_drag(display_id)
        if gesture is None:
            return None
        return await self._coordinator.complete_drag(gesture, offset_px, target_day)

    async def on_create(self, draft: AppointmentDraft) -> CalendarEvent | None:
        """Cria agendamento com evento provisório até a confirmação remota."""
        if not self._session.is_authenticated:
            self._notifier.error(AUTH_REQUIRED_CREATE)
            self._log_operation("create", "unauthenticated")
            return None

        errors = validate_draft(draft)
        if errors:
            self._notifier.error("\n".join(errors))
            self._log_operation("create", "invalid", errors=len(errors))
            return None

        provisional = build_provisional_event(draft)
        if find_conflicts(self._cache.events, provisional):
            self._notifier.error(CONFLICT_ERROR)
            self._log_operation("create", "conflict")
            return None

        payload = build_create_payload(draft, self._session)
        with self._operation():
            self._cache.dispatch(ProvisionalAdded(event=provisional))
            try:
                document_id = await self._store.create(payload)
            except Exception as exc:
                self._log_operation("create", "error", error_type=type(exc).__name__)
                if self._active:
                    self._cache.dispatch(ProvisionalDiscarded(display_id=provisional.display_id))
                    self._notifier.error(message_for_store_error(exc, CREATE_FAILED_PREFIX))
                return None

            self._log_operation("create", "created", document_id=document_id)
            if not self._active:
                return provisional.model_copy(update={"document_id": document_id})
            self._cache.dispatch(
                ProvisionalConfirmed(display_id=provisional.display_id, document_id=document_id)
            )
            self._notifier.info(APPOINTMENT_CREATED)
            return self._cache.get(provisional.display_id)

    async def on_update(
        self,
        display_id: str,
        changes: Mapping[str, Any],
    ) -> CalendarEvent | None:
        """Edição otimista dos campos do evento, com rollback em falha."""
        if not self._session.is_authenticated:
            self._notifier.error(AUTH_REQUIRED_MODIFY)
            self._log_operation("update", "unauthenticated")
            return None
        original = self._cache.get(display_id)
        if original is None:
            self._notifier.error(NOT_FOUND_ERROR)
            self._log_operation("update", "event_missing")
            return None
        if original.is_pending_create:
            self._notifier.error(SAVE_PENDING_ERROR)
            self._log_operation("update", "create_pending")
            return None

        updated = self._apply_changes(original, changes)
        if updated is None:
            return None

        with self._operation():
            self._cache.dispatch(EventUpserted(event=updated))
            if updated.document_id is None:
                # placeholder
                self._log_operation("update", "local_only")
                return updated
            try:
                await self._store.update(updated.document_id, build_update_payload(updated))
            except Exception as exc:
                self._log_operation("update", "error", error_type=type(exc).__name__)
                if self._active:
                    self._cache.dispatch(EventRestored(snapshot=original))
                    self._notifier.error(message_for_store_error(exc, UPDATE_FAILED_PREFIX))
                return None

            self._log_operation("update", "updated", document_id=updated.document_id)
            if self._active:
                self._notifier.info(APPOINTMENT_UPDATED)
            return updated

    async def on_delete(self, display_id: str) -> bool:
        """Remoção otimista; o evento volta à lista se a escrita falhar."""
        if not self._session.is_authenticated:
            self._notifier.error(AUTH_REQUIRED_MODIFY)
            self._log_operation("delete", "unauthenticated")
            return False
        original = self._cache.get(display_id)
        if original is None:
            self._log_operation("delete", "event_missing")
            return False

        with self._operation():
            self._cache.dispatch(EventRemoved(display_id=display_id))
            if self._selected_id == display_id:
                self._selected_id = None
            if original.document_id is None:
                self._log_operation("delete", "local_only")
                return True
            try:
                await self._store.delete(original.document_id)
            except Exception as exc:
                self._log_operation("delete", "error", error_type=type(exc).__name__)
                if self._active:
                    self._cache.dispatch(EventRestored(snapshot=original, reinsert=True))
                    self._notifier.error(message_for_store_error(exc, DELETE_FAILED_PREFIX))
                return False

            self._log_operation("delete", "deleted", document_id=original.document_id)
            if self._active:
                self._notifier.info(APPOINTMENT_DELETED)
            return True

    # ──────────────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────────────

    def _apply_changes(
        self,
        original: CalendarEvent,
        changes: Mapping[str, Any],
    ) -> CalendarEvent | None:
        data = original.model_dump()
        data.update({k: v for k, v in changes.items() if k not in _IMMUTABLE_FIELDS})
        for key in ("start_time", "end_time"):
            data[key] = normalize_wall_clock(data.get(key))
        if "event_date" in changes:
            event_date = _coerce_date(data["event_date"])
            if event_date is None:
                self._notifier.error(INVALID_DATE)
                self._log_operation("update", "invalid", errors=1)
                return None
            data["event_date"] = event_date
            if "day" not in changes:
                data["day"] = event_date.isoweekday()

        errors = validate_calendar_event(
            data.get("title"),
            data.get("start_time"),
            data.get("end_time"),
            data.get("description"),
        )
        if errors:
            self._notifier.error("\n".join(errors))
            self._log_operation("update", "invalid", errors=len(errors))
            return None
        try:
            return CalendarEvent.model_validate(data)
        except ValidationError as exc:
            self._notifier.error(message_for_store_error(exc, UPDATE_FAILED_PREFIX))
            self._log_operation("update", "invalid", errors=exc.error_count())
            return None

    @contextmanager
    def _operation(self) -> Iterator[str]:
        operation_id = generate_correlation_id("op")
        token = set_correlation_id(operation_id)
        try:
            yield operation_id
        finally:
            reset_correlation_id(token)

    def _log_operation(self, action: str, result: str, **fields: Any) -> None:
        logger.info(
            "calendar_operation",
            extra={
                "component": "scheduling_calendar",
                "action": action,
                "result": result,
                **fields,
            },
        )


def _coerce_date(value: Any) -> date | None:
    """Aceita `date` ou string ISO; qualquer outra coisa é inválida."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


__all__ = ["EventLayout", "SchedulingCalendar"]
