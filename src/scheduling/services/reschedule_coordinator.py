"""Coordenador de reagendamento por drag & drop.

Cada gesto tem sua própria máquina de estados (fsm.GestureStateMachine)
e seu snapshot imutável pré-drag:

    IDLE → DRAGGING → DROP_PENDING → (VALIDATED | REJECTED)
    VALIDATED → OPTIMISTICALLY_APPLIED → PERSISTING → (COMMITTED | ROLLED_BACK)

Regras:
- hora candidata fora de [grid_start_hour, grid_end_hour) é rejeitada em
  silêncio, sem clamp, e o evento fica intacto
- duração original é preservada; o fim nunca passa da meia-noite
- a coluna de destino é autoritativa para dia e data
- falha remota restaura o snapshot e notifica o usuário, sem retry
- sessão sem usuário rejeita antes de qualquer chamada de rede
- evento provisório com criação ainda pendente não pode ser movido
- com o calendário fechado, a resolução da escrita é ignorada
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from fsm import GestureStateMachine, RescheduleState, create_gesture_fsm
from scheduling.constants.messages import (
    AUTH_REQUIRED_MODIFY,
    RESCHEDULE_FAILED_PREFIX,
    SAVE_PENDING_ERROR,
)
from scheduling.observability import (
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from scheduling.services.appointment_cache import EventRestored, EventUpserted
from scheduling.services.appointment_mapper import build_reschedule_payload
from scheduling.services.store_errors import message_for_store_error

if TYPE_CHECKING:
    from collections.abc import Callable

    from scheduling.domain import CalendarEvent, SessionContext
    from scheduling.protocols import AppointmentStoreProtocol, NotifierProtocol
    from scheduling.services.appointment_cache import AppointmentCache
    from scheduling.services.time_grid import TimeGridEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DragGesture:
    """Gesto efêmero: descartado quando chega a um estado terminal."""

    gesture_id: str
    display_id: str
    origin_day: int
    snapshot: CalendarEvent
    machine: GestureStateMachine

    @property
    def state(self) -> RescheduleState:
        return self.machine.current_state


@dataclass(frozen=True, slots=True)
class RescheduleOutcome:
    """Resultado final de um drop."""

    gesture_id: str
    display_id: str
    state: RescheduleState
    event: CalendarEvent | None = None
    reason: str | None = None
    message: str | None = None

    @property
    def committed(self) -> bool:
        return self.state is RescheduleState.COMMITTED


class RescheduleCoordinator:
    """Orquestra drag → validação → update otimista → persistência."""

    def __init__(
        self,
        *,
        grid: TimeGridEngine,
        cache: AppointmentCache,
        store: AppointmentStoreProtocol,
        notifier: NotifierProtocol,
        session: Callable[[], SessionContext],
        is_active: Callable[[], bool],
    ) -> None:
        self._grid = grid
        self._cache = cache
        self._store = store
        self._notifier = notifier
        self._session = session
        self._is_active = is_active

    def begin_drag(self, display_id: str) -> DragGesture | None:
        """Inicia um gesto sobre o evento; None se o evento não está em cache."""
        event = self._cache.get(display_id)
        if event is None:
            logger.info(
                "drag_ignored",
                extra={
                    "component": "reschedule_coordinator",
                    "action": "begin_drag",
                    "result": "event_missing",
                    "display_id": display_id,
                },
            )
            return None
        gesture_id = generate_correlation_id("gst")
        machine = create_gesture_fsm(gesture_id)
        machine.advance(RescheduleState.DRAGGING, "pointer_down")
        return DragGesture(
            gesture_id=gesture_id,
            display_id=display_id,
            origin_day=event.day,
            snapshot=event.model_copy(deep=True),
            machine=machine,
        )

    async def complete_drag(
        self,
        gesture: DragGesture,
        offset_px: float,
        target_day: int,
    ) -> RescheduleOutcome:
        """Conclui o gesto; sempre termina em COMMITTED, ROLLED_BACK ou REJECTED."""
        token = set_correlation_id(gesture.gesture_id)
        try:
            gesture.machine.advance(
                RescheduleState.DROP_PENDING,
                "drop",
                {"offset_px": offset_px, "target_day": target_day},
            )
            candidate = self._validate_drop(gesture, offset_px, target_day)
            if isinstance(candidate, RescheduleOutcome):
                return candidate
            return await self._apply_and_persist(gesture, candidate)
        finally:
            reset_correlation_id(token)

    def _validate_drop(
        self,
        gesture: DragGesture,
        offset_px: float,
        target_day: int,
    ) -> CalendarEvent | RescheduleOutcome:
        if not self._session().is_authenticated:
            self._notifier.error(AUTH_REQUIRED_MODIFY)
            return self._reject(gesture, "auth_required", message=AUTH_REQUIRED_MODIFY)
        current = self._cache.get(gesture.display_id)
        if current is None:
            return self._reject(gesture, "event_missing")
        if current.is_pending_create:
            self._notifier.error(SAVE_PENDING_ERROR)
            return self._reject(gesture, "create_pending", message=SAVE_PENDING_ERROR)
        if not 1 <= target_day <= 7:
            return self._reject(gesture, "invalid_day")

        new_hour, new_minute = self._grid.candidate_from_offset(offset_px)
        if not self._grid.is_within_working_hours(new_hour):
            return self._reject(gesture, "outside_working_hours", new_hour=new_hour)

        snapshot = gesture.snapshot
        interval = self._grid.shift_interval(
            snapshot.start_time, snapshot.end_time, new_hour, new_minute
        )
        if interval is None:
            return self._reject(gesture, "crosses_midnight", new_hour=new_hour)

        start_time, end_time = interval
        new_date = snapshot.event_date + timedelta(days=target_day - snapshot.day)
        gesture.machine.advance(
            RescheduleState.VALIDATED,
            "validated",
            {"start_time": start_time, "target_day": target_day},
        )
        return snapshot.model_copy(
            update={
                "start_time": start_time,
                "end_time": end_time,
                "day": target_day,
                "event_date": new_date,
            }
        )

    async def _apply_and_persist(
        self,
        gesture: DragGesture,
        updated: CalendarEvent,
    ) -> RescheduleOutcome:
        machine = gesture.machine
        self._cache.dispatch(EventUpserted(event=updated))
        machine.advance(RescheduleState.OPTIMISTICALLY_APPLIED, "applied_locally")
        machine.advance(RescheduleState.PERSISTING, "write_started")

        if updated.document_id is None:
            # placeholder: nada para atualizar remotamente
            machine.advance(RescheduleState.COMMITTED, "local_only")
            return self._finish(gesture, updated)

        try:
            await self._store.update(updated.document_id, build_reschedule_payload(updated))
        except Exception as exc:
            return self._rollback(gesture, exc)

        ignored = not self._is_active()
        machine.advance(RescheduleState.COMMITTED, "write_ok", {"ignored": ignored})
        return self._finish(gesture, updated)

    def _rollback(self, gesture: DragGesture, exc: Exception) -> RescheduleOutcome:
        logger.warning(
            "reschedule_write_failed",
            extra={
                "component": "reschedule_coordinator",
                "action": "persist",
                "result": "error",
                "gesture_id": gesture.gesture_id,
                "error_type": type(exc).__name__,
            },
        )
        if not self._is_active():
            gesture.machine.advance(
                RescheduleState.ROLLED_BACK, "write_failed", {"ignored": True}
            )
            return self._finish(gesture, None, reason="calendar_closed")

        self._cache.dispatch(EventRestored(snapshot=gesture.snapshot))
        message = message_for_store_error(exc, prefix=RESCHEDULE_FAILED_PREFIX)
        self._notifier.error(message)
        gesture.machine.advance(RescheduleState.ROLLED_BACK, "write_failed")
        return self._finish(gesture, gesture.snapshot, reason="write_failed", message=message)

    def _reject(
        self,
        gesture: DragGesture,
        reason: str,
        *,
        message: str | None = None,
        **fields: Any,
    ) -> RescheduleOutcome:
        gesture.machine.advance(RescheduleState.REJECTED, reason, fields or None)
        return self._finish(gesture, gesture.snapshot, reason=reason, message=message)

    def _finish(
        self,
        gesture: DragGesture,
        event: CalendarEvent | None,
        *,
        reason: str | None = None,
        message: str | None = None,
    ) -> RescheduleOutcome:
        state = gesture.machine.current_state
        logger.info(
            "reschedule_finished",
            extra={
                "component": "reschedule_coordinator",
                "action": "complete_drag",
                "result": state.value,
                "gesture_id": gesture.gesture_id,
                "display_id": gesture.display_id,
                "reason": reason,
                "transitions": len(gesture.machine.history),
            },
        )
        return RescheduleOutcome(
            gesture_id=gesture.gesture_id,
            display_id=gesture.display_id,
            state=state,
            event=event,
            reason=reason,
            message=message,
        )


__all__ = ["DragGesture", "RescheduleCoordinator", "RescheduleOutcome"]
