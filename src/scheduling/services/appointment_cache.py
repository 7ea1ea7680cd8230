"""Cache em memória dos agendamentos do intervalo visível.

Toda mutação passa por `reduce_cache(state, action) -> state`, uma função
pura. `AppointmentCache` mantém o estado atual, a assinatura viva no store
e encaminha callbacks de snapshot (que podem chegar numa thread do SDK)
para o event loop dono via `loop.call_soon_threadsafe`.

Regras de reconciliação:
- snapshot substitui por identidade (document_id); não há merge de campos
- display_id é preservado para o mesmo document_id entre snapshots
- provisórios sobrevivem até aparecerem no snapshot ou serem descartados
- eventos persistidos ausentes do snapshot foram removidos remotamente
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from config.logging import log_fallback
from scheduling.services.appointment_mapper import (
    parse_snapshot,
    placeholder_events,
    to_store_datetime,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scheduling.domain import CalendarEvent, VisibleRange
    from scheduling.protocols import AppointmentStoreProtocol, StoreDocument, SubscriptionHandle

logger = logging.getLogger(__name__)


class CacheSource(StrEnum):
    """Origem do conjunto de eventos atualmente em cache."""

    EMPTY = "empty"
    LIVE = "live"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True, slots=True)
class CacheState:
    events: tuple[CalendarEvent, ...] = ()
    source: CacheSource = CacheSource.EMPTY

    def find(self, display_id: str) -> CalendarEvent | None:
        for event in self.events:
            if event.display_id == display_id:
                return event
        return None

    def find_by_document(self, document_id: str) -> CalendarEvent | None:
        for event in self.events:
            if event.document_id == document_id and not event.provisional:
                return event
        return None


# ──────────────────────────────────────────────────────────────────────────────
# Ações
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SnapshotReceived:
    events: tuple[CalendarEvent, ...]


@dataclass(frozen=True, slots=True)
class SubscriptionFailed:
    placeholders: tuple[CalendarEvent, ...]


@dataclass(frozen=True, slots=True)
class EventUpserted:
    """Edição otimista ou reagendamento aplicado localmente."""

    event: CalendarEvent


@dataclass(frozen=True, slots=True)
class EventRestored:
    """Rollback para o snapshot pré-edição.

    Com `reinsert=False` (drag/edição) o evento só é restaurado se ainda
    estiver no cache; com `reinsert=True` (remoção) ele volta à lista.
    """

    snapshot: CalendarEvent
    reinsert: bool = False


@dataclass(frozen=True, slots=True)
class ProvisionalAdded:
    event: CalendarEvent


@dataclass(frozen=True, slots=True)
class ProvisionalConfirmed:
    display_id: str
    document_id: str


@dataclass(frozen=True, slots=True)
class ProvisionalDiscarded:
    display_id: str


@dataclass(frozen=True, slots=True)
class EventRemoved:
    display_id: str


@dataclass(frozen=True, slots=True)
class CacheCleared:
    pass


CacheAction = (
    SnapshotReceived
    | SubscriptionFailed
    | EventUpserted
    | EventRestored
    | ProvisionalAdded
    | ProvisionalConfirmed
    | ProvisionalDiscarded
    | EventRemoved
    | CacheCleared
)


def reduce_cache(state: CacheState, action: CacheAction) -> CacheState:
    """Aplica uma ação ao estado e retorna o novo estado (sem efeitos colaterais)."""
    if isinstance(action, SnapshotReceived):
        return _apply_snapshot(state, action.events)
    if isinstance(action, SubscriptionFailed):
        provisional = tuple(event for event in state.events if event.provisional)
        return CacheState(events=action.placeholders + provisional, source=CacheSource.PLACEHOLDER)
    if isinstance(action, (EventUpserted, ProvisionalAdded)):
        return _replace_or_append(state, action.event, append=True)
    if isinstance(action, EventRestored):
        return _replace_or_append(state, action.snapshot, append=action.reinsert)
    if isinstance(action, ProvisionalConfirmed):
        return _confirm_provisional(state, action.display_id, action.document_id)
    if isinstance(action, (ProvisionalDiscarded, EventRemoved)):
        return CacheState(
            events=tuple(e for e in state.events if e.display_id != action.display_id),
            source=state.source,
        )
    if isinstance(action, CacheCleared):
        return CacheState()
    msg = f"Ação de cache desconhecida: {type(action).__name__}"
    raise TypeError(msg)


def _apply_snapshot(state: CacheState, incoming: Sequence[CalendarEvent]) -> CacheState:
    known = {e.document_id: e.display_id for e in state.events if e.document_id is not None}
    remote = tuple(
        event.model_copy(update={"display_id": known[event.document_id]})
        if event.document_id in known
        else event
        for event in incoming
    )
    remote_ids = {event.document_id for event in remote}
    survivors = tuple(
        event
        for event in state.events
        if event.provisional and (event.document_id is None or event.document_id not in remote_ids)
    )
    return CacheState(events=remote + survivors, source=CacheSource.LIVE)


def _replace_or_append(state: CacheState, event: CalendarEvent, *, append: bool) -> CacheState:
    replaced = False
    events: list[CalendarEvent] = []
    for current in state.events:
        if current.display_id == event.display_id:
            events.append(event)
            replaced = True
        else:
            events.append(current)
    if not replaced:
        if not append:
            return state
        events.append(event)
    return CacheState(events=tuple(events), source=state.source)


def _confirm_provisional(state: CacheState, display_id: str, document_id: str) -> CacheState:
    provisional = state.find(display_id)
    if provisional is None:
        return state
    remote = state.find_by_document(document_id)
    if remote is not None:
        # snapshot remoto chegou antes da confirmação: o remoto herda o display_id
        events = tuple(
            event.model_copy(update={"display_id": display_id}) if event is remote else event
            for event in state.events
            if event is not provisional
        )
        return CacheState(events=events, source=state.source)
    confirmed = provisional.model_copy(update={"document_id": document_id})
    return _replace_or_append(state, confirmed, append=False)


# ──────────────────────────────────────────────────────────────────────────────
# Cache com assinatura
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class _Subscription:
    generation: int
    visible_range: VisibleRange
    loop: asyncio.AbstractEventLoop | None
    handle: SubscriptionHandle | None = field(default=None)


class AppointmentCache:
    """Estado reativo dos agendamentos do intervalo visível.

    `subscribe` é o único ponto que (re)abre a assinatura; cada nova
    assinatura invalida callbacks atrasados da anterior.
    """

    def __init__(
        self,
        store: AppointmentStoreProtocol,
        *,
        on_change: Callable[[CacheState], None] | None = None,
    ) -> None:
        self._store = store
        self._state = CacheState()
        self._on_change = on_change
        self._generation = 0
        self._subscription: _Subscription | None = None

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def events(self) -> tuple[CalendarEvent, ...]:
        return self._state.events

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None

    def get(self, display_id: str) -> CalendarEvent | None:
        return self._state.find(display_id)

    def dispatch(self, action: CacheAction) -> CacheState:
        """Aplica a ação via reducer e notifica o observador."""
        self._state = reduce_cache(self._state, action)
        logger.debug(
            "cache_action_applied",
            extra={
                "component": "appointment_cache",
                "action": type(action).__name__,
                "events": len(self._state.events),
                "source": self._state.source.value,
            },
        )
        if self._on_change is not None:
            self._on_change(self._state)
        return self._state

    def subscribe(self, owner_id: str, visible_range: VisibleRange) -> None:
        """Derruba a assinatura atual e assina o novo intervalo."""
        self.unsubscribe()
        self._generation += 1
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        subscription = _Subscription(
            generation=self._generation,
            visible_range=visible_range,
            loop=loop,
        )
        self._subscription = subscription
        generation = subscription.generation

        def on_snapshot(documents: Sequence[StoreDocument]) -> None:
            self._marshal(subscription, lambda: self._handle_snapshot(generation, documents))

        def on_error(exc: Exception) -> None:
            self._marshal(subscription, lambda: self._handle_failure(generation, exc))

        logger.info(
            "subscription_started",
            extra={
                "component": "appointment_cache",
                "action": "subscribe",
                "range_start": visible_range.start.isoformat(),
                "range_end": visible_range.end.isoformat(),
                "view": visible_range.view.value,
            },
        )
        try:
            handle = self._store.subscribe(
                owner_id,
                to_store_datetime(visible_range.start_datetime),
                to_store_datetime(visible_range.end_datetime),
                on_snapshot,
                on_error,
            )
        except Exception as exc:
            self._handle_failure(generation, exc)
            return
        if self._subscription is subscription:
            subscription.handle = handle
        else:
            handle.unsubscribe()

    def unsubscribe(self) -> None:
        """Encerra a assinatura viva (se houver); callbacks atrasados são ignorados."""
        subscription = self._subscription
        if subscription is None:
            return
        self._subscription = None
        self._generation += 1
        if subscription.handle is not None:
            subscription.handle.unsubscribe()
        logger.info(
            "subscription_stopped",
            extra={"component": "appointment_cache", "action": "unsubscribe"},
        )

    def clear(self) -> None:
        self.dispatch(CacheCleared())

    def _marshal(self, subscription: _Subscription, callback: Callable[[], None]) -> None:
        loop = subscription.loop
        if loop is None:
            callback()
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            callback()
        elif not loop.is_closed():
            loop.call_soon_threadsafe(callback)

    def _is_current(self, generation: int) -> bool:
        return self._subscription is not None and self._subscription.generation == generation

    def _handle_snapshot(self, generation: int, documents: Sequence[StoreDocument]) -> None:
        if not self._is_current(generation):
            logger.debug(
                "stale_snapshot_ignored",
                extra={"component": "appointment_cache", "action": "snapshot"},
            )
            return
        self.dispatch(SnapshotReceived(events=tuple(parse_snapshot(documents))))

    def _handle_failure(self, generation: int, exc: Exception) -> None:
        if not self._is_current(generation):
            return
        subscription = self._subscription
        if subscription is None:
            return
        logger.error(
            "subscription_failed",
            extra={
                "component": "appointment_cache",
                "action": "subscribe",
                "result": "error",
                "error_type": type(exc).__name__,
            },
        )
        placeholders = tuple(placeholder_events(subscription.visible_range.week_start))
        log_fallback(
            logger,
            "appointment_cache",
            reason="subscription_failed",
            placeholders=len(placeholders),
        )
        self.dispatch(SubscriptionFailed(placeholders=placeholders))


__all__ = [
    "AppointmentCache",
    "CacheAction",
    "CacheCleared",
    "CacheSource",
    "CacheState",
    "EventRemoved",
    "EventRestored",
    "EventUpserted",
    "ProvisionalAdded",
    "ProvisionalConfirmed",
    "ProvisionalDiscarded",
    "SnapshotReceived",
    "SubscriptionFailed",
    "reduce_cache",
]
