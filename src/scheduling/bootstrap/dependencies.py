"""Factories do calendário: criação de implementações concretas.

Centraliza a escolha do store de agendamentos (CALENDAR_STORE_BACKEND), do
notificador e a montagem da fachada `SchedulingCalendar`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.settings import get_base_settings, get_calendar_settings, get_firestore_settings
from scheduling.bootstrap.clients import create_firestore_client
from scheduling.infra.notifications import LoggingNotifier
from scheduling.infra.stores import FirestoreAppointmentStore, MemoryAppointmentStore
from scheduling.services import SchedulingCalendar

if TYPE_CHECKING:
    from datetime import date

    from config.settings import CalendarSettings
    from scheduling.domain import SessionContext, VisibleRange
    from scheduling.protocols import AppointmentStoreProtocol, NotifierProtocol

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Appointment Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_appointment_store(
    settings: CalendarSettings | None = None,
) -> AppointmentStoreProtocol:
    """Cria store de agendamentos baseado na configuração.

    Lê CALENDAR_STORE_BACKEND (via CalendarSettings):
    - "memory": MemoryAppointmentStore (dev/test only)
    - "firestore": FirestoreAppointmentStore (staging/production)

    Returns:
        Implementação de AppointmentStoreProtocol
    """
    settings = settings or get_calendar_settings()
    backend = settings.store_backend

    if backend == "firestore":
        collection = get_firestore_settings().collection_appointments
        store: AppointmentStoreProtocol = FirestoreAppointmentStore(
            create_firestore_client(), collection=collection
        )
        logger.info(
            "appointment_store_created",
            extra={"backend": "firestore", "collection": collection},
        )
        return store

    if backend == "memory":
        base = get_base_settings()
        if not base.allows_memory_store:
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        store = MemoryAppointmentStore()
        logger.info("appointment_store_created", extra={"backend": "memory"})
        return store

    msg = f"CALENDAR_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)


# ──────────────────────────────────────────────────────────────────────────────
# Notifier Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_notifier() -> NotifierProtocol:
    """Cria notificador padrão (mensagens ao usuário vão para o log)."""
    return LoggingNotifier()


# ──────────────────────────────────────────────────────────────────────────────
# Calendar Factory
# ──────────────────────────────────────────────────────────────────────────────


def build_scheduling_calendar(
    session: SessionContext,
    *,
    store: AppointmentStoreProtocol | None = None,
    notifier: NotifierProtocol | None = None,
    settings: CalendarSettings | None = None,
    visible_range: VisibleRange | None = None,
    today: date | None = None,
) -> SchedulingCalendar:
    """Monta a fachada do calendário com dependências padrão ou injetadas.

    O calendário volta fechado; quem monta a tela chama `open()`.
    """
    settings = settings or get_calendar_settings()
    calendar = SchedulingCalendar(
        store=store or create_appointment_store(settings),
        notifier=notifier or create_notifier(),
        session=session,
        settings=settings,
        visible_range=visible_range,
        today=today,
    )
    logger.debug(
        "scheduling_calendar_built",
        extra={
            "component": "bootstrap",
            "authenticated": session.is_authenticated,
            "view": calendar.visible_range.view.value,
        },
    )
    return calendar


__all__ = [
    "build_scheduling_calendar",
    "create_appointment_store",
    "create_notifier",
]
