"""Store de agendamentos em memória, apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.

Entrega snapshots de forma síncrona: ao assinar (snapshot inicial) e após
cada escrita, para todas as assinaturas cuja consulta casa com o documento.
"""

from __future__ import annotations

import itertools
import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from scheduling.protocols.appointment_store import (
    DELETE_FIELD,
    AppointmentStoreProtocol,
    StoreDocument,
    SubscriptionHandle,
)
from utils.errors import AppointmentNotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scheduling.protocols.appointment_store import ErrorCallback, SnapshotCallback

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Subscriber:
    owner_id: str
    range_start: datetime
    range_end: datetime
    on_snapshot: SnapshotCallback
    on_error: ErrorCallback


class MemorySubscription(SubscriptionHandle):
    """Handle de assinatura do store em memória."""

    def __init__(self, store: MemoryAppointmentStore, subscriber_id: int) -> None:
        self._store = store
        self._subscriber_id = subscriber_id

    def unsubscribe(self) -> None:
        self._store._remove_subscriber(self._subscriber_id)


class MemoryAppointmentStore(AppointmentStoreProtocol):
    """Store de agendamentos em memória, apenas para dev/test."""

    def __init__(self, documents: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._documents: dict[str, dict[str, Any]] = {
            doc_id: dict(data) for doc_id, data in (documents or {}).items()
        }
        self._subscribers: dict[int, _Subscriber] = {}
        self._ids = itertools.count(1)

    @property
    def documents(self) -> dict[str, dict[str, Any]]:
        """Cópia rasa dos documentos armazenados."""
        return {doc_id: dict(data) for doc_id, data in self._documents.items()}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(
        self,
        owner_id: str,
        range_start: datetime,
        range_end: datetime,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> SubscriptionHandle:
        subscriber_id = next(self._ids)
        subscriber = _Subscriber(
            owner_id=owner_id,
            range_start=_as_aware(range_start),
            range_end=_as_aware(range_end),
            on_snapshot=on_snapshot,
            on_error=on_error,
        )
        self._subscribers[subscriber_id] = subscriber
        self._deliver(subscriber)
        return MemorySubscription(self, subscriber_id)

    async def create(self, payload: Mapping[str, Any]) -> str:
        document_id = uuid.uuid4().hex[:20]
        now = datetime.now(tz=UTC)
        self._documents[document_id] = {**payload, "createdAt": now, "updatedAt": now}
        logger.debug("memory_appointment_created", extra={"document_id": document_id})
        self._broadcast()
        return document_id

    async def update(self, document_id: str, fields: Mapping[str, Any]) -> None:
        document = self._documents.get(document_id)
        if document is None:
            raise AppointmentNotFoundError(document_id)
        for key, value in fields.items():
            if value is DELETE_FIELD:
                document.pop(key, None)
            else:
                document[key] = value
        document["updatedAt"] = datetime.now(tz=UTC)
        self._broadcast()

    async def delete(self, document_id: str) -> None:
        if self._documents.pop(document_id, None) is None:
            raise AppointmentNotFoundError(document_id)
        self._broadcast()

    def _remove_subscriber(self, subscriber_id: int) -> None:
        self._subscribers.pop(subscriber_id, None)

    def _broadcast(self) -> None:
        for subscriber in list(self._subscribers.values()):
            self._deliver(subscriber)

    def _deliver(self, subscriber: _Subscriber) -> None:
        subscriber.on_snapshot(self._matching(subscriber))

    def _matching(self, subscriber: _Subscriber) -> list[StoreDocument]:
        matches: list[tuple[datetime, StoreDocument]] = []
        for doc_id, data in self._documents.items():
            if data.get("userId") != subscriber.owner_id:
                continue
            value = data.get("dateTime")
            if not isinstance(value, datetime):
                continue
            moment = _as_aware(value)
            if subscriber.range_start <= moment <= subscriber.range_end:
                matches.append((moment, StoreDocument(doc_id, dict(data))))
        matches.sort(key=lambda item: item[0])
        return [document for _, document in matches]


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.astimezone()


__all__ = ["MemoryAppointmentStore", "MemorySubscription"]
