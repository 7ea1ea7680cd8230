"""Firestore Appointment Store.

Coleção `appointments`, consulta por `userId` + faixa de `dateTime`
ordenada por `dateTime`. Escritas rodam em `asyncio.to_thread`; erros do
SDK são traduzidos para a hierarquia de `utils.errors`.

Callbacks de `on_snapshot` rodam numa thread do SDK; quem assina é
responsável por encaminhá-los ao seu event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from scheduling.protocols.appointment_store import (
    DELETE_FIELD,
    AppointmentStoreProtocol,
    StoreDocument,
    SubscriptionHandle,
)
from utils.errors import (
    AppointmentNotFoundError,
    AppointmentStoreError,
    FirestoreUnavailableError,
    StoreInternalError,
    StorePermissionDeniedError,
    StoreUnauthenticatedError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from google.cloud.firestore import Client as FirestoreClient

    from scheduling.protocols.appointment_store import ErrorCallback, SnapshotCallback

logger = logging.getLogger(__name__)

APPOINTMENTS_COLLECTION = "appointments"


class FirestoreSubscription(SubscriptionHandle):
    """Envolve o Watch do SDK; unsubscribe é idempotente."""

    def __init__(self, watch: Any) -> None:
        self._watch = watch

    def unsubscribe(self) -> None:
        watch, self._watch = self._watch, None
        if watch is not None:
            watch.unsubscribe()


class FirestoreAppointmentStore(AppointmentStoreProtocol):
    """Store de agendamentos usando Firestore."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str = APPOINTMENTS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection

    def subscribe(
        self,
        owner_id: str,
        range_start: datetime,
        range_end: datetime,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> SubscriptionHandle:
        from google.cloud.firestore_v1.base_query import FieldFilter

        query = (
            self._db.collection(self._collection)
            .where(filter=FieldFilter("userId", "==", owner_id))
            .where(filter=FieldFilter("dateTime", ">=", range_start))
            .where(filter=FieldFilter("dateTime", "<=", range_end))
            .order_by("dateTime")
        )

        def callback(docs: Sequence[Any], _changes: Any, _read_time: Any) -> None:
            try:
                documents = [StoreDocument(doc.id, doc.to_dict() or {}) for doc in docs]
            except Exception as exc:
                on_error(_translate_error(exc))
                return
            on_snapshot(documents)

        try:
            watch = query.on_snapshot(callback)
        except Exception as exc:
            logger.error(
                "appointments_subscribe_failed",
                extra={
                    "component": "firestore_appointment_store",
                    "action": "subscribe",
                    "result": "error",
                    "error_type": type(exc).__name__,
                },
            )
            raise _translate_error(exc) from exc
        logger.debug(
            "appointments_subscribed",
            extra={"component": "firestore_appointment_store", "action": "subscribe"},
        )
        return FirestoreSubscription(watch)

    async def create(self, payload: Mapping[str, Any]) -> str:
        return await asyncio.to_thread(self._create_sync, dict(payload))

    def _create_sync(self, payload: dict[str, Any]) -> str:
        from google.cloud.firestore import SERVER_TIMESTAMP

        data = {**payload, "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP}
        try:
            _, reference = self._db.collection(self._collection).add(data)
        except Exception as exc:
            raise self._failure("create", exc) from exc
        logger.info(
            "appointment_created",
            extra={
                "component": "firestore_appointment_store",
                "action": "create",
                "result": "created",
                "document_id": reference.id,
            },
        )
        return str(reference.id)

    async def update(self, document_id: str, fields: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._update_sync, document_id, dict(fields))

    def _update_sync(self, document_id: str, fields: dict[str, Any]) -> None:
        from google.cloud import firestore

        data = {
            key: firestore.DELETE_FIELD if value is DELETE_FIELD else value
            for key, value in fields.items()
        }
        data["updatedAt"] = firestore.SERVER_TIMESTAMP
        try:
            self._db.collection(self._collection).document(document_id).update(data)
        except Exception as exc:
            raise self._failure("update", exc, document_id) from exc
        logger.debug(
            "appointment_updated",
            extra={
                "component": "firestore_appointment_store",
                "action": "update",
                "document_id": document_id,
            },
        )

    async def delete(self, document_id: str) -> None:
        await asyncio.to_thread(self._delete_sync, document_id)

    def _delete_sync(self, document_id: str) -> None:
        try:
            self._db.collection(self._collection).document(document_id).delete()
        except Exception as exc:
            raise self._failure("delete", exc, document_id) from exc
        logger.debug(
            "appointment_deleted",
            extra={
                "component": "firestore_appointment_store",
                "action": "delete",
                "document_id": document_id,
            },
        )

    def _failure(
        self,
        action: str,
        exc: Exception,
        document_id: str | None = None,
    ) -> AppointmentStoreError:
        logger.error(
            "appointment_write_failed",
            extra={
                "component": "firestore_appointment_store",
                "action": action,
                "result": "error",
                "document_id": document_id,
                "error_type": type(exc).__name__,
            },
        )
        return _translate_error(exc)


def _translate_error(exc: Exception) -> AppointmentStoreError:
    """Mapeia exceções do google-api-core para a hierarquia do core."""
    if isinstance(exc, AppointmentStoreError):
        return exc

    from google.api_core import exceptions as api_exceptions

    message = str(exc)
    if isinstance(exc, api_exceptions.PermissionDenied):
        return StorePermissionDeniedError(message)
    if isinstance(exc, api_exceptions.Unauthenticated):
        return StoreUnauthenticatedError(message)
    if isinstance(exc, api_exceptions.NotFound):
        return AppointmentNotFoundError(message)
    if isinstance(
        exc,
        (
            api_exceptions.ServiceUnavailable,
            api_exceptions.DeadlineExceeded,
            api_exceptions.RetryError,
            TimeoutError,
            ConnectionError,
        ),
    ):
        return FirestoreUnavailableError(message)
    if isinstance(exc, api_exceptions.InternalServerError):
        return StoreInternalError(message)
    return AppointmentStoreError(message)


__all__ = ["APPOINTMENTS_COLLECTION", "FirestoreAppointmentStore", "FirestoreSubscription"]
